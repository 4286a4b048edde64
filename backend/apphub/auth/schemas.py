# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the auth endpoints."""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_RE = re.compile(r"^[0-9+\-() ]{7,20}$")


def password_policy_error(pw: str) -> str | None:
    """
    Return an error string if the password does not meet the minimum policy,
    or None if it is acceptable.

    Policy: >= 8 chars, at most 72 bytes (bcrypt limit), at least one
    uppercase, one lowercase, one digit.
    """
    if len(pw) < 8:
        return "Password must be at least 8 characters long"
    if len(pw.encode("utf-8")) > 72:
        return "Password must not exceed 72 bytes"
    if not re.search(r"[A-Z]", pw):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", pw):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[0-9]", pw):
        return "Password must contain at least one number"
    return None


def check_username(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Username is required")
    if not 3 <= len(value) <= 50:
        raise ValueError("Username must be between 3 and 50 characters")
    if not _USERNAME_RE.match(value):
        raise ValueError("Username can only contain letters, numbers, and underscores")
    return value


def check_email(value: str) -> str:
    value = value.strip().lower()
    if not _EMAIL_RE.match(value):
        raise ValueError("Please provide a valid email address")
    return value


def _check_phone(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not _PHONE_RE.match(value):
        raise ValueError("Please provide a valid phone number")
    return value


# -- Requests --------------------------------------------------------------


class LoginRequest(BaseModel):
    # Missing, null and non-string fields all become "", so every bad
    # credential shape gets the same generic 400 naming no field.
    username: str = ""
    password: str = ""

    @field_validator("username", "password", mode="before")
    @classmethod
    def _blank_unless_text(cls, v):
        return v if isinstance(v, str) else ""


class RegisterRequest(BaseModel):
    username: str
    password: str
    email: str
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = None
    role_id: Optional[int] = Field(None, ge=1)

    # Signup attribution, stored in registration_metadata
    referral_source: Optional[str] = Field(None, max_length=255)
    utm_source: Optional[str] = Field(None, max_length=255)
    utm_medium: Optional[str] = Field(None, max_length=255)
    utm_campaign: Optional[str] = Field(None, max_length=255)

    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        return check_username(value)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Email is required")
        return check_email(value)

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        err = password_policy_error(value)
        if err:
            raise ValueError(err)
        return value

    @field_validator("phone")
    @classmethod
    def _phone(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)


class UpdateProfileRequest(BaseModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _email(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else check_email(value)

    @field_validator("phone")
    @classmethod
    def _phone(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str


# -- Responses -------------------------------------------------------------


class AccountProfile(BaseModel):
    id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    role: Optional[str] = Field(None, validation_alias="role_name")
    is_verified: bool
    created_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class LoginResponse(BaseModel):
    message: str = "Login successful"
    user: AccountProfile
    token: str
    token_type: str = "bearer"


class RegisterResponse(BaseModel):
    id: int
    username: str
    email: str

    model_config = {"from_attributes": True}


class MeResponse(BaseModel):
    # Serialized with the camelCase keys clients read: userId, userRole, authSource
    user_id: int = Field(alias="userId")
    user_role: Optional[str] = Field(None, alias="userRole")
    auth_source: str = Field(alias="authSource")  # "session" or "token"
    user: AccountProfile

    model_config = {"populate_by_name": True}
