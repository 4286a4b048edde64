# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for app management."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from apphub.auth.schemas import check_username, password_policy_error


# -- Apps (groups) ---------------------------------------------------------


class AppGroupIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    apps_name: str = Field(..., min_length=1, max_length=255)
    code: Optional[str] = Field(None, max_length=45)
    sort_order: int = 0


class AppGroupUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    apps_name: Optional[str] = Field(None, min_length=1, max_length=255)
    code: Optional[str] = Field(None, max_length=45)
    sort_order: Optional[int] = None


class AppDetailsIn(BaseModel):
    icon: Optional[str] = Field(None, max_length=255)
    logo: Optional[str] = Field(None, max_length=255)
    name_image: Optional[str] = Field(None, max_length=255)
    background_color: Optional[str] = Field(None, max_length=32)
    banner: Optional[str] = Field(None, max_length=255)
    url: Optional[str] = Field(None, max_length=255)


class AppDetailsOut(AppDetailsIn):
    model_config = {"from_attributes": True}


class AppGroupOut(AppGroupIn):
    id: int
    details: Optional[AppDetailsOut] = None

    model_config = {"from_attributes": True}


class AppCreateRequest(BaseModel):
    """An app entry plus, optionally, its branding in one request."""
    group: AppGroupIn
    details: Optional[AppDetailsIn] = None


# -- App accounts ----------------------------------------------------------


class AppAccountCreate(BaseModel):
    username: str
    password: str
    app_id: int = Field(..., ge=1)

    # Same rules as self-service registration
    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        return check_username(value)

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        err = password_policy_error(value)
        if err:
            raise ValueError(err)
        return value


class AppAccountOut(BaseModel):
    id: int
    account_id: int
    username: str
    app_id: int
    app_name: str
    is_active: bool
    created_at: datetime


class AppAccountListResponse(BaseModel):
    accounts: List[AppAccountOut]


class AppAccountCheck(BaseModel):
    exists: bool
    accounts: int


class PasswordResetResponse(BaseModel):
    detail: str
    temporary_password: str
