# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the admin endpoints."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# -- Accounts --------------------------------------------------------------


class ChangeRoleRequest(BaseModel):
    role_id: int


class AccountRow(BaseModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = Field(None, validation_alias="role_name")
    is_verified: bool
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class AccountListResponse(BaseModel):
    users: List[AccountRow]


# -- Roles -----------------------------------------------------------------


class RoleCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=255)
    hierarchy_level: int = Field(..., ge=0)
    permissions: List[str] = []


class RoleUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=255)
    hierarchy_level: Optional[int] = Field(None, ge=0)
    permissions: Optional[List[str]] = None


class RoleRow(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    hierarchy_level: int
    permissions: List[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RoleListResponse(BaseModel):
    roles: List[RoleRow]


# -- Registration metadata ---------------------------------------------------


class RegistrationRow(BaseModel):
    id: int
    account_id: int
    registration_ip: Optional[str] = None
    user_agent: Optional[str] = None
    referral_source: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class RegistrationCorrectionRequest(BaseModel):
    registration_ip: Optional[str] = Field(None, max_length=45)
    user_agent: Optional[str] = None
    referral_source: Optional[str] = Field(None, max_length=255)
    utm_source: Optional[str] = Field(None, max_length=255)
    utm_medium: Optional[str] = Field(None, max_length=255)
    utm_campaign: Optional[str] = Field(None, max_length=255)


class RegistrationDayStats(BaseModel):
    registration_date: date
    total_registrations: int
    unique_ips: int
    referred_registrations: int


class RegistrationStatsResponse(BaseModel):
    stats: List[RegistrationDayStats]


class SourceCount(BaseModel):
    source: str
    registrations: int


class SourceCountResponse(BaseModel):
    sources: List[SourceCount]


class UtmCount(BaseModel):
    utm_source: str
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    registrations: int


class UtmCountResponse(BaseModel):
    campaigns: List[UtmCount]


# -- Audit log responses ---------------------------------------------------


class AuditLogRow(BaseModel):
    id: int
    actor_username: Optional[str] = None      # resolved from actor_id
    target_username: Optional[str] = None     # resolved from target_account_id
    action: str
    detail: Optional[str] = None
    request_ip: Optional[str] = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    logs: List[AuditLogRow]
