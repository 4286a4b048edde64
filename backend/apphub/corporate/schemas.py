# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for corporate content."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from apphub.auth.schemas import check_email

_FEEDBACK_STATUSES = ("pending", "in_progress", "resolved", "closed")


class _Out(BaseModel):
    id: int
    owner_id: Optional[int] = None
    created_at: datetime

    model_config = {"from_attributes": True}


# -- Ads -------------------------------------------------------------------


class AdIn(BaseModel):
    ad_type: str = Field(..., min_length=1, max_length=50)
    ad_position: Optional[str] = Field(None, max_length=50)
    title: str = Field(..., min_length=1, max_length=255)
    image: Optional[str] = Field(None, max_length=255)
    url: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    is_active: bool = True


class AdUpdate(BaseModel):
    ad_type: Optional[str] = Field(None, min_length=1, max_length=50)
    ad_position: Optional[str] = Field(None, max_length=50)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    image: Optional[str] = Field(None, max_length=255)
    url: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class AdOut(AdIn, _Out):
    pass


# -- Popup ads -------------------------------------------------------------


class PopupAdIn(BaseModel):
    side_ads: Optional[str] = None
    image: Optional[str] = Field(None, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    is_active: bool = True


class PopupAdUpdate(BaseModel):
    side_ads: Optional[str] = None
    image: Optional[str] = Field(None, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    is_active: Optional[bool] = None


class PopupAdOut(PopupAdIn, _Out):
    pass


# -- Terms and conditions --------------------------------------------------


class TermsIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    version: str = Field("1.0", min_length=1, max_length=20)
    is_active: bool = True


class TermsUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    version: Optional[str] = Field(None, min_length=1, max_length=20)
    is_active: Optional[bool] = None


class TermsOut(TermsIn, _Out):
    pass


# -- About us / awards -----------------------------------------------------


class AboutUsIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    image: Optional[str] = Field(None, max_length=255)
    is_active: bool = True


class AboutUsUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class AboutUsOut(AboutUsIn, _Out):
    pass


class AwardIn(AboutUsIn):
    tag_line: Optional[str] = Field(None, max_length=255)


class AwardUpdate(AboutUsUpdate):
    tag_line: Optional[str] = Field(None, max_length=255)


class AwardOut(AwardIn, _Out):
    pass


# -- Galleries -------------------------------------------------------------


class GalleryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    is_active: bool = True


class GalleryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class GalleryOut(GalleryIn, _Out):
    pass


class GalleryImageIn(BaseModel):
    image: str = Field(..., min_length=1, max_length=255)
    caption: Optional[str] = Field(None, max_length=255)
    sort_order: int = 0


class GalleryImagesRequest(BaseModel):
    images: List[GalleryImageIn] = Field(..., min_length=1)


class GalleryImageOut(GalleryImageIn):
    id: int
    gallery_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


# -- Contact details -------------------------------------------------------


class ContactIn(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    map_location: Optional[str] = None
    working_hours: Optional[str] = Field(None, max_length=255)
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def _email(cls, value: Optional[str]) -> Optional[str]:
        return check_email(value) if value else None


class ContactUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    map_location: Optional[str] = None
    working_hours: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def _email(cls, value: Optional[str]) -> Optional[str]:
        return check_email(value) if value else None


class ContactOut(ContactIn, _Out):
    pass


# -- Social links ----------------------------------------------------------


class SocialLinkIn(BaseModel):
    platform: str = Field(..., min_length=1, max_length=50)
    url: str = Field(..., min_length=1, max_length=255)
    icon: Optional[str] = Field(None, max_length=255)
    is_active: bool = True


class SocialLinkUpdate(BaseModel):
    platform: Optional[str] = Field(None, min_length=1, max_length=50)
    url: Optional[str] = Field(None, min_length=1, max_length=255)
    icon: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class SocialLinkOut(SocialLinkIn, _Out):
    pass


# -- Feedback --------------------------------------------------------------


class FeedbackIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=100)
    feedback_type: str = Field(..., min_length=1, max_length=50)
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    rating: Optional[int] = Field(None, ge=1, le=5)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return check_email(value)


class FeedbackUpdate(BaseModel):
    """Only the triage status of a feedback entry can change."""
    status: str

    @field_validator("status")
    @classmethod
    def _status(cls, value: str) -> str:
        if value not in _FEEDBACK_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(_FEEDBACK_STATUSES)}")
        return value


class FeedbackOut(FeedbackIn, _Out):
    status: str
