# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Content published by corporate tenants: ads, popup ads, terms, about-us
pages, galleries, contact details, social links, feedback and awards.

Every row records the account that created it (owner_id); corporate
accounts only ever see their own rows, admins see all of them.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func

from apphub.database import Base


def _owner():
    return Column(
        Integer,
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )


def _created():
    return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class CorporateAd(Base):
    __tablename__ = "corporate_ads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = _owner()
    ad_type = Column(String(50), nullable=False, index=True)   # e.g. "banner", "header"
    ad_position = Column(String(50), nullable=True)
    title = Column(String(255), nullable=False)
    image = Column(String(255), nullable=True)
    url = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created()


class PopupAd(Base):
    __tablename__ = "popup_ads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = _owner()
    side_ads = Column(Text, nullable=True)
    image = Column(String(255), nullable=True)
    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created()


class TermsConditions(Base):
    __tablename__ = "terms_conditions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = _owner()
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    version = Column(String(20), nullable=False, default="1.0")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created()


class AboutUs(Base):
    __tablename__ = "about_us"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = _owner()
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    image = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created()


class Gallery(Base):
    __tablename__ = "galleries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = _owner()
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created()


class GalleryImage(Base):
    __tablename__ = "gallery_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    gallery_id = Column(
        Integer,
        ForeignKey("galleries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image = Column(String(255), nullable=False)
    caption = Column(String(255), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = _created()


class ContactInfo(Base):
    __tablename__ = "contact_us"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = _owner()
    company_name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(100), nullable=True)
    website = Column(String(255), nullable=True)
    map_location = Column(Text, nullable=True)
    working_hours = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created()


class SocialLink(Base):
    __tablename__ = "social_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = _owner()
    platform = Column(String(50), nullable=False)
    url = Column(String(255), nullable=False)
    icon = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created()


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = _owner()
    name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False)
    feedback_type = Column(String(50), nullable=False)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    rating = Column(Integer, nullable=True)                     # 1..5
    status = Column(String(20), nullable=False, default="pending")
    created_at = _created()


class Award(Base):
    __tablename__ = "awards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = _owner()
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    image = Column(String(255), nullable=True)
    tag_line = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created()
