# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Apps offered inside the hub.

An AppGroup is one app entry (name, code, menu position); AppDetails holds
its branding assets, one row per app.  AppAccount links a service account
in ``accounts`` to the app it was created for.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from apphub.database import Base


class AppGroup(Base):
    __tablename__ = "app_groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    apps_name = Column(String(255), nullable=False)
    code = Column(String(45), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    details = relationship(
        "AppDetails", uselist=False, lazy="joined", cascade="all, delete-orphan", passive_deletes=True
    )


class AppDetails(Base):
    __tablename__ = "app_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    app_group_id = Column(
        Integer,
        ForeignKey("app_groups.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    icon = Column(String(255), nullable=True)
    logo = Column(String(255), nullable=True)
    name_image = Column(String(255), nullable=True)
    background_color = Column(String(32), nullable=True)
    banner = Column(String(255), nullable=True)
    url = Column(String(255), nullable=True)


class AppAccount(Base):
    __tablename__ = "app_accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    # RESTRICT: an app cannot be removed while accounts are provisioned for it
    app_group_id = Column(
        Integer,
        ForeignKey("app_groups.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    account = relationship("Account", lazy="joined")
    app = relationship("AppGroup", lazy="joined")
