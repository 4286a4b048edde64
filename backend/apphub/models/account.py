# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Account ORM model and the live-account query.

Accounts are never physically removed; ``deleted_at`` marks a soft delete.
Every read of accounts goes through :func:`live_accounts` so the
``deleted_at IS NULL`` predicate is applied by default.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Session, relationship
from sqlalchemy.sql import func

from apphub.database import Base


_LIVE = text("deleted_at IS NULL")


class Account(Base):
    __tablename__ = "accounts"
    # Uniqueness holds among live rows only.  SQLite and PostgreSQL honour the
    # partial predicate; other backends fall back to a plain unique index.
    __table_args__ = (
        Index(
            "uq_accounts_username_live",
            "username",
            unique=True,
            sqlite_where=_LIVE,
            postgresql_where=_LIVE,
        ),
        Index(
            "uq_accounts_email_live",
            "email",
            unique=True,
            sqlite_where=_LIVE,
            postgresql_where=_LIVE,
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    # bcrypt embeds the salt in the hash string
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    role_id = Column(
        Integer,
        ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    role = relationship("Role", lazy="joined")

    @property
    def role_name(self) -> str | None:
        return self.role.name if self.role else None


def live_accounts(db: Session):
    """Query over accounts that have not been soft-deleted."""
    return db.query(Account).filter(Account.deleted_at.is_(None))


def get_live_account(db: Session, account_id: int) -> Account | None:
    return live_accounts(db).filter(Account.id == account_id).first()
