# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Role ORM model – a named permission bundle with a privilege level."""

from sqlalchemy import Column, Integer, String, JSON, DateTime
from sqlalchemy.sql import func

from apphub.database import Base

# A role holding this permission passes every permission check
ALL_PERMISSIONS = "all"


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String(255), nullable=True)
    # Lower value = more privileged (admin is 1)
    hierarchy_level = Column(Integer, nullable=False, default=0)
    permissions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def grants(self, permission: str) -> bool:
        perms = self.permissions or []
        return ALL_PERMISSIONS in perms or permission in perms
