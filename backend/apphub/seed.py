# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Default data created on first boot: the five built-in roles and, when
FIRST_ADMIN_PASSWORD is configured, the first admin account.

Both steps are idempotent and safe to run on every startup.
"""

from sqlalchemy.orm import Session

from apphub.core.config import settings
from apphub.core.logger import logger
from apphub.core.security import hash_password
from apphub.models.account import Account, live_accounts
from apphub.models.role import ALL_PERMISSIONS, Role

# (name, description, hierarchy_level, permissions) – most privileged first
DEFAULT_ROLES = [
    ("admin", "System Administrator", 1, [ALL_PERMISSIONS]),
    ("corporate", "Corporate Manager", 2, ["manage_company", "view_reports", "manage_users"]),
    ("regional", "Regional Manager", 3, ["manage_region", "view_reports"]),
    ("branch", "Branch Manager", 4, ["manage_branch", "view_local_reports"]),
    ("user", "Regular User", 5, ["view_profile", "update_profile"]),
]


def seed_roles(db: Session) -> int:
    """Insert the built-in roles when the roles table is empty."""
    if db.query(Role).count():
        return 0
    for name, description, level, permissions in DEFAULT_ROLES:
        db.add(Role(
            name=name,
            description=description,
            hierarchy_level=level,
            permissions=permissions,
        ))
    db.commit()
    logger.info("Seeded %d default roles", len(DEFAULT_ROLES))
    return len(DEFAULT_ROLES)


def seed_first_admin(db: Session) -> Account | None:
    """Create the configured admin account unless it already exists."""
    if not settings.first_admin_password:
        return None

    existing = live_accounts(db).filter(Account.username == settings.first_admin_username).first()
    if existing:
        return None

    admin_role = db.query(Role).filter(Role.name == "admin").first()
    if admin_role is None:
        logger.warning("Admin role missing – run seed_roles first; admin not created")
        return None

    admin = Account(
        username=settings.first_admin_username,
        email=settings.first_admin_email,
        password_hash=hash_password(settings.first_admin_password),
        first_name="System",
        last_name="Administrator",
        role_id=admin_role.id,
        is_verified=True,
        is_active=True,
    )
    db.add(admin)
    db.commit()
    logger.info("Created first admin account '%s'", admin.username)
    return admin


def seed_defaults(db: Session) -> None:
    seed_roles(db)
    seed_first_admin(db)
