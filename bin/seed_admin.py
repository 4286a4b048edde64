# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the built-in roles and the first admin account.

Run once after ``alembic upgrade head``:
    python bin/seed_admin.py

The admin credentials come from FIRST_ADMIN_USERNAME, FIRST_ADMIN_EMAIL and
FIRST_ADMIN_PASSWORD in etc/app.conf.  The service performs the same seeding
on startup; this script exists for deployments that start the API with a
read-only configuration.
"""

import os
import sys

# bin/seed_admin.py  →  ../backend
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from apphub.core.config import settings                       # noqa: E402
from apphub.database import SessionLocal                      # noqa: E402
from apphub.seed import seed_first_admin, seed_roles          # noqa: E402


def seed():
    db = SessionLocal()
    try:
        created = seed_roles(db)
        print(f"[seed_admin] {created} default role(s) created.")

        if not settings.first_admin_password:
            print("[seed_admin] FIRST_ADMIN_PASSWORD not set in etc/app.conf – no admin created.")
            return

        admin = seed_first_admin(db)
        if admin is None:
            print(f"[seed_admin] Admin '{settings.first_admin_username}' already exists – skipping.")
        else:
            print(f"[seed_admin] Admin '{admin.username}' created successfully.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
