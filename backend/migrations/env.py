# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Alembic environment – wires the migration engine to the same database URL
the application uses.

The URL is loaded from etc/app.conf (or the environment) through the
application's Settings class, so there is a single source of truth for
the connection string.
"""

import os
import sys

# ---------------------------------------------------------------------------
# Path setup – make ``backend/`` importable so ``apphub`` resolves when
# alembic is run from a plain checkout without ``pip install -e .``
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from alembic import context                # noqa: E402
from sqlalchemy import create_engine       # noqa: E402

from apphub.core.config import settings    # noqa: E402
from apphub.database import Base           # noqa: E402

# Every ORM model must be imported so Base.metadata knows all tables;
# ``alembic revision --autogenerate`` cannot detect them otherwise.
import apphub.models.role                   # noqa: F401, E402
import apphub.models.account                # noqa: F401, E402
import apphub.models.registration_metadata  # noqa: F401, E402
import apphub.models.session                # noqa: F401, E402
import apphub.models.audit_log              # noqa: F401, E402
import apphub.models.location               # noqa: F401, E402
import apphub.models.catalog                # noqa: F401, E402
import apphub.models.app                    # noqa: F401, E402
import apphub.models.corporate              # noqa: F401, E402


def run_migrations_online():
    connectable = create_engine(settings.database_url)
    with connectable.connect() as conn:
        context.configure(
            connection=conn,
            target_metadata=Base.metadata,
            # SQLite cannot ALTER most constraints in place
            render_as_batch=conn.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


def run_migrations_offline():
    context.configure(
        url=settings.database_url,
        target_metadata=Base.metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
