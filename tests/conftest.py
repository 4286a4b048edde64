"""
Pytest configuration and fixtures.

The settings singleton is built at import time, so the environment is
prepared before anything from ``apphub`` is imported.
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="apphub-tests-")

os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'apphub.db')}"
os.environ["SECRET_KEY"] = "test-signing-key-0123456789abcdef"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["FIRST_ADMIN_USERNAME"] = "admin"
os.environ["FIRST_ADMIN_EMAIL"] = "admin@apphub.com"
os.environ["FIRST_ADMIN_PASSWORD"] = "password"

import pytest                                   # noqa: E402
from fastapi.testclient import TestClient       # noqa: E402

from apphub.database import Base, SessionLocal, engine   # noqa: E402
from apphub.core.ratelimit import login_limiter          # noqa: E402
from apphub.core.security import hash_password           # noqa: E402
from apphub.main import app                               # noqa: E402
from apphub.models.account import Account                 # noqa: E402
from apphub.models.role import Role                       # noqa: E402
from apphub.seed import seed_defaults                     # noqa: E402

# Import every model so Base.metadata knows all tables
import apphub.models.app                    # noqa: F401, E402
import apphub.models.audit_log              # noqa: F401, E402
import apphub.models.catalog                # noqa: F401, E402
import apphub.models.corporate              # noqa: F401, E402
import apphub.models.location               # noqa: F401, E402
import apphub.models.registration_metadata  # noqa: F401, E402
import apphub.models.session                # noqa: F401, E402

ADMIN_PASSWORD = "password"
USER_PASSWORD = "Secret123"


@pytest.fixture(autouse=True)
def _database():
    """Fresh schema plus the default roles and admin for every test."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_defaults(db)
    finally:
        db.close()
    login_limiter.clear()
    yield
    login_limiter.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def make_account(db):
    """Factory: create a live, active account holding the named role."""
    def _make(username, role="user", password=USER_PASSWORD, email=None, **fields):
        role_row = db.query(Role).filter(Role.name == role).first()
        account = Account(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=hash_password(password),
            role_id=role_row.id if role_row else None,
            **fields,
        )
        db.add(account)
        db.commit()
        db.refresh(account)
        return account

    return _make


def login(client, username, password, path="/auth/client/login"):
    return client.post(path, json={"username": username, "password": password})


@pytest.fixture()
def admin_client(client):
    """A client carrying the seeded admin's session cookie."""
    resp = login(client, "admin", ADMIN_PASSWORD, path="/auth/login")
    assert resp.status_code == 200, resp.text
    return client


@pytest.fixture()
def admin_headers(client):
    """Bearer headers for the seeded admin, with the session cookie dropped."""
    resp = login(client, "admin", ADMIN_PASSWORD, path="/auth/login")
    assert resp.status_code == 200, resp.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['token']}"}
