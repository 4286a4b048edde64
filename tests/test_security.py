from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
import pytest
from pydantic import ValidationError

from apphub.core.config import Settings, settings
from apphub.core.security import (
    AuthSource,
    create_access_token,
    decode_access_token,
    hash_password,
    resolve_authentication,
    verify_password,
)
from apphub.core import sessions
from apphub.models.role import Role
from apphub.models.session import AuthSession

from conftest import USER_PASSWORD, login


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


# -- Password hashing ----------------------------------------------------------


def test_hash_is_salted_and_verifies():
    first = hash_password("Secret123")
    second = hash_password("Secret123")
    assert first != second
    assert verify_password("Secret123", first)
    assert not verify_password("secret123", first)


def test_verify_refuses_over_long_password():
    stored = hash_password("A" * 72)
    assert not verify_password("A" * 73, stored)


def test_verify_malformed_hash_raises():
    with pytest.raises(ValueError):
        verify_password("Secret123", "not-a-bcrypt-hash")


def test_verify_without_stored_hash_still_runs_bcrypt(monkeypatch):
    checked = []
    real_checkpw = bcrypt.checkpw

    def _recording_checkpw(password, hashed):
        checked.append(hashed)
        return real_checkpw(password, hashed)

    monkeypatch.setattr(bcrypt, "checkpw", _recording_checkpw)
    assert verify_password("Secret123", None) is False
    assert len(checked) == 1
    assert checked[0].startswith(b"$2")


# -- Token lifetime --------------------------------------------------------------


def test_token_accepted_just_before_expiry(client, make_account):
    account = make_account("ivan")
    issued = datetime.now(timezone.utc) - timedelta(hours=23, minutes=59)
    token = create_access_token(account, "user", issued_at=issued)
    resp = client.get("/auth/me", headers=_bearer(token))
    assert resp.status_code == 200


def test_token_rejected_just_after_expiry(client, make_account):
    account = make_account("ivan")
    issued = datetime.now(timezone.utc) - timedelta(hours=24, minutes=1)
    token = create_access_token(account, "user", issued_at=issued)
    resp = client.get("/auth/me", headers=_bearer(token))
    assert resp.status_code == 401


def test_token_claims(make_account):
    account = make_account("ivan")
    claims = decode_access_token(create_access_token(account, "user"))
    assert claims["sub"] == str(account.id)
    assert claims["account_id"] == account.id
    assert claims["username"] == "ivan"
    assert claims["role"] == "user"
    assert claims["exp"] - claims["iat"] == 24 * 3600


def test_token_signed_with_other_secret_rejected(client, make_account):
    account = make_account("ivan")
    forged = jwt.encode(
        {"sub": str(account.id), "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        "some-other-secret-value-0123456789",
        algorithm="HS256",
    )
    assert client.get("/auth/me", headers=_bearer(forged)).status_code == 401


def test_garbage_token_rejected(client):
    assert client.get("/auth/me", headers=_bearer("not.a.token")).status_code == 401


# -- Deleted / disabled accounts -------------------------------------------------


def test_token_for_soft_deleted_account_rejected(admin_client, make_account):
    account = make_account("judy")
    token = create_access_token(account, "user")

    assert admin_client.delete(f"/admin/users/{account.id}").status_code == 200
    admin_client.cookies.clear()

    resp = admin_client.get("/auth/me", headers=_bearer(token))
    assert resp.status_code == 401


def test_session_for_disabled_account_rejected(client, make_account, db):
    account = make_account("kim")
    login(client, "kim", USER_PASSWORD)
    assert client.get("/auth/me").status_code == 200

    account.is_active = False
    db.commit()
    assert client.get("/auth/me").status_code == 401


# -- Session / token resolution --------------------------------------------------


def test_token_request_hydrates_session(client, make_account, db):
    account = make_account("leo")
    token = create_access_token(account, "user")

    first = client.get("/auth/me", headers=_bearer(token))
    assert first.json()["authSource"] == "token"
    assert settings.session_cookie_name in first.cookies
    assert db.query(AuthSession).filter(AuthSession.account_id == account.id).count() == 1

    # The cookie alone now authenticates
    second = client.get("/auth/me")
    assert second.status_code == 200
    assert second.json()["authSource"] == "session"


def test_repeated_bearer_requests_reuse_one_session(client, make_account, db):
    account = make_account("leo")
    token = create_access_token(account, "user")

    for _ in range(20):
        client.cookies.clear()
        assert client.get("/auth/me", headers=_bearer(token)).status_code == 200

    assert db.query(AuthSession).filter(AuthSession.account_id == account.id).count() == 1


def test_new_session_purges_expired_rows(make_account, db):
    account = make_account("nina")
    for _ in range(3):
        sessions.create_session(db, account, "user")
    db.query(AuthSession).update(
        {AuthSession.expires_at: datetime.now(timezone.utc) - timedelta(minutes=1)}
    )
    db.commit()

    live = sessions.create_session(db, account, "user")
    rows = db.query(AuthSession).filter(AuthSession.account_id == account.id).all()
    assert len(rows) == 1
    assert sessions.get_valid_session(db, live) is not None


def test_expired_token_session_is_replaced(client, make_account, db):
    account = make_account("leo")
    token = create_access_token(account, "user")
    client.get("/auth/me", headers=_bearer(token))

    db.query(AuthSession).update(
        {AuthSession.expires_at: datetime.now(timezone.utc) - timedelta(minutes=1)}
    )
    db.commit()

    client.cookies.clear()
    assert client.get("/auth/me", headers=_bearer(token)).status_code == 200
    db.expire_all()
    row = db.query(AuthSession).filter(AuthSession.account_id == account.id).one()
    assert sessions.get_valid_session(db, sessions.session_id_for_token(token)) is row


def test_bearer_logout_drops_token_session(client, make_account, db):
    account = make_account("leo")
    token = create_access_token(account, "user")
    client.get("/auth/me", headers=_bearer(token))
    client.cookies.clear()

    assert client.post("/auth/logout", headers=_bearer(token)).status_code == 200
    assert db.query(AuthSession).filter(AuthSession.account_id == account.id).count() == 0


def test_session_takes_precedence_over_token(client, make_account):
    leo = make_account("leo")
    mia = make_account("mia")
    login(client, "leo", USER_PASSWORD)

    resp = client.get("/auth/me", headers=_bearer(create_access_token(mia, "user")))
    assert resp.json()["userId"] == leo.id
    assert resp.json()["authSource"] == "session"


def test_invalid_session_falls_back_to_token(client, make_account, db):
    account = make_account("leo")
    client.cookies.set(settings.session_cookie_name, "stale-session-id")
    resp = client.get("/auth/me", headers=_bearer(create_access_token(account, "user")))
    assert resp.status_code == 200
    assert resp.json()["authSource"] == "token"


def test_expired_session_is_not_valid(make_account, db):
    account = make_account("nina")
    session_id = sessions.create_session(db, account, "user")
    row = db.query(AuthSession).one()
    row.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
    db.commit()

    assert sessions.get_valid_session(db, session_id) is None
    assert resolve_authentication(db, session_id, None).source is AuthSource.NONE


def test_session_id_is_stored_hashed(make_account, db):
    account = make_account("nina")
    session_id = sessions.create_session(db, account, "user")
    row = db.query(AuthSession).one()
    assert row.token_hash != session_id
    assert len(row.token_hash) == 64
    assert row.role_name == "user"


def test_resolve_without_proof():
    assert resolve_authentication(None, None, None).source is AuthSource.NONE


# -- Role and permission gates --------------------------------------------------


def test_all_sentinel_grants_any_permission(db):
    admin_role = db.query(Role).filter(Role.name == "admin").one()
    for permission in ("manage_roles", "view_reports", "something_never_defined"):
        assert admin_role.grants(permission)


def test_specific_permission_only(db):
    regional = db.query(Role).filter(Role.name == "regional").one()
    assert regional.grants("view_reports")
    assert not regional.grants("manage_roles")


def test_permission_gate_allows_reports_for_corporate(client, make_account):
    make_account("olga", role="corporate")
    login(client, "olga", USER_PASSWORD)
    assert client.get("/admin/registrations/by-source").status_code == 200


def test_permission_gate_forbids_missing_permission(client, make_account):
    make_account("olga", role="corporate")
    login(client, "olga", USER_PASSWORD)
    resp = client.get("/admin/roles")
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied. Required permission: manage_roles"


def test_gate_without_role_is_forbidden(client, make_account):
    make_account("pat", role="no-such-role")
    login(client, "pat", USER_PASSWORD)
    resp = client.get("/admin/registrations/by-source")
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Invalid user role"


def test_gate_unauthenticated_is_401(client):
    assert client.get("/admin/registrations/by-source").status_code == 401


# -- Configuration ---------------------------------------------------------------


@pytest.mark.parametrize("secret", ["your-secret-key", "changeme", "too-short"])
def test_weak_secret_refused(secret):
    with pytest.raises(ValidationError):
        Settings(database_url="sqlite://", secret_key=secret)


def test_missing_secret_refused(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url="sqlite://")
