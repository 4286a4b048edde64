# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Server-side session store.

A session id is 32 bytes from ``secrets`` handed to the browser in an
HTTP-only cookie.  Only its SHA-256 digest is persisted, next to the account
id and the role name cached at login.  Sessions expire
``session_expire_minutes`` after their last use (sliding expiry).

A bearer-only caller is given the session derived from its token, so
repeated token requests reuse one row instead of opening a new one each
time.  Expired rows of an account are purged whenever it opens a session.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Response
from sqlalchemy.orm import Session

from apphub.core.config import settings
from apphub.models.session import AuthSession


def _hash_session_id(session_id: str) -> str:
    return hashlib.sha256(session_id.encode("utf-8")).hexdigest()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _lifetime() -> timedelta:
    return timedelta(minutes=settings.session_expire_minutes)


def session_id_for_token(token: str) -> str:
    """Stable session id for a bearer token, keyed with the signing secret."""
    return hmac.new(
        settings.secret_key.encode("utf-8"), token.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def purge_expired_sessions(db: Session, account_id: int) -> int:
    """Delete the expired sessions of *account_id*.  Does not commit."""
    return (
        db.query(AuthSession)
        .filter(AuthSession.account_id == account_id, AuthSession.expires_at <= _now())
        .delete(synchronize_session=False)
    )


def create_session(
    db: Session,
    account,
    role_name: Optional[str],
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    session_id: Optional[str] = None,
) -> str:
    """
    Persist a new session for *account* and return the plaintext id.
    A random id is drawn unless *session_id* is given.
    """
    session_id = session_id or secrets.token_urlsafe(32)
    purge_expired_sessions(db, account.id)
    now = _now()
    db.add(AuthSession(
        token_hash=_hash_session_id(session_id),
        account_id=account.id,
        role_name=role_name,
        ip_address=ip_address,
        user_agent=user_agent,
        created_at=now,
        last_used_at=now,
        expires_at=now + _lifetime(),
    ))
    db.commit()
    return session_id


def get_valid_session(db: Session, session_id: str) -> Optional[AuthSession]:
    """Return the unexpired session row for *session_id*, if any."""
    row = (
        db.query(AuthSession)
        .filter(AuthSession.token_hash == _hash_session_id(session_id))
        .first()
    )
    if row is None or _as_utc(row.expires_at) <= _now():
        return None
    return row


def touch_session(db: Session, session_id: str) -> None:
    """Slide the expiry of an active session forward."""
    row = get_valid_session(db, session_id)
    if row is None:
        return
    now = _now()
    row.last_used_at = now
    row.expires_at = now + _lifetime()
    db.commit()


def destroy_session(db: Session, session_id: str) -> bool:
    deleted = (
        db.query(AuthSession)
        .filter(AuthSession.token_hash == _hash_session_id(session_id))
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0


def destroy_account_sessions(db: Session, account_id: int, keep: Optional[str] = None) -> int:
    """
    Revoke every session of *account_id*, except *keep* when given.
    Does not commit; callers commit together with the change that
    triggered the revocation.
    """
    q = db.query(AuthSession).filter(AuthSession.account_id == account_id)
    if keep:
        q = q.filter(AuthSession.token_hash != _hash_session_id(keep))
    return q.delete(synchronize_session=False)


# -- Cookie helpers -------------------------------------------------------------


def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_expire_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
