# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives and auth guards live
here.  No other module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (bcrypt, cost 12)
2. JWT creation / decoding                  (PyJWT / HS256, 24 h expiry)
3. Unified session-or-bearer authentication (resolve_authentication)
4. FastAPI dependency guards                (get_current_account,
                                             require_roles, require_permission)
"""

import enum
from dataclasses import dataclass
from functools import lru_cache
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt as _jwt        # PyJWT
from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from apphub.core import sessions
from apphub.core.config import settings
from apphub.core.logger import logger
from apphub.database import get_db
from apphub.models.account import Account, get_live_account

# ---------------------------------------------------------------------------
# 1.  bcrypt – password hashing
# ---------------------------------------------------------------------------
# bcrypt only looks at the first 72 bytes of input and refuses longer
# passwords outright, so registration caps passwords at that length.
_BCRYPT_MAX_BYTES = 72


def hash_password(plain: str) -> str:
    """
    Hash a plaintext password with bcrypt and a freshly generated salt.

    The salt and cost factor are embedded in the returned hash string
    (``$2b$12$...``).
    """
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


@lru_cache(maxsize=1)
def _dummy_hash() -> bytes:
    return hash_password("apphub-unknown-account").encode("utf-8")


def verify_password(plain: str, stored_hash: Optional[str]) -> bool:
    """
    Constant-time verification of a plaintext password against a bcrypt hash
    produced by :func:`hash_password`.  A malformed stored hash raises
    ``ValueError``; it is never reported as a match.

    With no stored hash (unknown account) the password is still checked
    against a throwaway hash of the same cost, and False is returned, so the
    miss takes as long as a wrong password.
    """
    encoded = plain.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        # No hash we issue can match a password we would have refused
        return False
    if stored_hash is None:
        bcrypt.checkpw(encoded, _dummy_hash())
        return False
    return bcrypt.checkpw(encoded, stored_hash.encode("utf-8"))


# ---------------------------------------------------------------------------
# 2.  JWT – access tokens
# ---------------------------------------------------------------------------


def create_access_token(
    account: Account,
    role_name: str | None,
    issued_at: Optional[datetime] = None,
) -> str:
    """
    Sign a JWT with HS256 for *account*.

    Claims: sub (account id as string), account_id, username, role, iat, exp.
    *issued_at* defaults to now; expiry is ``access_token_expire_minutes``
    after issuance.
    """
    iat = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": str(account.id),
        "account_id": account.id,
        "username": account.username,
        "role": role_name,
        "iat": iat,
        "exp": iat + timedelta(minutes=settings.access_token_expire_minutes),
    }
    return _jwt.encode(payload, settings.secret_key, algorithm="HS256")


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a JWT.  Raises ``jwt.InvalidTokenError`` (of which
    ``ExpiredSignatureError`` is a subclass) on any failure.
    """
    return _jwt.decode(
        token,
        settings.secret_key,
        algorithms=["HS256"],
        options={"require": ["exp", "sub"]},
    )


# ---------------------------------------------------------------------------
# 3.  Unified authentication
# ---------------------------------------------------------------------------

# tokenUrl is only used by the auto-generated OpenAPI docs.  auto_error is off
# because a session cookie alone is also a valid proof.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


class AuthSource(str, enum.Enum):
    NONE = "none"
    SESSION = "session"
    TOKEN = "token"


@dataclass
class AuthResult:
    source: AuthSource
    account: Optional[Account] = None
    role_name: Optional[str] = None
    session_id: Optional[str] = None


_UNAUTHENTICATED = AuthResult(AuthSource.NONE)


def _usable(account: Optional[Account]) -> bool:
    return account is not None and account.is_active


def resolve_authentication(
    db: Session,
    session_id: Optional[str],
    bearer_token: Optional[str],
) -> AuthResult:
    """
    Work out who is calling, trying the session cookie before the bearer
    token.  Has no side effects; the caller decides whether to hydrate or
    refresh a session from the result.
    """
    if session_id:
        row = sessions.get_valid_session(db, session_id)
        if row is not None:
            account = get_live_account(db, row.account_id)
            if _usable(account):
                return AuthResult(
                    AuthSource.SESSION, account, account.role_name, session_id
                )

    if bearer_token:
        try:
            claims = decode_access_token(bearer_token)
            account_id = int(claims["sub"])
        except (_jwt.InvalidTokenError, KeyError, ValueError) as exc:
            logger.info("Bearer token rejected: %s", exc)
            return _UNAUTHENTICATED
        account = get_live_account(db, account_id)
        if _usable(account):
            return AuthResult(AuthSource.TOKEN, account, account.role_name)

    return _UNAUTHENTICATED


# ---------------------------------------------------------------------------
# 4.  FastAPI dependency guards
# ---------------------------------------------------------------------------


def get_current_account(
    request: Request,
    response: Response,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Account:
    """
    Dependency: resolve the calling account from the session cookie or the
    bearer token.  Raises 401 when neither proof names a live account.

    A token-only request is bound to the session derived from its token
    (opened on first use, reused after that) and receives its cookie, so
    later requests skip token verification.  A session-backed request
    slides the session expiry forward.
    """
    cookie = request.cookies.get(settings.session_cookie_name)
    result = resolve_authentication(db, cookie, token)

    if result.source is AuthSource.NONE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if result.source is AuthSource.TOKEN:
        session_id = sessions.session_id_for_token(token)
        if sessions.get_valid_session(db, session_id) is not None:
            sessions.touch_session(db, session_id)
        else:
            sessions.create_session(
                db,
                result.account,
                result.role_name,
                ip_address=get_client_ip(request),
                user_agent=request.headers.get("User-Agent"),
                session_id=session_id,
            )
    else:
        session_id = result.session_id
        sessions.touch_session(db, session_id)
    sessions.set_session_cookie(response, session_id)

    request.state.auth_source = result.source
    request.state.session_id = session_id
    return result.account


def require_roles(*allowed_roles: str):
    """
    Dependency factory: the current account's role must be one of
    *allowed_roles*.  The resolved Role is stored on ``request.state.role``.
    """
    def _guard(request: Request, account: Account = Depends(get_current_account)) -> Account:
        role = account.role
        if role is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid user role")
        if role.name not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {' or '.join(allowed_roles)}",
            )
        request.state.role = role
        return account

    return _guard


def require_permission(permission: str):
    """
    Dependency factory: the current account's role must grant *permission*
    (or hold the ``all`` sentinel).
    """
    def _guard(request: Request, account: Account = Depends(get_current_account)) -> Account:
        role = account.role
        if role is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid user role")
        if not role.grants(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required permission: {permission}",
            )
        request.state.role = role
        return account

    return _guard


require_admin = require_roles("admin")


# -- IP Address extraction ----------------------------------------------------


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from the request.
    Checks X-Forwarded-For header first (for proxies), then falls back to client host.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
