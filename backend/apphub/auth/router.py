# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Auth endpoints – admin login, registration, the client-facing login and
signup flow, current-account info, profile and password changes, logout.

Security notes
--------------
* Wrong password and unknown username produce the *same* 401 body.  This
  prevents user-enumeration attacks.
* The admin entry point checks the role before the password, so a
  non-admin username is answered with 403 whatever password is sent.
* Every failed login counts against the caller's address in the login
  rate limiter; a successful login clears it.
* change-password verifies the old password before accepting the new one,
  so a stolen (but not yet expired) token alone cannot reset the password.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from apphub.database import get_db
from apphub.core import sessions
from apphub.core.config import settings
from apphub.core.logger import logger
from apphub.core.ratelimit import enforce_login_rate_limit, login_limiter
from apphub.core.security import (
    AuthSource,
    create_access_token,
    get_client_ip,
    get_current_account,
    hash_password,
    oauth2_scheme,
    require_admin,
    resolve_authentication,
    verify_password,
)
from apphub.models.account import Account, live_accounts
from apphub.models.audit_log import AuditLog
from apphub.models.registration_metadata import RegistrationMetadata
from apphub.models.role import ALL_PERMISSIONS, Role
from apphub.admin.schemas import AccountListResponse
from apphub.auth.schemas import (
    AccountProfile,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    UpdateProfileRequest,
    password_policy_error,
)

router = APIRouter(prefix="/auth", tags=["auth"])

# Generic message used for both "no such username" and "wrong password"
_LOGIN_FAIL = "Invalid credentials"
_ADMIN_ROLE = "admin"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _reject_login(request: Request, code: int, detail: str, username: str):
    ip = get_client_ip(request)
    failures = login_limiter.record_failure(ip)
    logger.info("Login rejected (%d) for username=%r client=%s failures=%d", code, username, ip, failures)
    raise HTTPException(status_code=code, detail=detail)


def _require_credentials(body: LoginRequest) -> None:
    if not body.username or not body.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required",
        )


def _establish_login(
    db: Session,
    request: Request,
    response: Response,
    account: Account,
) -> LoginResponse:
    """Stamp last_login, open a session, and issue a bearer token."""
    ip = get_client_ip(request)
    role_name = account.role_name

    account.last_login = datetime.now(timezone.utc)
    db.add(AuditLog(actor_id=account.id, target_account_id=account.id, action="login", request_ip=ip))
    db.commit()

    session_id = sessions.create_session(
        db,
        account,
        role_name,
        ip_address=ip,
        user_agent=request.headers.get("User-Agent"),
    )
    sessions.set_session_cookie(response, session_id)
    login_limiter.reset(ip)

    token = create_access_token(account, role_name)
    logger.info("Login succeeded for account_id=%d role=%s client=%s", account.id, role_name, ip)
    return LoginResponse(user=AccountProfile.model_validate(account), token=token)


def _caller_is_admin(db: Session, request: Request, token: str | None) -> bool:
    cookie = request.cookies.get(settings.session_cookie_name)
    result = resolve_authentication(db, cookie, token)
    return result.source is not AuthSource.NONE and result.role_name == _ADMIN_ROLE


def _create_account(
    db: Session,
    request: Request,
    body: RegisterRequest,
    any_role: bool = False,
) -> Account:
    """
    Validate uniqueness, hash the password, and persist account + metadata.

    Without *any_role* the requested role may be no more privileged than
    the default one, and never one holding every permission.
    """
    if live_accounts(db).filter(Account.username == body.username).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
    if live_accounts(db).filter(Account.email == body.email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already exists")

    # Least privileged = highest hierarchy level
    default_role = db.query(Role).order_by(Role.hierarchy_level.desc()).first()
    role = default_role
    if body.role_id is not None:
        role = db.get(Role, body.role_id)
        if role is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid role")
        privileged = (
            role.grants(ALL_PERMISSIONS)
            or role.hierarchy_level < default_role.hierarchy_level
        )
        if privileged and not any_role:
            logger.warning("Registration refused privileged role=%s client=%s", role.name, get_client_ip(request))
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only an administrator can assign this role",
            )

    account = Account(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone,
        role_id=role.id if role else None,
    )
    db.add(account)
    try:
        db.flush()  # get account.id; a racing duplicate fails here
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username or email already exists",
        )

    ip = get_client_ip(request)
    db.add(RegistrationMetadata(
        account_id=account.id,
        registration_ip=ip,
        user_agent=request.headers.get("User-Agent"),
        referral_source=body.referral_source,
        utm_source=body.utm_source,
        utm_medium=body.utm_medium,
        utm_campaign=body.utm_campaign,
    ))
    db.add(AuditLog(
        actor_id=None,
        target_account_id=account.id,
        action="register",
        detail=f"role={role.name if role else None}",
        request_ip=ip,
    ))
    db.commit()
    db.refresh(account)
    logger.info("Registered account_id=%d username=%s", account.id, account.username)
    return account


# ---------------------------------------------------------------------------
# POST /auth/login  – admin entry point
# ---------------------------------------------------------------------------


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(enforce_login_rate_limit)],
)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    """Authenticate an administrator, open a session and return a JWT."""
    _require_credentials(body)

    account = live_accounts(db).filter(Account.username == body.username).first()
    if not account:
        verify_password(body.password, None)
        _reject_login(request, status.HTTP_401_UNAUTHORIZED, _LOGIN_FAIL, body.username)

    if account.role_name != _ADMIN_ROLE:
        _reject_login(
            request,
            status.HTTP_403_FORBIDDEN,
            "Access denied. Admin privileges required.",
            body.username,
        )

    if not verify_password(body.password, account.password_hash):
        _reject_login(request, status.HTTP_401_UNAUTHORIZED, _LOGIN_FAIL, body.username)

    if not account.is_active:
        _reject_login(request, status.HTTP_401_UNAUTHORIZED, "Account disabled", body.username)

    return _establish_login(db, request, response, account)


# ---------------------------------------------------------------------------
# POST /auth/register
# ---------------------------------------------------------------------------


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    request: Request,
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
):
    """
    Create an account.  No token is issued here; see /auth/client/register.
    Only an authenticated admin may hand out a privileged role.
    """
    return _create_account(db, request, body, any_role=_caller_is_admin(db, request, token))


# ---------------------------------------------------------------------------
# POST /auth/client/login  /  POST /auth/client/register
# ---------------------------------------------------------------------------


@router.post(
    "/client/login",
    response_model=LoginResponse,
    dependencies=[Depends(enforce_login_rate_limit)],
)
def client_login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    """Authenticate an account of any role."""
    _require_credentials(body)

    account = live_accounts(db).filter(Account.username == body.username).first()
    # Unified failure path – no information leaks about whether the username exists
    password_ok = verify_password(body.password, account.password_hash if account else None)
    if not account or not password_ok:
        _reject_login(request, status.HTTP_401_UNAUTHORIZED, _LOGIN_FAIL, body.username)

    if not account.is_active:
        _reject_login(request, status.HTTP_401_UNAUTHORIZED, "Account disabled", body.username)

    return _establish_login(db, request, response, account)


@router.post(
    "/client/register",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
)
def client_register(
    body: RegisterRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    """Create an account and sign it in straight away."""
    account = _create_account(db, request, body)
    result = _establish_login(db, request, response, account)
    result.message = "Registration successful"
    return result


# ---------------------------------------------------------------------------
# GET /auth/me  /  PUT /auth/me
# ---------------------------------------------------------------------------


@router.get("/me", response_model=MeResponse)
def me(request: Request, current: Account = Depends(get_current_account)):
    """Return the authenticated account's id, role and public profile."""
    return MeResponse(
        user_id=current.id,
        user_role=current.role_name,
        auth_source=request.state.auth_source.value,
        user=AccountProfile.model_validate(current),
    )


@router.put("/me", response_model=AccountProfile)
def update_profile(
    body: UpdateProfileRequest,
    current: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """Update the caller's own name, phone or email."""
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    new_email = changes.get("email")
    if new_email and new_email != current.email:
        clash = (
            live_accounts(db)
            .filter(Account.email == new_email, Account.id != current.id)
            .first()
        )
        if clash:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already exists")
    elif "email" in changes and not new_email:
        del changes["email"]

    for field, value in changes.items():
        setattr(current, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already exists")
    db.refresh(current)
    return current


# ---------------------------------------------------------------------------
# PUT /auth/change-password
# ---------------------------------------------------------------------------


@router.put("/change-password")
def change_password(
    body: ChangePasswordRequest,
    request: Request,
    current: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """
    Change the authenticated account's password.  Every other session of
    the account is revoked; the session making the request survives.
    """
    if not verify_password(body.old_password, current.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    err = password_policy_error(body.new_password)
    if err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=err)

    current.password_hash = hash_password(body.new_password)
    sessions.destroy_account_sessions(db, current.id, keep=request.state.session_id)
    db.add(AuditLog(
        actor_id=current.id,
        target_account_id=current.id,
        action="change_password",
        request_ip=get_client_ip(request),
    ))
    db.commit()

    return {"detail": "Password changed successfully"}


# ---------------------------------------------------------------------------
# POST /auth/logout
# ---------------------------------------------------------------------------


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
):
    """
    Destroy the server-side session and clear its cookie.  A bearer token
    stays valid until it expires; clients discard it themselves.
    """
    cookie = request.cookies.get(settings.session_cookie_name)
    result = resolve_authentication(db, cookie, token)
    if result.source is AuthSource.NONE:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    session_id = result.session_id
    if result.source is AuthSource.TOKEN:
        session_id = sessions.session_id_for_token(token)
    sessions.destroy_session(db, session_id)
    sessions.clear_session_cookie(response)
    return {"detail": "Logged out successfully"}


# ---------------------------------------------------------------------------
# GET /auth/users  – admin only
# ---------------------------------------------------------------------------


@router.get("/users", response_model=AccountListResponse)
def list_users(
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Every live account, newest first (no password data – handled by the schema)."""
    accounts = live_accounts(db).order_by(Account.created_at.desc(), Account.id.desc()).all()
    return AccountListResponse(users=accounts)
