# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
App management – the apps listed in the hub, their branding, and the
service accounts provisioned for them.  Admin only.

    /admin/groups                         CRUD over app entries
    /admin/app-create                     app entry + branding in one call
    /admin/app-accounts                   list / create service accounts
    /admin/app-accounts/{id}              delete (soft-deletes the account)
    /admin/app-accounts/{id}/reset-password
    /admin/app-accounts/check/{app_id}    does the app have any account yet
"""

import secrets
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from apphub.database import get_db
from apphub.core import sessions
from apphub.core.config import settings
from apphub.core.crud import Resource, register_resource
from apphub.core.logger import logger
from apphub.core.security import get_client_ip, hash_password, require_admin
from apphub.models.account import Account, live_accounts
from apphub.models.app import AppAccount, AppDetails, AppGroup
from apphub.models.audit_log import AuditLog
from apphub.models.role import Role
from apphub.auth.schemas import password_policy_error
from apphub.apps.schemas import (
    AppAccountCheck,
    AppAccountCreate,
    AppAccountListResponse,
    AppAccountOut,
    AppCreateRequest,
    AppGroupIn,
    AppGroupOut,
    AppGroupUpdate,
    PasswordResetResponse,
)

router = APIRouter(prefix="/admin", tags=["apps"], dependencies=[Depends(require_admin)])

APPS = Resource("App", "groups", AppGroup, AppGroupIn, AppGroupUpdate, AppGroupOut,
                order_by=("sort_order", "name"), toggle=False)
register_resource(router, APPS)


def _audit(db: Session, request: Request, admin: Account, action: str,
           target_id: int | None = None, detail: str | None = None) -> None:
    db.add(AuditLog(
        actor_id=admin.id,
        target_account_id=target_id,
        action=action,
        detail=detail,
        request_ip=get_client_ip(request),
    ))


def _app_or_400(db: Session, app_id: int) -> AppGroup:
    app = db.get(AppGroup, app_id)
    if app is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="App not found")
    return app


def _link_or_404(db: Session, link_id: int) -> AppAccount:
    link = db.get(AppAccount, link_id)
    if link is None or link.account.deleted_at is not None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return link


def _row(link: AppAccount) -> AppAccountOut:
    return AppAccountOut(
        id=link.id,
        account_id=link.account_id,
        username=link.account.username,
        app_id=link.app_group_id,
        app_name=link.app.name,
        is_active=link.account.is_active,
        created_at=link.created_at,
    )


def _temporary_password() -> str:
    while True:
        candidate = secrets.token_urlsafe(12)
        if password_policy_error(candidate) is None:
            return candidate


# ---------------------------------------------------------------------------
# /admin/app-create
# ---------------------------------------------------------------------------


@router.get("/app-create", response_model=list[AppGroupOut])
def list_apps_with_details(db: Session = Depends(get_db)):
    """Every app entry with its branding, in menu order."""
    return db.query(AppGroup).order_by(AppGroup.sort_order.asc(), AppGroup.name.asc()).all()


@router.post("/app-create", response_model=AppGroupOut, status_code=status.HTTP_201_CREATED)
def create_app(
    body: AppCreateRequest,
    request: Request,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create an app entry and, when given, its branding row."""
    app = AppGroup(**body.group.model_dump())
    db.add(app)
    db.flush()
    if body.details is not None:
        db.add(AppDetails(app_group_id=app.id, **body.details.model_dump()))
    _audit(db, request, admin, "create_app", detail=f"id={app.id} name={app.name}")
    db.commit()
    db.refresh(app)
    logger.info("App %d (%s) created by admin %d", app.id, app.name, admin.id)
    return app


# ---------------------------------------------------------------------------
# /admin/app-accounts
# ---------------------------------------------------------------------------


@router.get("/app-accounts", response_model=AppAccountListResponse)
def list_app_accounts(db: Session = Depends(get_db)):
    links = (
        db.query(AppAccount)
        .join(Account, AppAccount.account_id == Account.id)
        .filter(Account.deleted_at.is_(None))
        .order_by(AppAccount.id.asc())
        .all()
    )
    return AppAccountListResponse(accounts=[_row(link) for link in links])


@router.get("/app-accounts/check/{app_id}", response_model=AppAccountCheck)
def check_app_accounts(app_id: int, db: Session = Depends(get_db)):
    count = (
        db.query(AppAccount)
        .join(Account, AppAccount.account_id == Account.id)
        .filter(AppAccount.app_group_id == app_id, Account.deleted_at.is_(None))
        .count()
    )
    return AppAccountCheck(exists=count > 0, accounts=count)


@router.post("/app-accounts", response_model=AppAccountOut, status_code=status.HTTP_201_CREATED)
def create_app_account(
    body: AppAccountCreate,
    request: Request,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Provision a service account for an app.  The account holds the least
    privileged role and a generated address under the configured domain.
    """
    app = _app_or_400(db, body.app_id)
    if live_accounts(db).filter(Account.username == body.username).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    role = db.query(Role).order_by(Role.hierarchy_level.desc()).first()
    account = Account(
        username=body.username,
        email=f"{body.username.lower()}@{settings.app_account_email_domain}",
        password_hash=hash_password(body.password),
        role_id=role.id if role else None,
    )
    db.add(account)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username or email already exists",
        )

    link = AppAccount(account_id=account.id, app_group_id=app.id)
    db.add(link)
    _audit(db, request, admin, "create_app_account", account.id, f"app={app.name}")
    db.commit()
    db.refresh(link)
    logger.info("App account %s created for app %d by admin %d", account.username, app.id, admin.id)
    return _row(link)


@router.delete("/app-accounts/{link_id}")
def delete_app_account(
    link_id: int,
    request: Request,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Soft-delete the service account and drop its app link."""
    link = _link_or_404(db, link_id)
    account = link.account
    account.deleted_at = datetime.now(timezone.utc)
    sessions.destroy_account_sessions(db, account.id)
    _audit(db, request, admin, "delete_app_account", account.id, f"username={account.username}")
    db.delete(link)
    db.commit()
    return {"detail": "Account deleted successfully"}


@router.post("/app-accounts/{link_id}/reset-password", response_model=PasswordResetResponse)
def reset_app_account_password(
    link_id: int,
    request: Request,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Replace the service account's password with a random one, revoke its
    sessions, and return the new password.  It is shown only in this
    response.
    """
    link = _link_or_404(db, link_id)
    account = link.account
    password = _temporary_password()
    account.password_hash = hash_password(password)
    sessions.destroy_account_sessions(db, account.id)
    _audit(db, request, admin, "reset_app_account_password", account.id)
    db.commit()
    logger.info("Password reset for app account %d by admin %d", account.id, admin.id)
    return PasswordResetResponse(detail="Password reset successfully", temporary_password=password)
