# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Admin endpoints – account lifecycle, role management, registration
analytics and the audit trail.

Account and audit endpoints are guarded by ``require_admin``.  Role
management needs the ``manage_roles`` permission and registration analytics
the ``view_reports`` permission, so a corporate or regional manager can read
reports without being able to touch accounts.  A request that carries a
valid session or JWT but lacks the role/permission receives 403 before any
business logic runs.
"""

import io
from datetime import date, datetime, time, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from apphub.database import get_db
from apphub.core import sessions
from apphub.core.logger import logger
from apphub.core.security import get_client_ip, require_admin, require_permission
from apphub.models.account import Account, get_live_account, live_accounts
from apphub.models.audit_log import AuditLog
from apphub.models.registration_metadata import RegistrationMetadata
from apphub.models.role import Role
from apphub.admin.schemas import (
    AccountListResponse,
    AccountRow,
    AuditLogListResponse,
    AuditLogRow,
    ChangeRoleRequest,
    RegistrationCorrectionRequest,
    RegistrationDayStats,
    RegistrationRow,
    RegistrationStatsResponse,
    RoleCreateRequest,
    RoleListResponse,
    RoleRow,
    RoleUpdateRequest,
    SourceCount,
    SourceCountResponse,
    UtmCount,
    UtmCountResponse,
)

router = APIRouter(prefix="/admin", tags=["admin"])

require_role_manager = require_permission("manage_roles")
require_reports = require_permission("view_reports")


def _live_or_404(db: Session, account_id: int) -> Account:
    target = get_live_account(db, account_id)
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return target


def _audit(db: Session, request: Request, actor: Account, action: str,
           target_id: int | None = None, detail: str | None = None) -> None:
    db.add(AuditLog(
        actor_id=actor.id,
        target_account_id=target_id,
        action=action,
        detail=detail,
        request_ip=get_client_ip(request),
    ))


# ===========================================================================
# Accounts
# ===========================================================================


# ---------------------------------------------------------------------------
# GET /admin/users  – list live accounts
# ---------------------------------------------------------------------------


@router.get("/users", response_model=AccountListResponse)
def list_accounts(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Live accounts newest first, paginated."""
    rows = (
        live_accounts(db)
        .order_by(Account.created_at.desc(), Account.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
    return AccountListResponse(users=rows)


@router.get("/users/{account_id}", response_model=AccountRow)
def get_account(
    account_id: int,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _live_or_404(db, account_id)


# ---------------------------------------------------------------------------
# PUT /admin/users/{id}/role  – move an account to another role
# ---------------------------------------------------------------------------


@router.put("/users/{account_id}/role")
def change_role(
    account_id: int,
    body: ChangeRoleRequest,
    request: Request,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Assign a different role.  Guards:
    * The role must exist.
    * An admin cannot change their own role (prevents accidental self-lockout).
    """
    if account_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot change your own role",
        )

    role = db.get(Role, body.role_id)
    if role is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid role")

    target = _live_or_404(db, account_id)
    target.role_id = role.id
    _audit(db, request, admin, "change_role", account_id, f"new_role={role.name}")
    db.commit()

    return {"detail": "Role updated"}


# ---------------------------------------------------------------------------
# PUT /admin/users/{id}/disable  /  enable
# ---------------------------------------------------------------------------


@router.put("/users/{account_id}/disable")
def disable_account(
    account_id: int,
    request: Request,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Set ``is_active = False``.  The account can no longer log in, its
    sessions are revoked, and existing tokens are rejected by the auth guard.
    """
    if account_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot disable yourself",
        )

    target = _live_or_404(db, account_id)
    target.is_active = False
    sessions.destroy_account_sessions(db, target.id)
    _audit(db, request, admin, "disable_account", account_id)
    db.commit()

    return {"detail": "User disabled"}


@router.put("/users/{account_id}/enable")
def enable_account(
    account_id: int,
    request: Request,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    target = _live_or_404(db, account_id)
    target.is_active = True
    _audit(db, request, admin, "enable_account", account_id)
    db.commit()

    return {"detail": "User enabled"}


# ---------------------------------------------------------------------------
# DELETE /admin/users/{id}  – soft delete
# ---------------------------------------------------------------------------


@router.delete("/users/{account_id}")
def delete_account(
    account_id: int,
    request: Request,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Soft-delete an account: ``deleted_at`` is stamped and the row stays.
    Its sessions are revoked; its unexpired tokens stop resolving because
    the auth guard only loads live accounts.
    """
    if account_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete yourself",
        )

    target = _live_or_404(db, account_id)
    target.deleted_at = datetime.now(timezone.utc)
    sessions.destroy_account_sessions(db, target.id)
    _audit(db, request, admin, "delete_account", account_id, f"username={target.username}")
    db.commit()
    logger.info("Account %d soft-deleted by admin %d", account_id, admin.id)

    return {"detail": "User deleted successfully"}


# ===========================================================================
# Roles
# ===========================================================================


def _role_or_404(db: Session, role_id: int) -> Role:
    role = db.get(Role, role_id)
    if not role:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role not found")
    return role


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    q = db.query(Role).filter(Role.name == name)
    if exclude_id is not None:
        q = q.filter(Role.id != exclude_id)
    return q.first() is not None


@router.get("/roles", response_model=RoleListResponse)
def list_roles(
    actor: Account = Depends(require_role_manager),
    db: Session = Depends(get_db),
):
    """All roles, most privileged first."""
    roles = db.query(Role).order_by(Role.hierarchy_level.asc(), Role.id.asc()).all()
    return RoleListResponse(roles=roles)


@router.get("/roles/{role_id}", response_model=RoleRow)
def get_role(
    role_id: int,
    actor: Account = Depends(require_role_manager),
    db: Session = Depends(get_db),
):
    return _role_or_404(db, role_id)


@router.post("/roles", response_model=RoleRow, status_code=status.HTTP_201_CREATED)
def create_role(
    body: RoleCreateRequest,
    request: Request,
    actor: Account = Depends(require_role_manager),
    db: Session = Depends(get_db),
):
    if _name_taken(db, body.name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Role name already exists")

    role = Role(
        name=body.name,
        description=body.description,
        hierarchy_level=body.hierarchy_level,
        permissions=list(body.permissions),
    )
    db.add(role)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Role name already exists")
    _audit(db, request, actor, "create_role", detail=f"role={role.name}")
    db.commit()
    db.refresh(role)
    return role


@router.put("/roles/{role_id}", response_model=RoleRow)
def update_role(
    role_id: int,
    body: RoleUpdateRequest,
    request: Request,
    actor: Account = Depends(require_role_manager),
    db: Session = Depends(get_db),
):
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    role = _role_or_404(db, role_id)
    if "name" in changes and _name_taken(db, changes["name"], exclude_id=role.id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Role name already exists")

    for field, value in changes.items():
        setattr(role, field, value)
    _audit(db, request, actor, "update_role", detail=f"role={role.name} fields={','.join(sorted(changes))}")
    db.commit()
    db.refresh(role)
    return role


@router.delete("/roles/{role_id}")
def delete_role(
    role_id: int,
    request: Request,
    actor: Account = Depends(require_role_manager),
    db: Session = Depends(get_db),
):
    """
    Delete a role.  Refused with 409 while any live account holds it;
    soft-deleted accounts that still reference it have the link nulled by
    the foreign key.
    """
    role = _role_or_404(db, role_id)

    in_use = live_accounts(db).filter(Account.role_id == role.id).count()
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot delete role that is assigned to users",
        )

    name = role.name
    db.delete(role)
    _audit(db, request, actor, "delete_role", detail=f"role={name}")
    db.commit()
    return {"detail": "Role deleted successfully"}


# ===========================================================================
# Registration metadata
# ===========================================================================


@router.get("/registrations/stats", response_model=RegistrationStatsResponse)
def registration_stats(
    start: date | None = Query(None, description="First day (inclusive), default 30 days ago"),
    end: date | None = Query(None, description="Last day (inclusive), default today"),
    actor: Account = Depends(require_reports),
    db: Session = Depends(get_db),
):
    """Per-day registrations, distinct IPs and referred signups, newest day first."""
    end = end or datetime.now(timezone.utc).date()
    start = start or end - timedelta(days=30)
    if start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start must not be after end")

    day = func.date(RegistrationMetadata.created_at)
    rows = (
        db.query(
            day.label("registration_date"),
            func.count(RegistrationMetadata.id),
            func.count(func.distinct(RegistrationMetadata.registration_ip)),
            func.count(RegistrationMetadata.referral_source),
        )
        .filter(
            RegistrationMetadata.created_at >= datetime.combine(start, time.min),
            RegistrationMetadata.created_at < datetime.combine(end + timedelta(days=1), time.min),
        )
        .group_by(day)
        .order_by(day.desc())
        .all()
    )
    return RegistrationStatsResponse(stats=[
        RegistrationDayStats(
            registration_date=d,
            total_registrations=total,
            unique_ips=ips,
            referred_registrations=referred,
        )
        for d, total, ips, referred in rows
    ])


@router.get("/registrations/by-source", response_model=SourceCountResponse)
def registrations_by_source(
    actor: Account = Depends(require_reports),
    db: Session = Depends(get_db),
):
    """Registrations per referral source; signups without one count as ``direct``."""
    source = func.coalesce(RegistrationMetadata.referral_source, "direct")
    total = func.count(RegistrationMetadata.id)
    rows = db.query(source, total).group_by(source).order_by(total.desc(), source).all()
    return SourceCountResponse(sources=[SourceCount(source=s, registrations=n) for s, n in rows])


@router.get("/registrations/by-utm", response_model=UtmCountResponse)
def registrations_by_utm(
    actor: Account = Depends(require_reports),
    db: Session = Depends(get_db),
):
    total = func.count(RegistrationMetadata.id)
    rows = (
        db.query(
            RegistrationMetadata.utm_source,
            RegistrationMetadata.utm_medium,
            RegistrationMetadata.utm_campaign,
            total,
        )
        .filter(RegistrationMetadata.utm_source.isnot(None))
        .group_by(
            RegistrationMetadata.utm_source,
            RegistrationMetadata.utm_medium,
            RegistrationMetadata.utm_campaign,
        )
        .order_by(total.desc())
        .all()
    )
    return UtmCountResponse(campaigns=[
        UtmCount(utm_source=src, utm_medium=medium, utm_campaign=campaign, registrations=n)
        for src, medium, campaign, n in rows
    ])


# ---------------------------------------------------------------------------
# GET /admin/registrations/export  – download registration metadata as Excel
# ---------------------------------------------------------------------------

_EXPORT_HEADER_FONT  = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
_EXPORT_HEADER_FILL  = PatternFill(start_color="6C63FF", end_color="6C63FF", fill_type="solid")
_EXPORT_HEADER_ALIGN = Alignment(horizontal="center", vertical="center")
_EXPORT_THIN_BORDER  = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)

_EXPORT_HEADERS = [
    "Account ID", "Username", "Registered", "IP", "User Agent",
    "Referral", "UTM Source", "UTM Medium", "UTM Campaign",
]
_EXPORT_COL_WIDTHS = [12, 24, 20, 16, 50, 20, 18, 18, 24]


@router.get("/registrations/export")
def export_registrations(
    actor: Account = Depends(require_reports),
    db: Session = Depends(get_db),
):
    """Export every registration row as an Excel workbook."""
    rows = (
        db.query(RegistrationMetadata, Account.username)
        .outerjoin(Account, RegistrationMetadata.account_id == Account.id)
        .order_by(RegistrationMetadata.created_at.desc(), RegistrationMetadata.id.desc())
        .all()
    )

    wb = Workbook()
    ws = wb.active
    ws.title = "Registrations"

    # Header row
    ws.append(_EXPORT_HEADERS)
    for cell in ws[1]:
        cell.font = _EXPORT_HEADER_FONT
        cell.fill = _EXPORT_HEADER_FILL
        cell.alignment = _EXPORT_HEADER_ALIGN
        cell.border = _EXPORT_THIN_BORDER

    # Data rows
    for meta, username in rows:
        ws.append([
            meta.account_id,
            username or "",
            meta.created_at.strftime("%Y-%m-%d %H:%M:%S") if meta.created_at else "",
            meta.registration_ip or "",
            meta.user_agent or "",
            meta.referral_source or "",
            meta.utm_source or "",
            meta.utm_medium or "",
            meta.utm_campaign or "",
        ])
        row_idx = ws.max_row
        for col_idx in range(1, len(_EXPORT_HEADERS) + 1):
            ws.cell(row=row_idx, column=col_idx).border = _EXPORT_THIN_BORDER

    for col_idx, width in enumerate(_EXPORT_COL_WIDTHS, start=1):
        ws.column_dimensions[chr(64 + col_idx)].width = width

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    wb.close()

    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": 'attachment; filename="registrations.xlsx"'},
    )


def _registration_or_404(db: Session, account_id: int) -> RegistrationMetadata:
    meta = (
        db.query(RegistrationMetadata)
        .filter(RegistrationMetadata.account_id == account_id)
        .first()
    )
    if not meta:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Registration data not found")
    return meta


@router.get("/registrations/{account_id}", response_model=RegistrationRow)
def get_registration(
    account_id: int,
    actor: Account = Depends(require_reports),
    db: Session = Depends(get_db),
):
    return _registration_or_404(db, account_id)


@router.put("/registrations/{account_id}", response_model=RegistrationRow)
def correct_registration(
    account_id: int,
    body: RegistrationCorrectionRequest,
    request: Request,
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Admin correction of signup attribution.  This is the only write path
    for registration metadata; ``account_id`` can never change.
    """
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    meta = _registration_or_404(db, account_id)
    for field, value in changes.items():
        setattr(meta, field, value)
    _audit(db, request, admin, "correct_registration", account_id, f"fields={','.join(sorted(changes))}")
    db.commit()
    db.refresh(meta)
    return meta


# ===========================================================================
# GET /admin/audit-logs  – audit trail with optional filters
# ===========================================================================


@router.get("/audit-logs", response_model=AuditLogListResponse)
def list_audit_logs(
    action: str | None = Query(None, description="Exact action name, e.g. delete_account"),
    since: datetime | None = Query(None, description="ISO-8601 start of time window"),
    until: datetime | None = Query(None, description="ISO-8601 end of time window"),
    limit: int = Query(200, ge=1, le=1000),
    admin: Account = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Audit rows newest first, with actor and target usernames resolved."""
    Actor  = aliased(Account)
    Target = aliased(Account)

    q = (
        db.query(AuditLog, Actor.username, Target.username)
        .outerjoin(Actor,  AuditLog.actor_id          == Actor.id)
        .outerjoin(Target, AuditLog.target_account_id == Target.id)
    )
    if action:
        q = q.filter(AuditLog.action == action)
    if since:
        q = q.filter(AuditLog.created_at >= since)
    if until:
        q = q.filter(AuditLog.created_at <= until)

    rows = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit).all()

    return AuditLogListResponse(logs=[
        AuditLogRow(
            id=row.id,
            actor_username=actor_name,
            target_username=target_name,
            action=row.action,
            detail=row.detail,
            request_ip=row.request_ip,
            created_at=row.created_at,
        )
        for row, actor_name, target_name in rows
    ])
