# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Table-driven CRUD routes for the flat content tables.

A Resource describes one table; register_resource() attaches to a router:

    GET    /<path>               list, optionally filtered by query params
    GET    /<path>/{id}          one row (404 if missing or not visible)
    POST   /<path>               create
    PUT    /<path>/{id}          partial update
    PUT    /<path>/{id}/status   flip is_active (toggle=True only)
    DELETE /<path>/{id}          delete

Owned resources stamp owner_id with the caller on create.  Callers other
than admins only ever see, change or delete their own rows; anything else
is reported as missing.  Create, update and delete are written to the
audit log.
"""

from dataclasses import dataclass
from typing import Sequence, Type

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from apphub.database import Base, get_db
from apphub.core.logger import logger
from apphub.core.security import get_client_ip, get_current_account
from apphub.models.account import Account
from apphub.models.audit_log import AuditLog

_ADMIN_ROLE = "admin"


@dataclass
class Resource:
    label: str                       # "Award" – used in messages
    path: str                        # "awards" – URL segment
    model: Type[Base]
    schema_in: Type[BaseModel]
    schema_update: Type[BaseModel]
    schema_out: Type[BaseModel]
    order_by: Sequence[str] = ("id",)
    owned: bool = False
    filters: Sequence[str] = ()      # columns that may be matched via ?name=value
    toggle: bool = True

    @property
    def key(self) -> str:
        return self.path.replace("-", "_")


def visible_rows(db: Session, resource: Resource, account: Account):
    q = db.query(resource.model)
    if resource.owned and account.role_name != _ADMIN_ROLE:
        q = q.filter(resource.model.owner_id == account.id)
    return q


def get_visible_or_404(db: Session, resource: Resource, row_id: int, account: Account):
    row = visible_rows(db, resource, account).filter(resource.model.id == row_id).first()
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource.label} not found")
    return row


def _audit(db: Session, request: Request, account: Account, action: str, detail: str) -> None:
    db.add(AuditLog(
        actor_id=account.id,
        action=action,
        detail=detail,
        request_ip=get_client_ip(request),
    ))


def _commit_or_409(db: Session, resource: Resource) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{resource.label} already exists",
        )


def _reject_nulls(resource: Resource, changes: dict) -> None:
    columns = resource.model.__table__.columns
    for field, value in changes.items():
        if value is None and field in columns and not columns[field].nullable:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{field} cannot be null",
            )


def register_resource(router: APIRouter, resource: Resource) -> None:
    """Attach the CRUD routes for *resource* to *router*."""
    base = f"/{resource.path}"
    model = resource.model
    schema_in = resource.schema_in
    schema_update = resource.schema_update
    schema_out = resource.schema_out
    key = resource.key

    @router.get(base, response_model=list[schema_out], name=f"list_{key}")
    def list_rows(
        request: Request,
        account: Account = Depends(get_current_account),
        db: Session = Depends(get_db),
    ):
        q = visible_rows(db, resource, account)
        for name in resource.filters:
            value = request.query_params.get(name)
            if value:
                q = q.filter(getattr(model, name) == value)
        return q.order_by(*(getattr(model, col) for col in resource.order_by)).all()

    @router.get(base + "/{row_id}", response_model=schema_out, name=f"get_{key}")
    def get_row(
        row_id: int,
        account: Account = Depends(get_current_account),
        db: Session = Depends(get_db),
    ):
        return get_visible_or_404(db, resource, row_id, account)

    @router.post(base, response_model=schema_out, status_code=status.HTTP_201_CREATED,
                 name=f"create_{key}")
    def create_row(
        body: schema_in,
        request: Request,
        account: Account = Depends(get_current_account),
        db: Session = Depends(get_db),
    ):
        row = model(**body.model_dump())
        if resource.owned:
            row.owner_id = account.id
        db.add(row)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"{resource.label} already exists",
            )
        _audit(db, request, account, f"create_{key}", f"id={row.id}")
        db.commit()
        db.refresh(row)
        logger.info("%s %d created by account_id=%d", resource.label, row.id, account.id)
        return row

    @router.put(base + "/{row_id}", response_model=schema_out, name=f"update_{key}")
    def update_row(
        row_id: int,
        body: schema_update,
        request: Request,
        account: Account = Depends(get_current_account),
        db: Session = Depends(get_db),
    ):
        row = get_visible_or_404(db, resource, row_id, account)
        changes = body.model_dump(exclude_unset=True)
        if not changes:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")
        _reject_nulls(resource, changes)

        for field, value in changes.items():
            setattr(row, field, value)
        _audit(db, request, account, f"update_{key}", f"id={row.id} fields={','.join(sorted(changes))}")
        _commit_or_409(db, resource)
        db.refresh(row)
        return row

    if resource.toggle:
        @router.put(base + "/{row_id}/status", response_model=schema_out, name=f"toggle_{key}")
        def toggle_status(
            row_id: int,
            account: Account = Depends(get_current_account),
            db: Session = Depends(get_db),
        ):
            row = get_visible_or_404(db, resource, row_id, account)
            row.is_active = not row.is_active
            db.commit()
            db.refresh(row)
            return row

    @router.delete(base + "/{row_id}", name=f"delete_{key}")
    def delete_row(
        row_id: int,
        request: Request,
        account: Account = Depends(get_current_account),
        db: Session = Depends(get_db),
    ):
        row = get_visible_or_404(db, resource, row_id, account)
        db.delete(row)
        _audit(db, request, account, f"delete_{key}", f"id={row_id}")
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"{resource.label} is still in use",
            )
        logger.info("%s %d deleted by account_id=%d", resource.label, row_id, account.id)
        return {"detail": f"{resource.label} deleted successfully"}
