"""
Admin back-office endpoints.

Backs the customers table, the sales dashboard, schema bootstrap and the
audit log view. Every route sits behind the admin guard, which answers 404
to everyone else.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from emporium import audit
from emporium.api.deps import require_admin
from emporium.api.errors import delete_failure, deleted, not_found, store_failure
from emporium.api.resources import update_record
from emporium.db import models, schemas
from emporium.db.database import engine, get_db
from emporium.db.repositories import audits as audit_repo
from emporium.db.repositories import records
from emporium.db.repositories import shop as shop_repo
from emporium.db.repositories import users as users_repo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _customer(db: Session, customer_id: str) -> models.User:
    reference = records.check_exists(db, "User", customer_id, f"Customer with ID {customer_id} does not exist.")
    customer = users_repo.get_customer(db, reference)
    if customer is None:
        raise not_found(f"Customer with ID {customer_id} does not exist.")
    return customer


@router.get("/customers", response_model=List[schemas.User])
def list_customers(request: Request, db: Session = Depends(get_db), user_context=Depends(require_admin)):
    try:
        return users_repo.list_customers(db, request.query_params)
    except SQLAlchemyError as exc:
        raise store_failure("fetch customers", exc)


@router.put("/customers/{customer_id}", response_model=schemas.User)
def update_customer(
    customer_id: str,
    payload: schemas.UserUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _current_user = user_context
    customer = _customer(db, customer_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("email"):
        data["email"] = data["email"].strip().lower()
    updated = update_record(db, "User", customer.id, data, "update customer")
    audit.log_customer(
        db,
        actor_user_id=user.id,
        customer_id=updated.id,
        action=audit.AuditAction.CUSTOMER_UPDATE,
        metadata={"fields": sorted(data)},
    )
    return updated


@router.delete("/customers/{customer_id}")
def delete_customer(customer_id: str, db: Session = Depends(get_db), user_context=Depends(require_admin)):
    user, _current_user = user_context
    customer = _customer(db, customer_id)
    customer_ref = customer.id
    try:
        records.delete(db, customer_ref)
    except SQLAlchemyError as exc:
        raise delete_failure("customer", exc)
    audit.log_customer(db, actor_user_id=user.id, customer_id=customer_ref, action=audit.AuditAction.CUSTOMER_DELETE)
    return deleted("Customer")


@router.get("/dashboard", response_model=schemas.Dashboard)
def get_dashboard(db: Session = Depends(get_db), user_context=Depends(require_admin)):
    try:
        return shop_repo.dashboard(db)
    except SQLAlchemyError as exc:
        raise store_failure("load dashboard", exc)


@router.post("/schema", status_code=status.HTTP_201_CREATED)
def create_schema(db: Session = Depends(get_db), user_context=Depends(require_admin)):
    user, _current_user = user_context
    try:
        models.Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as exc:
        raise store_failure("create tables", exc)
    logger.info("schema_create: requested by %s", user.email)
    audit.log(db, action=audit.AuditAction.SCHEMA_CREATE, target_type="schema", actor_user_id=user.id)
    return {"message": "Tables created successfully."}


@router.get("/audit-logs", response_model=List[schemas.AuditLog])
def list_audit_logs(
    user_id: Optional[str] = None,
    action_type: Optional[str] = None,
    audit_status: Optional[str] = Query(default=None, alias="status"),
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    return audit_repo.get_audit_logs(
        db,
        user_id=user_id,
        action_type=action_type,
        status=audit_status,
        target_type=target_type,
        target_id=target_id,
        skip=skip,
        limit=limit,
    )
