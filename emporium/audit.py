"""
Audit logging helpers and enums.

Persists one normalized audit record per admin write. Auditing is best
effort: a failure is logged and never fails the request that triggered it.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional, Dict
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from emporium.db import schemas
from emporium.db.repositories import audits as audit_repo

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    # Customers
    CUSTOMER_UPDATE = "customer_update"
    CUSTOMER_DELETE = "customer_delete"
    # Chat console
    CHAT_ASSIGN = "chat_assign"
    CHAT_CLOSE = "chat_close"
    MESSAGE_UPDATE = "message_update"
    MESSAGE_DELETE = "message_delete"
    # Schema
    SCHEMA_CREATE = "schema_create"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def log(
    db: Session,
    *,
    action: AuditAction | str,
    status: AuditStatus | str = AuditStatus.SUCCESS,
    target_type: str,
    target_id: Optional[str] = None,
    actor_user_id: str,
    metadata: Optional[Dict[str, Any]] = None,
):
    """Central audit logging helper; returns the stored row or None on failure."""
    # Persist pure string values, not Enum reprs
    action_value = action.value if isinstance(action, AuditAction) else str(action)
    status_value = status.value if isinstance(status, AuditStatus) else str(status)
    audit_log = schemas.AuditLogCreate(
        action_type=action_value,
        status=status_value,
        target_type=target_type,
        target_id=target_id,
        metadata=metadata or {},
    )
    try:
        return audit_repo.create_audit_log(db, audit_log=audit_log, actor_user_id=actor_user_id)
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Failed to write audit log for %s on %s %s", action_value, target_type, target_id, exc_info=True)
        return None


def log_chat(db: Session, *, actor_user_id: str, chat_id: str, action: AuditAction, metadata: Optional[Dict[str, Any]] = None):
    return log(
        db,
        action=action,
        target_type="chat",
        target_id=chat_id,
        actor_user_id=actor_user_id,
        metadata=metadata,
    )


def log_customer(db: Session, *, actor_user_id: str, customer_id: str, action: AuditAction, metadata: Optional[Dict[str, Any]] = None):
    return log(
        db,
        action=action,
        target_type="customer",
        target_id=customer_id,
        actor_user_id=actor_user_id,
        metadata=metadata,
    )


__all__ = ["AuditAction", "AuditStatus", "log", "log_chat", "log_customer"]
