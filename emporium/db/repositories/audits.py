"""
Audit log storage and the filtered listing behind the admin audit view.
"""
from __future__ import annotations

from typing import List, Optional
from sqlalchemy.orm import Session

from emporium.db import schemas, models


def create_audit_log(db: Session, audit_log: schemas.AuditLogCreate, actor_user_id: str) -> models.AuditLog:
    fields = audit_log.model_dump(exclude={"metadata"})
    row = models.AuditLog(actor_user_id=actor_user_id, metadata_json=audit_log.metadata, **fields)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def get_audit_logs(
    db: Session,
    user_id: Optional[str] = None,
    action_type: Optional[str] = None,
    status: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[models.AuditLog]:
    """Newest first; every supplied filter must match."""
    AuditLog = models.AuditLog
    filters = (
        (AuditLog.actor_user_id, user_id),
        (AuditLog.action_type, action_type),
        (AuditLog.status, status),
        (AuditLog.target_type, target_type),
        (AuditLog.target_id, target_id),
    )
    query = db.query(AuditLog)
    for column, value in filters:
        if value:
            query = query.filter(column == value)
    return query.order_by(AuditLog.created_at.desc()).offset(skip).limit(limit).all()
