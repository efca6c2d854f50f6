import uuid
from sqlalchemy import Column, String, Text, DateTime, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from .base import Base, now_utc


class AuditLog(Base):
    """One admin write: who did what to which customer, chat or message."""
    __tablename__ = 'audit_logs'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    actor_user_id = Column(String(96), nullable=False)
    action_type = Column(Text, nullable=False)
    # 'customer' | 'chat' | 'message' | 'schema'
    target_type = Column(Text, nullable=True)
    target_id = Column(String(96), nullable=True)
    status = Column(Text, nullable=False)
    reason = Column(Text, nullable=True)
    metadata_json = Column('metadata', JSONB, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    __table_args__ = (
        Index('ix_audit_logs_actor_user_id_created_at', 'actor_user_id', 'created_at'),
        Index('ix_audit_logs_action_type', 'action_type'),
        Index('ix_audit_logs_target', 'target_type', 'target_id'),
    )
