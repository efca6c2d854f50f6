"""
Chat repository functions.

Covers the widget side (chat users, chats, messages) and the admin console
(listing with last message, status transitions).
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from emporium.db import models
from emporium.db.models.base import now_utc
from emporium.db.patches import prepare_updates
from emporium.db.repositories import records

STATUS_OPEN = "open"
STATUS_VIEWED = "viewed"
STATUS_ACTIVE = "active"
STATUS_CLOSED = "closed"
CHAT_STATUSES = (STATUS_OPEN, STATUS_VIEWED, STATUS_ACTIVE, STATUS_CLOSED)


def get_chat_user_by_email(db: Session, email: str) -> Optional[models.ChatUser]:
    return db.query(models.ChatUser).filter(models.ChatUser.email == email).first()


def get_or_create_chat_user(db: Session, email: str, name: Optional[str] = None, user_ref: Optional[str] = None):
    chat_user = get_chat_user_by_email(db, email)
    if chat_user is not None:
        if name and not chat_user.name:
            chat_user = records.patch(db, chat_user.id, prepare_updates([("/name", name)]))
        return chat_user
    return records.create(db, "ChatUser", {"email": email, "name": name, "user_ref": user_ref})


def start_chat(db: Session, chat_user: models.ChatUser) -> models.Chat:
    return records.create(db, "Chat", {"user_id": chat_user.id, "status": STATUS_OPEN, "started_at": now_utc()})


def get_messages(db: Session, chat_id: str) -> List[models.Message]:
    return (
        db.query(models.Message)
        .filter(models.Message.chat_id == chat_id)
        .order_by(models.Message.created_at.asc(), models.Message.id.asc())
        .all()
    )


def post_message(db: Session, chat_id: str, sender_id: str, sender_role: str, content: str) -> models.Message:
    return records.create(
        db,
        "Message",
        {"chat_id": chat_id, "sender_id": sender_id, "sender_role": sender_role, "content": content},
    )


def _last_message(db: Session, chat_id: str) -> Optional[models.Message]:
    return (
        db.query(models.Message)
        .filter(models.Message.chat_id == chat_id)
        .order_by(models.Message.created_at.desc(), models.Message.id.desc())
        .first()
    )


def list_chats(db: Session, status: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Dict[str, Any]]:
    query = db.query(models.Chat)
    if status:
        query = query.filter(models.Chat.status == status)
    chats = query.order_by(models.Chat.created_at.desc()).offset(skip).limit(limit).all()

    summaries = []
    for chat in chats:
        chat_user = db.get(models.ChatUser, chat.user_id)
        admin = db.get(models.User, chat.admin_id) if chat.admin_id else None
        last = _last_message(db, chat.id)
        summaries.append(
            {
                "id": chat.id,
                "user_id": chat.user_id,
                "user_email": chat_user.email if chat_user is not None else None,
                "user_name": chat_user.name if chat_user is not None else None,
                "admin_id": chat.admin_id,
                "admin_name": (admin.display_name or admin.email) if admin is not None else None,
                "status": chat.status,
                "last_message": last.content if last is not None else None,
                "created_at": chat.created_at,
            }
        )
    return summaries


def set_status(db: Session, chat_id: str, status: str, **fields) -> models.Chat:
    updates = [("/status", status)] + [(f"/{name}", value) for name, value in fields.items()]
    return records.patch(db, chat_id, prepare_updates(updates))


def mark_viewed(db: Session, chat: models.Chat) -> models.Chat:
    """Only an unseen (open) chat moves to viewed."""
    if chat.status != STATUS_OPEN:
        return chat
    return set_status(db, chat.id, STATUS_VIEWED)


def assign(db: Session, chat: models.Chat, admin_id: str) -> models.Chat:
    return set_status(db, chat.id, STATUS_ACTIVE, admin_id=admin_id)


def close(db: Session, chat: models.Chat) -> models.Chat:
    return set_status(db, chat.id, STATUS_CLOSED, ended_at=now_utc())
