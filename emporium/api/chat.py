"""
Live chat endpoints.

The widget side is anonymous: a visitor identifies by email, gets a chat and
an HttpOnly ``chatUser`` cookie naming both. The admin console lives under
``/api/admin`` behind the role guard. Every write goes through the records
store, so the change feed sees it.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote, unquote

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from emporium import audit
from emporium.api.deps import get_optional_user_context, require_admin, require_feature
from emporium.api.errors import conflict, deleted, not_found, validation_error
from emporium.db import models, schemas
from emporium.db.database import get_db
from emporium.db.record_id import InvalidRecordId, RecordId
from emporium.db.repositories import chat as chat_repo
from emporium.db.repositories import records
from emporium.db.repositories import users as users_repo
from emporium.db.patches import prepare_updates
from emporium.utils.feature_flags import chat_feature_enabled
from emporium.utils.runtime import chat_cookie_max_age

logger = logging.getLogger(__name__)

COOKIE_NAME = "chatUser"
_COOKIE_KEYS = ("chat_user_id", "chat_id", "user_email", "user_name")

_chat_enabled = Depends(require_feature(chat_feature_enabled))
router = APIRouter(prefix="/api/chat", tags=["chat"], dependencies=[_chat_enabled])
admin_router = APIRouter(prefix="/api/admin", tags=["admin", "chat"], dependencies=[_chat_enabled])


def encode_cookie(chat_user: models.ChatUser, chat: models.Chat) -> str:
    payload = {
        "chat_user_id": chat_user.id,
        "chat_id": chat.id,
        "user_email": chat_user.email,
        "user_name": chat_user.name,
    }
    # URI-encoded JSON keeps the value inside the cookie-safe alphabet
    return quote(json.dumps(payload, separators=(",", ":")), safe="")


def decode_cookie(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    if not raw:
        return None
    try:
        data = json.loads(unquote(raw))
    except ValueError:
        return None
    if not isinstance(data, dict) or not all(key in data for key in _COOKIE_KEYS):
        return None
    return data


def _set_cookie(response: Response, chat_user: models.ChatUser, chat: models.Chat) -> None:
    response.set_cookie(
        COOKIE_NAME,
        encode_cookie(chat_user, chat),
        max_age=chat_cookie_max_age(),
        httponly=True,
        samesite="lax",
    )


def _cookie_session(db: Session, request: Request):
    """Chat user and chat named by the cookie, or None when stale."""
    data = decode_cookie(request.cookies.get(COOKIE_NAME))
    if data is None:
        return None
    try:
        chat_user = records.select(db, RecordId.parse(data["chat_user_id"], "ChatUser"))
        chat = records.select(db, RecordId.parse(data["chat_id"], "Chat"))
    except InvalidRecordId:
        return None
    if chat_user is None or chat is None or chat.user_id != chat_user.id:
        return None
    return chat_user, chat


def _owned_chat(db: Session, request: Request, chat_id: str) -> models.Chat:
    session = _cookie_session(db, request)
    try:
        requested = str(RecordId.parse(chat_id, "Chat"))
    except InvalidRecordId:
        raise not_found(f"Chat with ID {chat_id} does not exist.")
    if session is None or session[1].id != requested:
        raise not_found(f"Chat with ID {chat_id} does not exist.")
    return session[1]


@router.post("/start", response_model=schemas.ChatSession)
def start_chat(
    payload: schemas.ChatStart,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    user_context=Depends(get_optional_user_context),
):
    session = _cookie_session(db, request)
    if session is not None:
        chat_user, chat = session
        if chat_user.email == payload.email and chat.status != chat_repo.STATUS_CLOSED:
            logger.info("chat_resume: chat=%s user=%s", chat.id, chat_user.email)
            _set_cookie(response, chat_user, chat)
            return {"chat_user": chat_user, "chat": chat, "resumed": True}

    user_ref = user_context[0].id if user_context else None
    chat_user = chat_repo.get_or_create_chat_user(db, payload.email, payload.name, user_ref=user_ref)
    chat = chat_repo.start_chat(db, chat_user)
    logger.info("chat_start: chat=%s user=%s", chat.id, chat_user.email)
    _set_cookie(response, chat_user, chat)
    return {"chat_user": chat_user, "chat": chat, "resumed": False}


@router.get("/session", response_model=schemas.ChatSession)
def get_chat_session(request: Request, db: Session = Depends(get_db)):
    session = _cookie_session(db, request)
    if session is None:
        raise not_found("No active chat session.")
    chat_user, chat = session
    return {"chat_user": chat_user, "chat": chat, "resumed": True}


@router.get("/{chat_id}/messages", response_model=List[schemas.Message])
def list_chat_messages(chat_id: str, request: Request, db: Session = Depends(get_db)):
    chat = _owned_chat(db, request, chat_id)
    return chat_repo.get_messages(db, chat.id)


@router.post("/{chat_id}/messages", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
def post_chat_message(chat_id: str, payload: schemas.MessageCreate, request: Request, db: Session = Depends(get_db)):
    chat = _owned_chat(db, request, chat_id)
    if chat.status == chat_repo.STATUS_CLOSED:
        raise conflict("Chat is closed.")
    return chat_repo.post_message(db, chat.id, chat.user_id, "user", payload.content)


# Admin console

@admin_router.get("/chats", response_model=List[schemas.ChatSummary])
def list_chats(
    chat_status: Optional[str] = Query(default=None, alias="status"),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    if chat_status and chat_status not in chat_repo.CHAT_STATUSES:
        raise validation_error("status", f"status must be one of {', '.join(chat_repo.CHAT_STATUSES)}")
    return chat_repo.list_chats(db, status=chat_status, skip=skip, limit=limit)


def _admin_chat(db: Session, chat_id: str) -> models.Chat:
    reference = records.check_exists(db, "Chat", chat_id)
    return records.select(db, reference)


@admin_router.get("/chats/{chat_id}", response_model=schemas.ChatWithMessages)
def get_chat(chat_id: str, db: Session = Depends(get_db), user_context=Depends(require_admin)):
    chat = _admin_chat(db, chat_id)
    data = schemas.Chat.model_validate(chat).model_dump()
    data["messages"] = chat_repo.get_messages(db, chat.id)
    return data


@admin_router.post("/chats/{chat_id}/view", response_model=schemas.Chat)
def view_chat(chat_id: str, db: Session = Depends(get_db), user_context=Depends(require_admin)):
    return chat_repo.mark_viewed(db, _admin_chat(db, chat_id))


@admin_router.post("/chats/{chat_id}/assign", response_model=schemas.Chat)
def assign_chat(
    chat_id: str,
    payload: schemas.ChatAssign,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _current_user = user_context
    chat = _admin_chat(db, chat_id)
    admin_ref = records.check_exists(db, "User", payload.admin_id)
    admin = records.select(db, admin_ref)
    if admin.role != "admin":
        raise validation_error("admin_id", "Chats can only be assigned to admins")
    if chat.status == chat_repo.STATUS_CLOSED:
        raise conflict("Chat is closed.")
    chat = chat_repo.assign(db, chat, admin.id)
    audit.log_chat(db, actor_user_id=user.id, chat_id=chat.id, action=audit.AuditAction.CHAT_ASSIGN,
                   metadata={"admin_id": admin.id})
    return chat


@admin_router.post("/chats/{chat_id}/close", response_model=schemas.Chat)
def close_chat(chat_id: str, db: Session = Depends(get_db), user_context=Depends(require_admin)):
    user, _current_user = user_context
    chat = chat_repo.close(db, _admin_chat(db, chat_id))
    audit.log_chat(db, actor_user_id=user.id, chat_id=chat.id, action=audit.AuditAction.CHAT_CLOSE)
    logger.info("chat_close: chat=%s by=%s", chat.id, user.email)
    return chat


@admin_router.post("/chats/{chat_id}/messages", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
def post_admin_message(
    chat_id: str,
    payload: schemas.MessageCreate,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _current_user = user_context
    chat = _admin_chat(db, chat_id)
    if chat.status == chat_repo.STATUS_CLOSED:
        raise conflict("Chat is closed.")
    return chat_repo.post_message(db, chat.id, user.id, "admin", payload.content)


@admin_router.put("/messages/{message_id}", response_model=schemas.Message)
def update_message(
    message_id: str,
    payload: schemas.MessageUpdate,
    db: Session = Depends(get_db),
    user_context=Depends(require_admin),
):
    user, _current_user = user_context
    reference = records.check_exists(db, "Message", message_id)
    message = records.patch(db, reference, prepare_updates([("/content", payload.content)]))
    audit.log(db, action=audit.AuditAction.MESSAGE_UPDATE, target_type="message",
              target_id=message.id, actor_user_id=user.id)
    return message


@admin_router.delete("/messages/{message_id}")
def delete_message(message_id: str, db: Session = Depends(get_db), user_context=Depends(require_admin)):
    user, _current_user = user_context
    reference = records.check_exists(db, "Message", message_id)
    records.delete(db, reference)
    audit.log(db, action=audit.AuditAction.MESSAGE_DELETE, target_type="message",
              target_id=str(reference), actor_user_id=user.id)
    return deleted("Message")


@admin_router.get("/admins", response_model=List[schemas.User])
def list_admins(db: Session = Depends(get_db), user_context=Depends(require_admin)):
    return users_repo.list_admins(db)
