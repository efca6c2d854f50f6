from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChatStart(BaseModel):
    email: str = Field(min_length=3)
    name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("A valid email address is required")
        return v


class MessageCreate(BaseModel):
    content: str = Field(min_length=1)


class MessageUpdate(BaseModel):
    content: str = Field(min_length=1)


class ChatAssign(BaseModel):
    admin_id: str = Field(min_length=1)


class ChatUser(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    user_ref: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class Chat(BaseModel):
    id: str
    user_id: str
    admin_id: Optional[str] = None
    status: str
    started_at: datetime
    ended_at: Optional[datetime] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class Message(BaseModel):
    id: str
    chat_id: str
    sender_id: str
    sender_role: str
    content: str
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ChatSession(BaseModel):
    chat_user: ChatUser
    chat: Chat
    resumed: bool = False


class ChatSummary(BaseModel):
    """Row of the admin chat console."""
    id: str
    user_id: str
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    admin_id: Optional[str] = None
    admin_name: Optional[str] = None
    status: str
    last_message: Optional[str] = None
    created_at: datetime


class ChatWithMessages(Chat):
    messages: List[Message] = []
