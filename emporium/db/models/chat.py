from sqlalchemy import Column, String, Text, DateTime, Index
from .base import Base, RecordMixin, now_utc


class ChatUser(RecordMixin, Base):
    __tablename__ = 'chat_users'
    __record_table__ = 'ChatUser'
    __references__ = {'user_ref': 'User'}

    email = Column(String, nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    # Linked site account when the visitor is signed in
    user_ref = Column(String(96), nullable=True)


class Chat(RecordMixin, Base):
    __tablename__ = 'chats'
    __record_table__ = 'Chat'
    __references__ = {'user_id': 'ChatUser', 'admin_id': 'User'}

    user_id = Column(String(96), nullable=False, index=True)
    admin_id = Column(String(96), nullable=True)
    # 'open' | 'viewed' | 'active' | 'closed'
    status = Column(String(20), nullable=False, default='open')
    started_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    ended_at = Column(DateTime(timezone=True), nullable=True)


class Message(RecordMixin, Base):
    __tablename__ = 'chat_messages'
    __record_table__ = 'Message'
    __references__ = {'chat_id': 'Chat'}

    chat_id = Column(String(96), nullable=False)
    sender_id = Column(String(96), nullable=False)
    # 'user' | 'admin'
    sender_role = Column(String(20), nullable=False, default='user')
    content = Column(Text, nullable=False)

    __table_args__ = (
        Index('ix_chat_messages_chat_id_created_at', 'chat_id', 'created_at'),
    )
