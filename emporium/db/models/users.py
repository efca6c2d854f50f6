from sqlalchemy import Column, String
from .base import Base, RecordMixin


class User(RecordMixin, Base):
    __tablename__ = 'users'
    __record_table__ = 'User'

    email = Column(String, nullable=False, unique=True, index=True)
    display_name = Column(String, nullable=True)
    # 'user' | 'admin'
    role = Column(String(20), nullable=False, default='user')
