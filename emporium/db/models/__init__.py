"""
Domain-split SQLAlchemy models with a compatibility aggregator.

Exposes `Base`, `now_utc`, and all ORM classes.
"""

from .base import Base, RecordMixin, now_utc  # re-export

# Domain models
from .users import User
from .blog import BlogPost, BlogCategory, BlogTag, BlogComment, BlogLike, BlogBookmark, BlogMedia
from .shop import (
    ShopCategory,
    ShopProduct,
    ShopCart,
    ShopDiscount,
    ShopOrder,
    ShopOrderDetails,
    ShopPayment,
    ShopReview,
)
from .chat import ChatUser, Chat, Message
from .audit import AuditLog

__all__ = [
    # base
    "Base",
    "RecordMixin",
    "now_utc",
    # users
    "User",
    # blog
    "BlogPost",
    "BlogCategory",
    "BlogTag",
    "BlogComment",
    "BlogLike",
    "BlogBookmark",
    "BlogMedia",
    # shop
    "ShopCategory",
    "ShopProduct",
    "ShopCart",
    "ShopDiscount",
    "ShopOrder",
    "ShopOrderDetails",
    "ShopPayment",
    "ShopReview",
    # chat
    "ChatUser",
    "Chat",
    "Message",
    # audit
    "AuditLog",
]
