"""
Registry of record tables.

Maps the public record table name (the prefix of every ``RecordId``) to its
ORM model and back.
"""
from typing import Dict, Type

from .models import (
    Base,
    User,
    BlogPost,
    BlogCategory,
    BlogTag,
    BlogComment,
    BlogLike,
    BlogBookmark,
    BlogMedia,
    ShopCategory,
    ShopProduct,
    ShopCart,
    ShopDiscount,
    ShopOrder,
    ShopOrderDetails,
    ShopPayment,
    ShopReview,
    ChatUser,
    Chat,
    Message,
)


class UnknownTable(KeyError):
    pass


_MODELS = (
    User,
    BlogPost,
    BlogCategory,
    BlogTag,
    BlogLike,
    BlogComment,
    BlogBookmark,
    BlogMedia,
    ShopCategory,
    ShopProduct,
    ShopCart,
    ShopDiscount,
    ShopOrder,
    ShopOrderDetails,
    ShopPayment,
    ShopReview,
    ChatUser,
    Chat,
    Message,
)

TABLES: Dict[str, Type[Base]] = {m.__record_table__: m for m in _MODELS}


def model_for(table: str) -> Type[Base]:
    try:
        return TABLES[table]
    except KeyError:
        raise UnknownTable(table) from None


def table_for(model) -> str:
    """Record table name for a model class or instance."""
    cls = model if isinstance(model, type) else type(model)
    name = getattr(cls, "__record_table__", "")
    if name not in TABLES:
        raise UnknownTable(cls.__name__)
    return name
