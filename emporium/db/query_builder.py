"""
URL query parameters to SQLAlchemy ``Select`` statements.

Every list endpoint funnels its query string through ``build_query``. Values
are always bound parameters; column and ordering names come from the model
and a per-endpoint whitelist, never from the request.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from sqlalchemy import Text, cast, false, select
from sqlalchemy.sql import Select

from .record_id import InvalidRecordId, ref
from .tables import model_for

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

EXACT_MATCH_FIELDS = (
    "author",
    "post_ref",
    "media_type",
    "slug",
    "city",
    "country",
    "status",
    "user_id",
    "product_id",
    "order_id",
    "chat_id",
)
CATEGORY_COLUMNS = ("categories", "category_id")


def _param(params: Mapping[str, str], name: str) -> Optional[str]:
    value = params.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def resolve_limit(value: Optional[str]) -> int:
    limit = _parse_int(value)
    if limit is None or limit <= 0:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def resolve_start(value: Optional[str]) -> int:
    start = _parse_int(value)
    if start is None or start < 0:
        return 0
    return start


def _column(model, name: str):
    return getattr(model, name, None) if name in model.__table__.columns else None


def _list_contains(column, reference: str):
    # JSON arrays of references are matched on their quoted text form
    return cast(column, Text).contains(f'"{reference}"', autoescape=True)


def _reference_condition(model, field: str, value: str):
    column = getattr(model, field)
    single = model.__references__.get(field)
    many = model.__reference_lists__.get(field)
    try:
        if single:
            return column == ref(single, value)
        if many:
            return _list_contains(column, ref(many, value))
    except InvalidRecordId:
        return false()
    return column == value


def build_query(
    params: Mapping[str, str],
    table: str,
    valid_order_by: Iterable[str],
    query_field: Optional[str] = None,
) -> Select:
    model = model_for(table)
    stmt = select(model)

    text = _param(params, "query")
    if text and query_field and _column(model, query_field) is not None:
        stmt = stmt.where(getattr(model, query_field).contains(text, autoescape=True))

    title = _param(params, "title")
    if title and _column(model, "title") is not None:
        stmt = stmt.where(model.title.contains(title, autoescape=True))

    category = _param(params, "category")
    if category:
        for name in CATEGORY_COLUMNS:
            if _column(model, name) is not None:
                stmt = stmt.where(_reference_condition(model, name, category))
                break

    for field in EXACT_MATCH_FIELDS:
        value = _param(params, field)
        if value and _column(model, field) is not None:
            stmt = stmt.where(_reference_condition(model, field, value))

    price = _param(params, "price")
    if price and _column(model, "price") is not None:
        try:
            stmt = stmt.where(model.price == float(price))
        except ValueError:
            pass

    order_by = _param(params, "orderBy")
    allowed = set(valid_order_by)
    if not order_by or order_by not in allowed or _column(model, order_by) is None:
        order_by = "created_at"
    direction = (_param(params, "orderDirection") or "").upper()
    column = getattr(model, order_by)
    stmt = stmt.order_by(column.asc() if direction == "ASC" else column.desc())

    return stmt.offset(resolve_start(_param(params, "start"))).limit(resolve_limit(_param(params, "limit")))
