"""
Shared handler steps for the CRUD routers.

Every resource endpoint follows the same shape: validate the body, existence
check the path id and every referenced id, issue one store call and shape
the JSON. The helpers below implement those steps once.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from emporium.api.errors import delete_failure, deleted, store_failure
from emporium.db import query_builder
from emporium.db.patches import prepare_updates
from emporium.db.repositories import records

logger = logging.getLogger(__name__)


def resolve_references(
    db: Session,
    data: Dict[str, Any],
    single: Optional[Mapping[str, str]] = None,
    many: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Existence-check referenced ids in ``data`` and store their full form."""
    resolved = dict(data)
    for name, table in (single or {}).items():
        if resolved.get(name) is not None:
            resolved[name] = str(records.check_exists(db, table, resolved[name]))
    for name, table in (many or {}).items():
        if resolved.get(name) is not None:
            resolved[name] = records.check_all_exist(db, table, resolved[name])
    return resolved


def list_records(
    db: Session,
    params: Mapping[str, str],
    table: str,
    valid_order_by: Iterable[str],
    query_field: Optional[str] = None,
    action: str = "fetch records",
):
    statement = query_builder.build_query(params, table, valid_order_by, query_field=query_field)
    try:
        return records.query(db, statement)
    except SQLAlchemyError as exc:
        raise store_failure(action, exc)


def get_record(db: Session, table: str, record_id: str, message: Optional[str] = None):
    reference = records.check_exists(db, table, record_id, message)
    return records.select(db, reference)


def create_record(db: Session, table: str, data: Dict[str, Any], action: str):
    try:
        return records.create(db, table, data)
    except SQLAlchemyError as exc:
        raise store_failure(action, exc)


def update_record(
    db: Session,
    table: str,
    record_id: str,
    data: Dict[str, Any],
    action: str,
    single: Optional[Mapping[str, str]] = None,
    many: Optional[Mapping[str, str]] = None,
):
    """Patch only the fields present in ``data`` (a ``model_dump(exclude_unset=True)``)."""
    reference = records.check_exists(db, table, record_id)
    data = resolve_references(db, data, single, many)
    operations = prepare_updates((f"/{name}", value) for name, value in data.items())
    try:
        return records.patch(db, reference, operations)
    except SQLAlchemyError as exc:
        raise store_failure(action, exc)


def delete_record(db: Session, table: str, record_id: str, thing: str, label: Optional[str] = None):
    reference = records.check_exists(db, table, record_id)
    try:
        records.delete(db, reference)
    except SQLAlchemyError as exc:
        raise delete_failure(thing, exc)
    return deleted(label or thing.capitalize())
