"""
Generic record store operations.

Every function works on any table in the registry, addresses rows by
``RecordId`` and commits its own unit of work. Writes called with
``commit=False`` only flush, so several of them can share one transaction
that the caller closes with ``commit``.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from emporium.db.patches import PatchOperation, apply_patch
from emporium.db.record_id import InvalidRecordId, RecordId
from emporium.db.tables import model_for, table_for

logger = logging.getLogger(__name__)

Reference = Union[RecordId, str]


class RecordNotFound(LookupError):
    pass


class RecordConflict(Exception):
    pass


def _as_record_id(reference: Reference) -> RecordId:
    if isinstance(reference, RecordId):
        return reference
    table, sep, _ = str(reference).partition(":")
    if not sep:
        raise InvalidRecordId(f"Expected a table:key reference, got {reference}")
    return RecordId.parse(reference, table)


def _save(db: Session, obj=None, commit: bool = True):
    """Commit, or only flush when the caller owns the unit of work."""
    try:
        if commit:
            db.commit()
        else:
            db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise RecordConflict(str(exc.orig) if exc.orig is not None else str(exc)) from exc
    except SQLAlchemyError:
        db.rollback()
        raise
    if obj is not None and commit:
        db.refresh(obj)
    return obj


def commit(db: Session, obj=None):
    """Finish a unit of work started with ``commit=False`` calls."""
    return _save(db, obj)


@contextmanager
def unit_of_work(db: Session):
    """Roll back everything flushed inside the block if a write fails."""
    try:
        yield db
    except SQLAlchemyError:
        db.rollback()
        raise


def _attribute_names(model) -> Dict[str, str]:
    """Column name -> mapped attribute name."""
    return {attr.columns[0].name: attr.key for attr in inspect(model).column_attrs}


def select(db: Session, reference: Reference):
    record_id = _as_record_id(reference)
    return db.get(model_for(record_id.table), str(record_id))


def select_all(db: Session, table: str) -> List[Any]:
    model = model_for(table)
    return db.query(model).order_by(model.created_at.asc()).all()


def create(db: Session, table: str, data: Dict[str, Any], commit: bool = True):
    model = model_for(table)
    names = _attribute_names(model)
    values = {names.get(key, key): value for key, value in data.items() if key != "id"}
    obj = model(**values)
    db.add(obj)
    return _save(db, obj, commit)


def patch(db: Session, reference: Reference, operations: Iterable[PatchOperation], commit: bool = True):
    obj = select(db, reference)
    if obj is None:
        return None
    apply_patch(obj, operations)
    return _save(db, obj, commit)


def delete(db: Session, reference: Reference, commit: bool = True):
    obj = select(db, reference)
    if obj is None:
        return None
    snapshot = to_record(obj)
    db.delete(obj)
    _save(db, commit=commit)
    return snapshot


def query(db: Session, statement: Select) -> List[Any]:
    return list(db.scalars(statement).all())


def array_add(db: Session, reference: Reference, field: str, value: str, commit: bool = True):
    """Append ``value`` to a reference-list column unless already present."""
    obj = select(db, reference)
    if obj is None:
        return None
    current = list(getattr(obj, field) or [])
    if value in current:
        return obj
    current.append(value)
    setattr(obj, field, current)
    return _save(db, obj, commit)


def array_remove(db: Session, reference: Reference, field: str, value: str, commit: bool = True):
    obj = select(db, reference)
    if obj is None:
        return None
    current = list(getattr(obj, field) or [])
    if value not in current:
        return obj
    setattr(obj, field, [v for v in current if v != value])
    return _save(db, obj, commit)


def check_exists(db: Session, table: str, key: Optional[str], message: Optional[str] = None) -> RecordId:
    """Resolve ``key`` to a reference of ``table`` or raise ``RecordNotFound``."""
    text = message or f"{table} with ID {key} does not exist."
    try:
        record_id = RecordId.parse(key, table)
    except InvalidRecordId:
        raise RecordNotFound(text) from None
    if db.get(model_for(table), str(record_id)) is None:
        raise RecordNotFound(text)
    return record_id


def check_all_exist(db: Session, table: str, keys: Optional[Iterable[str]]) -> List[str]:
    return [str(check_exists(db, table, key)) for key in keys or []]


def _plain(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def to_record(obj) -> Dict[str, Any]:
    """Column values of ``obj`` keyed by column name, JSON-ready."""
    mapper = inspect(type(obj))
    return {attr.columns[0].name: _plain(getattr(obj, attr.key)) for attr in mapper.column_attrs}


def record_table(obj) -> str:
    return table_for(obj)
