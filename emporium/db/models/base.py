"""
Shared SQLAlchemy base and helpers.
"""
from datetime import datetime, UTC

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import declarative_base, declared_attr

from ..record_id import RecordId

# Import SQLite compilation shims for PostgreSQL-only types when running tests
# under SQLite.
from .. import sqlite_compiler_shims  # noqa: F401


def now_utc():
    """Return an aware UTC datetime for default/updated timestamps."""
    return datetime.now(UTC)


Base = declarative_base()


class RecordMixin:
    """Columns shared by every record table.

    ``__record_table__`` is the public table name used in record references;
    ``__references__`` maps single-reference columns to the table they point
    at and ``__reference_lists__`` does the same for JSON arrays of references.
    """

    __record_table__: str = ""
    __references__: dict = {}
    __reference_lists__: dict = {}

    @declared_attr
    def id(cls):
        table = cls.__record_table__
        return Column(String(96), primary_key=True, default=lambda: str(RecordId.generate(table)))

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), default=now_utc, nullable=False, index=True)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)
