"""
Typed record references.

Every stored row is addressed by a ``RecordId`` made of the record table name
and a key. The canonical string form is ``"<table>:<key>"``; handlers accept
either the bare key or the full form and normalise it here.
"""
from __future__ import annotations

import re
import secrets
import string
from dataclasses import dataclass
from typing import Optional

KEY_LENGTH = 20
MAX_KEY_LENGTH = 64
_KEY_ALPHABET = string.ascii_lowercase + string.digits
_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class InvalidRecordId(ValueError):
    """Raised when a string cannot be turned into a reference for a table."""


@dataclass(frozen=True)
class RecordId:
    table: str
    key: str

    def __str__(self) -> str:
        return f"{self.table}:{self.key}"

    @classmethod
    def generate(cls, table: str) -> "RecordId":
        key = "".join(secrets.choice(_KEY_ALPHABET) for _ in range(KEY_LENGTH))
        return cls(table, key)

    @classmethod
    def parse(cls, value: Optional[str], table: str) -> "RecordId":
        """Build a reference for ``table`` from a bare key or ``table:key``."""
        if isinstance(value, RecordId):
            if value.table != table:
                raise InvalidRecordId(f"Expected a {table} reference, got {value}")
            return value
        if value is None:
            raise InvalidRecordId("Record id is required")
        raw = str(value).strip()
        key = raw
        if ":" in raw:
            prefix, _, key = raw.partition(":")
            if prefix != table:
                raise InvalidRecordId(f"Expected a {table} reference, got {raw}")
        if not key:
            raise InvalidRecordId("Record id is required")
        if len(key) > MAX_KEY_LENGTH or not _KEY_PATTERN.match(key):
            raise InvalidRecordId(f"Malformed record id: {raw}")
        return cls(table, key)


def ref(table: str, value: Optional[str]) -> Optional[str]:
    """Canonical string form of ``value`` for ``table`` (``None`` passes through)."""
    if value is None:
        return None
    return str(RecordId.parse(value, table))


def refs(table: str, values) -> list[str]:
    return [str(RecordId.parse(v, table)) for v in values or []]


def key_of(value: str) -> str:
    """Bare key of a canonical reference string."""
    return value.partition(":")[2] if ":" in value else value
