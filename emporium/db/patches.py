"""
Partial-update instructions for stored records.

Handlers describe an update as a list of ``PatchOperation`` values (a small
JSON-Patch subset) and the records repository applies them to the ORM row.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple

from sqlalchemy import inspect

from .models.base import now_utc

REPLACE = "replace"
ADD = "add"
REMOVE = "remove"
_OPS = {REPLACE, ADD, REMOVE}


class PatchError(ValueError):
    pass


@dataclass(frozen=True)
class PatchOperation:
    op: str
    path: str
    value: Any = None

    @property
    def field(self) -> str:
        return self.path.lstrip("/").split("/", 1)[0]

    @property
    def appends(self) -> bool:
        return self.path.endswith("/-")

    def as_dict(self) -> dict:
        return {"op": self.op, "path": self.path, "value": self.value}


def prepare_updates(fields: Iterable[Tuple[str, Any]]) -> List[PatchOperation]:
    """Emit a replace for every supplied value, then stamp ``updated_at``."""
    ops = [PatchOperation(REPLACE, path, value) for path, value in fields if value is not None]
    ops.append(PatchOperation(REPLACE, "/updated_at", now_utc()))
    return ops


def _attribute_for(record, field: str) -> str:
    # Columns renamed on the model (``metadata`` -> ``metadata_json``)
    mapper = inspect(type(record))
    if field in mapper.column_attrs:
        return field
    for attr in mapper.column_attrs:
        if attr.columns[0].name == field:
            return attr.key
    raise PatchError(f"Unknown field '{field}' for {type(record).__name__}")


def apply_patch(record, operations: Iterable[PatchOperation]):
    for operation in operations:
        if operation.op not in _OPS:
            raise PatchError(f"Unsupported patch operation '{operation.op}'")
        field = operation.field
        if not field:
            raise PatchError(f"Invalid patch path '{operation.path}'")
        if field == "id":
            raise PatchError("The id field cannot be patched")
        attr = _attribute_for(record, field)

        if operation.op == REMOVE:
            setattr(record, attr, None)
        elif operation.op == ADD and operation.appends:
            current = list(getattr(record, attr) or [])
            current.append(operation.value)
            # Reassign so the JSON column is flagged dirty
            setattr(record, attr, current)
        else:
            setattr(record, attr, operation.value)
    return record
