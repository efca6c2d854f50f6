"""
Blog repository functions.

Comments and likes are mirrored on their post's reference lists; these
helpers keep both sides in step inside a single transaction.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable

from sqlalchemy.orm import Session

from emporium.db.patches import PatchOperation
from emporium.db.repositories import records

POST = "BlogPost"


def _create_mirrored(db: Session, table: str, field: str, data: Dict[str, Any]):
    with records.unit_of_work(db):
        obj = records.create(db, table, data, commit=False)
        records.array_add(db, obj.post_ref, field, obj.id, commit=False)
        return records.commit(db, obj)


def _delete_mirrored(db: Session, reference, field: str):
    with records.unit_of_work(db):
        snapshot = records.delete(db, reference, commit=False)
        if snapshot is None:
            return None
        records.array_remove(db, snapshot["post_ref"], field, snapshot["id"], commit=False)
        records.commit(db)
    return snapshot


def create_comment(db: Session, data: Dict[str, Any]):
    return _create_mirrored(db, "BlogComment", "comments", data)


def delete_comment(db: Session, reference):
    return _delete_mirrored(db, reference, "comments")


def create_like(db: Session, data: Dict[str, Any]):
    return _create_mirrored(db, "BlogLike", "likes", data)


def update_like(db: Session, reference, operations: Iterable[PatchOperation]):
    """Patch a like; moving it to another post moves its mirror entry too."""
    current = records.select(db, reference)
    if current is None:
        return None
    old_post = current.post_ref
    with records.unit_of_work(db):
        like = records.patch(db, reference, operations, commit=False)
        if like.post_ref != old_post:
            records.array_remove(db, old_post, "likes", like.id, commit=False)
            records.array_add(db, like.post_ref, "likes", like.id, commit=False)
        return records.commit(db, like)


def delete_like(db: Session, reference):
    return _delete_mirrored(db, reference, "likes")
