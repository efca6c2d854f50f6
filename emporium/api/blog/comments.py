"""
Blog comment endpoints.

A comment is mirrored in its post's ``comments`` list; replies point at
their parent comment through ``parent_comment_ref``.
"""
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from emporium.api.errors import delete_failure, deleted, store_failure
from emporium.api.resources import get_record, list_records, resolve_references, update_record
from emporium.db import schemas
from emporium.db.database import get_db
from emporium.db.repositories import blog as blog_repo
from emporium.db.repositories import records

router = APIRouter(prefix="/comment", tags=["blog"])

TABLE = "BlogComment"
ORDER_FIELDS = ("created_at",)
REFERENCES = {"post_ref": "BlogPost", "user_ref": "User", "parent_comment_ref": "BlogComment"}


def _stored_fields(data: dict) -> dict:
    if "parent_id" in data:
        data["parent_comment_ref"] = data.pop("parent_id")
    return data


@router.get("", response_model=List[schemas.BlogComment])
def list_comments(request: Request, db: Session = Depends(get_db)):
    return list_records(db, request.query_params, TABLE, ORDER_FIELDS, query_field="content", action="fetch comments")


@router.post("", response_model=schemas.BlogComment, status_code=status.HTTP_201_CREATED)
def create_comment(payload: schemas.BlogCommentCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, _stored_fields(payload.model_dump()), REFERENCES)
    try:
        return blog_repo.create_comment(db, data)
    except SQLAlchemyError as exc:
        raise store_failure("create comment", exc)


@router.get("/{comment_id}", response_model=schemas.BlogComment)
def get_comment(comment_id: str, db: Session = Depends(get_db)):
    return get_record(db, TABLE, comment_id, f"Comment with ID {comment_id} does not exist.")


@router.put("/{comment_id}", response_model=schemas.BlogComment)
def update_comment(comment_id: str, payload: schemas.BlogCommentUpdate, db: Session = Depends(get_db)):
    data = _stored_fields(payload.model_dump(exclude_unset=True))
    return update_record(db, TABLE, comment_id, data, "update comment", single=REFERENCES)


@router.delete("/{comment_id}")
def delete_comment(comment_id: str, db: Session = Depends(get_db)):
    reference = records.check_exists(db, TABLE, comment_id)
    try:
        blog_repo.delete_comment(db, reference)
    except SQLAlchemyError as exc:
        raise delete_failure("comment", exc)
    return deleted("Comment")
