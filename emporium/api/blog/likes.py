"""
Post likes and bookmarks.

Both link one user to one post at most once. Likes are also mirrored in the
post's ``likes`` list.
"""
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from emporium.api.errors import conflict, delete_failure, deleted, store_failure
from emporium.api.resources import (
    create_record,
    delete_record,
    get_record,
    list_records,
    resolve_references,
    update_record,
)
from emporium.db import models, schemas
from emporium.db.database import get_db
from emporium.db.patches import prepare_updates
from emporium.db.repositories import blog as blog_repo
from emporium.db.repositories import records

router = APIRouter(tags=["blog"])

ORDER_FIELDS = ("created_at",)
REFERENCES = {"post_ref": "BlogPost", "user_ref": "User"}


def _ensure_unique(db: Session, model, post_ref: str, user_ref: str, message: str, exclude_id: str = None):
    query = db.query(model).filter(model.post_ref == post_ref, model.user_ref == user_ref)
    if exclude_id:
        query = query.filter(model.id != exclude_id)
    if query.first() is not None:
        raise conflict(message)


# Likes

@router.get("/like", response_model=List[schemas.BlogLike])
def list_likes(request: Request, db: Session = Depends(get_db)):
    return list_records(db, request.query_params, "BlogLike", ORDER_FIELDS, action="fetch likes")


@router.post("/like", response_model=schemas.BlogLike, status_code=status.HTTP_201_CREATED)
def create_like(payload: schemas.PostUserLink, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), REFERENCES)
    _ensure_unique(db, models.BlogLike, data["post_ref"], data["user_ref"], "User has already liked this post.")
    try:
        return blog_repo.create_like(db, data)
    except SQLAlchemyError as exc:
        raise store_failure("create like", exc)


@router.get("/like/{like_id}", response_model=schemas.BlogLike)
def get_like(like_id: str, db: Session = Depends(get_db)):
    return get_record(db, "BlogLike", like_id, f"Like with ID {like_id} does not exist.")


@router.put("/like/{like_id}", response_model=schemas.BlogLike)
def update_like(like_id: str, payload: schemas.PostUserLinkUpdate, db: Session = Depends(get_db)):
    current = get_record(db, "BlogLike", like_id)
    data = resolve_references(db, payload.model_dump(exclude_unset=True), REFERENCES)
    post_ref = data.get("post_ref") or current.post_ref
    user_ref = data.get("user_ref") or current.user_ref
    _ensure_unique(db, models.BlogLike, post_ref, user_ref, "User has already liked this post.", exclude_id=current.id)
    operations = prepare_updates((f"/{name}", value) for name, value in data.items())
    try:
        return blog_repo.update_like(db, current.id, operations)
    except SQLAlchemyError as exc:
        raise store_failure("update like", exc)


@router.delete("/like/{like_id}")
def delete_like(like_id: str, db: Session = Depends(get_db)):
    reference = records.check_exists(db, "BlogLike", like_id)
    try:
        blog_repo.delete_like(db, reference)
    except SQLAlchemyError as exc:
        raise delete_failure("like", exc)
    return deleted("Like")


# Bookmarks

@router.get("/bookmark", response_model=List[schemas.BlogBookmark])
def list_bookmarks(request: Request, db: Session = Depends(get_db)):
    return list_records(db, request.query_params, "BlogBookmark", ORDER_FIELDS, action="fetch bookmarks")


@router.post("/bookmark", response_model=schemas.BlogBookmark, status_code=status.HTTP_201_CREATED)
def create_bookmark(payload: schemas.PostUserLink, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), REFERENCES)
    _ensure_unique(db, models.BlogBookmark, data["post_ref"], data["user_ref"], "Post is already bookmarked.")
    return create_record(db, "BlogBookmark", data, "create bookmark")


@router.get("/bookmark/{bookmark_id}", response_model=schemas.BlogBookmark)
def get_bookmark(bookmark_id: str, db: Session = Depends(get_db)):
    return get_record(db, "BlogBookmark", bookmark_id, f"Bookmark with ID {bookmark_id} does not exist.")


@router.put("/bookmark/{bookmark_id}", response_model=schemas.BlogBookmark)
def update_bookmark(bookmark_id: str, payload: schemas.PostUserLinkUpdate, db: Session = Depends(get_db)):
    current = get_record(db, "BlogBookmark", bookmark_id)
    data = resolve_references(db, payload.model_dump(exclude_unset=True), REFERENCES)
    _ensure_unique(
        db,
        models.BlogBookmark,
        data.get("post_ref") or current.post_ref,
        data.get("user_ref") or current.user_ref,
        "Post is already bookmarked.",
        exclude_id=current.id,
    )
    return update_record(db, "BlogBookmark", bookmark_id, data, "update bookmark")


@router.delete("/bookmark/{bookmark_id}")
def delete_bookmark(bookmark_id: str, db: Session = Depends(get_db)):
    return delete_record(db, "BlogBookmark", bookmark_id, "bookmark")
