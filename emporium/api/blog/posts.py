"""
Blog post endpoints (mounted at the blog root).
"""
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from emporium.api.resources import (
    create_record,
    delete_record,
    get_record,
    list_records,
    resolve_references,
    update_record,
)
from emporium.db import schemas
from emporium.db.database import get_db

router = APIRouter(tags=["blog"])

TABLE = "BlogPost"
ORDER_FIELDS = ("created_at", "title")
REFERENCES = {"author": "User"}
REFERENCE_LISTS = {"categories": "BlogCategory", "tags": "BlogTag"}
UPDATE_REFERENCE_LISTS = {**REFERENCE_LISTS, "likes": "BlogLike", "comments": "BlogComment"}


@router.get("", response_model=List[schemas.BlogPost])
def list_posts(request: Request, db: Session = Depends(get_db)):
    return list_records(db, request.query_params, TABLE, ORDER_FIELDS, query_field="title", action="fetch posts")


@router.post("", response_model=schemas.BlogPost, status_code=status.HTTP_201_CREATED)
def create_post(payload: schemas.BlogPostCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), REFERENCES, REFERENCE_LISTS)
    return create_record(db, TABLE, data, "create post")


@router.get("/{post_id}", response_model=schemas.BlogPost)
def get_post(post_id: str, db: Session = Depends(get_db)):
    return get_record(db, TABLE, post_id, f"Post with ID {post_id} does not exist.")


@router.put("/{post_id}", response_model=schemas.BlogPost)
def update_post(post_id: str, payload: schemas.BlogPostUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    return update_record(
        db, TABLE, post_id, data, "update post", single=REFERENCES, many=UPDATE_REFERENCE_LISTS
    )


@router.delete("/{post_id}")
def delete_post(post_id: str, db: Session = Depends(get_db)):
    # Comments, likes and media of the post are left in place
    return delete_record(db, TABLE, post_id, "post")
