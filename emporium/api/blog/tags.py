from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from emporium.api.resources import create_record, delete_record, get_record, list_records, update_record
from emporium.db import schemas
from emporium.db.database import get_db

router = APIRouter(prefix="/tag", tags=["blog"])

TABLE = "BlogTag"
ORDER_FIELDS = ("created_at", "name", "slug")


@router.get("", response_model=List[schemas.BlogTag])
def list_tags(request: Request, db: Session = Depends(get_db)):
    return list_records(db, request.query_params, TABLE, ORDER_FIELDS, query_field="name", action="fetch tags")


@router.post("", response_model=schemas.BlogTag, status_code=status.HTTP_201_CREATED)
def create_tag(payload: schemas.BlogTagCreate, db: Session = Depends(get_db)):
    return create_record(db, TABLE, payload.model_dump(), "create tag")


@router.get("/{tag_id}", response_model=schemas.BlogTag)
def get_tag(tag_id: str, db: Session = Depends(get_db)):
    return get_record(db, TABLE, tag_id, f"Tag with ID {tag_id} does not exist.")


@router.put("/{tag_id}", response_model=schemas.BlogTag)
def update_tag(tag_id: str, payload: schemas.BlogTagUpdate, db: Session = Depends(get_db)):
    return update_record(db, TABLE, tag_id, payload.model_dump(exclude_unset=True), "update tag")


@router.delete("/{tag_id}")
def delete_tag(tag_id: str, db: Session = Depends(get_db)):
    return delete_record(db, TABLE, tag_id, "tag")
