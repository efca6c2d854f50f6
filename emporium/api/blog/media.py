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

router = APIRouter(prefix="/media", tags=["blog"])

TABLE = "BlogMedia"
ORDER_FIELDS = ("created_at", "media_type")
REFERENCES = {"post_ref": "BlogPost"}


@router.get("", response_model=List[schemas.BlogMedia])
def list_media(request: Request, db: Session = Depends(get_db)):
    return list_records(db, request.query_params, TABLE, ORDER_FIELDS, action="fetch media")


@router.post("", response_model=schemas.BlogMedia, status_code=status.HTTP_201_CREATED)
def create_media(payload: schemas.BlogMediaCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), REFERENCES)
    return create_record(db, TABLE, data, "create media")


@router.get("/{media_id}", response_model=schemas.BlogMedia)
def get_media(media_id: str, db: Session = Depends(get_db)):
    return get_record(db, TABLE, media_id, f"Media with ID {media_id} does not exist.")


@router.put("/{media_id}", response_model=schemas.BlogMedia)
def update_media(media_id: str, payload: schemas.BlogMediaUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    return update_record(db, TABLE, media_id, data, "update media", single=REFERENCES)


@router.delete("/{media_id}")
def delete_media(media_id: str, db: Session = Depends(get_db)):
    return delete_record(db, TABLE, media_id, "media", label="Media")
