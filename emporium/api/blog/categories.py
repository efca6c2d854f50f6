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

router = APIRouter(prefix="/category", tags=["blog"])

TABLE = "BlogCategory"
ORDER_FIELDS = ("created_at", "slug")
REFERENCES = {"parent_id": "BlogCategory"}


@router.get("", response_model=List[schemas.BlogCategory])
def list_categories(request: Request, db: Session = Depends(get_db)):
    return list_records(db, request.query_params, TABLE, ORDER_FIELDS, query_field="title", action="fetch categories")


@router.post("", response_model=schemas.BlogCategory, status_code=status.HTTP_201_CREATED)
def create_category(payload: schemas.BlogCategoryCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), REFERENCES)
    return create_record(db, TABLE, data, "create category")


@router.get("/{category_id}", response_model=schemas.BlogCategory)
def get_category(category_id: str, db: Session = Depends(get_db)):
    return get_record(db, TABLE, category_id, f"Category with ID {category_id} does not exist.")


@router.put("/{category_id}", response_model=schemas.BlogCategory)
def update_category(category_id: str, payload: schemas.BlogCategoryUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    return update_record(db, TABLE, category_id, data, "update category", single=REFERENCES)


@router.delete("/{category_id}")
def delete_category(category_id: str, db: Session = Depends(get_db)):
    return delete_record(db, TABLE, category_id, "category")
