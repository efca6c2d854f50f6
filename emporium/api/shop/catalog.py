"""
Shop catalog endpoints: categories and products.
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

router = APIRouter(tags=["shop"])

CATEGORY_REFERENCES = {"parent_id": "ShopCategory"}
PRODUCT_REFERENCE_LISTS = {"category_id": "ShopCategory"}


@router.get("/category", response_model=List[schemas.ShopCategory])
def list_categories(request: Request, db: Session = Depends(get_db)):
    return list_records(
        db, request.query_params, "ShopCategory", ("created_at", "name", "slug"),
        query_field="name", action="fetch categories",
    )


@router.post("/category", response_model=schemas.ShopCategory, status_code=status.HTTP_201_CREATED)
def create_category(payload: schemas.ShopCategoryCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), CATEGORY_REFERENCES)
    return create_record(db, "ShopCategory", data, "create category")


@router.get("/category/{category_id}", response_model=schemas.ShopCategory)
def get_category(category_id: str, db: Session = Depends(get_db)):
    return get_record(db, "ShopCategory", category_id, f"Category with ID {category_id} not found.")


@router.put("/category/{category_id}", response_model=schemas.ShopCategory)
def update_category(category_id: str, payload: schemas.ShopCategoryUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    return update_record(db, "ShopCategory", category_id, data, "update category", single=CATEGORY_REFERENCES)


@router.delete("/category/{category_id}")
def delete_category(category_id: str, db: Session = Depends(get_db)):
    return delete_record(db, "ShopCategory", category_id, "category")


@router.get("/product", response_model=List[schemas.ShopProduct])
def list_products(request: Request, db: Session = Depends(get_db)):
    return list_records(
        db, request.query_params, "ShopProduct", ("created_at", "price"),
        query_field="name", action="fetch products",
    )


@router.post("/product", response_model=schemas.ShopProduct, status_code=status.HTTP_201_CREATED)
def create_product(payload: schemas.ShopProductCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), many=PRODUCT_REFERENCE_LISTS)
    return create_record(db, "ShopProduct", data, "create product")


@router.get("/product/{product_id}", response_model=schemas.ShopProduct)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return get_record(db, "ShopProduct", product_id, f"Product with ID {product_id} not found.")


@router.put("/product/{product_id}", response_model=schemas.ShopProduct)
def update_product(product_id: str, payload: schemas.ShopProductUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    return update_record(db, "ShopProduct", product_id, data, "update product", many=PRODUCT_REFERENCE_LISTS)


@router.delete("/product/{product_id}")
def delete_product(product_id: str, db: Session = Depends(get_db)):
    return delete_record(db, "ShopProduct", product_id, "product")
