"""
Shopping cart endpoints.

``DELETE /cart/{id}?item_id=<product>`` removes that product's lines from the
cart; without ``item_id`` the cart itself is deleted.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from emporium.api.errors import delete_failure
from emporium.api.resources import create_record, delete_record, get_record, list_records, update_record
from emporium.db import schemas
from emporium.db.database import get_db
from emporium.db.repositories import records
from emporium.db.repositories import shop as shop_repo

router = APIRouter(prefix="/cart", tags=["shop"])

TABLE = "ShopCart"


def _resolve_items(db: Session, items) -> list:
    resolved = []
    for item in items or []:
        product = records.check_exists(db, "ShopProduct", item["product_id"])
        resolved.append({"product_id": str(product), "quantity": item["quantity"]})
    return resolved


@router.get("", response_model=List[schemas.ShopCart])
def list_carts(request: Request, db: Session = Depends(get_db)):
    return list_records(db, request.query_params, TABLE, ("created_at",), action="fetch carts")


@router.post("", response_model=schemas.ShopCart, status_code=status.HTTP_201_CREATED)
def create_cart(payload: schemas.ShopCartCreate, db: Session = Depends(get_db)):
    data = payload.model_dump()
    data["user_id"] = str(records.check_exists(db, "User", data["user_id"]))
    data["items"] = _resolve_items(db, data["items"])
    return create_record(db, TABLE, data, "create cart")


@router.get("/{cart_id}", response_model=schemas.ShopCart)
def get_cart(cart_id: str, db: Session = Depends(get_db)):
    return get_record(db, TABLE, cart_id, f"Cart with ID {cart_id} not found.")


@router.put("/{cart_id}", response_model=schemas.ShopCart)
def update_cart(cart_id: str, payload: schemas.ShopCartUpdate, db: Session = Depends(get_db)):
    records.check_exists(db, TABLE, cart_id, f"Cart with ID {cart_id} not found.")
    data = payload.model_dump(exclude_unset=True)
    if data.get("items") is not None:
        data["items"] = _resolve_items(db, data["items"])
    return update_record(db, TABLE, cart_id, data, "update cart", single={"user_id": "User"})


@router.delete("/{cart_id}")
def delete_cart(cart_id: str, item_id: Optional[str] = None, db: Session = Depends(get_db)):
    reference = records.check_exists(db, TABLE, cart_id, f"Cart with ID {cart_id} not found.")
    if not item_id:
        return delete_record(db, TABLE, cart_id, "cart")

    product = records.check_exists(db, "ShopProduct", item_id, f"Product with ID {item_id} not found.")
    try:
        shop_repo.remove_cart_item(db, reference, str(product))
    except SQLAlchemyError as exc:
        raise delete_failure("cart item", exc, message="Failed to remove item from cart.")
    return {"message": "Item removed from cart successfully."}
