"""
Discounts, orders, order details, payments and reviews.
"""
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from emporium.api.errors import validation_error
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
from emporium.db.schemas.shop import as_utc

router = APIRouter(tags=["shop"])

DISCOUNT_REFERENCE_LISTS = {"product_id": "ShopProduct"}
ORDER_REFERENCES = {"user_id": "User"}
DETAILS_REFERENCES = {"order_id": "ShopOrder", "product_id": "ShopProduct", "applied_discount": "ShopDiscount"}
PAYMENT_REFERENCES = {"order_id": "ShopOrder"}
PAYMENT_REFERENCE_LISTS = {"product_id": "ShopProduct"}
REVIEW_REFERENCES = {"product_id": "ShopProduct", "user_id": "User"}


# Discounts

@router.get("/discount", response_model=List[schemas.ShopDiscount])
def list_discounts(request: Request, db: Session = Depends(get_db)):
    return list_records(
        db, request.query_params, "ShopDiscount", ("created_at", "name", "start_date", "end_date"),
        query_field="name", action="fetch discounts",
    )


@router.post("/discount", response_model=schemas.ShopDiscount, status_code=status.HTTP_201_CREATED)
def create_discount(payload: schemas.ShopDiscountCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), many=DISCOUNT_REFERENCE_LISTS)
    return create_record(db, "ShopDiscount", data, "create discount")


@router.get("/discount/{discount_id}", response_model=schemas.ShopDiscount)
def get_discount(discount_id: str, db: Session = Depends(get_db)):
    return get_record(db, "ShopDiscount", discount_id, f"Discount with ID {discount_id} not found.")


@router.put("/discount/{discount_id}", response_model=schemas.ShopDiscount)
def update_discount(discount_id: str, payload: schemas.ShopDiscountUpdate, db: Session = Depends(get_db)):
    current = get_record(db, "ShopDiscount", discount_id)
    data = payload.model_dump(exclude_unset=True)
    start = data.get("start_date") or current.start_date
    end = data.get("end_date") or current.end_date
    if as_utc(end) < as_utc(start):
        raise validation_error("end_date", "end_date must not precede start_date")
    return update_record(db, "ShopDiscount", discount_id, data, "update discount", many=DISCOUNT_REFERENCE_LISTS)


@router.delete("/discount/{discount_id}")
def delete_discount(discount_id: str, db: Session = Depends(get_db)):
    return delete_record(db, "ShopDiscount", discount_id, "discount")


# Orders

@router.get("/order", response_model=List[schemas.ShopOrder])
def list_orders(request: Request, db: Session = Depends(get_db)):
    return list_records(
        db, request.query_params, "ShopOrder", ("created_at", "total_amount", "status"), action="fetch orders"
    )


@router.post("/order", response_model=schemas.ShopOrder, status_code=status.HTTP_201_CREATED)
def create_order(payload: schemas.ShopOrderCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), ORDER_REFERENCES)
    return create_record(db, "ShopOrder", data, "create order")


@router.get("/order/{order_id}", response_model=schemas.ShopOrder)
def get_order(order_id: str, db: Session = Depends(get_db)):
    return get_record(db, "ShopOrder", order_id, f"Order with ID {order_id} not found.")


@router.put("/order/{order_id}", response_model=schemas.ShopOrder)
def update_order(order_id: str, payload: schemas.ShopOrderUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    return update_record(db, "ShopOrder", order_id, data, "update order", single=ORDER_REFERENCES)


@router.delete("/order/{order_id}")
def delete_order(order_id: str, db: Session = Depends(get_db)):
    return delete_record(db, "ShopOrder", order_id, "order")


# Order details

@router.get("/orderdetails", response_model=List[schemas.ShopOrderDetails])
def list_order_details(request: Request, db: Session = Depends(get_db)):
    return list_records(
        db, request.query_params, "ShopOrderDetails", ("created_at", "total_price"), action="fetch order details"
    )


@router.post("/orderdetails", response_model=schemas.ShopOrderDetails, status_code=status.HTTP_201_CREATED)
def create_order_details(payload: schemas.ShopOrderDetailsCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), DETAILS_REFERENCES)
    if data.get("total_price") is None:
        data["total_price"] = round(data["quantity"] * data["price_per_unit"], 2)
    return create_record(db, "ShopOrderDetails", data, "create order details")


@router.get("/orderdetails/{details_id}", response_model=schemas.ShopOrderDetails)
def get_order_details(details_id: str, db: Session = Depends(get_db)):
    return get_record(db, "ShopOrderDetails", details_id, f"Order details with ID {details_id} not found.")


@router.put("/orderdetails/{details_id}", response_model=schemas.ShopOrderDetails)
def update_order_details(details_id: str, payload: schemas.ShopOrderDetailsUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    return update_record(db, "ShopOrderDetails", details_id, data, "update order details", single=DETAILS_REFERENCES)


@router.delete("/orderdetails/{details_id}")
def delete_order_details(details_id: str, db: Session = Depends(get_db)):
    return delete_record(db, "ShopOrderDetails", details_id, "order details", label="Order details")


# Payments

@router.get("/payment", response_model=List[schemas.ShopPayment])
def list_payments(request: Request, db: Session = Depends(get_db)):
    return list_records(
        db, request.query_params, "ShopPayment", ("created_at", "payment_date", "amount"), action="fetch payments"
    )


@router.post("/payment", response_model=schemas.ShopPayment, status_code=status.HTTP_201_CREATED)
def create_payment(payload: schemas.ShopPaymentCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), PAYMENT_REFERENCES, PAYMENT_REFERENCE_LISTS)
    return create_record(db, "ShopPayment", data, "create payment")


@router.get("/payment/{payment_id}", response_model=schemas.ShopPayment)
def get_payment(payment_id: str, db: Session = Depends(get_db)):
    return get_record(db, "ShopPayment", payment_id, f"Payment with ID {payment_id} not found.")


@router.put("/payment/{payment_id}", response_model=schemas.ShopPayment)
def update_payment(payment_id: str, payload: schemas.ShopPaymentUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    return update_record(
        db, "ShopPayment", payment_id, data, "update payment",
        single=PAYMENT_REFERENCES, many=PAYMENT_REFERENCE_LISTS,
    )


@router.delete("/payment/{payment_id}")
def delete_payment(payment_id: str, db: Session = Depends(get_db)):
    return delete_record(db, "ShopPayment", payment_id, "payment")


# Reviews

@router.get("/review", response_model=List[schemas.ShopReview])
def list_reviews(request: Request, db: Session = Depends(get_db)):
    return list_records(
        db, request.query_params, "ShopReview", ("created_at", "rating"), query_field="comment", action="fetch reviews"
    )


@router.post("/review", response_model=schemas.ShopReview, status_code=status.HTTP_201_CREATED)
def create_review(payload: schemas.ShopReviewCreate, db: Session = Depends(get_db)):
    data = resolve_references(db, payload.model_dump(), REVIEW_REFERENCES)
    return create_record(db, "ShopReview", data, "create review")


@router.get("/review/{review_id}", response_model=schemas.ShopReview)
def get_review(review_id: str, db: Session = Depends(get_db)):
    return get_record(db, "ShopReview", review_id, f"Review with ID {review_id} not found.")


@router.put("/review/{review_id}", response_model=schemas.ShopReview)
def update_review(review_id: str, payload: schemas.ShopReviewUpdate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    return update_record(db, "ShopReview", review_id, data, "update review")


@router.delete("/review/{review_id}")
def delete_review(review_id: str, db: Session = Depends(get_db)):
    return delete_record(db, "ShopReview", review_id, "review")
