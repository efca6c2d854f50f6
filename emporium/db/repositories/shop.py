"""
Shop repository functions: cart item edits and the sales dashboard.
"""
from __future__ import annotations

import calendar
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from emporium.db import models
from emporium.db.models.base import now_utc
from emporium.db.patches import prepare_updates
from emporium.db.repositories import records


def remove_cart_item(db: Session, reference, product_ref: str):
    """Drop every line of ``product_ref`` from the cart."""
    cart = records.select(db, reference)
    if cart is None:
        return None
    items = [item for item in (cart.items or []) if item.get("product_id") != product_ref]
    return records.patch(db, reference, prepare_updates([("/items", items)]))


def _month_window(now: datetime):
    start = datetime(now.year, now.month, 1, tzinfo=now.tzinfo)
    if now.month == 12:
        end = datetime(now.year + 1, 1, 1, tzinfo=now.tzinfo)
    else:
        end = datetime(now.year, now.month + 1, 1, tzinfo=now.tzinfo)
    return start, end


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; compare everything in naive UTC
    if value is None:
        return None
    return value.replace(tzinfo=None)


def dashboard(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or now_utc()
    Payment = models.ShopPayment

    total_revenue = db.query(func.coalesce(func.sum(Payment.amount), 0.0)).scalar() or 0.0
    orders_count = db.query(func.count(models.ShopOrder.id)).scalar() or 0

    payments = db.query(Payment.amount, Payment.payment_date).all()
    month_start, month_end = _month_window(now)
    month_start, month_end = _naive(month_start), _naive(month_end)
    totals = [0.0] * 12
    sales_this_month = 0
    for amount, paid_at in payments:
        paid_at = _naive(paid_at)
        if paid_at is None:
            continue
        if paid_at.year == now.year:
            totals[paid_at.month - 1] += float(amount or 0)
        if month_start <= paid_at < month_end:
            sales_this_month += 1

    monthly_revenue = [
        {"name": calendar.month_abbr[i + 1], "total": round(totals[i], 2)} for i in range(12)
    ]

    return {
        "total_revenue": round(float(total_revenue), 2),
        "sales_this_month": sales_this_month,
        "orders_count": int(orders_count),
        "monthly_revenue": monthly_revenue,
        "recent_sales": recent_sales(db),
    }


def recent_sales(db: Session, limit: int = 5) -> List[Dict[str, Any]]:
    Payment = models.ShopPayment
    rows = db.query(Payment).order_by(Payment.payment_date.desc(), Payment.created_at.desc()).limit(limit).all()
    sales = []
    for payment in rows:
        order = db.get(models.ShopOrder, payment.order_id)
        buyer = db.get(models.User, order.user_id) if order is not None else None
        sales.append(
            {
                "id": payment.id,
                "name": buyer.display_name if buyer is not None else None,
                "email": buyer.email if buyer is not None else None,
                "amount": float(payment.amount),
            }
        )
    return sales
