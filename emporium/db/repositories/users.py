"""
User repository functions backing the admin customers table.
"""
from __future__ import annotations

from typing import List, Mapping
from sqlalchemy.orm import Session

from emporium.db import models, query_builder
from emporium.db.repositories import records

CUSTOMER_ORDER_FIELDS = ("created_at", "email")


def list_customers(db: Session, params: Mapping[str, str]) -> List[models.User]:
    statement = query_builder.build_query(params, "User", CUSTOMER_ORDER_FIELDS, query_field="display_name")
    statement = statement.where(models.User.role == "user")
    return records.query(db, statement)


def get_customer(db: Session, reference):
    user = records.select(db, reference)
    if user is None or user.role != "user":
        return None
    return user


def list_admins(db: Session) -> List[models.User]:
    return db.query(models.User).filter(models.User.role == "admin").order_by(models.User.email.asc()).all()
