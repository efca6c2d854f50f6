"""
Authentication helpers and identity resolution.

Parses proxy headers, normalizes emails, and upserts users while supporting
admin elevation via the ADMIN_EMAILS environment variable.
"""
import logging
from typing import Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from emporium.db import models
from emporium.utils.runtime import admin_emails

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_USER = "user"


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return email.strip().lower()


def resolve_identity_from_headers(
    x_auth_request_user: Optional[str],
    x_auth_request_email: Optional[str],
    x_forwarded_user: Optional[str],
    x_forwarded_email: Optional[str],
) -> Tuple[Optional[str], Optional[str]]:
    user = x_auth_request_user or x_forwarded_user
    email = _normalize_email(x_auth_request_email or x_forwarded_email)
    return user, email


def has_identity_headers(headers) -> bool:
    return bool(
        headers.get("x-auth-request-user")
        or headers.get("x-auth-request-email")
        or headers.get("x-forwarded-user")
        or headers.get("x-forwarded-email")
    )


def get_or_create_user(db: Session, email: str, display_name: Optional[str] = None) -> models.User:
    email = _normalize_email(email)
    user = db.query(models.User).filter(models.User.email == email).first()
    is_admin = email in admin_emails()
    if not user:
        user = models.User(
            email=email,
            display_name=display_name or email.split("@")[0],
            role=ROLE_ADMIN if is_admin else ROLE_USER,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Created user %s with role %s", email, user.role)
        return user

    # Existing users might predate a new ADMIN_EMAILS value; promote them when necessary.
    if is_admin and user.role != ROLE_ADMIN:
        user.role = ROLE_ADMIN
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.warning("Could not promote %s to admin", email, exc_info=True)
        else:
            db.refresh(user)
    return user
