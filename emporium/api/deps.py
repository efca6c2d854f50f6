"""
API dependency helpers.

Resolves the caller from proxy headers (or the dev user) and provides the
role guard and feature-flag gates shared by the routers.
"""
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from emporium.api.auth import ROLE_ADMIN, get_or_create_user, resolve_identity_from_headers
from emporium.api.errors import not_found
from emporium.db.database import get_db
from emporium.utils.runtime import DEV_USER_EMAIL, dev_mode_active

logger = logging.getLogger(__name__)

UserContext = Tuple[Any, Dict[str, Any]]


def _context_for(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "display_name": user.display_name,
        "role": user.role,
        "is_admin": user.role == ROLE_ADMIN,
    }


def _resolve_user(db: Session, user_header, email_header, fwd_user, fwd_email):
    try:
        is_dev_mode = dev_mode_active()
    except RuntimeError as exc:
        logger.error("DEV_MODE misconfiguration detected: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DEV_MODE misconfigured")

    if is_dev_mode:
        return get_or_create_user(db, email=DEV_USER_EMAIL, display_name="Development User")

    name, email = resolve_identity_from_headers(
        x_auth_request_user=user_header,
        x_auth_request_email=email_header,
        x_forwarded_user=fwd_user,
        x_forwarded_email=fwd_email,
    )
    if not email:
        return None
    return get_or_create_user(db, email=email, display_name=name)


def get_optional_user_context(
    db: Session = Depends(get_db),
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> Optional[UserContext]:
    user = _resolve_user(db, x_auth_request_user, x_auth_request_email, x_forwarded_user, x_forwarded_email)
    if user is None:
        return None
    return user, _context_for(user)


# Contract:
# Returns (sqlalchemy User model, current_user_context_dict)
# Raises 401 if identity cannot be resolved.
def get_current_user_context(
    user_context: Optional[UserContext] = Depends(get_optional_user_context),
) -> UserContext:
    if user_context is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return user_context


def guard_api(role: str = ROLE_ADMIN) -> Callable[..., UserContext]:
    """Dependency factory: admins and ``role`` pass, everyone else sees a 404."""

    def _guard(user_context: Optional[UserContext] = Depends(get_optional_user_context)) -> UserContext:
        if user_context is None:
            raise not_found()
        _user, current_user = user_context
        if current_user["role"] not in (ROLE_ADMIN, role):
            raise not_found()
        return user_context

    return _guard


require_admin = guard_api(ROLE_ADMIN)


def require_feature(is_enabled: Callable[[], bool]) -> Callable[[], None]:
    """Dependency factory answering 404 while a feature flag is off."""

    def _gate() -> None:
        if not is_enabled():
            raise not_found()

    return _gate
