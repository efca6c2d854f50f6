"""
Support endpoints: build metadata, health and the caller's identity.
"""
from __future__ import annotations

import os
import logging

from fastapi import APIRouter, Depends

from emporium.api.deps import get_current_user_context
from emporium.utils.feature_flags import get_feature_flags

logger = logging.getLogger(__name__)

router = APIRouter(tags=["support"])


@router.get("/build-info")
def get_build_info():
    """Return build and deployment information for the running service."""
    build_sha = os.getenv("BUILD_SHA")
    build_timestamp = os.getenv("BUILD_TIMESTAMP")
    image_tag = os.getenv("IMAGE_TAG")
    version = os.getenv("VERSION", "unknown")

    return {
        "build_sha": build_sha if build_sha else None,
        "build_timestamp": build_timestamp if build_timestamp else None,
        "image_tag": image_tag if image_tag else None,
        "service_name": "emporium-service",
        "version": version,
    }


@router.get("/health")
def health_check():
    return {"status": "ok", "service": "emporium-service"}


@router.get("/api/me")
def get_me(user_context=Depends(get_current_user_context)):
    """Identity and role of the caller plus the active feature flags."""
    _user, current_user = user_context
    return {**current_user, "authenticated": True, **get_feature_flags()}
