"""Feature flag helpers for runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Literal, TypedDict, cast


FeatureFlagKey = Literal[
    "feature_blog_enabled",
    "feature_shop_enabled",
    "feature_chat_enabled",
    "feature_live_queries_enabled",
]


class FeatureFlagValues(TypedDict):
    feature_blog_enabled: bool
    feature_shop_enabled: bool
    feature_chat_enabled: bool
    feature_live_queries_enabled: bool


@dataclass(frozen=True)
class FeatureFlagDefinition:
    env_var: str
    default: bool


_FEATURE_FLAG_DEFINITIONS: Dict[FeatureFlagKey, FeatureFlagDefinition] = {
    "feature_blog_enabled": FeatureFlagDefinition("FEATURE_BLOG_ENABLED", True),
    "feature_shop_enabled": FeatureFlagDefinition("FEATURE_SHOP_ENABLED", True),
    "feature_chat_enabled": FeatureFlagDefinition("FEATURE_CHAT_ENABLED", True),
    "feature_live_queries_enabled": FeatureFlagDefinition("FEATURE_LIVE_QUERIES_ENABLED", True),
}


def _normalize_bool(value: str | None, default: bool = True) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


@lru_cache(maxsize=None)
def get_feature_flags() -> FeatureFlagValues:
    """Return the cached feature flag state sourced from the environment."""
    values: Dict[FeatureFlagKey, bool] = {}
    for key, definition in _FEATURE_FLAG_DEFINITIONS.items():
        values[key] = _normalize_bool(os.getenv(definition.env_var), default=definition.default)
    return cast(FeatureFlagValues, values)


def is_feature_enabled(flag: FeatureFlagKey) -> bool:
    return get_feature_flags()[flag]


def blog_feature_enabled() -> bool:
    return is_feature_enabled("feature_blog_enabled")


def shop_feature_enabled() -> bool:
    return is_feature_enabled("feature_shop_enabled")


def chat_feature_enabled() -> bool:
    """Toggle for the chat widget and the admin chat console."""
    return is_feature_enabled("feature_chat_enabled")


def live_queries_enabled() -> bool:
    return is_feature_enabled("feature_live_queries_enabled")


def refresh_feature_flag_cache() -> None:
    """Invalidate cached feature flag values (useful for tests)."""
    get_feature_flags.cache_clear()
