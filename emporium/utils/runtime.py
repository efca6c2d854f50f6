"""Runtime environment helpers for guarding development-only flags."""

import os
from urllib.parse import urlparse
from typing import Optional, Set

_LOCAL_HOSTS: Set[str] = {"localhost", "127.0.0.1", "::1"}

DEV_USER_EMAIL = "dev@localhost"


def _extract_hostname(url_value: str) -> Optional[str]:
    """Return hostname from a URL or bare host string."""
    if not url_value or not url_value.strip():
        return None
    url_value = url_value.strip()
    candidate = url_value if "://" in url_value else f"http://{url_value}"
    return urlparse(candidate).hostname


def _allowed_dev_hosts() -> Set[str]:
    extra = os.getenv("DEV_MODE_ALLOWED_HOSTS", "")
    allowed = set(_LOCAL_HOSTS)
    if extra:
        allowed.update({host.strip().lower() for host in extra.split(",") if host.strip()})
    return allowed


def dev_mode_requested() -> bool:
    """Return True when DEV_MODE env var is set to a truthy value."""
    return os.getenv("DEV_MODE", "false").lower() == "true"


def dev_mode_active() -> bool:
    """Return True if dev mode is enabled and allowed; raise if misconfigured.

    DEV_MODE only works when APP_BASE_URL points at a local host (or one listed
    in DEV_MODE_ALLOWED_HOSTS), so a deployed shop never impersonates the dev
    user. Without APP_BASE_URL an explicit ALLOW_DEV_MODE=true is required.
    """
    if not dev_mode_requested():
        return False

    hostname = _extract_hostname(os.getenv("APP_BASE_URL", ""))
    allowed_hosts = _allowed_dev_hosts()

    if hostname:
        if hostname.lower() not in allowed_hosts:
            raise RuntimeError(
                "DEV_MODE=true is not permitted when APP_BASE_URL points to "
                f"'{hostname}'. Allowed hosts: {sorted(allowed_hosts)}"
            )
    elif os.getenv("ALLOW_DEV_MODE", "false").lower() != "true" and not os.getenv("PYTEST_CURRENT_TEST"):
        raise RuntimeError(
            "DEV_MODE=true requires APP_BASE_URL to be set to a localhost URL "
            "or ALLOW_DEV_MODE=true for non-local execution."
        )

    return True


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def chat_cookie_max_age() -> int:
    """Lifetime of the chat widget cookie in seconds (3 days by default)."""
    return _int_env("CHAT_COOKIE_MAX_AGE_SECONDS", 3 * 24 * 60 * 60)


def live_ping_interval() -> float:
    """Seconds of silence before a live stream emits a keep-alive ping."""
    return float(_int_env("LIVE_PING_INTERVAL_SECONDS", 15))


def admin_emails() -> Set[str]:
    raw = os.getenv("ADMIN_EMAILS", "")
    return {e.strip().lower() for e in raw.split(",") if e.strip()}
