"""
Application settings with environment variable overrides.

Invalid values are logged and replaced by the defaults so that a typo in the
environment never prevents the API from starting.
"""

import logging
import os
from datetime import timedelta

from engine.cache import CACHE_TTLS
from engine.notifications import DEFAULT_DEDUPE_WINDOW

logger = logging.getLogger(__name__)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid %s value %r; falling back to default %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s must be positive, got %s; falling back to default %s", name, value, default)
        return default
    return value


class AppConfig:
    """Centralized API settings"""
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///../app.db")

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
        ).split(",")
        if origin.strip()
    ]

    NOTIFICATION_DEDUPE_WINDOW = _int_env("NOTIFICATION_DEDUPE_WINDOW", DEFAULT_DEDUPE_WINDOW)


class CacheConfig:
    """
    Per-namespace cache lifetimes.

    CACHE_TTL_<NAMESPACE>_HOURS overrides the default for one namespace,
    e.g. CACHE_TTL_PROMOTIONS_HOURS=6.
    """

    @staticmethod
    def ttl_overrides() -> dict:
        overrides = {}
        for namespace, default in CACHE_TTLS.items():
            default_hours = int(default.total_seconds() // 3600)
            hours = _int_env(f"CACHE_TTL_{namespace.upper()}_HOURS", default_hours)
            if hours != default_hours:
                overrides[namespace] = timedelta(hours=hours)
        return overrides
