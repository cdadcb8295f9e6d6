"""
Cache key construction and freshness policy for AI-generated card data.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


KEY_SEPARATOR = "|"

# Default time-to-live per cache namespace
CACHE_TTLS = {
    "card_analysis": timedelta(days=30),
    "card_suggestions": timedelta(days=30),
    "card_comparison": timedelta(days=7),
    "partner_programs": timedelta(days=7),
    "promotions": timedelta(days=1),
}


def build_cache_key(namespace: str, *parts: Optional[str]) -> str:
    """
    Build the lookup key for a cached response.

    None parts become empty strings so that an omitted optional field (e.g.
    rewards program) and an empty one share a cache entry. Surrounding
    whitespace is stripped; case is preserved.

    Args:
        namespace: Cache namespace (e.g., "promotions")
        *parts: Key components (card name, bank, country, ...)

    Returns:
        Key string (e.g., "promotions|Gold Card|Amex|US|")

    Raises:
        ValueError: If namespace is blank
    """
    if not namespace or not namespace.strip():
        raise ValueError("Cache namespace cannot be empty")

    normalized = [(part or "").strip() for part in parts]
    return KEY_SEPARATOR.join([namespace.strip(), *normalized])


def ttl_for(namespace: str, overrides: Optional[dict] = None) -> Optional[timedelta]:
    """
    Look up the time-to-live for a namespace.

    Args:
        namespace: Cache namespace
        overrides: Optional mapping of namespace -> timedelta (or None for no expiry)

    Returns:
        timedelta, or None when entries never expire

    Raises:
        ValueError: If namespace is unknown
    """
    if overrides and namespace in overrides:
        return overrides[namespace]
    if namespace not in CACHE_TTLS:
        raise ValueError(
            f"Unknown cache namespace: {namespace}. Must be one of: {', '.join(sorted(CACHE_TTLS))}."
        )
    return CACHE_TTLS[namespace]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_fresh(stored_at: datetime, now: datetime, ttl: Optional[timedelta]) -> bool:
    """
    Decide whether a cached entry may still be served.

    Naive datetimes are treated as UTC.

    Example:
        >>> stored = datetime(2025, 1, 1, 12, 0)
        >>> is_fresh(stored, datetime(2025, 1, 2, 11, 0), timedelta(days=1))
        True
        >>> is_fresh(stored, datetime(2025, 1, 2, 12, 0), timedelta(days=1))
        False
    """
    if ttl is None:
        return True
    return _as_utc(now) - _as_utc(stored_at) < ttl
