"""
Persistent cache for AI-generated card data.

Entries are keyed by namespace plus the request fields that identify the card
(see engine.cache.build_cache_key) and expire per namespace.
"""

import json
import logging
from datetime import datetime, UTC
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.cache_entry import CacheEntry
from engine.cache import build_cache_key, is_fresh, ttl_for

logger = logging.getLogger(__name__)


def _utc_now_naive() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class CacheService:
    def __init__(self, db: Session, ttl_overrides: Optional[dict] = None):
        self.db = db
        self.ttl_overrides = ttl_overrides or {}

    def _find(self, namespace: str, key: str) -> Optional[CacheEntry]:
        return (
            self.db.query(CacheEntry)
            .filter(CacheEntry.namespace == namespace, CacheEntry.cache_key == key)
            .first()
        )

    def get_cached(self, namespace: str, *parts: Optional[str], now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
        """
        Return the cached payload, or None on a miss.

        Stale entries and entries whose JSON cannot be decoded are treated as
        misses; the caller fetches fresh data and overwrites them.
        """
        key = build_cache_key(namespace, *parts)
        entry = self._find(namespace, key)
        if entry is None:
            logger.info("Cache miss for %s", key)
            return None

        ttl = ttl_for(namespace, self.ttl_overrides)
        if not is_fresh(entry.stored_at, now or _utc_now_naive(), ttl):
            logger.info("Cache entry expired for %s (stored at %s)", key, entry.stored_at)
            return None

        try:
            payload = json.loads(entry.payload)
        except ValueError:
            logger.warning("Discarding corrupt cache entry for %s", key)
            return None

        logger.info("Cache hit for %s", key)
        return payload

    def set_cached(self, namespace: str, payload: Dict[str, Any], *parts: Optional[str]) -> None:
        """Insert or replace the cached payload for a key."""
        ttl_for(namespace, self.ttl_overrides)  # rejects unknown namespaces
        key = build_cache_key(namespace, *parts)
        serialized = json.dumps(payload)

        entry = self._find(namespace, key)
        if entry is None:
            entry = CacheEntry(namespace=namespace, cache_key=key, payload=serialized)
            self.db.add(entry)
        else:
            entry.payload = serialized
        entry.stored_at = _utc_now_naive()

        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def invalidate(self, namespace: str, *parts: Optional[str]) -> bool:
        entry = self._find(namespace, build_cache_key(namespace, *parts))
        if entry is None:
            return False
        self.db.delete(entry)
        self.db.commit()
        return True

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """
        Delete every stale entry. Returns the number of rows removed.

        Rows from namespaces that no longer have a lifetime are removed too.
        """
        now = now or _utc_now_naive()
        removed = 0
        for entry in self.db.query(CacheEntry).all():
            try:
                ttl = ttl_for(entry.namespace, self.ttl_overrides)
            except ValueError:
                logger.warning("Removing cache entry %s from unknown namespace %r", entry.cache_key, entry.namespace)
                self.db.delete(entry)
                removed += 1
                continue
            if not is_fresh(entry.stored_at, now, ttl):
                self.db.delete(entry)
                removed += 1
        if removed:
            self.db.commit()
            logger.info("Purged %s expired cache entries", removed)
        return removed
