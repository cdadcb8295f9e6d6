from datetime import datetime, UTC

from sqlalchemy import Column, Integer, String, Text, DateTime, UniqueConstraint

from app.db.db import Base


def _utc_now_naive() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class CacheEntry(Base):
    """Cached AI-generated payload, keyed by namespace + cache key."""
    __tablename__ = "cache_entries"

    id = Column(Integer, primary_key=True, index=True)
    namespace = Column(String(64), nullable=False, index=True)
    cache_key = Column(String(1024), nullable=False)
    payload = Column(Text, nullable=False)  # JSON string
    stored_at = Column(DateTime, default=_utc_now_naive, nullable=False)

    __table_args__ = (
        UniqueConstraint("namespace", "cache_key", name="uq_cache_namespace_key"),
    )
