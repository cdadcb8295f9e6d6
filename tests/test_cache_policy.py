"""
Tests for cache key construction and the freshness policy.
"""

from datetime import datetime, timedelta, timezone

import pytest

from engine.cache import CACHE_TTLS, build_cache_key, is_fresh, ttl_for


class TestBuildCacheKey:

    def test_joins_parts(self):
        key = build_cache_key("card_analysis", "Sapphire Reserve", "Chase", "US")
        assert key == "card_analysis|Sapphire Reserve|Chase|US"

    def test_missing_optional_part_matches_empty(self):
        """An omitted rewards program and an empty one share a cache entry."""
        with_none = build_cache_key("promotions", "Gold", "Amex", "US", None)
        with_empty = build_cache_key("promotions", "Gold", "Amex", "US", "")

        assert with_none == with_empty == "promotions|Gold|Amex|US|"

    def test_strips_whitespace_keeps_case(self):
        assert build_cache_key("promotions", " Gold ", "AMEX") == "promotions|Gold|AMEX"
        assert build_cache_key("promotions", "gold") != build_cache_key("promotions", "Gold")

    def test_parts_order_matters(self):
        assert build_cache_key("card_suggestions", "DBS", "SG") != build_cache_key("card_suggestions", "SG", "DBS")

    def test_blank_namespace(self):
        with pytest.raises(ValueError):
            build_cache_key("  ", "Gold")


class TestTtlFor:

    def test_known_namespaces(self):
        assert ttl_for("promotions") == timedelta(days=1)
        assert ttl_for("card_analysis") == timedelta(days=30)

    def test_override(self):
        assert ttl_for("promotions", {"promotions": timedelta(hours=2)}) == timedelta(hours=2)
        assert ttl_for("promotions", {"promotions": None}) is None

    def test_unknown_namespace(self):
        with pytest.raises(ValueError) as exc:
            ttl_for("weather")
        assert "Unknown cache namespace" in str(exc.value)

    def test_all_ttls_positive(self):
        assert all(ttl > timedelta(0) for ttl in CACHE_TTLS.values())


class TestIsFresh:

    def test_within_ttl(self):
        stored = datetime(2025, 1, 1, 12, 0)
        assert is_fresh(stored, datetime(2025, 1, 2, 11, 59), timedelta(days=1))

    def test_exactly_at_ttl_is_stale(self):
        stored = datetime(2025, 1, 1, 12, 0)
        assert not is_fresh(stored, datetime(2025, 1, 2, 12, 0), timedelta(days=1))

    def test_no_ttl_never_expires(self):
        stored = datetime(2000, 1, 1)
        assert is_fresh(stored, datetime(2025, 1, 1), None)

    def test_naive_treated_as_utc(self):
        stored = datetime(2025, 1, 1, 12, 0)
        now = datetime(2025, 1, 1, 20, 0, tzinfo=timezone(timedelta(hours=8)))  # 12:00 UTC
        assert is_fresh(stored, now, timedelta(minutes=1))
        assert not is_fresh(stored, now + timedelta(minutes=1), timedelta(minutes=1))
