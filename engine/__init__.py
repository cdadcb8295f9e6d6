"""
Title matching and offer de-duplication engine.

Pure functions shared by the CLI and the backend services.
"""

from .similarity import is_title_similar, levenshtein_distance, normalize_title
from .notifications import find_similar_notification, unique_card_types, dedupe_titles
from .cache import build_cache_key, is_fresh, ttl_for

__all__ = [
    "is_title_similar",
    "levenshtein_distance",
    "normalize_title",
    "find_similar_notification",
    "unique_card_types",
    "dedupe_titles",
    "build_cache_key",
    "is_fresh",
    "ttl_for",
]
