from engine.notifications import dedupe_titles
from engine.similarity import is_title_similar, levenshtein_distance, normalize_title


class SimilarityService:
    """Exposes the title matcher to the API layer."""

    def compare(self, title_a: str, title_b: str) -> dict:
        normalized_a = normalize_title(title_a)
        normalized_b = normalize_title(title_b)
        return {
            "title_a": title_a,
            "title_b": title_b,
            "normalized_a": normalized_a,
            "normalized_b": normalized_b,
            "is_similar": is_title_similar(title_a, title_b),
            "edit_distance": levenshtein_distance(normalized_a, normalized_b),
        }

    def dedupe(self, titles: list[str]) -> dict:
        kept = dedupe_titles(titles)
        return {"titles": kept, "removed": len(titles) - len(kept)}
