"""
Title similarity matching.
Decides whether two free-text labels (card names, offer titles) refer to
the same real-world entity. Pure functions, safe to call from any thread.
"""

from typing import List, Optional


# Tuning constants
WORD_OVERLAP_THRESHOLD = 0.7
EDIT_DISTANCE_THRESHOLD = 0.3
MIN_SIGNIFICANT_WORD_LENGTH = 3  # words of this length or shorter are not counted as matches
MIN_WORDS_FOR_OVERLAP = 3

DEFAULT_SIMILARITY_CONFIG = {
    "word_overlap_threshold": WORD_OVERLAP_THRESHOLD,
    "edit_distance_threshold": EDIT_DISTANCE_THRESHOLD,
    "min_significant_word_length": MIN_SIGNIFICANT_WORD_LENGTH,
    "min_words_for_overlap": MIN_WORDS_FOR_OVERLAP,
}


def normalize_title(title: str) -> str:
    """
    Normalize a title for comparison.

    Example:
        >>> normalize_title("  Chase Sapphire Reserve ")
        "chase sapphire reserve"
    """
    return title.lower().strip()


def levenshtein_distance(str1: str, str2: str) -> int:
    """
    Calculate the Levenshtein distance between two strings.

    This is the minimum number of single-character insertions, deletions or
    substitutions required to turn one string into the other.

    Args:
        str1: First string
        str2: Second string

    Returns:
        Edit distance (int, >= 0)

    Example:
        >>> levenshtein_distance("kitten", "sitting")
        3
    """
    m = len(str1)
    n = len(str2)

    # (m+1) x (n+1) table, first row and column hold the distance to ""
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if str1[i - 1] == str2[j - 1]:
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = 1 + min(
                    dp[i - 1][j],      # deletion
                    dp[i][j - 1],      # insertion
                    dp[i - 1][j - 1],  # substitution
                )

    return dp[m][n]


def _count_matching_words(words1: List[str], words2: List[str], min_length: int) -> int:
    lookup = set(words2)
    return sum(1 for word in words1 if len(word) > min_length and word in lookup)


def is_title_similar(title1: str, title2: str, config: Optional[dict] = None) -> bool:
    """
    Check whether two titles are similar.

    Heuristics are tried in order and the first one that applies decides:
    1. Exact match after normalization (lowercase, trimmed)
    2. One normalized title contains the other
    3. Word overlap, when both titles have at least 3 words: words longer than
       3 characters from title1 found anywhere in title2, divided by the
       smaller word count, must exceed 0.7
    4. Otherwise the edit distance divided by the longer title length must be
       below 0.3

    Args:
        title1: First title to compare
        title2: Second title to compare
        config: Optional config dict (uses DEFAULT_SIMILARITY_CONFIG if not provided)

    Returns:
        True if the titles are considered the same entity

    Example:
        >>> is_title_similar("Platinum Card from American Express",
        ...                  "American Express Platinum Card")
        True
        >>> is_title_similar("Visa", "Mastercard")
        False
    """
    if config is None:
        config = DEFAULT_SIMILARITY_CONFIG

    overlap_threshold = config.get("word_overlap_threshold", WORD_OVERLAP_THRESHOLD)
    distance_threshold = config.get("edit_distance_threshold", EDIT_DISTANCE_THRESHOLD)
    min_word_length = config.get("min_significant_word_length", MIN_SIGNIFICANT_WORD_LENGTH)
    min_words = config.get("min_words_for_overlap", MIN_WORDS_FOR_OVERLAP)

    t1 = normalize_title(title1)
    t2 = normalize_title(title2)

    if t1 == t2:
        return True

    if t1 in t2 or t2 in t1:
        return True

    words1 = t1.split()
    words2 = t2.split()

    if len(words1) >= min_words and len(words2) >= min_words:
        matching = _count_matching_words(words1, words2, min_word_length)
        return matching / min(len(words1), len(words2)) > overlap_threshold

    longest = max(len(t1), len(t2))
    if longest == 0:
        # Both titles empty
        return True

    return levenshtein_distance(t1, t2) / longest < distance_threshold
