"""
Offer de-duplication helpers used when refreshing card notifications.
Deterministic and unit-testable; persistence lives in the backend services.
"""

from typing import Any, Callable, Iterable, List, Optional

from engine.models import CardType, ExistingNotification
from engine.similarity import is_title_similar


# Only the most recent notifications of a card type are compared against new offers
DEFAULT_DEDUPE_WINDOW = 5


def find_similar_notification(
    existing: Iterable[ExistingNotification],
    title: str,
    window: int = DEFAULT_DEDUPE_WINDOW,
) -> Optional[ExistingNotification]:
    """
    Find a recent notification whose title matches an incoming offer title.

    Args:
        existing: Notifications already stored for the same issuer, card and type
        title: Title of the incoming offer
        window: How many of the most recent notifications to compare against

    Returns:
        The first (newest) similar notification, or None

    Raises:
        ValueError: If window is not positive
    """
    if window <= 0:
        raise ValueError(f"Invalid dedupe window: {window}. Must be > 0.")

    recent = sorted(existing, key=lambda n: n.created_at, reverse=True)[:window]
    for notification in recent:
        if is_title_similar(notification.title, title):
            return notification
    return None


def unique_card_types(cards: Iterable[CardType]) -> List[CardType]:
    """
    Collapse user card rows to distinct card types.

    Cards are keyed on (bank, card_name); the first row seen for a key wins.
    Result is ordered by bank, then card name.

    Example:
        >>> unique_card_types([
        ...     CardType("Chase", "Sapphire", "US"),
        ...     CardType("Amex", "Gold", "US"),
        ...     CardType("Chase", "Sapphire", "CA"),
        ... ])
        [CardType(bank='Amex', ...), CardType(bank='Chase', card_name='Sapphire', country='US')]
    """
    seen = {}
    for card in cards:
        seen.setdefault(card.identity, card)
    return sorted(seen.values(), key=lambda c: (c.bank, c.card_name))


def dedupe_titles(items: Iterable, key: Optional[Callable[[Any], str]] = None) -> list:
    """
    Drop items whose title is similar to one already kept, preserving order.

    Args:
        items: Titles, or objects carrying a title
        key: Optional function extracting the title from an item
    """
    if key is None:
        key = str

    kept = []
    kept_titles: List[str] = []
    for item in items:
        title = key(item)
        if not any(is_title_similar(k, title) for k in kept_titles):
            kept.append(item)
            kept_titles.append(title)
    return kept
