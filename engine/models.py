"""
Data models for offer matching and notification de-duplication.
All models are dataclasses for simplicity and type safety.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class CardType:
    """
    A card product as registered by users.

    Fields:
    - bank: issuing bank name as returned by the BIN lookup
    - card_name: card product name (e.g., "Sapphire Reserve")
    - country: issuing country

    Two rows with the same bank and card_name are the same card type,
    regardless of country.
    """
    bank: str
    card_name: str
    country: str = ""

    @property
    def identity(self) -> tuple:
        return (self.bank, self.card_name)


@dataclass
class Offer:
    """
    A promotional offer for a card type, as extracted from an external source.

    Fields:
    - title: offer headline, used for duplicate detection
    - description: free-text details
    - type: notification type ('new_offer' | 'transfer_bonus' | 'expiring_offers' | ...)
    - start_date: date the offer starts
    - end_date: optional end date
    - source_url: optional link to the offer terms
    """
    title: str
    description: str
    type: str
    start_date: date
    end_date: Optional[date] = None
    source_url: Optional[str] = None


@dataclass
class ExistingNotification:
    """A notification already stored for a card type."""
    id: int
    title: str
    type: str
    created_at: datetime


@dataclass
class NotificationRefreshResult:
    """
    Counters describing one notification refresh run.

    Fields:
    - processed: card types processed
    - new_notifications: notifications created
    - duplicates: offers matched to an existing notification
    - errors: offers or card types that failed
    - user_notifications_created: user links created
    - messages: one line per failure, for the caller
    """
    processed: int = 0
    new_notifications: int = 0
    duplicates: int = 0
    errors: int = 0
    user_notifications_created: int = 0
    messages: list[str] = field(default_factory=list)

    def merge(self, other: "NotificationRefreshResult") -> None:
        self.processed += other.processed
        self.new_notifications += other.new_notifications
        self.duplicates += other.duplicates
        self.errors += other.errors
        self.user_notifications_created += other.user_notifications_created
        self.messages.extend(other.messages)

    def as_dict(self) -> dict:
        return {
            "processed": self.processed,
            "new_notifications": self.new_notifications,
            "duplicates": self.duplicates,
            "errors": self.errors,
            "user_notifications_created": self.user_notifications_created,
            "messages": list(self.messages),
        }
