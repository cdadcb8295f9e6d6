from .cache_entry import CacheEntry
from .notification import CardNotification, NotificationType, UserNotification
from .user_card import UserCard, UserCardCreate, UserCardUpdate, UserCardResponse

__all__ = [
    "CacheEntry",
    "CardNotification",
    "NotificationType",
    "UserNotification",
    "UserCard",
    "UserCardCreate",
    "UserCardUpdate",
    "UserCardResponse",
]
