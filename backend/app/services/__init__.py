from .errors import ServiceError
from .cache_service import CacheService
from .notification_service import NotificationService
from .promotion_service import PromotionService
from .similarity_service import SimilarityService
from .user_card_service import UserCardService

__all__ = [
    "ServiceError",
    "CacheService",
    "NotificationService",
    "PromotionService",
    "SimilarityService",
    "UserCardService",
]
