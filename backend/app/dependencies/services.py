from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from app.config import CacheConfig
from app.dependencies.db import get_db
from app.services.cache_service import CacheService
from app.services.notification_service import NotificationService, OffersFetcher
from app.services.promotion_service import PromotionService, PromotionsFetcher
from app.services.similarity_service import SimilarityService
from app.services.user_card_service import UserCardService


def get_cache_service(db: Session = Depends(get_db)) -> CacheService:
    return CacheService(db, ttl_overrides=CacheConfig.ttl_overrides())


def get_promotions_fetcher() -> Optional[PromotionsFetcher]:
    # No provider is wired in by default; deployments override this dependency.
    return None


def get_offers_fetcher() -> Optional[OffersFetcher]:
    # The scheduled refresh stays unavailable until a deployment overrides this.
    return None


def get_promotion_service(
    cache: CacheService = Depends(get_cache_service),
    fetcher: Optional[PromotionsFetcher] = Depends(get_promotions_fetcher),
) -> PromotionService:
    return PromotionService(cache, fetcher)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_user_card_service(db: Session = Depends(get_db)) -> UserCardService:
    return UserCardService(db)


def get_similarity_service() -> SimilarityService:
    return SimilarityService()
