"""Notification routes.

- Ingest offers for a card type (POST /api/v1/notifications/ingest)
- Refresh offers for every held card type (POST /api/v1/notifications/refresh)
- List the caller's notifications (GET /api/v1/notifications)
- Mark notifications as read (PATCH /api/v1/notifications)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies.security import require_user_id_header
from app.dependencies.services import get_cache_service, get_notification_service, get_offers_fetcher
from app.models.notification import (
    MarkAsReadRequest,
    MarkAsReadResponse,
    NotificationListResponse,
    NotificationRefreshResponse,
    OfferIngestRequest,
)
from app.services.errors import ServiceError
from app.services.cache_service import CacheService
from app.services.notification_service import NotificationService, OffersFetcher
from engine.models import CardType, Offer

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/notifications",
    tags=["notifications"]
)


@router.post("/ingest", response_model=NotificationRefreshResponse)
def ingest_offers(
    payload: OfferIngestRequest,
    service: NotificationService = Depends(get_notification_service),
):
    card_type = CardType(bank=payload.card_issuer, card_name=payload.card_name, country=payload.country)
    offers = [
        Offer(
            title=offer.title,
            description=offer.description,
            type=offer.type.value,
            start_date=offer.start_date,
            end_date=offer.end_date,
            source_url=offer.source_url,
        )
        for offer in payload.offers
    ]
    result = service.ingest_offers(card_type, offers)
    return NotificationRefreshResponse(**result.as_dict())


@router.post("/refresh", response_model=NotificationRefreshResponse)
def refresh_notifications(
    service: NotificationService = Depends(get_notification_service),
    cache: CacheService = Depends(get_cache_service),
    fetch_offers: Optional[OffersFetcher] = Depends(get_offers_fetcher),
):
    """Scheduled job: fetch offers for all held card types, then purge stale cache rows."""
    try:
        result = service.refresh_all(fetch_offers)
    except ServiceError as exc:
        logger.warning("Notification refresh failed: %s", exc)
        raise HTTPException(status_code=exc.status_code, detail=exc.to_payload())

    purged = cache.purge_expired()
    return NotificationRefreshResponse(**result.as_dict(), cache_entries_purged=purged)


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread_only: bool = False,
    user_id: str = Depends(require_user_id_header),
    service: NotificationService = Depends(get_notification_service),
):
    notifications, unread_count = service.list_for_user(
        user_id, unread_only=unread_only, limit=limit, offset=offset
    )
    return NotificationListResponse(notifications=notifications, unread_count=unread_count)


@router.patch("", response_model=MarkAsReadResponse)
def mark_as_read(
    payload: MarkAsReadRequest,
    user_id: str = Depends(require_user_id_header),
    service: NotificationService = Depends(get_notification_service),
):
    try:
        updated = service.mark_read(
            user_id,
            notification_ids=payload.notification_ids,
            mark_all=payload.mark_all_as_read,
        )
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.to_payload())
    return MarkAsReadResponse(updated=updated)
