"""
Notification ingestion and per-user fan-out.

New offers for a card type are compared with the most recent notifications of
the same issuer, card and type; a similar title reuses the existing
notification instead of creating a duplicate. Every holder of the card type is
then linked to the notification once.
"""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import AppConfig
from app.models.notification import CardNotification, NotificationType, UserNotification
from app.models.user_card import UserCard
from app.services.errors import ServiceError
from engine.models import CardType, ExistingNotification, NotificationRefreshResult, Offer
from engine.notifications import find_similar_notification, unique_card_types

logger = logging.getLogger(__name__)

OffersFetcher = Callable[[CardType], Iterable[Offer]]


class NotificationService:
    def __init__(self, db: Session, dedupe_window: Optional[int] = None):
        self.db = db
        self.dedupe_window = dedupe_window or AppConfig.NOTIFICATION_DEDUPE_WINDOW

    def _recent_notifications(self, card_type: CardType, notification_type: NotificationType) -> List[ExistingNotification]:
        rows = (
            self.db.query(CardNotification)
            .filter(
                CardNotification.card_issuer == card_type.bank,
                CardNotification.card_name == card_type.card_name,
                CardNotification.notification_type == notification_type,
            )
            .order_by(CardNotification.created_at.desc(), CardNotification.id.desc())
            .limit(self.dedupe_window)
            .all()
        )
        return [
            ExistingNotification(
                id=row.id,
                title=row.title,
                type=row.notification_type.value,
                created_at=row.created_at,
            )
            for row in rows
        ]

    def _holders(self, card_type: CardType) -> List[str]:
        rows = (
            self.db.query(UserCard.user_id)
            .filter(
                UserCard.issuing_bank == card_type.bank,
                UserCard.card_product_name == card_type.card_name,
            )
            .distinct()
            .all()
        )
        return [row.user_id for row in rows]

    def _link_holders(self, notification_id: int, user_ids: List[str]) -> int:
        already_linked = {
            row.user_id
            for row in self.db.query(UserNotification.user_id)
            .filter(UserNotification.notification_id == notification_id)
            .all()
        }
        created = 0
        for user_id in user_ids:
            if user_id in already_linked:
                continue
            self.db.add(UserNotification(user_id=user_id, notification_id=notification_id))
            created += 1
        return created

    def ingest_offers(self, card_type: CardType, offers: Iterable[Offer]) -> NotificationRefreshResult:
        """
        Store the offers of one card type, skipping ones already notified.

        Each offer is committed on its own; a failing offer is logged, counted
        in `errors` and does not stop the others.
        """
        result = NotificationRefreshResult(processed=1)
        holders = self._holders(card_type)

        for offer in offers:
            try:
                notification_type = NotificationType(offer.type)
                match = find_similar_notification(
                    self._recent_notifications(card_type, notification_type),
                    offer.title,
                    window=self.dedupe_window,
                )

                if match is not None:
                    notification_id = match.id
                    result.duplicates += 1
                    logger.debug("Offer %r matches notification %s", offer.title, match.id)
                else:
                    notification = CardNotification(
                        card_issuer=card_type.bank,
                        card_name=card_type.card_name,
                        notification_type=notification_type,
                        title=offer.title,
                        description=offer.description,
                        start_date=offer.start_date,
                        end_date=offer.end_date,
                        source_url=offer.source_url,
                    )
                    self.db.add(notification)
                    self.db.flush()
                    notification_id = notification.id
                    result.new_notifications += 1

                result.user_notifications_created += self._link_holders(notification_id, holders)
                self.db.commit()
            except (ValueError, SQLAlchemyError) as exc:
                self.db.rollback()
                result.errors += 1
                result.messages.append(f"{card_type.bank} {card_type.card_name}: {exc}")
                logger.exception("Error storing offer %r for %s %s", offer.title, card_type.bank, card_type.card_name)

        return result

    def refresh_all(self, fetch_offers: Optional[OffersFetcher]) -> NotificationRefreshResult:
        """
        Fetch and ingest offers for every card type users hold.

        Args:
            fetch_offers: External offers provider, called once per card type

        Raises:
            ServiceError: 503 when no offers provider is configured
        """
        if fetch_offers is None:
            raise ServiceError(
                status_code=503,
                code="PROVIDER_UNAVAILABLE",
                message="Offers provider is not configured.",
                details={},
            )

        rows = self.db.query(UserCard).order_by(UserCard.issuing_bank, UserCard.card_product_name).all()
        card_types = unique_card_types(
            CardType(bank=row.issuing_bank, card_name=row.card_product_name, country=row.country)
            for row in rows
        )
        logger.info("Processing %s unique card types for notifications", len(card_types))

        total = NotificationRefreshResult()
        for card_type in card_types:
            try:
                offers = list(fetch_offers(card_type))
            except Exception as exc:
                logger.exception("Offers provider failed for %s %s", card_type.bank, card_type.card_name)
                total.processed += 1
                total.errors += 1
                total.messages.append(f"{card_type.bank} {card_type.card_name}: {exc}")
                continue

            if not offers:
                total.processed += 1
                continue

            total.merge(self.ingest_offers(card_type, offers))

        logger.info("Notification refresh finished: %s", total.as_dict())
        return total

    def list_for_user(
        self,
        user_id: str,
        unread_only: bool = False,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[dict], int]:
        """Return the user's notifications (newest first) and their unread count."""
        query = (
            self.db.query(UserNotification, CardNotification)
            .join(CardNotification, UserNotification.notification_id == CardNotification.id)
            .filter(UserNotification.user_id == user_id)
        )
        if unread_only:
            query = query.filter(UserNotification.read.is_(False))

        rows = (
            query.order_by(UserNotification.created_at.desc(), UserNotification.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

        unread_count = (
            self.db.query(UserNotification)
            .filter(UserNotification.user_id == user_id, UserNotification.read.is_(False))
            .count()
        )

        notifications = [
            {
                "id": link.id,
                "notification_id": notification.id,
                "card_issuer": notification.card_issuer,
                "card_name": notification.card_name,
                "notification_type": notification.notification_type,
                "title": notification.title,
                "description": notification.description,
                "start_date": notification.start_date,
                "end_date": notification.end_date,
                "source_url": notification.source_url,
                "read": link.read,
                "created_at": link.created_at,
            }
            for link, notification in rows
        ]
        return notifications, unread_count

    def mark_read(
        self,
        user_id: str,
        notification_ids: Optional[List[int]] = None,
        mark_all: bool = False,
    ) -> int:
        """
        Mark the user's notifications as read.

        Args:
            user_id: Owner of the notifications
            notification_ids: user notification ids to mark
            mark_all: mark every unread notification of the user

        Returns:
            Number of notifications updated

        Raises:
            ServiceError: 400 when neither ids nor mark_all are given
        """
        if not mark_all and not notification_ids:
            raise ServiceError(
                status_code=400,
                code="VALIDATION_ERROR",
                message="Provide notification_ids or set mark_all_as_read.",
                details={},
            )

        query = self.db.query(UserNotification).filter(
            UserNotification.user_id == user_id,
            UserNotification.read.is_(False),
        )
        if not mark_all:
            query = query.filter(UserNotification.id.in_(notification_ids))

        updated = query.update({UserNotification.read: True}, synchronize_session=False)
        self.db.commit()
        return updated
