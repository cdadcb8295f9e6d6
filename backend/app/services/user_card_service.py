import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.user_card import UserCard, UserCardCreate, UserCardUpdate
from app.services.errors import ServiceError

logger = logging.getLogger(__name__)


class UserCardService:
    def __init__(self, db: Session):
        self.db = db

    def _get_owned(self, user_id: str, card_id: str) -> UserCard:
        card = (
            self.db.query(UserCard)
            .filter(UserCard.user_id == user_id, UserCard.id == card_id)
            .first()
        )
        if card is None:
            raise ServiceError(
                status_code=404,
                code="NOT_FOUND",
                message="Card not found for user.",
                details={"card_id": card_id},
            )
        return card

    def list_cards(self, user_id: str) -> List[UserCard]:
        """Retrieve the user's registered cards, oldest first."""
        return (
            self.db.query(UserCard)
            .filter(UserCard.user_id == user_id)
            .order_by(UserCard.added_date, UserCard.id)
            .all()
        )

    def add_card(self, user_id: str, data: UserCardCreate) -> UserCard:
        """Register a card for the user."""
        card = UserCard(user_id=user_id, **data.model_dump())
        try:
            self.db.add(card)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise

        self.db.refresh(card)
        logger.info("User %s registered %s %s", user_id, card.issuing_bank, card.card_product_name)
        return card

    def update_card(self, user_id: str, card_id: str, updates: UserCardUpdate) -> UserCard:
        card = self._get_owned(user_id, card_id)
        for field, value in updates.model_dump(exclude_unset=True).items():
            setattr(card, field, value)
        self.db.commit()
        self.db.refresh(card)
        return card

    def delete_card(self, user_id: str, card_id: str) -> None:
        card = self._get_owned(user_id, card_id)
        self.db.delete(card)
        self.db.commit()
