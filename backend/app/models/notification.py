from datetime import datetime, date, UTC
from enum import Enum as PyEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, Enum as SAEnum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.db import Base


class NotificationType(str, PyEnum):
    new_offer = "new_offer"
    transfer_bonus = "transfer_bonus"
    merchant_offer = "merchant_offer"
    seasonal_promotion = "seasonal_promotion"
    lounge_access_removal = "lounge_access_removal"
    rewards_rate_reduction = "rewards_rate_reduction"
    annual_fee_increase = "annual_fee_increase"
    benefits_discontinued = "benefits_discontinued"
    program_changes = "program_changes"
    expiring_offers = "expiring_offers"


def _utc_now_naive() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


# SQLAlchemy ORM Models
class CardNotification(Base):
    """An offer or program change for one card type, shared by all its holders."""
    __tablename__ = "card_notifications"

    id = Column(Integer, primary_key=True, index=True)
    card_issuer = Column(String(255), nullable=False, index=True)
    card_name = Column(String(255), nullable=False, index=True)
    notification_type = Column(SAEnum(NotificationType), nullable=False)
    title = Column(String(512), nullable=False)
    description = Column(Text, nullable=False, default="")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    source_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime, default=_utc_now_naive, nullable=False)

    user_notifications = relationship(
        "UserNotification",
        back_populates="notification",
        cascade="all, delete-orphan",
    )


class UserNotification(Base):
    __tablename__ = "user_notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    notification_id = Column(Integer, ForeignKey("card_notifications.id", ondelete="CASCADE"), nullable=False)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_utc_now_naive, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "notification_id", name="uq_user_notification"),
    )

    notification = relationship("CardNotification", back_populates="user_notifications")


# Pydantic Models for Request/Response
class OfferIn(BaseModel):
    """An offer extracted for a card type (from the offers provider)"""
    type: NotificationType
    title: str
    description: str = ""
    start_date: date
    end_date: Optional[date] = None
    source_url: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Offer title cannot be empty")
        return v.strip()


class OfferIngestRequest(BaseModel):
    card_issuer: str = Field(..., min_length=1)
    card_name: str = Field(..., min_length=1)
    country: str = ""
    offers: list[OfferIn]


class NotificationRefreshResponse(BaseModel):
    success: bool = True
    processed: int
    new_notifications: int
    duplicates: int
    errors: int
    user_notifications_created: int
    messages: list[str] = Field(default_factory=list)
    cache_entries_purged: int = 0


class UserNotificationResponse(BaseModel):
    """Schema for API responses"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    notification_id: int
    card_issuer: str
    card_name: str
    notification_type: NotificationType
    title: str
    description: str
    start_date: date
    end_date: Optional[date] = None
    source_url: Optional[str] = None
    read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    success: bool = True
    notifications: list[UserNotificationResponse]
    unread_count: int


class MarkAsReadRequest(BaseModel):
    notification_ids: Optional[list[int]] = None
    mark_all_as_read: bool = False


class MarkAsReadResponse(BaseModel):
    success: bool = True
    updated: int
