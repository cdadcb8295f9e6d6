import re
import uuid
from datetime import datetime, UTC
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import Column, Numeric, String, DateTime

from app.db.db import Base

BIN_PATTERN = re.compile(r"^\d{6,8}$")
LAST4_PATTERN = re.compile(r"^\d{4}$")


def _utc_now_naive() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def _new_card_id() -> str:
    return str(uuid.uuid4())


# SQLAlchemy ORM Model
class UserCard(Base):
    __tablename__ = "user_cards"

    id = Column(String(36), primary_key=True, default=_new_card_id)
    user_id = Column(String(255), nullable=False, index=True)
    bin = Column(String(8), nullable=False)
    card_product_name = Column(String(255), nullable=False)
    issuing_bank = Column(String(255), nullable=False)
    network = Column(String(32), nullable=False)
    country = Column(String(64), nullable=False)
    points_balance = Column(Numeric(14, 2), nullable=True)
    last4_digits = Column(String(4), nullable=True)
    added_date = Column(DateTime, default=_utc_now_naive, nullable=False)


# Pydantic Models for Request/Response
class UserCardBase(BaseModel):
    bin: str
    card_product_name: str
    issuing_bank: str
    network: str
    country: str
    points_balance: Optional[float] = Field(None, ge=0)
    last4_digits: Optional[str] = None

    @field_validator("bin")
    @classmethod
    def bin_format(cls, v):
        v = (v or "").strip()
        if not BIN_PATTERN.match(v):
            raise ValueError("BIN must be 6-8 digits")
        return v

    @field_validator("card_product_name", "issuing_bank", "network", "country")
    @classmethod
    def not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("last4_digits")
    @classmethod
    def last4_format(cls, v):
        if v is not None and not LAST4_PATTERN.match(v):
            raise ValueError("last4_digits must be exactly 4 digits")
        return v


class UserCardCreate(UserCardBase):
    """Schema for registering a card"""
    pass


class UserCardUpdate(BaseModel):
    """Schema for updating a registered card"""
    card_product_name: Optional[str] = None
    points_balance: Optional[float] = Field(None, ge=0)
    last4_digits: Optional[str] = None

    @field_validator("card_product_name", mode="before")
    @classmethod
    def not_empty(cls, v):
        # Omit the field to leave it unchanged; null is not a valid name
        if v is None:
            raise ValueError("card_product_name cannot be null")
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("card_product_name cannot be empty")
        return v

    @field_validator("last4_digits")
    @classmethod
    def last4_format(cls, v):
        if v is not None and not LAST4_PATTERN.match(v):
            raise ValueError("last4_digits must be exactly 4 digits")
        return v


class UserCardResponse(UserCardBase):
    """Schema for API responses"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    added_date: datetime
