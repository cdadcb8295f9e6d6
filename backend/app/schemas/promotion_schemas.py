"""
Promotion lookup schemas.

The provider payload is validated before it is cached, and again when it is
read back, so a corrupt cache row is never served.
"""

from typing import Optional, List

from pydantic import BaseModel, Field, field_validator


class Promotion(BaseModel):
    promotion_title: str
    description: str
    partner_involved: Optional[str] = None
    offer_type: str
    valid_until: Optional[str] = None
    source_url: Optional[str] = None


class PromotionSpotlight(BaseModel):
    """Promotions currently running for one card"""
    card_context: str
    promotions: List[Promotion] = Field(default_factory=list)


class PromotionRequest(BaseModel):
    card: str = Field(..., description="Card product name")
    bank_name: str = Field(..., description="Issuing bank")
    country: str
    rewards_program: Optional[str] = Field(None, description="Loyalty program, part of the cache key")
    force_refresh: bool = Field(False, description="Drop the cached entry and ask the provider again")

    @field_validator("card", "bank_name", "country")
    @classmethod
    def not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()


class PromotionResponse(BaseModel):
    success: bool = True
    data: PromotionSpotlight
    source: str  # "cache" | "provider"
