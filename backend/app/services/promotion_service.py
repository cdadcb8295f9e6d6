"""
Promotion lookup backed by the response cache.

The promotions themselves come from an external AI provider, injected as a
callable so that the service never builds prompts or talks HTTP itself.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import ValidationError

from app.schemas.promotion_schemas import PromotionSpotlight
from app.services.cache_service import CacheService
from app.services.errors import ServiceError
from engine.notifications import dedupe_titles

logger = logging.getLogger(__name__)

NAMESPACE = "promotions"

# (card_name, issuing_bank, country, rewards_program) -> provider payload
PromotionsFetcher = Callable[[str, str, str, Optional[str]], Dict[str, Any]]


def dedupe_promotions(spotlight: PromotionSpotlight) -> PromotionSpotlight:
    """Drop promotions whose title matches an earlier one in the list."""
    kept = dedupe_titles(spotlight.promotions, key=lambda p: p.promotion_title)
    return spotlight.model_copy(update={"promotions": kept})


class PromotionService:
    def __init__(self, cache: CacheService, fetcher: Optional[PromotionsFetcher] = None):
        self.cache = cache
        self.fetcher = fetcher

    def get_promotions(
        self,
        card_name: str,
        issuing_bank: str,
        country: str,
        rewards_program: Optional[str] = None,
        force_refresh: bool = False,
    ) -> Tuple[PromotionSpotlight, str]:
        """
        Return promotions for a card and where they came from ("cache" or "provider").

        Raises:
            ServiceError: 400 on missing fields, 503 when no provider is
                configured, 502 when the provider fails, 500 when the provider
                returns an unexpected payload
        """
        missing = [
            name for name, value in (
                ("card", card_name),
                ("bank_name", issuing_bank),
                ("country", country),
            )
            if not value or not value.strip()
        ]
        if missing:
            raise ServiceError(
                status_code=400,
                code="VALIDATION_ERROR",
                message="Card name, bank name, and country are required.",
                details={"missing": missing},
            )

        key_parts = (card_name, issuing_bank, country, rewards_program)

        if force_refresh and self.cache.invalidate(NAMESPACE, *key_parts):
            logger.info("Dropped cached promotions for %s / %s", card_name, issuing_bank)

        cached = self.cache.get_cached(NAMESPACE, *key_parts)
        if cached is not None:
            try:
                return PromotionSpotlight.model_validate(cached), "cache"
            except ValidationError as exc:
                logger.warning("Cached promotion data failed validation: %s", exc.errors())

        if self.fetcher is None:
            raise ServiceError(
                status_code=503,
                code="PROVIDER_UNAVAILABLE",
                message="Promotions provider is not configured.",
                details={},
            )

        try:
            raw = self.fetcher(card_name, issuing_bank, country, rewards_program)
        except Exception as exc:
            logger.exception("Promotions provider failed for %s / %s", card_name, issuing_bank)
            raise ServiceError(
                status_code=502,
                code="PROVIDER_ERROR",
                message="Failed to get promotions.",
                details={"reason": str(exc)},
            ) from exc

        try:
            spotlight = PromotionSpotlight.model_validate(raw)
        except ValidationError as exc:
            logger.error("Promotions provider response validation error: %s", exc.errors())
            raise ServiceError(
                status_code=500,
                code="INVALID_PROVIDER_RESPONSE",
                message="Invalid response format from AI service.",
                details={"errors": [
                    {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                    for error in exc.errors()
                ]},
            ) from exc

        spotlight = dedupe_promotions(spotlight)
        self.cache.set_cached(NAMESPACE, spotlight.model_dump(), *key_parts)
        return spotlight, "provider"
