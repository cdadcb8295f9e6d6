import logging

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies.services import get_promotion_service
from app.schemas.promotion_schemas import PromotionRequest, PromotionResponse
from app.services.errors import ServiceError
from app.services.promotion_service import PromotionService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/promotions",
    tags=["promotions"]
)


@router.post("", response_model=PromotionResponse)
def get_promotions(
    payload: PromotionRequest,
    service: PromotionService = Depends(get_promotion_service),
):
    try:
        spotlight, source = service.get_promotions(
            card_name=payload.card,
            issuing_bank=payload.bank_name,
            country=payload.country,
            rewards_program=payload.rewards_program,
            force_refresh=payload.force_refresh,
        )
    except ServiceError as exc:
        logger.warning("Promotions lookup failed: %s", exc)
        raise HTTPException(status_code=exc.status_code, detail=exc.to_payload())

    return PromotionResponse(data=spotlight, source=source)
