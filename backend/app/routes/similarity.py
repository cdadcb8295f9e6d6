from fastapi import APIRouter, Depends

from app.dependencies.services import get_similarity_service
from app.schemas.similarity_schemas import DedupeRequest, DedupeResponse, SimilarityRequest, SimilarityResponse
from app.services.similarity_service import SimilarityService

router = APIRouter(
    prefix="/api/v1/similarity",
    tags=["similarity"]
)


@router.post("", response_model=SimilarityResponse)
def compare_titles(
    payload: SimilarityRequest,
    service: SimilarityService = Depends(get_similarity_service),
):
    return service.compare(payload.title_a, payload.title_b)


@router.post("/dedupe", response_model=DedupeResponse)
def dedupe_titles(
    payload: DedupeRequest,
    service: SimilarityService = Depends(get_similarity_service),
):
    return service.dedupe(payload.titles)
