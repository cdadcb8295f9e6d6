from pydantic import BaseModel, Field


class SimilarityRequest(BaseModel):
    title_a: str = Field(..., description="First label (card name or offer title)")
    title_b: str = Field(..., description="Second label")


class SimilarityResponse(BaseModel):
    title_a: str
    title_b: str
    normalized_a: str
    normalized_b: str
    is_similar: bool
    edit_distance: int


class DedupeRequest(BaseModel):
    titles: list[str]


class DedupeResponse(BaseModel):
    titles: list[str]
    removed: int
