"""User card registry routes.

- List registered cards (GET /api/v1/user_cards)
- Register a card (POST /api/v1/user_cards)
- Edit a card (PUT /api/v1/user_cards/{id})
- Delete a card (DELETE /api/v1/user_cards/{id})
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.dependencies.security import require_user_id_header
from app.dependencies.services import get_user_card_service
from app.models.user_card import UserCardCreate, UserCardResponse, UserCardUpdate
from app.services.errors import ServiceError
from app.services.user_card_service import UserCardService

router = APIRouter(
    prefix="/api/v1/user_cards",
    tags=["user_cards"]
)


@router.get("", response_model=list[UserCardResponse])
def list_user_cards(
    user_id: str = Depends(require_user_id_header),
    service: UserCardService = Depends(get_user_card_service),
):
    return service.list_cards(user_id)


@router.post("", response_model=UserCardResponse, status_code=status.HTTP_201_CREATED)
def add_user_card(
    payload: UserCardCreate,
    user_id: str = Depends(require_user_id_header),
    service: UserCardService = Depends(get_user_card_service),
):
    return service.add_card(user_id, payload)


@router.put("/{card_id}", response_model=UserCardResponse)
def update_user_card(
    card_id: str,
    payload: UserCardUpdate,
    user_id: str = Depends(require_user_id_header),
    service: UserCardService = Depends(get_user_card_service),
):
    try:
        return service.update_card(user_id, card_id, payload)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.to_payload())


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user_card(
    card_id: str,
    user_id: str = Depends(require_user_id_header),
    service: UserCardService = Depends(get_user_card_service),
):
    try:
        service.delete_card(user_id, card_id)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.to_payload())
    return Response(status_code=status.HTTP_204_NO_CONTENT)
