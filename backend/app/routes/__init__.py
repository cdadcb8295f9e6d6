from .similarity import router as similarity_router
from .promotions import router as promotions_router
from .notifications import router as notifications_router
from .user_cards import router as user_cards_router

__all__ = [
    "similarity_router",
    "promotions_router",
    "notifications_router",
    "user_cards_router",
]
