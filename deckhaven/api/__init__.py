from deckhaven.api.cards import router as cards_router
from deckhaven.api.decks import router as decks_router
from deckhaven.api.formats import router as formats_router
from deckhaven.api.health import router as health_router

__all__ = [
    "cards_router",
    "decks_router",
    "formats_router",
    "health_router",
]
