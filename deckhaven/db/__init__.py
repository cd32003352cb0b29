from deckhaven.db.database import get_session, init_db
from deckhaven.db.operations import (
    create_deck,
    deck_card_to_model,
    deck_to_model,
    deck_total_cards,
    delete_deck,
    delete_deck_card,
    get_deck,
    get_deck_card,
    get_deck_card_by_id,
    get_decks_for_user,
    get_quantity,
    update_deck,
    upsert_quantity,
)

__all__ = [
    "create_deck",
    "deck_card_to_model",
    "deck_to_model",
    "deck_total_cards",
    "delete_deck",
    "delete_deck_card",
    "get_deck",
    "get_deck_card",
    "get_deck_card_by_id",
    "get_decks_for_user",
    "get_quantity",
    "get_session",
    "init_db",
    "update_deck",
    "upsert_quantity",
]
