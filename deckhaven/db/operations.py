"""
Database CRUD operations.

Provides async functions for creating, reading, updating, and deleting
decks and their card entries. These functions never apply copy limits;
callers decide legality first and only then write.
"""

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from deckhaven.models.db import DeckCardDB, DeckDB
from deckhaven.models.deck import Deck, DeckCardEntry

# Columns a deck update may touch
DECK_UPDATE_FIELDS = frozenset(
    {"name", "description", "format", "deck_box_color", "trim_color"}
)

# --- Deck Operations ---


async def create_deck(
    session: AsyncSession,
    user_id: str,
    name: str,
    format_name: str | None = None,
    description: str | None = None,
    game: str = "mtg",
    deck_box_color: str | None = None,
    trim_color: str | None = None,
) -> DeckDB:
    """Create a new, empty deck."""
    deck = DeckDB(
        user_id=user_id,
        name=name,
        format=format_name,
        description=description,
        game=game,
        deck_box_color=deck_box_color,
        trim_color=trim_color,
    )
    session.add(deck)
    await session.flush()
    # Load the (empty) cards relationship so callers can read it without lazy IO
    await session.refresh(deck, attribute_names=["cards"])
    return deck


async def get_deck(session: AsyncSession, deck_id: int) -> DeckDB | None:
    """
    Get a deck with its card entries.

    Returns None if no deck exists with this id.
    """
    result = await session.execute(
        select(DeckDB)
        .where(DeckDB.id == deck_id)
        .options(selectinload(DeckDB.cards))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_decks_for_user(session: AsyncSession, user_id: str) -> list[DeckDB]:
    """Get all decks for a user, newest first."""
    result = await session.execute(
        select(DeckDB)
        .where(DeckDB.user_id == user_id)
        .options(selectinload(DeckDB.cards))
        .order_by(DeckDB.id.desc())
    )
    return list(result.scalars().all())


async def update_deck(session: AsyncSession, deck_id: int, changes: dict[str, Any]) -> DeckDB | None:
    """
    Apply metadata changes to a deck.

    Only DECK_UPDATE_FIELDS are applied. Returns None if not found.
    """
    deck = await get_deck(session, deck_id)
    if deck is None:
        return None

    unknown = set(changes) - DECK_UPDATE_FIELDS
    if unknown:
        msg = f"Cannot update deck fields: {sorted(unknown)}"
        raise ValueError(msg)

    for key, value in changes.items():
        setattr(deck, key, value)

    await session.flush()
    return deck


async def delete_deck(session: AsyncSession, deck_id: int) -> bool:
    """
    Delete a deck and all its card entries.

    Returns True if deleted, False if not found.
    """
    deck = await get_deck(session, deck_id)
    if deck is None:
        return False

    await session.delete(deck)
    await session.flush()
    return True


def deck_to_model(deck: DeckDB) -> Deck:
    """Convert a database deck to a domain model."""
    return Deck(
        id=deck.id,
        user_id=deck.user_id,
        name=deck.name,
        format=deck.format,
        description=deck.description,
        game=deck.game,
        deck_box_color=deck.deck_box_color,
        trim_color=deck.trim_color,
        cards=[deck_card_to_model(card) for card in deck.cards],
    )


# --- Deck Card Operations ---


async def get_deck_card(session: AsyncSession, deck_id: int, card_id: str) -> DeckCardDB | None:
    """
    Get a deck entry by card id.

    The id is matched verbatim; "c:X" and "X" are different entries.
    """
    result = await session.execute(
        select(DeckCardDB).where(
            DeckCardDB.deck_id == deck_id,
            DeckCardDB.card_id == card_id,
        )
    )
    return result.scalar_one_or_none()


async def get_deck_card_by_id(
    session: AsyncSession, deck_id: int, deck_card_id: int
) -> DeckCardDB | None:
    """Get a deck entry by its own id, scoped to a deck."""
    result = await session.execute(
        select(DeckCardDB).where(
            DeckCardDB.id == deck_card_id,
            DeckCardDB.deck_id == deck_id,
        )
    )
    return result.scalar_one_or_none()


async def get_quantity(session: AsyncSession, deck_id: int, card_id: str) -> int:
    """Copies of a card in a deck (0 if absent)."""
    entry = await get_deck_card(session, deck_id, card_id)
    return entry.quantity if entry else 0


async def upsert_quantity(
    session: AsyncSession, deck_id: int, card_id: str, quantity: int
) -> DeckCardDB:
    """
    Insert or update a deck entry with an absolute quantity.

    If an entry with the same (deck, card_id) exists, updates it.
    Otherwise creates a new record.
    """
    if quantity < 1:
        msg = f"Quantity must be positive to store, got {quantity}"
        raise ValueError(msg)

    existing = await get_deck_card(session, deck_id, card_id)

    if existing:
        existing.quantity = quantity
        await session.flush()
        return existing

    entry = DeckCardDB(deck_id=deck_id, card_id=card_id, quantity=quantity)
    session.add(entry)
    await session.flush()
    return entry


async def delete_deck_card(session: AsyncSession, deck_id: int, deck_card_id: int) -> bool:
    """
    Remove a card entry from a deck.

    Returns True if deleted, False if not found.
    """
    result = await session.execute(
        delete(DeckCardDB).where(
            DeckCardDB.id == deck_card_id,
            DeckCardDB.deck_id == deck_id,
        )
    )
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount) > 0  # type: ignore[attr-defined]


async def deck_total_cards(session: AsyncSession, deck_id: int) -> int:
    """Sum of quantities across a deck's entries."""
    result = await session.execute(
        select(func.coalesce(func.sum(DeckCardDB.quantity), 0)).where(
            DeckCardDB.deck_id == deck_id
        )
    )
    return int(result.scalar_one())


def deck_card_to_model(entry: DeckCardDB) -> DeckCardEntry:
    """Convert a database deck entry to a domain model."""
    return DeckCardEntry(id=entry.id, card_id=entry.card_id, quantity=entry.quantity)
