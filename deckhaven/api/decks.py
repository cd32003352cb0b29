"""
Deck API endpoints.

CRUD for decks plus the deck-card endpoints. Adding a card and changing a
card's quantity both go through the copy-limit policy before anything is
written; a rejected request returns 400 with the policy's message and
leaves the deck untouched.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from deckhaven.db import (
    create_deck,
    deck_card_to_model,
    deck_to_model,
    delete_deck,
    delete_deck_card,
    get_deck,
    get_deck_card,
    get_deck_card_by_id,
    get_decks_for_user,
    update_deck,
    upsert_quantity,
)
from deckhaven.db.database import get_session
from deckhaven.models.db import DeckDB
from deckhaven.models.deck import Deck
from deckhaven.services.card_metadata import CardMetadataProvider, get_metadata_provider
from deckhaven.services.copy_limits import (
    CardDecision,
    evaluate_add_card,
    evaluate_set_quantity,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/decks", tags=["decks"])


class DeckCardResponse(BaseModel):
    """A card entry in a deck."""

    id: int
    card_id: str
    quantity: int


class DeckResponse(BaseModel):
    """Response model for a single deck."""

    id: int
    user_id: str
    name: str
    description: str | None = None
    format: str | None = None
    game: str = "mtg"
    deck_box_color: str | None = None
    trim_color: str | None = None
    total_cards: int = 0
    unique_cards: int = 0
    cards: list[DeckCardResponse] = Field(default_factory=list)


class DeckListResponse(BaseModel):
    """Response model for a user's decks."""

    user_id: str
    decks: list[DeckResponse]
    count: int


class DeckCreateRequest(BaseModel):
    """Request model for creating a deck."""

    model_config = ConfigDict(extra="forbid")

    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    format: str | None = Field(
        default=None,
        max_length=50,
        description="Format key, e.g. 'Commander'. Unknown formats get the default 4-copy rule.",
        examples=["Commander"],
    )
    game: str = Field(default="mtg", max_length=50)
    deck_box_color: str | None = Field(default=None, max_length=32)
    trim_color: str | None = Field(default=None, max_length=32)


class DeckUpdateRequest(BaseModel):
    """Request model for updating deck metadata."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    format: str | None = Field(default=None, max_length=50)
    deck_box_color: str | None = Field(default=None, max_length=32)
    trim_color: str | None = Field(default=None, max_length=32)


class AddCardRequest(BaseModel):
    """
    Request model for adding a card to a deck.

    quantity is validated by the copy-limit policy, not by the schema, so
    a bad value is reported as an invalid quantity (400).
    """

    model_config = ConfigDict(extra="forbid")

    card_id: str = Field(..., min_length=1, description="Card id; 'c:' marks a commander")
    quantity: Any = Field(default=1, description="Copies to add (positive integer)")


class UpdateCardQuantityRequest(BaseModel):
    """Request model for setting a card's quantity. 0 removes the card."""

    model_config = ConfigDict(extra="forbid")

    quantity: Any = Field(..., description="New quantity (0 removes the card)")


class DeckCardMutationResponse(BaseModel):
    """Result of adding or updating a deck card."""

    deck_id: int
    deck_card: DeckCardResponse | None = None
    removed: bool = False


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    deleted: bool
    message: str = ""


def _deck_response(model: Deck) -> DeckResponse:
    return DeckResponse(
        id=model.id,
        user_id=model.user_id,
        name=model.name,
        description=model.description,
        format=model.format,
        game=model.game,
        deck_box_color=model.deck_box_color,
        trim_color=model.trim_color,
        total_cards=model.total_cards(),
        unique_cards=model.unique_cards(),
        cards=[
            DeckCardResponse(id=c.id, card_id=c.card_id, quantity=c.quantity)
            for c in model.cards
        ],
    )


async def _require_deck(session: AsyncSession, deck_id: int) -> DeckDB:
    db_deck = await get_deck(session, deck_id)
    if db_deck is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Deck not found",
        )
    return db_deck


def _raise_if_rejected(decision: CardDecision) -> None:
    if not decision.ok:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=decision.message,
        )


@router.post("", response_model=DeckResponse, status_code=status.HTTP_201_CREATED)
async def create_user_deck(
    request: DeckCreateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckResponse:
    """Create a new, empty deck."""
    db_deck = await create_deck(
        session,
        user_id=request.user_id,
        name=request.name,
        format_name=request.format,
        description=request.description,
        game=request.game,
        deck_box_color=request.deck_box_color,
        trim_color=request.trim_color,
    )
    logger.info("Created deck %s (%s) for user %s", db_deck.id, db_deck.format, db_deck.user_id)
    return _deck_response(deck_to_model(db_deck))


@router.get("", response_model=DeckListResponse)
async def list_user_decks(
    user_id: Annotated[str, Query(min_length=1)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckListResponse:
    """List a user's decks, newest first, with card totals."""
    db_decks = await get_decks_for_user(session, user_id)
    decks = [_deck_response(deck_to_model(d)) for d in db_decks]
    return DeckListResponse(user_id=user_id, decks=decks, count=len(decks))


@router.get("/{deck_id}", response_model=DeckResponse)
async def get_user_deck(
    deck_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckResponse:
    """
    Get a deck with its cards.

    Returns 404 if deck not found.
    """
    db_deck = await _require_deck(session, deck_id)
    return _deck_response(deck_to_model(db_deck))


@router.patch("/{deck_id}", response_model=DeckResponse)
async def update_user_deck(
    deck_id: int,
    request: DeckUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckResponse:
    """
    Update deck metadata.

    Changing the format does not revalidate existing cards; new limits
    apply to the next add or update.
    """
    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )
    if "name" in changes and changes["name"] is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Deck name cannot be empty",
        )

    db_deck = await update_deck(session, deck_id, changes)
    if db_deck is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Deck not found",
        )
    return _deck_response(deck_to_model(db_deck))


@router.delete("/{deck_id}", response_model=DeleteResponse)
async def delete_user_deck(
    deck_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeleteResponse:
    """Delete a deck and all of its cards."""
    deleted = await delete_deck(session, deck_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Deck not found",
        )
    return DeleteResponse(deleted=True, message="Deck deleted.")


@router.post("/{deck_id}/cards", response_model=DeckCardMutationResponse)
async def add_card_to_deck(
    deck_id: int,
    request: AddCardRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    provider: Annotated[CardMetadataProvider, Depends(get_metadata_provider)],
) -> DeckCardMutationResponse:
    """
    Add copies of a card to a deck.

    If the card is already in the deck its quantity is increased;
    otherwise a new entry is created. Returns 400 if the quantity is
    invalid or the deck's format does not allow that many copies.
    """
    db_deck = await _require_deck(session, deck_id)

    existing = await get_deck_card(session, deck_id, request.card_id)
    current_quantity = existing.quantity if existing else 0

    decision = await evaluate_add_card(
        deck_id=deck_id,
        card_id=request.card_id,
        format_key=db_deck.format,
        requested_quantity=request.quantity,
        current_quantity=current_quantity,
        provider=provider,
    )
    _raise_if_rejected(decision)

    entry = await upsert_quantity(session, deck_id, request.card_id, decision.new_quantity)
    logger.debug("Deck %s: %s now x%d", deck_id, request.card_id, entry.quantity)

    model = deck_card_to_model(entry)
    return DeckCardMutationResponse(
        deck_id=deck_id,
        deck_card=DeckCardResponse(id=model.id, card_id=model.card_id, quantity=model.quantity),
    )


@router.patch("/{deck_id}/cards/{deck_card_id}", response_model=DeckCardMutationResponse)
async def update_deck_card_quantity(
    deck_id: int,
    deck_card_id: int,
    request: UpdateCardQuantityRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    provider: Annotated[CardMetadataProvider, Depends(get_metadata_provider)],
) -> DeckCardMutationResponse:
    """
    Set a deck card's quantity.

    A quantity of 0 removes the card from the deck.
    """
    db_deck = await _require_deck(session, deck_id)

    entry = await get_deck_card_by_id(session, deck_id, deck_card_id)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Card not found in deck",
        )

    decision = await evaluate_set_quantity(
        deck_id=deck_id,
        card_id=entry.card_id,
        format_key=db_deck.format,
        requested_quantity=request.quantity,
        provider=provider,
    )
    _raise_if_rejected(decision)

    if decision.removes_entry:
        await delete_deck_card(session, deck_id, deck_card_id)
        return DeckCardMutationResponse(deck_id=deck_id, deck_card=None, removed=True)

    entry.quantity = decision.new_quantity
    await session.flush()

    model = deck_card_to_model(entry)
    return DeckCardMutationResponse(
        deck_id=deck_id,
        deck_card=DeckCardResponse(id=model.id, card_id=model.card_id, quantity=model.quantity),
    )


@router.delete("/{deck_id}/cards/{deck_card_id}", response_model=DeleteResponse)
async def remove_card_from_deck(
    deck_id: int,
    deck_card_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeleteResponse:
    """Remove a card entry from a deck."""
    await _require_deck(session, deck_id)

    deleted = await delete_deck_card(session, deck_id, deck_card_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Card not found in deck",
        )
    return DeleteResponse(deleted=True, message="Card removed from deck.")
