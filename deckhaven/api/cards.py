"""
Card lookup endpoints.

Thin proxies over the card metadata provider. Provider failures surface
as MetadataLookupError and are rendered as 502 by the application's
known-error handler.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from deckhaven.services.card_identity import is_basic_land_name, strip_card_prefix
from deckhaven.services.card_metadata import (
    CardMetadata,
    CardMetadataProvider,
    get_metadata_provider,
)

router = APIRouter(prefix="/cards", tags=["cards"])


class CardResponse(BaseModel):
    """Card metadata as shown to clients."""

    id: str
    name: str
    type_line: str = ""
    rarity: str = ""
    mana_cost: str | None = None
    colors: list[str] = Field(default_factory=list)
    image_url: str | None = None
    set_code: str | None = None
    set_name: str | None = None
    is_basic_land: bool = False


class CardSearchResponse(BaseModel):
    """One page of card search results."""

    query: str
    page: int
    total: int
    has_more: bool
    cards: list[CardResponse]


def _card_response(card: CardMetadata) -> CardResponse:
    return CardResponse(
        id=card.id,
        name=card.name,
        type_line=card.type_line,
        rarity=card.rarity,
        mana_cost=card.mana_cost,
        colors=list(card.colors),
        image_url=card.image_url,
        set_code=card.set_code,
        set_name=card.set_name,
        is_basic_land=is_basic_land_name(card.name),
    )


@router.get("/search", response_model=CardSearchResponse)
async def search_cards(
    q: Annotated[str, Query(min_length=1, description="Scryfall search query")],
    provider: Annotated[CardMetadataProvider, Depends(get_metadata_provider)],
    page: Annotated[int, Query(ge=1)] = 1,
) -> CardSearchResponse:
    """Search cards by text. No matches is an empty page, not an error."""
    result = await provider.search(q, page=page)
    return CardSearchResponse(
        query=q,
        page=result.page,
        total=result.total,
        has_more=result.has_more,
        cards=[_card_response(card) for card in result.cards],
    )


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(
    card_id: str,
    provider: Annotated[CardMetadataProvider, Depends(get_metadata_provider)],
) -> CardResponse:
    """
    Get a card by id.

    Commander references ("c:<id>") resolve to the underlying card.
    """
    card = await provider.lookup(strip_card_prefix(card_id))
    if card is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card '{card_id}' not found",
        )
    return _card_response(card)
