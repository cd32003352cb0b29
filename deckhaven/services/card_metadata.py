"""
Card metadata provider.

Read-only access to card data (name, type line, rarity, mana cost, colors,
image) by card id or by free-text search. The Scryfall implementation is
used in production; anything satisfying CardMetadataProvider can be
injected instead.

Contract:
- lookup() returns None when the card does not exist (HTTP 404)
- every other failure (timeout, transport error, non-404 HTTP error,
  malformed or unexpectedly shaped body) raises MetadataLookupError
"""

from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from deckhaven.config import settings
from deckhaven.models.failure import MetadataLookupError


@dataclass(frozen=True)
class CardMetadata:
    """Card fields needed by deck views and the copy-limit policy."""

    id: str
    name: str
    type_line: str = ""
    rarity: str = ""
    mana_cost: str | None = None
    colors: tuple[str, ...] = field(default_factory=tuple)
    image_url: str | None = None
    set_code: str | None = None
    set_name: str | None = None


@dataclass(frozen=True)
class CardSearchPage:
    """One page of search results."""

    cards: list[CardMetadata]
    total: int
    has_more: bool
    page: int


class CardMetadataProvider(Protocol):
    """Read-only card metadata source."""

    async def lookup(self, card_id: str) -> CardMetadata | None: ...

    async def search(self, query: str, page: int = 1) -> CardSearchPage: ...


def _image_url(card: dict[str, Any]) -> str | None:
    """Normal-size image; double-faced cards use the front face."""
    image_uris = card.get("image_uris")
    if not image_uris:
        faces = card.get("card_faces") or []
        if faces:
            image_uris = faces[0].get("image_uris")
    if not image_uris:
        return None
    return image_uris.get("normal") or image_uris.get("large") or image_uris.get("small")


def parse_scryfall_card(card: dict[str, Any]) -> CardMetadata:
    """
    Convert a Scryfall card object to CardMetadata.

    Double-faced cards keep the combined name ("Front // Back"); mana cost
    and colors fall back to the front face when the top level lacks them.
    """
    faces = card.get("card_faces") or []
    front = faces[0] if faces else {}

    mana_cost = card.get("mana_cost")
    if mana_cost is None:
        mana_cost = front.get("mana_cost")

    colors = card.get("colors")
    if colors is None:
        colors = front.get("colors", [])

    return CardMetadata(
        id=str(card.get("id", "")),
        name=card.get("name") or "",
        type_line=card.get("type_line") or front.get("type_line", ""),
        rarity=card.get("rarity", ""),
        mana_cost=mana_cost,
        colors=tuple(colors),
        image_url=_image_url(card),
        set_code=card.get("set"),
        set_name=card.get("set_name"),
    )


class ScryfallMetadataProvider:
    """
    Card metadata from the Scryfall REST API.

    A client may be passed in for connection reuse; otherwise a short-lived
    client is created per call with the configured timeout.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.scryfall_timeout
        self._client = client

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        headers = {"Accept": "application/json", "User-Agent": settings.scryfall_user_agent}
        url = f"{self.base_url}{path}"
        if self._client is not None:
            return await self._client.get(url, params=params, headers=headers)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params, headers=headers)

    async def lookup(self, card_id: str) -> CardMetadata | None:
        """
        Fetch a single card by Scryfall id.

        Raises:
            MetadataLookupError: On any failure other than "not found"
        """
        try:
            response = await self._get(f"/cards/{quote(card_id, safe='')}")
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return parse_scryfall_card(response.json())
        except httpx.HTTPStatusError as e:
            raise MetadataLookupError(card_id, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise MetadataLookupError(card_id, f"{type(e).__name__}: {e}") from e
        except (ValueError, AttributeError, TypeError, KeyError) as e:
            raise MetadataLookupError(card_id, f"Malformed response: {e}") from e

    async def search(self, query: str, page: int = 1) -> CardSearchPage:
        """
        Full-text card search.

        Scryfall answers 404 when nothing matches; that is an empty page,
        not an error.

        Raises:
            MetadataLookupError: On any other failure
        """
        try:
            response = await self._get("/cards/search", params={"q": query, "page": page})
            if response.status_code == 404:
                return CardSearchPage(cards=[], total=0, has_more=False, page=page)
            response.raise_for_status()
            data = response.json()
            cards = [parse_scryfall_card(card) for card in data.get("data", [])]
            return CardSearchPage(
                cards=cards,
                total=int(data.get("total_cards", len(cards))),
                has_more=bool(data.get("has_more", False)),
                page=page,
            )
        except httpx.HTTPStatusError as e:
            raise MetadataLookupError(query, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise MetadataLookupError(query, f"{type(e).__name__}: {e}") from e
        except (ValueError, AttributeError, TypeError, KeyError) as e:
            raise MetadataLookupError(query, f"Malformed response: {e}") from e


_provider: CardMetadataProvider | None = None


def get_metadata_provider() -> CardMetadataProvider:
    """
    Dependency that provides the process-wide metadata provider.

    Override in tests via app.dependency_overrides.
    """
    global _provider
    if _provider is None:
        _provider = ScryfallMetadataProvider()
    return _provider
