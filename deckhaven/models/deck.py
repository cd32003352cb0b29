from dataclasses import dataclass, field


@dataclass(frozen=True)
class DeckCardEntry:
    """
    One card's row in a deck.

    At most one entry exists per (deck, card_id). A ``"c:"``-prefixed id is
    a separate entry from the bare id even though both resolve to the same
    card for metadata purposes.

    Attributes:
        id: Store identifier for this entry
        card_id: Opaque card identifier (Scryfall id, optionally prefixed)
        quantity: Copies of this card in the deck (>= 1)
    """

    id: int
    card_id: str
    quantity: int


@dataclass
class Deck:
    """
    A user's deck.

    Attributes:
        id: Store identifier
        user_id: Owner of the deck
        name: Deck name
        format: Format key (see FORMAT_RULES); free text is tolerated
        description: Optional description
        game: Card game the deck is for
        deck_box_color: Optional UI colour for the deck box
        trim_color: Optional UI colour for the deck box trim
        cards: Entries in insertion order
    """

    id: int
    user_id: str
    name: str
    format: str | None = None
    description: str | None = None
    game: str = "mtg"
    deck_box_color: str | None = None
    trim_color: str | None = None
    cards: list[DeckCardEntry] = field(default_factory=list)

    def total_cards(self) -> int:
        """Total cards in deck, counting quantities."""
        return sum(entry.quantity for entry in self.cards)

    def unique_cards(self) -> int:
        """Number of distinct entries."""
        return len(self.cards)

    def get_quantity(self, card_id: str) -> int:
        """Copies of a card id in the deck (0 if absent)."""
        for entry in self.cards:
            if entry.card_id == card_id:
                return entry.quantity
        return 0
