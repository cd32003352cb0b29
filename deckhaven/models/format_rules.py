"""
Format Rules: the static deck-construction rule table.

Keys are stable and UI-safe; they are the values stored in a deck's
``format`` column. The table is built once at import and exposed through a
read-only mapping.

Only two fields drive copy limits:
- ``category == FormatCategory.LIMITED`` disables copy limits entirely
- ``singleton`` caps every non-basic-land card at one copy

The remaining fields are descriptive and served to clients as-is.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class FormatCategory(str, Enum):
    """Broad family a format belongs to."""

    CONSTRUCTED = "Constructed"
    COMMANDER_STYLE = "Commander-style"
    LIMITED = "Limited"
    VARIANT = "Variant"


@dataclass(frozen=True, slots=True)
class FormatRule:
    """
    Deck-construction rules for a single format.

    Attributes:
        name: Human-readable format name
        category: Format family; only LIMITED changes copy limits
        deck_size: Description of deck size requirements
        sideboard: Description of sideboard rules
        copies: Description of copy rules
        singleton: True if each non-basic card is limited to one copy
        has_commander: True if the deck has a commander zone
        min_cards: Minimum deck size (Constructed / Limited)
        exact_cards: Exact deck size (Commander-style)
        restricted_list_possible: True if some cards may be restricted to 1
        notes: Free-form notes shown to users
    """

    name: str
    category: FormatCategory
    deck_size: str
    sideboard: str
    copies: str
    singleton: bool = False
    has_commander: bool = False
    min_cards: int | None = None
    exact_cards: int | None = None
    restricted_list_possible: bool = False
    notes: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_limited(self) -> bool:
        """True for formats built from a fixed pool (Draft, Sealed)."""
        return self.category is FormatCategory.LIMITED


_CONSTRUCTED_COPIES = "Up to 4 copies (except basic lands)"
_SINGLETON_COPIES = "Singleton (1 of each, except basic lands)"
_NO_SIDEBOARD = "None / Not typical"
_UNDERLYING = "Depends on underlying format"


def _constructed(name: str, copies: str = _CONSTRUCTED_COPIES, **kwargs: Any) -> FormatRule:
    return FormatRule(
        name=name,
        category=FormatCategory.CONSTRUCTED,
        deck_size="60 cards minimum",
        min_cards=60,
        sideboard="Up to 15",
        copies=copies,
        **kwargs,
    )


def _commander_style(name: str, deck_size: str, exact_cards: int, **kwargs: Any) -> FormatRule:
    return FormatRule(
        name=name,
        category=FormatCategory.COMMANDER_STYLE,
        deck_size=deck_size,
        exact_cards=exact_cards,
        sideboard=_NO_SIDEBOARD,
        copies=_SINGLETON_COPIES,
        singleton=True,
        **kwargs,
    )


def _limited(name: str, copies: str, notes: tuple[str, ...]) -> FormatRule:
    return FormatRule(
        name=name,
        category=FormatCategory.LIMITED,
        deck_size="40 cards minimum",
        min_cards=40,
        sideboard="All unused cards",
        copies=copies,
        notes=notes,
    )


def _variant(name: str, deck_size: str, notes: tuple[str, ...]) -> FormatRule:
    return FormatRule(
        name=name,
        category=FormatCategory.VARIANT,
        deck_size=deck_size,
        sideboard=_UNDERLYING,
        copies=_UNDERLYING,
        notes=notes,
    )


FORMAT_RULES: MappingProxyType[str, FormatRule] = MappingProxyType(
    {
        "Standard": _constructed(
            "Standard",
            notes=("Rotating format (card pool changes over time).",),
        ),
        "Pioneer": _constructed("Pioneer"),
        "Modern": _constructed("Modern"),
        "Legacy": _constructed(
            "Legacy",
            copies="Up to 4 copies (except basic lands); banned list applies",
            notes=("Some formats have a restricted list; Vintage is the main one.",),
        ),
        "Vintage": _constructed(
            "Vintage",
            copies="Up to 4 copies (except basic lands); some cards restricted to 1",
            restricted_list_possible=True,
        ),
        "Pauper": _constructed(
            "Pauper",
            notes=("Card pool restriction: commons only (per format legality).",),
        ),
        "Commander": _commander_style(
            "Commander",
            deck_size="Exactly 100 cards (including Commander)",
            exact_cards=100,
            has_commander=True,
            notes=(
                "Includes 1 Commander (shown separately from main deck).",
                "Singleton format: Maximum 1 copy of each card except basic lands.",
                "Basic lands (Plains, Island, Swamp, Mountain, Forest) can have multiple copies.",
                "Commander color identity rules apply.",
            ),
        ),
        "Brawl": _commander_style(
            "Brawl",
            deck_size="60 cards (including Commander)",
            exact_cards=60,
            has_commander=True,
            notes=("Uses a Standard-legal card pool (in paper).",),
        ),
        "Historic Brawl": _commander_style(
            "Historic Brawl",
            deck_size="100 cards (including Commander)",
            exact_cards=100,
            has_commander=True,
            notes=("Arena format (digital).",),
        ),
        "Oathbreaker": _commander_style(
            "Oathbreaker",
            deck_size="60 cards (includes Oathbreaker + Signature Spell)",
            exact_cards=60,
            notes=("Includes 1 Oathbreaker (a planeswalker) + 1 Signature Spell.",),
        ),
        "Draft": _limited(
            "Draft",
            copies="No copy limit (you can play any number you drafted)",
            notes=("Built during the event from drafted cards.",),
        ),
        "Sealed": _limited(
            "Sealed",
            copies="No copy limit (any number from your sealed pool)",
            notes=("Built during the event from your sealed pool.",),
        ),
        "Two-Headed Giant": _variant(
            "Two-Headed Giant",
            deck_size="Depends on underlying format (often 60+ Constructed or 40+ Limited)",
            notes=("Team format: deck rules come from the format being played.",),
        ),
        "Planechase": _variant(
            "Planechase",
            deck_size="Uses underlying format rules",
            notes=("Planes deck is separate from your main deck.",),
        ),
        "Archenemy": _variant(
            "Archenemy",
            deck_size="Uses underlying format rules",
            notes=("Scheme deck is separate from your main deck.",),
        ),
    }
)


def get_format_rule(format_key: str | None) -> FormatRule | None:
    """
    Look up the rule for a deck format.

    Unknown, empty, or missing keys return None rather than raising;
    legacy free-text formats fall through to the default policy.
    """
    if not format_key:
        return None
    return FORMAT_RULES.get(format_key)


def format_display_name(format_key: str | None) -> str:
    """Name to show users: the rule's name, else the raw key."""
    rule = get_format_rule(format_key)
    if rule is not None:
        return rule.name
    return format_key or "this format"
