from deckhaven.models.deck import Deck, DeckCardEntry
from deckhaven.models.failure import (
    FailureDetail,
    FailureKind,
    InvalidQuantityError,
    KnownError,
    LimitExceededError,
    MetadataLookupError,
)
from deckhaven.models.format_rules import (
    FORMAT_RULES,
    FormatCategory,
    FormatRule,
    format_display_name,
    get_format_rule,
)

__all__ = [
    "Deck",
    "DeckCardEntry",
    "FORMAT_RULES",
    "FailureDetail",
    "FailureKind",
    "FormatCategory",
    "FormatRule",
    "InvalidQuantityError",
    "KnownError",
    "LimitExceededError",
    "MetadataLookupError",
    "format_display_name",
    "get_format_rule",
]
