"""
DeckHaven services.

Business logic for deck card rules and card metadata.
"""

from deckhaven.services.card_identity import (
    BASIC_LAND_NAMES,
    COMMANDER_PREFIX,
    CardIdentity,
    classify,
    is_basic_land_name,
    strip_card_prefix,
)
from deckhaven.services.card_metadata import (
    CardMetadata,
    CardMetadataProvider,
    CardSearchPage,
    ScryfallMetadataProvider,
    get_metadata_provider,
)
from deckhaven.services.copy_limits import (
    DEFAULT_COPY_LIMIT,
    MAX_QUANTITY,
    SINGLETON_COPY_LIMIT,
    CardDecision,
    CopyLimit,
    compute_limit,
    evaluate_add_card,
    evaluate_set_quantity,
    validate_add,
    validate_quantity,
    validate_set_quantity,
)

__all__ = [
    "BASIC_LAND_NAMES",
    "COMMANDER_PREFIX",
    "CardDecision",
    "CardIdentity",
    "CardMetadata",
    "CardMetadataProvider",
    "CardSearchPage",
    "CopyLimit",
    "DEFAULT_COPY_LIMIT",
    "MAX_QUANTITY",
    "SINGLETON_COPY_LIMIT",
    "ScryfallMetadataProvider",
    "classify",
    "compute_limit",
    "evaluate_add_card",
    "evaluate_set_quantity",
    "get_metadata_provider",
    "is_basic_land_name",
    "strip_card_prefix",
    "validate_add",
    "validate_quantity",
    "validate_set_quantity",
]
