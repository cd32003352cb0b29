"""
Card identity classification.

Decides whether a card is one of the five basic lands, which are exempt
from every copy limit. Classification is recomputed on every request and
never stored, so a corrected card name takes effect immediately.

The lookup is fail-open toward the restrictive policy: if the metadata
provider errors or returns nothing usable, the card is treated as NOT a
basic land and normal copy limits apply.
"""

import logging
from dataclasses import dataclass

from deckhaven.models.failure import MetadataLookupError
from deckhaven.services.card_metadata import CardMetadataProvider

logger = logging.getLogger(__name__)

BASIC_LAND_NAMES = frozenset({"Plains", "Island", "Swamp", "Mountain", "Forest"})

# Commander-partner references are stored as "c:<card id>"
COMMANDER_PREFIX = "c:"


@dataclass(frozen=True, slots=True)
class CardIdentity:
    """Transient classification of a card."""

    is_basic_land: bool = False


def strip_card_prefix(card_id: str) -> str:
    """
    Remove the commander prefix for metadata lookup.

    Only use the result for lookups; deck entries keep the original id.
    """
    if card_id.startswith(COMMANDER_PREFIX):
        return card_id[len(COMMANDER_PREFIX) :]
    return card_id


def is_basic_land_name(name: str) -> bool:
    """Exact, case-sensitive match against the basic land names."""
    return name in BASIC_LAND_NAMES


async def classify(card_id: str, provider: CardMetadataProvider) -> CardIdentity:
    """
    Classify a card by looking up its name once.

    Args:
        card_id: Card identifier, optionally "c:"-prefixed
        provider: Metadata source

    Returns:
        CardIdentity; is_basic_land is False whenever the lookup fails
    """
    lookup_id = strip_card_prefix(card_id)

    try:
        metadata = await provider.lookup(lookup_id)
    except MetadataLookupError as e:
        logger.warning(
            "Metadata lookup failed for %s, applying normal copy limits: %s",
            lookup_id,
            e.detail,
        )
        return CardIdentity(is_basic_land=False)

    if metadata is None or not metadata.name:
        logger.debug("No card name for %s, applying normal copy limits", lookup_id)
        return CardIdentity(is_basic_land=False)

    return CardIdentity(is_basic_land=is_basic_land_name(metadata.name))
