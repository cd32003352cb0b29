"""
Copy-limit policy for deck cards.

Decides how many copies of a card a deck may hold under its format and
whether a proposed add or quantity change is legal.

Decision order (first match wins):
1. Basic land -> unlimited, in every format
2. Limited format (Draft, Sealed) -> unlimited
3. Singleton format (Commander, Brawl, ...) -> 1
4. Anything else, including unknown formats -> 4

Limits are computed per request from (format, basic-land status) and never
cached. Nothing here writes; persisting the new quantity is the caller's job,
and a rejection means the caller must not write at all.
"""

import logging
import math
from dataclasses import dataclass

from deckhaven.models.failure import (
    FailureKind,
    InvalidQuantityError,
    KnownError,
    LimitExceededError,
)
from deckhaven.models.format_rules import format_display_name, get_format_rule
from deckhaven.services.card_identity import classify
from deckhaven.services.card_metadata import CardMetadataProvider

logger = logging.getLogger(__name__)

DEFAULT_COPY_LIMIT = 4
SINGLETON_COPY_LIMIT = 1

# Largest value the deck_cards.quantity column (32-bit INTEGER) can hold
MAX_QUANTITY = 2**31 - 1


@dataclass(frozen=True, slots=True)
class CopyLimit:
    """
    Maximum legal copies of one card in one deck.

    Attributes:
        cap: Maximum copies, or None for no limit
        format_name: Display name of the format, used in messages
        singleton: True if the cap comes from a singleton format
    """

    cap: int | None
    format_name: str
    singleton: bool = False

    @property
    def is_unlimited(self) -> bool:
        return self.cap is None


@dataclass(frozen=True, slots=True)
class CardDecision:
    """
    Outcome of an add or quantity change.

    On success, new_quantity is what the caller should persist (0 means
    remove the entry). On failure, kind and message explain why and nothing
    may be written.
    """

    ok: bool
    new_quantity: int = 0
    kind: FailureKind | None = None
    message: str | None = None

    @classmethod
    def accepted(cls, new_quantity: int) -> "CardDecision":
        return cls(ok=True, new_quantity=new_quantity)

    @classmethod
    def rejected(cls, error: KnownError) -> "CardDecision":
        return cls(ok=False, kind=error.kind, message=error.message)

    @property
    def removes_entry(self) -> bool:
        return self.ok and self.new_quantity == 0


def compute_limit(format_key: str | None, is_basic_land: bool) -> CopyLimit:
    """
    Compute the copy limit for a card in a format.

    Unknown formats are not an error; they get the default cap.
    """
    rule = get_format_rule(format_key)
    format_name = format_display_name(format_key)
    singleton = rule is not None and rule.singleton

    if is_basic_land:
        return CopyLimit(cap=None, format_name=format_name, singleton=singleton)
    if rule is not None and rule.is_limited:
        return CopyLimit(cap=None, format_name=format_name, singleton=singleton)
    if singleton:
        return CopyLimit(cap=SINGLETON_COPY_LIMIT, format_name=format_name, singleton=True)
    return CopyLimit(cap=DEFAULT_COPY_LIMIT, format_name=format_name)


def _whole_number(value: float | str) -> int:
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass  # not an integer literal; "3.0" and "1e3" go through float
    try:
        number = float(value)
    except ValueError:
        raise InvalidQuantityError(value, "quantity must be a number") from None
    if not math.isfinite(number) or not number.is_integer():
        raise InvalidQuantityError(value, "quantity must be an integer")
    return int(number)


def validate_quantity(value: object, allow_zero: bool = False) -> int:
    """
    Coerce and validate a requested quantity.

    Integers pass through. Integer strings are parsed exactly; other numeric
    strings and floats are accepted when they hold a whole number ("3.0",
    3.0). Booleans, None, non-numeric values, fractions and values above
    MAX_QUANTITY are rejected.

    Args:
        value: Raw quantity from the request
        allow_zero: Accept 0 (used by the update path, where 0 removes)

    Raises:
        InvalidQuantityError: If the value is not a valid quantity
    """
    if isinstance(value, bool) or value is None:
        raise InvalidQuantityError(value, "quantity must be a number")

    if isinstance(value, int):
        quantity = value
    elif isinstance(value, (float, str)):
        quantity = _whole_number(value)
    else:
        raise InvalidQuantityError(value, "quantity must be a number")

    minimum = 0 if allow_zero else 1
    if quantity < minimum:
        message = (
            "quantity must be zero or a positive number"
            if allow_zero
            else "quantity must be a positive number"
        )
        raise InvalidQuantityError(value, message)
    if quantity > MAX_QUANTITY:
        raise InvalidQuantityError(value, f"quantity must be at most {MAX_QUANTITY}")

    return quantity


def validate_add(current_quantity: int, requested_delta: int, limit: CopyLimit) -> int:
    """
    Validate adding copies of a card to a deck.

    For a card not yet in the deck (current_quantity == 0) the requested
    quantity is checked directly against the cap; for an existing entry the
    combined total is checked and the message reports the current count.

    Returns:
        The new quantity to persist

    Raises:
        InvalidQuantityError: If requested_delta is not positive
            or the new total would overflow MAX_QUANTITY
        LimitExceededError: If the new total exceeds a finite cap
    """
    if requested_delta < 1:
        raise InvalidQuantityError(requested_delta, "quantity must be a positive number")

    new_quantity = current_quantity + requested_delta
    if new_quantity > MAX_QUANTITY:
        raise InvalidQuantityError(
            requested_delta, f"deck cannot hold more than {MAX_QUANTITY} copies of a card"
        )
    if limit.cap is not None and new_quantity > limit.cap:
        raise LimitExceededError(
            format_name=limit.format_name,
            singleton=limit.singleton,
            current_quantity=current_quantity,
            cap=limit.cap,
            include_current=current_quantity > 0,
        )
    return new_quantity


def validate_set_quantity(quantity: int, limit: CopyLimit) -> int:
    """
    Validate replacing a deck entry's quantity with an absolute value.

    Raises:
        LimitExceededError: If quantity exceeds a finite cap
    """
    if limit.cap is not None and quantity > limit.cap:
        raise LimitExceededError(
            format_name=limit.format_name,
            singleton=limit.singleton,
            current_quantity=quantity,
            cap=limit.cap,
        )
    return quantity


async def evaluate_add_card(
    deck_id: int,
    card_id: str,
    format_key: str | None,
    requested_quantity: object,
    current_quantity: int,
    provider: CardMetadataProvider,
) -> CardDecision:
    """
    Decide whether adding a card to a deck is legal.

    The quantity is validated before the metadata lookup, so an invalid
    request never costs a network call.

    Args:
        deck_id: Deck being modified (for logging)
        card_id: Card being added, stored verbatim
        format_key: The deck's format
        requested_quantity: Raw copies to add
        current_quantity: Copies already in the deck (0 if absent)
        provider: Metadata source for basic-land classification

    Returns:
        CardDecision with the quantity to persist, or the rejection
    """
    try:
        quantity = validate_quantity(requested_quantity)
    except InvalidQuantityError as e:
        return CardDecision.rejected(e)

    identity = await classify(card_id, provider)
    limit = compute_limit(format_key, identity.is_basic_land)

    try:
        new_quantity = validate_add(current_quantity, quantity, limit)
    except InvalidQuantityError as e:
        return CardDecision.rejected(e)
    except LimitExceededError as e:
        logger.info(
            "Rejected add of %d x %s to deck %s (%s, have %d, cap %s)",
            quantity,
            card_id,
            deck_id,
            limit.format_name,
            current_quantity,
            limit.cap,
        )
        return CardDecision.rejected(e)

    return CardDecision.accepted(new_quantity)


async def evaluate_set_quantity(
    deck_id: int,
    card_id: str,
    format_key: str | None,
    requested_quantity: object,
    provider: CardMetadataProvider,
) -> CardDecision:
    """
    Decide whether setting a deck entry to an absolute quantity is legal.

    A quantity of 0 is accepted without a lookup and means "remove".
    """
    try:
        quantity = validate_quantity(requested_quantity, allow_zero=True)
    except InvalidQuantityError as e:
        return CardDecision.rejected(e)

    if quantity == 0:
        return CardDecision.accepted(0)

    identity = await classify(card_id, provider)
    limit = compute_limit(format_key, identity.is_basic_land)

    try:
        new_quantity = validate_set_quantity(quantity, limit)
    except LimitExceededError as e:
        logger.info(
            "Rejected quantity %d for %s in deck %s (%s, cap %s)",
            quantity,
            card_id,
            deck_id,
            limit.format_name,
            limit.cap,
        )
        return CardDecision.rejected(e)

    return CardDecision.accepted(new_quantity)
