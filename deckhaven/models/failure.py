"""
Failure classification for deck operations.

Every rejection a user can see is classified by a FailureKind and carries
a specific, actionable message. Internal failures (metadata lookups) are
classified too, but callers convert them to safe defaults instead of
surfacing them.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_QUANTITY = "InvalidQuantity"

    # Constraint violations
    LIMIT_EXCEEDED = "LimitExceeded"

    # Service failures
    METADATA_LOOKUP = "MetadataLookup"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail for response bodies."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class InvalidQuantityError(KnownError):
    """
    Requested quantity is not a positive integer.

    Raised before any copy-limit check so a bad quantity is never reported
    as a limit violation.
    """

    def __init__(self, value: object, message: str = "quantity must be a positive integer"):
        self.value = value
        super().__init__(
            kind=FailureKind.INVALID_QUANTITY,
            message=message,
            detail=f"Received quantity: {value!r}",
            suggestion="Send a whole number greater than zero.",
        )


class LimitExceededError(KnownError):
    """
    Requested total would exceed the format's legal copy count.

    Attributes:
        format_name: Display name of the deck's format
        singleton: Whether the format allows only one copy per card
        current_quantity: Copies already in the deck (0 for a new card)
        cap: The copy limit that was exceeded
    """

    def __init__(
        self,
        format_name: str,
        singleton: bool,
        current_quantity: int,
        cap: int,
        include_current: bool = False,
    ):
        self.format_name = format_name
        self.singleton = singleton
        self.current_quantity = current_quantity
        self.cap = cap

        if singleton:
            message = f"{format_name} only allows 1 copy of each card (except basic lands)"
        else:
            message = f"{format_name} only allows {cap} copies of each card (except basic lands)"
            if include_current:
                message += f". You already have {current_quantity} copy(ies)."

        super().__init__(
            kind=FailureKind.LIMIT_EXCEEDED,
            message=message,
            suggestion="Lower the quantity or change the deck's format.",
        )


class MetadataLookupError(KnownError):
    """
    Card metadata provider failed (network error, timeout, bad response).

    Internal: the classifier converts this to the restrictive default and
    it is never shown to end users as an add-card failure.
    """

    def __init__(self, card_id: str, reason: str):
        self.card_id = card_id
        self.reason = reason
        super().__init__(
            kind=FailureKind.METADATA_LOOKUP,
            message="Card data service is unavailable. Please try again later.",
            detail=f"Lookup for '{card_id}' failed: {reason}",
            status_code=502,
        )
