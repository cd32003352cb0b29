"""
Format rule endpoints.

Serves the static format rule table so clients can show deck-size and
copy rules next to the format picker.
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from deckhaven.models.format_rules import FORMAT_RULES, FormatCategory, FormatRule
from deckhaven.services.copy_limits import compute_limit

router = APIRouter(prefix="/formats", tags=["formats"])


class FormatRuleResponse(BaseModel):
    """A format's deck-construction rules."""

    key: str
    name: str
    category: FormatCategory
    deck_size: str
    sideboard: str
    copies: str
    singleton: bool
    has_commander: bool
    min_cards: int | None = None
    exact_cards: int | None = None
    restricted_list_possible: bool = False
    notes: list[str] = Field(default_factory=list)
    copy_limit: int | None = Field(
        default=None,
        description="Max copies of a non-basic-land card; null means no limit",
    )


class FormatListResponse(BaseModel):
    """All known formats."""

    formats: list[FormatRuleResponse]
    count: int


def _rule_response(key: str, rule: FormatRule) -> FormatRuleResponse:
    return FormatRuleResponse(
        key=key,
        name=rule.name,
        category=rule.category,
        deck_size=rule.deck_size,
        sideboard=rule.sideboard,
        copies=rule.copies,
        singleton=rule.singleton,
        has_commander=rule.has_commander,
        min_cards=rule.min_cards,
        exact_cards=rule.exact_cards,
        restricted_list_possible=rule.restricted_list_possible,
        notes=list(rule.notes),
        copy_limit=compute_limit(key, is_basic_land=False).cap,
    )


@router.get("", response_model=FormatListResponse)
async def list_formats() -> FormatListResponse:
    """List every format in table order."""
    formats = [_rule_response(key, rule) for key, rule in FORMAT_RULES.items()]
    return FormatListResponse(formats=formats, count=len(formats))


@router.get("/{format_key}", response_model=FormatRuleResponse)
async def get_format(format_key: str) -> FormatRuleResponse:
    """
    Get one format's rules.

    Returns 404 for unknown keys. Decks may still use unknown formats;
    they get the default copy limit.
    """
    rule = FORMAT_RULES.get(format_key)
    if rule is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown format '{format_key}'",
        )
    return _rule_response(format_key, rule)
