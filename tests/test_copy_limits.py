"""Tests for the copy-limit policy."""

import pytest

from deckhaven.models.failure import FailureKind, InvalidQuantityError, LimitExceededError
from deckhaven.models.format_rules import FORMAT_RULES
from deckhaven.services.copy_limits import (
    DEFAULT_COPY_LIMIT,
    MAX_QUANTITY,
    CopyLimit,
    compute_limit,
    evaluate_add_card,
    evaluate_set_quantity,
    validate_add,
    validate_quantity,
    validate_set_quantity,
)

ALL_FORMATS = [*FORMAT_RULES.keys(), "Kitchen Table", "", None]


class TestComputeLimit:
    @pytest.mark.parametrize("format_key", ALL_FORMATS)
    def test_basic_land_always_unlimited(self, format_key: str | None) -> None:
        assert compute_limit(format_key, is_basic_land=True).is_unlimited

    @pytest.mark.parametrize("is_basic_land", [True, False])
    @pytest.mark.parametrize("format_key", ["Draft", "Sealed"])
    def test_limited_formats_unlimited(self, format_key: str, is_basic_land: bool) -> None:
        assert compute_limit(format_key, is_basic_land).cap is None

    @pytest.mark.parametrize("format_key", ["Commander", "Brawl", "Historic Brawl", "Oathbreaker"])
    def test_singleton_cap(self, format_key: str) -> None:
        limit = compute_limit(format_key, is_basic_land=False)
        assert limit.cap == 1
        assert limit.singleton is True

    @pytest.mark.parametrize("format_key", ["Standard", "Modern", "Vintage", "Planechase"])
    def test_constructed_and_variant_cap(self, format_key: str) -> None:
        limit = compute_limit(format_key, is_basic_land=False)
        assert limit.cap == DEFAULT_COPY_LIMIT
        assert limit.singleton is False

    @pytest.mark.parametrize("format_key", ["Kitchen Table", "commander", "", None])
    def test_unknown_format_defaults_to_four(self, format_key: str | None) -> None:
        limit = compute_limit(format_key, is_basic_land=False)
        assert limit.cap == 4
        assert limit.singleton is False

    def test_carries_display_name(self) -> None:
        assert compute_limit("Historic Brawl", False).format_name == "Historic Brawl"
        assert compute_limit("Kitchen Table", False).format_name == "Kitchen Table"
        assert compute_limit(None, False).format_name == "this format"


class TestValidateQuantity:
    @pytest.mark.parametrize("value,expected", [(1, 1), (7, 7), ("3", 3), (2.0, 2), (" 4 ", 4)])
    def test_accepts_whole_numbers(self, value: object, expected: int) -> None:
        assert validate_quantity(value) == expected

    @pytest.mark.parametrize("value", [0, -1, "0", "-2"])
    def test_rejects_non_positive(self, value: object) -> None:
        with pytest.raises(InvalidQuantityError, match="positive"):
            validate_quantity(value)

    @pytest.mark.parametrize("value", [1.5, "2.5", float("inf"), float("nan")])
    def test_rejects_fractions(self, value: object) -> None:
        with pytest.raises(InvalidQuantityError, match="integer"):
            validate_quantity(value)

    @pytest.mark.parametrize("value", ["abc", "", None, True, False, [1], {"n": 1}])
    def test_rejects_non_numeric(self, value: object) -> None:
        with pytest.raises(InvalidQuantityError):
            validate_quantity(value)

    def test_allow_zero(self) -> None:
        assert validate_quantity(0, allow_zero=True) == 0
        with pytest.raises(InvalidQuantityError):
            validate_quantity(-1, allow_zero=True)

    def test_error_kind(self) -> None:
        with pytest.raises(InvalidQuantityError) as exc_info:
            validate_quantity(0)
        assert exc_info.value.kind is FailureKind.INVALID_QUANTITY
        assert exc_info.value.status_code == 400


    def test_integer_strings_parse_exactly(self) -> None:
        assert validate_quantity("2147483647") == MAX_QUANTITY
        assert validate_quantity("1e3") == 1000

    @pytest.mark.parametrize(
        "value", [MAX_QUANTITY + 1, "2147483648", "9007199254740993", "1e30", 1e30, 10**40]
    )
    def test_rejects_values_above_column_range(self, value: object) -> None:
        with pytest.raises(InvalidQuantityError, match="at most 2147483647"):
            validate_quantity(value)

    def test_upper_bound_applies_with_allow_zero(self) -> None:
        with pytest.raises(InvalidQuantityError):
            validate_quantity("1e30", allow_zero=True)


class TestValidateAdd:
    def test_unlimited_always_succeeds(self) -> None:
        limit = CopyLimit(cap=None, format_name="Draft")
        assert validate_add(10, 5, limit) == 15

    def test_total_above_column_range(self) -> None:
        limit = CopyLimit(cap=None, format_name="Draft")
        with pytest.raises(InvalidQuantityError, match="cannot hold more than"):
            validate_add(MAX_QUANTITY, 1, limit)

    def test_within_cap(self) -> None:
        limit = CopyLimit(cap=4, format_name="Standard")
        assert validate_add(2, 2, limit) == 4

    def test_exceeds_cap_existing_card(self) -> None:
        limit = CopyLimit(cap=4, format_name="Standard")
        with pytest.raises(LimitExceededError) as exc_info:
            validate_add(3, 2, limit)

        error = exc_info.value
        assert error.kind is FailureKind.LIMIT_EXCEEDED
        assert error.current_quantity == 3
        assert "only allows 4 copies" in error.message
        assert "already have 3 copy(ies)" in error.message

    def test_exceeds_cap_new_card_omits_current(self) -> None:
        limit = CopyLimit(cap=4, format_name="Standard")
        with pytest.raises(LimitExceededError) as exc_info:
            validate_add(0, 5, limit)

        assert "only allows 4 copies" in exc_info.value.message
        assert "already have" not in exc_info.value.message

    def test_singleton_message(self) -> None:
        limit = CopyLimit(cap=1, format_name="Commander", singleton=True)
        with pytest.raises(LimitExceededError) as exc_info:
            validate_add(1, 1, limit)

        assert exc_info.value.message == (
            "Commander only allows 1 copy of each card (except basic lands)"
        )
        assert exc_info.value.singleton is True

    def test_rejects_non_positive_delta(self) -> None:
        limit = CopyLimit(cap=None, format_name="Draft")
        with pytest.raises(InvalidQuantityError):
            validate_add(1, 0, limit)

    @pytest.mark.parametrize("current", [0, 1, 3])
    def test_rejection_is_monotonic(self, current: int) -> None:
        """Once a delta is rejected, every larger delta is rejected too."""
        limit = CopyLimit(cap=4, format_name="Standard")
        first_rejected = None
        for delta in range(1, 10):
            try:
                validate_add(current, delta, limit)
            except LimitExceededError:
                first_rejected = first_rejected or delta
            else:
                assert first_rejected is None
        assert first_rejected == 4 - current + 1


class TestValidateSetQuantity:
    def test_within_cap(self) -> None:
        assert validate_set_quantity(4, CopyLimit(cap=4, format_name="Standard")) == 4

    def test_exceeds_cap(self) -> None:
        with pytest.raises(LimitExceededError) as exc_info:
            validate_set_quantity(5, CopyLimit(cap=4, format_name="Standard"))
        assert "already have" not in exc_info.value.message

    def test_unlimited(self) -> None:
        assert validate_set_quantity(60, CopyLimit(cap=None, format_name="Sealed")) == 60


class TestEvaluateAddCard:
    async def test_commander_single_copy(self, fake_provider) -> None:
        decision = await evaluate_add_card(1, "sol-ring", "Commander", 1, 0, fake_provider)

        assert decision.ok is True
        assert decision.new_quantity == 1

    async def test_commander_two_copies_rejected(self, fake_provider) -> None:
        decision = await evaluate_add_card(1, "sol-ring", "Commander", 2, 0, fake_provider)

        assert decision.ok is False
        assert decision.kind is FailureKind.LIMIT_EXCEEDED
        assert "1 copy of each card" in decision.message

    async def test_standard_over_four_rejected(self, fake_provider) -> None:
        decision = await evaluate_add_card(1, "bolt", "Standard", 2, 3, fake_provider)

        assert decision.ok is False
        assert decision.kind is FailureKind.LIMIT_EXCEEDED
        assert "already have 3 copy(ies)" in decision.message

    async def test_draft_unlimited(self, fake_provider) -> None:
        decision = await evaluate_add_card(1, "bolt", "Draft", 5, 10, fake_provider)

        assert decision.ok is True
        assert decision.new_quantity == 15

    async def test_overflowing_total_rejected(self, fake_provider) -> None:
        decision = await evaluate_add_card(1, "forest", "Draft", 2, MAX_QUANTITY - 1, fake_provider)

        assert decision.ok is False
        assert decision.kind is FailureKind.INVALID_QUANTITY

    async def test_basic_land_overrides_singleton(self, fake_provider) -> None:
        decision = await evaluate_add_card(1, "forest", "Commander", 10, 20, fake_provider)

        assert decision.ok is True
        assert decision.new_quantity == 30

    async def test_prefixed_basic_land_is_exempt(self, fake_provider) -> None:
        decision = await evaluate_add_card(1, "c:forest", "Commander", 5, 0, fake_provider)

        assert decision.ok is True
        assert decision.new_quantity == 5

    async def test_zero_quantity_invalid(self, fake_provider) -> None:
        decision = await evaluate_add_card(1, "bolt", "Standard", 0, 2, fake_provider)

        assert decision.ok is False
        assert decision.kind is FailureKind.INVALID_QUANTITY
        assert decision.new_quantity == 0

    async def test_invalid_quantity_skips_lookup(self, fake_provider) -> None:
        await evaluate_add_card(1, "bolt", "Standard", "lots", 0, fake_provider)

        assert fake_provider.calls == []

    async def test_lookup_failure_applies_normal_limits(self, fake_provider) -> None:
        """A flaky provider must not grant unlimited copies."""
        decision = await evaluate_add_card(1, "flaky", "Commander", 2, 0, fake_provider)

        assert decision.ok is False
        assert decision.kind is FailureKind.LIMIT_EXCEEDED

    async def test_unknown_format_uses_default_cap(self, fake_provider) -> None:
        accepted = await evaluate_add_card(1, "bolt", "Kitchen Table", 4, 0, fake_provider)
        rejected = await evaluate_add_card(1, "bolt", "Kitchen Table", 5, 0, fake_provider)

        assert accepted.ok is True
        assert rejected.ok is False
        assert rejected.message.startswith("Kitchen Table only allows 4 copies")

    async def test_no_format_uses_default_cap(self, fake_provider) -> None:
        decision = await evaluate_add_card(1, "bolt", None, 5, 0, fake_provider)

        assert decision.ok is False
        assert decision.message.startswith("this format only allows 4 copies")


class TestEvaluateSetQuantity:
    async def test_zero_removes_without_lookup(self, fake_provider) -> None:
        decision = await evaluate_set_quantity(1, "bolt", "Standard", 0, fake_provider)

        assert decision.ok is True
        assert decision.removes_entry is True
        assert fake_provider.calls == []

    async def test_negative_invalid(self, fake_provider) -> None:
        decision = await evaluate_set_quantity(1, "bolt", "Standard", -1, fake_provider)

        assert decision.ok is False
        assert decision.kind is FailureKind.INVALID_QUANTITY

    async def test_over_cap_rejected(self, fake_provider) -> None:
        decision = await evaluate_set_quantity(1, "sol-ring", "Brawl", 2, fake_provider)

        assert decision.ok is False
        assert decision.message == "Brawl only allows 1 copy of each card (except basic lands)"

    async def test_basic_land_set_freely(self, fake_provider) -> None:
        decision = await evaluate_set_quantity(1, "island", "Commander", 35, fake_provider)

        assert decision.ok is True
        assert decision.new_quantity == 35
        assert decision.removes_entry is False
