"""Unit tests for duration parsing, amount scaling and quantity combination."""

import pytest

from dishplanner.normalize.units import (
    CombinedQuantity,
    ParsedAmount,
    combine_quantities,
    extract_quantity_and_unit,
    format_duration,
    format_number,
    is_qualifier,
    normalize_ingredient_name,
    parse_duration_minutes,
    round_half_up,
    scale_amount,
)

# =============================================================================
# Duration Tests
# =============================================================================


class TestParseDurationMinutes:
    """Tests for parse_duration_minutes function."""

    def test_minutes(self):
        assert parse_duration_minutes("30 minutes") == 30
        assert parse_duration_minutes("1 minute") == 1

    def test_hours(self):
        assert parse_duration_minutes("1 hour") == 60
        assert parse_duration_minutes("2 hours") == 120

    def test_hours_and_minutes(self):
        assert parse_duration_minutes("1 hour 30 minutes") == 90
        assert parse_duration_minutes("2h 15min") == 135

    def test_unrecognized_is_zero(self):
        """Strings without units, and empty values, parse to 0."""
        assert parse_duration_minutes("") == 0
        assert parse_duration_minutes(None) == 0
        assert parse_duration_minutes("soon") == 0


class TestFormatDuration:
    """Tests for format_duration function."""

    @pytest.mark.parametrize(
        "minutes,expected",
        [
            (1, "1 minute"),
            (45, "45 minutes"),
            (60, "1 hour"),
            (90, "1 hour 30 minutes"),
            (121, "2 hours 1 minute"),
        ],
    )
    def test_format(self, minutes, expected):
        assert format_duration(minutes) == expected

    def test_output_parses_back(self):
        for minutes in (5, 60, 95, 240):
            assert parse_duration_minutes(format_duration(minutes)) == minutes


# =============================================================================
# Amount Tests
# =============================================================================


class TestRounding:
    """Tests for round_half_up and format_number."""

    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.125, 2) == 0.13

    def test_format_number_drops_trailing_zeros(self):
        assert format_number(2.0) == "2"
        assert format_number(2.5) == "2.5"
        assert format_number(1 / 3) == "0.33"


class TestExtractQuantityAndUnit:
    """Tests for extract_quantity_and_unit function."""

    def test_attached_unit(self):
        assert extract_quantity_and_unit("200g") == ParsedAmount(200.0, "", "g")

    def test_spaced_unit(self):
        assert extract_quantity_and_unit("2 cups") == ParsedAmount(2.0, " ", "cups")

    def test_decimal(self):
        assert extract_quantity_and_unit("1.5 tbsp") == ParsedAmount(1.5, " ", "tbsp")

    def test_non_numeric(self):
        assert extract_quantity_and_unit("to taste") is None
        assert extract_quantity_and_unit("") is None


class TestQualifiers:
    def test_known_qualifiers(self):
        assert is_qualifier("to taste")
        assert is_qualifier("A pinch")
        assert is_qualifier("as needed")

    def test_numeric_amounts_are_not_qualifiers(self):
        assert not is_qualifier("200g")
        assert not is_qualifier("2 pinches")


class TestScaleAmount:
    """Tests for scale_amount function."""

    def test_scales_and_keeps_unit(self):
        assert scale_amount("200g", 2) == "400g"
        assert scale_amount("2 cups", 1.5) == "3 cups"
        assert scale_amount("3 pieces", 0.5) == "1.5 pieces"

    def test_rounds_to_two_decimals(self):
        assert scale_amount("100g", 1 / 3) == "33.33g"

    def test_qualifiers_unchanged(self):
        assert scale_amount("to taste", 3) == "to taste"
        assert scale_amount("a pinch", 2) == "a pinch"

    def test_unparseable_unchanged(self):
        assert scale_amount("handful", 4) == "handful"


# =============================================================================
# Quantity Combination Tests
# =============================================================================


class TestCombineQuantities:
    """Tests for CombinedQuantity and combine_quantities."""

    def test_same_unit_sums(self):
        assert combine_quantities("400g", "200g") == "600g"

    def test_different_units_stay_separate(self):
        assert combine_quantities("2 cups", "600g") == "2 cups + 600g"

    def test_order_does_not_matter(self):
        assert combine_quantities("600g", "2 cups") == combine_quantities("2 cups", "600g")

    def test_qualifier_is_kept_as_literal(self):
        assert combine_quantities("10g", "to taste") == "10g + to taste"

    def test_sum_is_rounded(self):
        assert combine_quantities("0.1 cups", "0.2 cups") == "0.3 cups"

    def test_is_numeric(self):
        assert CombinedQuantity.from_amount("200g").is_numeric
        assert not CombinedQuantity.from_amount("to taste").is_numeric
        combined = CombinedQuantity.from_amount("200g") + CombinedQuantity.from_amount("1 cup")
        assert not combined.is_numeric

    def test_addition_leaves_operands_unchanged(self):
        first = CombinedQuantity.from_amount("200g")
        second = CombinedQuantity.from_amount("100g")
        total = first + second
        assert total.to_display_string() == "300g"
        assert first.to_display_string() == "200g"


class TestNormalizeIngredientName:
    def test_lowercases_and_collapses_whitespace(self):
        assert normalize_ingredient_name("  Soy   Sauce ") == "soy sauce"

    def test_empty(self):
        assert normalize_ingredient_name("") == ""
