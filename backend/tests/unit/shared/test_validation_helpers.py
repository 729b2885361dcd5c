"""
Unit tests for shared coercion helpers.

Tests:
- to_decimal coerce-to-zero rules, thousands separators and range
- to_datetime parsing and timezone handling
- to_choice case-insensitive lookup
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from tradejournal.models.trade import Direction
from tradejournal.shared.validation_helpers import (
    strip_thousands_separators,
    to_choice,
    to_datetime,
    to_decimal,
)


class TestToDecimal:
    """Test to_decimal coercion."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1.0800", Decimal("1.0800")),
            ("  42 ", Decimal("42")),
            ("1,250.50", Decimal("1250.50")),
            (7, Decimal("7")),
            (Decimal("-3.5"), Decimal("-3.5")),
        ],
    )
    def test_valid_values(self, value, expected):
        """Test numeric inputs convert without flagging."""
        assert to_decimal(value) == (expected, False)

    def test_float_goes_through_str(self):
        """Test floats keep their short decimal form."""
        result, was_coerced = to_decimal(1.08)

        assert result == Decimal("1.08")
        assert str(result) == "1.08"
        assert was_coerced is False

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_values_are_zero_not_flagged(self, value):
        """Test missing values become zero silently."""
        assert to_decimal(value) == (Decimal("0"), False)

    @pytest.mark.parametrize(
        "value",
        ["abc", "1.2.3", True, False, float("nan"), float("inf"), "NaN", "-Infinity", [1], object()],
    )
    def test_malformed_values_are_zero_and_flagged(self, value):
        """Test malformed values become zero and are flagged."""
        assert to_decimal(value) == (Decimal("0"), True)

    def test_infinite_decimal_flagged(self):
        """Test Decimal infinity is rejected."""
        assert to_decimal(Decimal("Infinity")) == (Decimal("0"), True)

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1,000", Decimal("1000")),
            ("-12,345,678.9", Decimal("-12345678.9")),
            ("1,250.", Decimal("1250")),
        ],
    )
    def test_thousands_separators(self, value, expected):
        """Test grouped thousands are read as one number."""
        assert to_decimal(value) == (expected, False)

    @pytest.mark.parametrize("value", ["1,5", "12,34", "1,0000", ",100", "1,000,00", "1.5,000"])
    def test_other_commas_flagged(self, value):
        """Test a comma that is not a thousands separator is malformed."""
        assert to_decimal(value) == (Decimal("0"), True)

    @pytest.mark.parametrize("value", ["1e100", "-1E+150", 10**100, Decimal("1e300"), 1e200])
    def test_out_of_range_magnitudes_flagged(self, value):
        """Test magnitudes of 1e100 and above are rejected."""
        assert to_decimal(value) == (Decimal("0"), True)

    def test_large_in_range_value(self):
        """Test values just under the limit are kept."""
        assert to_decimal("9.9e99") == (Decimal("9.9e99"), False)


class TestStripThousandsSeparators:
    """Test thousands-separator handling."""

    @pytest.mark.parametrize(
        "text,expected",
        [("1,250.50", "1250.50"), ("+1,000", "+1000"), ("250", "250"), ("abc", "abc")],
    )
    def test_stripped(self, text, expected):
        """Test separators are removed and comma-free text is unchanged."""
        assert strip_thousands_separators(text) == expected

    def test_decimal_comma_rejected(self):
        """Test a decimal comma is not mistaken for a separator."""
        assert strip_thousands_separators("1,5") is None


class TestToDatetime:
    """Test to_datetime parsing."""

    def test_iso_date_string(self):
        """Test a plain ISO date becomes midnight."""
        assert to_datetime("2025-09-01") == (datetime(2025, 9, 1), False)

    def test_iso_datetime_string(self):
        """Test an ISO datetime keeps its time."""
        assert to_datetime("2025-09-01T14:30:00") == (datetime(2025, 9, 1, 14, 30), False)

    def test_timezone_offset_dropped(self):
        """Test offsets are removed, keeping wall-clock time."""
        parsed, was_coerced = to_datetime("2025-09-01T23:30:00+05:00")

        assert parsed == datetime(2025, 9, 1, 23, 30)
        assert parsed.tzinfo is None
        assert was_coerced is False

    def test_aware_datetime(self):
        """Test aware datetimes are made naive."""
        aware = datetime(2025, 9, 1, 8, 0, tzinfo=timezone(timedelta(hours=-4)))

        parsed, _ = to_datetime(aware)

        assert parsed == datetime(2025, 9, 1, 8, 0)

    def test_date_object(self):
        """Test date objects are accepted."""
        assert to_datetime(date(2025, 9, 1)) == (datetime(2025, 9, 1), False)

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_missing(self, value):
        """Test missing dates are None and not flagged."""
        assert to_datetime(value) == (None, False)

    @pytest.mark.parametrize("value", ["not a date", "2025-13-45", 20250901])
    def test_unparseable(self, value):
        """Test unparseable dates are None and flagged."""
        assert to_datetime(value) == (None, True)


class TestToChoice:
    """Test to_choice lookup."""

    WORDS = {"long": Direction.LONG, "buy": Direction.LONG, "short": Direction.SHORT}

    @pytest.mark.parametrize(
        "value,expected",
        [("Long", Direction.LONG), ("SHORT", Direction.SHORT), (" buy ", Direction.LONG)],
    )
    def test_known_words(self, value, expected):
        """Test lookup ignores case and whitespace."""
        assert to_choice(value, self.WORDS, Direction.LONG) == (expected, False)

    def test_enum_input(self):
        """Test enum members are read by value."""
        assert to_choice(Direction.SHORT, self.WORDS, Direction.LONG) == (Direction.SHORT, False)

    def test_missing_uses_default(self):
        """Test None falls back to default without flagging."""
        assert to_choice(None, self.WORDS, Direction.LONG) == (Direction.LONG, False)

    def test_unknown_uses_default_and_flags(self):
        """Test unknown text falls back to default and is flagged."""
        assert to_choice("sideways", self.WORDS, Direction.LONG) == (Direction.LONG, True)
