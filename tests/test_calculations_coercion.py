"""
Tests for field coercion
"""

from datetime import date

import pytest

from chargelog.calculations.coercion import (
    TimeOfDay,
    format_decimal,
    format_minutes,
    parse_date,
    parse_decimal,
    parse_flag,
    parse_money,
    parse_time_of_day,
)
from chargelog.calculations.constants import TRUTHY_FLAGS


class TestParseMoney:
    """Test tolerant money parsing"""

    def test_currency_symbol_and_separator(self):
        assert parse_money("$1,234.56") == 1234.56

    def test_empty_is_zero(self):
        assert parse_money("") == 0

    def test_letters_only_is_zero(self):
        assert parse_money("abc") == 0

    def test_none_is_zero(self):
        assert parse_money(None) == 0

    def test_negative_amount(self):
        assert parse_money("-5.25") == -5.25

    def test_trailing_currency_code(self):
        assert parse_money("12.50 AUD") == 12.5

    def test_unparseable_remainder_is_zero(self):
        """'1.2.3' survives cleaning but is not a number"""
        assert parse_money("1.2.3") == 0

    def test_lone_minus_is_zero(self):
        assert parse_money("-") == 0


class TestParseFlag:
    """Test yes/no flag parsing"""

    @pytest.mark.parametrize("raw", ["YES ", "yes", "Y", " true ", "TRUE", "✓"])
    def test_truthy_values(self, raw):
        assert parse_flag(raw) is True

    @pytest.mark.parametrize("raw", ["no", "", "n", "false", "1", "yes please", None])
    def test_falsy_values(self, raw):
        assert parse_flag(raw) is False

    def test_truthy_set_is_fixed(self):
        """Adding a synonym is a behaviour change and should fail this test"""
        assert TRUTHY_FLAGS == {"yes", "y", "true", "✓"}


class TestParseTimeOfDay:
    """Test HH:MM parsing"""

    def test_valid_time(self):
        assert parse_time_of_day("22:05") == TimeOfDay(22, 5)

    def test_surrounding_whitespace(self):
        assert parse_time_of_day(" 9:30 ") == TimeOfDay(9, 30)

    def test_seconds_are_ignored(self):
        assert parse_time_of_day("08:15:59") == TimeOfDay(8, 15)

    def test_hour_range_not_validated(self):
        """25:00 is accepted and simply counts as more minutes"""
        result = parse_time_of_day("25:00")
        assert result == TimeOfDay(25, 0)
        assert result.total_minutes() == 1500

    @pytest.mark.parametrize("raw", ["", "10am", "10", "ab:cd", "10:-5", "1:2:3:4", None])
    def test_invalid(self, raw):
        assert parse_time_of_day(raw) is None


class TestParseDecimal:
    """Test decimal parsing where invalid differs from zero"""

    def test_valid(self):
        assert parse_decimal("12.5") == 12.5

    def test_zero_is_valid(self):
        assert parse_decimal("0") == 0.0

    def test_empty_is_invalid(self):
        assert parse_decimal("") is None

    def test_garbage_is_invalid(self):
        assert parse_decimal("twelve") is None

    def test_thousands_separator_is_invalid(self):
        assert parse_decimal("1,000") is None

    @pytest.mark.parametrize("raw", ["nan", "inf", "-Infinity"])
    def test_non_finite_is_invalid(self, raw):
        assert parse_decimal(raw) is None


class TestParseDate:
    """Test tolerant date parsing"""

    @pytest.mark.parametrize("raw", [
        "2024-03-01",
        "2024/03/01",
        "01/03/2024",
        "01-Mar-2024",
        "1 Mar 2024",
        "Mar 1, 2024",
        "March 1, 2024",
        "2024-03-01T08:30",
    ])
    def test_supported_formats(self, raw):
        assert parse_date(raw) == date(2024, 3, 1)

    @pytest.mark.parametrize("raw", ["", "yesterday", "2024-13-01", None])
    def test_invalid(self, raw):
        assert parse_date(raw) is None


class TestFormatting:
    """Test display helpers"""

    def test_format_decimal(self):
        assert format_decimal(0.15, 2) == "0.15"

    def test_format_decimal_none(self):
        assert format_decimal(None, 2) == ""

    def test_format_decimal_negative_zero(self):
        assert format_decimal(-0.0001, 2) == "0.00"

    def test_format_minutes(self):
        assert format_minutes(510) == "8:30"
        assert format_minutes(0) == "0:00"
        assert format_minutes(1500) == "25:00"
