"""
Unit tests for date/time normalization.
Tests the six date shapes, the two time shapes, the century rule and the
difference between unrecognized and invalid tokens.
"""

import pytest
from datetime import date, time
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from jeeves.core.datetime_formats import (
    InvalidDateError,
    InvalidTimeError,
    ParsedDate,
    UnrecognizedFormatError,
    format_date,
    format_time,
    is_valid_date,
    is_valid_time,
    normalize_date,
    normalize_time,
    parse_date_input,
    parse_time_input,
)


# =============================================================================
# Date recognition
# =============================================================================

class TestParseDateInput:
    """Tests for structural date matching."""

    @pytest.mark.parametrize("raw", [
        "24-12-2025",
        "24-12-25",
        "24.12.2025",
        "24.12.25",
        "241225",
        "24122025",
    ])
    def test_all_supported_shapes_give_same_date(self, raw):
        """Every supported shape of Christmas 2025 normalizes identically."""
        assert format_date(normalize_date(raw)) == "24-12-2025"

    def test_single_digit_day_and_month(self):
        assert parse_date_input("1-2-2025") == ParsedDate(day=1, month=2, year=2025)
        assert format_date(normalize_date("1.2.25")) == "01-02-2025"

    @pytest.mark.parametrize("raw,expected_year", [
        ("01-01-00", 2000),
        ("01-01-25", 2025),
        ("01.01.99", 2099),
        ("010199", 2099),
    ])
    def test_two_digit_year_is_this_century(self, raw, expected_year):
        assert parse_date_input(raw).year == expected_year

    def test_surrounding_whitespace_ignored(self):
        assert parse_date_input("  24-12-2025 ").formatted == "24-12-2025"

    @pytest.mark.parametrize("raw", [
        "21/11/2025",
        "2025-12-24",
        "24-12-202",
        "2412",
        "24 12 2025",
        "tomorrow",
        "",
        "٢٤-١٢-٢٠٢٥",
        "२४१२२५",
    ])
    def test_unsupported_shapes_not_recognized(self, raw):
        assert parse_date_input(raw) is None

    def test_shape_match_does_not_check_calendar(self):
        """Structural match succeeds even for a day that does not exist."""
        parsed = parse_date_input("31-02-2025")
        assert parsed == ParsedDate(day=31, month=2, year=2025)
        assert not parsed.is_valid()


class TestNormalizeDate:
    """Tests for the full recognize-then-validate step."""

    def test_returns_date(self):
        assert normalize_date("21-11-2025") == date(2025, 11, 21)

    def test_impossible_day_is_invalid(self):
        with pytest.raises(InvalidDateError) as exc_info:
            normalize_date("31-02-2025")
        assert "does not exist" in str(exc_info.value)
        assert exc_info.value.raw == "31-02-2025"

    def test_unknown_shape_is_unrecognized(self):
        with pytest.raises(UnrecognizedFormatError) as exc_info:
            normalize_date("21/11/2025")
        message = str(exc_info.value)
        assert 'Invalid date format: "21/11/2025"' in message
        assert "DD-MM-YYYY (24-12-2025)" in message
        assert exc_info.value.field == "date"

    def test_invalid_and_unrecognized_are_distinct(self):
        with pytest.raises(InvalidDateError):
            normalize_date("31-02-2025")
        with pytest.raises(UnrecognizedFormatError):
            normalize_date("21/11/2025")

    def test_leap_years(self):
        assert normalize_date("29-02-2024") == date(2024, 2, 29)
        with pytest.raises(InvalidDateError):
            normalize_date("29-02-2025")

    def test_month_thirteen_is_invalid(self):
        with pytest.raises(InvalidDateError):
            normalize_date("01-13-2025")

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            normalize_date("nope")


# =============================================================================
# Time recognition
# =============================================================================

class TestNormalizeTime:
    """Tests for time matching and range checks."""

    @pytest.mark.parametrize("raw", ["9:30", "9.30", "09:30", "09.30"])
    def test_single_and_double_digit_hours(self, raw):
        assert format_time(normalize_time(raw)) == "09:30"

    def test_dot_and_colon_are_equivalent(self):
        assert normalize_time("14.30") == normalize_time("14:30") == time(14, 30)

    @pytest.mark.parametrize("raw", ["00:00", "23:59"])
    def test_boundaries_accepted(self, raw):
        assert format_time(normalize_time(raw)) == raw

    @pytest.mark.parametrize("raw", ["24:00", "12:60", "99.99"])
    def test_out_of_range_is_invalid(self, raw):
        with pytest.raises(InvalidTimeError) as exc_info:
            normalize_time(raw)
        assert "Hours must be 00-23, minutes must be 00-59" in str(exc_info.value)

    @pytest.mark.parametrize("raw", [
        "930", "9:5", "9-30", "noon", "14:30:00", "", "９:３０",
    ])
    def test_unknown_shape_is_unrecognized(self, raw):
        assert parse_time_input(raw) is None
        with pytest.raises(UnrecognizedFormatError) as exc_info:
            normalize_time(raw)
        assert exc_info.value.field == "time"
        assert "HH:MM (14:30)" in str(exc_info.value)


class TestValidators:
    def test_is_valid_date(self):
        assert is_valid_date(24, 12, 2025)
        assert not is_valid_date(31, 4, 2025)
        assert not is_valid_date(0, 1, 2025)

    def test_is_valid_time(self):
        assert is_valid_time(0, 0)
        assert is_valid_time(23, 59)
        assert not is_valid_time(24, 0)
        assert not is_valid_time(10, 60)

    def test_canonical_formatting_zero_pads(self):
        assert format_date(date(2025, 1, 5)) == "05-01-2025"
        assert format_time(time(7, 5)) == "07:05"
