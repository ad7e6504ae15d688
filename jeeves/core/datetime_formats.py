"""
Date and time normalization for JeevesBot
Recognizes the loosely formatted date/time tokens users type in chat or in
the web form and converts them to the canonical DD-MM-YYYY / HH:MM forms.

Recognition happens in two steps:
1. Structural match - the token is matched against a fixed, ordered list of
   shapes. The first shape that matches wins, even if the values turn out
   to be impossible.
2. Semantic validation - the matched numbers must form a real calendar
   date or wall-clock time.

A token that fails step 1 is "unrecognized"; one that fails step 2 is
"invalid". Callers get a different exception for each.
"""

import re
from dataclasses import dataclass
from datetime import date, time
from typing import Callable, List, Optional, Pattern, Tuple


# Two-digit years always belong to this century
CENTURY_BASE = 2000

SUPPORTED_DATE_FORMATS = [
    "DD-MM-YYYY (24-12-2025)",
    "DD-MM-YY (24-12-25)",
    "DD.MM.YYYY (24.12.2025)",
    "DD.MM.YY (24.12.25)",
    "DDMMYY (241225)",
    "DDMMYYYY (24122025)",
]

SUPPORTED_TIME_FORMATS = [
    "HH:MM (14:30)",
    "HH.MM (14.30)",
]


def _full_year(value: str) -> int:
    return int(value)


def _short_year(value: str) -> int:
    return CENTURY_BASE + int(value)


# Ordered: (pattern, year converter). Each pattern captures day, month, year.
DATE_PATTERNS: List[Tuple[Pattern[str], Callable[[str], int]]] = [
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$", re.ASCII), _full_year),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{2})$", re.ASCII), _short_year),
    (re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$", re.ASCII), _full_year),
    (re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{2})$", re.ASCII), _short_year),
    (re.compile(r"^(\d{2})(\d{2})(\d{2})$", re.ASCII), _short_year),
    (re.compile(r"^(\d{2})(\d{2})(\d{4})$", re.ASCII), _full_year),
]

TIME_PATTERNS: List[Pattern[str]] = [
    re.compile(r"^(\d{1,2}):(\d{2})$", re.ASCII),
    re.compile(r"^(\d{1,2})\.(\d{2})$", re.ASCII),
]


class DateTimeInputError(ValueError):
    """Base class for rejected date/time tokens"""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw


class UnrecognizedFormatError(DateTimeInputError):
    """Token does not match any supported shape"""

    def __init__(self, message: str, raw: str, field: str):
        super().__init__(message, raw)
        self.field = field


class InvalidDateError(DateTimeInputError):
    """Token has a date shape but names a day that does not exist"""


class InvalidTimeError(DateTimeInputError):
    """Token has a time shape but the hour or minute is out of range"""


@dataclass(frozen=True)
class ParsedDate:
    """Structurally matched date, not yet checked against the calendar"""
    day: int
    month: int
    year: int

    @property
    def formatted(self) -> str:
        return f"{self.day:02d}-{self.month:02d}-{self.year:04d}"

    def is_valid(self) -> bool:
        return is_valid_date(self.day, self.month, self.year)


@dataclass(frozen=True)
class ParsedTime:
    """Structurally matched time, not yet range checked"""
    hours: int
    minutes: int

    @property
    def formatted(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}"

    def is_valid(self) -> bool:
        return is_valid_time(self.hours, self.minutes)


def parse_date_input(raw: str) -> Optional[ParsedDate]:
    """
    Match a date token against the supported shapes.

    Args:
        raw: Date token as typed by the user (surrounding whitespace ignored)

    Returns:
        ParsedDate for the first matching shape, or None if no shape matches
    """
    value = raw.strip()
    for pattern, to_year in DATE_PATTERNS:
        match = pattern.match(value)
        if match:
            day, month, year = match.groups()
            return ParsedDate(day=int(day), month=int(month), year=to_year(year))
    return None


def parse_time_input(raw: str) -> Optional[ParsedTime]:
    """
    Match a time token against the supported shapes.

    Args:
        raw: Time token as typed by the user (surrounding whitespace ignored)

    Returns:
        ParsedTime for the first matching shape, or None if no shape matches
    """
    value = raw.strip()
    for pattern in TIME_PATTERNS:
        match = pattern.match(value)
        if match:
            hours, minutes = match.groups()
            return ParsedTime(hours=int(hours), minutes=int(minutes))
    return None


def is_valid_date(day: int, month: int, year: int) -> bool:
    """Check that day/month/year names a real calendar day."""
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def is_valid_time(hours: int, minutes: int) -> bool:
    return 0 <= hours <= 23 and 0 <= minutes <= 59


def normalize_date(raw: str) -> date:
    """
    Convert a date token in any supported shape to a date.

    Raises:
        UnrecognizedFormatError: Token matches none of the date shapes
        InvalidDateError: Token matches a shape but the day does not exist
    """
    parsed = parse_date_input(raw)
    if parsed is None:
        raise UnrecognizedFormatError(
            f'Invalid date format: "{raw}". '
            f"Supported date formats: {', '.join(SUPPORTED_DATE_FORMATS)}",
            raw,
            field="date",
        )
    if not parsed.is_valid():
        raise InvalidDateError(
            f'Invalid date: "{raw}" ({parsed.formatted}) does not exist in the calendar',
            raw,
        )
    return date(parsed.year, parsed.month, parsed.day)


def normalize_time(raw: str) -> time:
    """
    Convert a time token in any supported shape to a time.

    Raises:
        UnrecognizedFormatError: Token matches none of the time shapes
        InvalidTimeError: Hour outside 00-23 or minute outside 00-59
    """
    parsed = parse_time_input(raw)
    if parsed is None:
        raise UnrecognizedFormatError(
            f'Invalid time format: "{raw}". '
            f"Supported time formats: {', '.join(SUPPORTED_TIME_FORMATS)}",
            raw,
            field="time",
        )
    if not parsed.is_valid():
        raise InvalidTimeError(
            f'Invalid time: "{raw}". Hours must be 00-23, minutes must be 00-59',
            raw,
        )
    return time(parsed.hours, parsed.minutes)


def format_date(value: date) -> str:
    return f"{value.day:02d}-{value.month:02d}-{value.year:04d}"


def format_time(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"
