"""
Appointment input parser for JeevesBot
Turns "DATE. TIME. Contact Name. Category" into an AppointmentDraft.

The field separator is a period, which is also allowed inside dates
(24.12.2025) and times (9.30). Splitting therefore yields more than four
segments for those shapes, and split_segments() recovers the intended
grouping by trying a fixed list of layouts in order.

The parser never raises for bad input. Every failure is returned as a
ParseResult whose error text can be shown to the user verbatim.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List

from .datetime_formats import (
    DateTimeInputError,
    normalize_date,
    normalize_time,
    parse_date_input,
    parse_time_input,
)
from .models import AppointmentDraft, ParseResult


logger = logging.getLogger(__name__)

SEPARATOR = "."
EXPECTED_PARTS = 4
INPUT_FORMAT = "DATE. TIME. Contact Name. Category"


@dataclass(frozen=True)
class SegmentSplit:
    """Raw (un-normalized) field values chosen from the split segments"""
    date: str
    time: str
    contact_name: str
    category: str


def split_input(raw: str) -> List[str]:
    """Split on the separator, trim each segment and drop empty ones."""
    return [part.strip() for part in raw.split(SEPARATOR) if part.strip()]


def _join(parts: List[str]) -> str:
    return SEPARATOR.join(parts)


def _positional(parts: List[str]) -> SegmentSplit:
    return SegmentSplit(
        date=parts[0],
        time=parts[1],
        contact_name=parts[2],
        category=_join(parts[3:]),
    )


def _candidate_splits(parts: List[str]) -> Iterator[SegmentSplit]:
    """
    Yield the layouts tried for input with more than four segments.

    Order matters: the first layout whose date and time both match a
    supported shape is used.
    """
    count = len(parts)

    # Date swallowed the extra segments (24.12.2025. 10:30. Name. Category)
    yield SegmentSplit(
        date=_join(parts[:count - 3]),
        time=parts[count - 3],
        contact_name=parts[count - 2],
        category=parts[count - 1],
    )

    # Dotted date, extra periods belong to the category
    if count >= 6:
        yield SegmentSplit(
            date=_join(parts[:3]),
            time=parts[3],
            contact_name=parts[4],
            category=_join(parts[5:]),
        )

    # Dotted time (24-12-2025. 9.30. Name. Category)
    yield SegmentSplit(
        date=parts[0],
        time=_join(parts[1:3]),
        contact_name=parts[3],
        category=_join(parts[4:]),
    )

    # Dotted date and dotted time (24.12.25. 9.30. Name. Category)
    if count >= 7:
        yield SegmentSplit(
            date=_join(parts[:3]),
            time=_join(parts[3:5]),
            contact_name=parts[5],
            category=_join(parts[6:]),
        )


def split_segments(parts: List[str]) -> SegmentSplit:
    """
    Group split segments into date, time, contact name and category.

    Exactly four segments are taken positionally. With more, each
    candidate layout is tried in order and the first whose date and time
    structurally match is returned. When none matches, the positional
    layout is returned so normalization reports the offending token.

    Args:
        parts: Trimmed, non-empty segments (at least four)

    Returns:
        SegmentSplit with raw field values
    """
    if len(parts) == EXPECTED_PARTS:
        return _positional(parts)

    for candidate in _candidate_splits(parts):
        if parse_date_input(candidate.date) and parse_time_input(candidate.time):
            return candidate

    return _positional(parts)


def parse_appointment_input(raw: str) -> ParseResult:
    """
    Parse raw appointment input into a draft.

    Args:
        raw: Text such as "21-11-2025. 14:30. Peter van der Meer. Ghostin 06"

    Returns:
        ParseResult with either the draft or a human-readable error
    """
    parts = split_input(raw or "")

    if len(parts) < EXPECTED_PARTS:
        return ParseResult.fail(
            f"Expected {EXPECTED_PARTS} parts separated by dots "
            f"({INPUT_FORMAT}), but received {len(parts)}."
        )

    split = split_segments(parts)

    try:
        appointment_date = normalize_date(split.date)
        appointment_time = normalize_time(split.time)
    except DateTimeInputError as e:
        logger.debug(f"Rejected appointment input {raw!r}: {e}")
        return ParseResult.fail(str(e))

    return build_draft(appointment_date, appointment_time,
                       split.contact_name, split.category)


def build_draft(appointment_date, appointment_time, contact_name: str,
                category: str) -> ParseResult:
    """Validate the free-text fields and assemble the draft."""
    contact_name = (contact_name or "").strip()
    category = (category or "").strip()

    missing = []
    if not contact_name:
        missing.append("contact name")
    if not category:
        missing.append("category")
    if missing:
        return ParseResult.fail(
            f"Missing {' and '.join(missing)}. "
            f"Expected {EXPECTED_PARTS} parts: {INPUT_FORMAT}."
        )

    return ParseResult.ok(AppointmentDraft(
        date=appointment_date,
        time=appointment_time,
        contact_name=contact_name,
        category=category,
    ))


def parse_appointment_fields(date_text: str, time_text: str,
                             contact_name: str, category: str) -> ParseResult:
    """
    Validate already-separated fields (web form / API body).

    Applies the same date/time rules as parse_appointment_input.
    """
    try:
        appointment_date = normalize_date(date_text or "")
        appointment_time = normalize_time(time_text or "")
    except DateTimeInputError as e:
        return ParseResult.fail(str(e))

    return build_draft(appointment_date, appointment_time, contact_name, category)
