"""
Free-text date parsing for check-in and check-out answers.

Two shapes are accepted, and only as the whole message:
    15/02/2026, 15-2-26, 15.02.2026     (day, month, 2- or 4-digit year)
    15 Feb 2026, 15th february 2026     (month matched on its first 3 letters)

Anything else, including relative words like "tomorrow", is invalid.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

MONTH_ABBREVIATIONS = (
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
)

_NUMERIC_DATE = re.compile(r"(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4}|\d{2})")
_WORDED_DATE = re.compile(
    r"(\d{1,2})(?:st|nd|rd|th)?\s+([a-z]{3,})\.?,?\s+(\d{4}|\d{2})",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ParsedDate:
    """Result of parse_date. ``date`` and the strings are set only when valid."""
    valid: bool
    date: Optional[date] = None
    display: str = ""
    canonical: str = ""


INVALID_DATE = ParsedDate(valid=False)


def _expand_year(raw: str) -> int:
    year = int(raw)
    return 2000 + year if len(raw) == 2 else year


def _build(day: int, month: int, year: int) -> ParsedDate:
    try:
        value = date(year, month, day)
    except ValueError:
        return INVALID_DATE
    # Reject anything a lenient calendar would have rolled over (31/02 -> 03/03)
    if value.day != day or value.month != month:
        return INVALID_DATE
    return ParsedDate(
        valid=True,
        date=value,
        display=format_display(value),
        canonical=value.isoformat(),
    )


def format_display(value: date) -> str:
    """Human form used in replies, e.g. ``10 Feb 2026``."""
    return f"{value.day:02d} {MONTH_ABBREVIATIONS[value.month - 1].title()} {value.year}"


def parse_date(text: str) -> ParsedDate:
    """Parse a guest's date answer into a calendar date."""
    candidate = text.strip()

    match = _NUMERIC_DATE.fullmatch(candidate)
    if match:
        day, month, year = match.groups()
        return _build(int(day), int(month), _expand_year(year))

    match = _WORDED_DATE.fullmatch(candidate)
    if match:
        day, month_word, year = match.groups()
        prefix = month_word[:3].lower()
        if prefix not in MONTH_ABBREVIATIONS:
            return INVALID_DATE
        return _build(int(day), MONTH_ABBREVIATIONS.index(prefix) + 1, _expand_year(year))

    return INVALID_DATE
