"""
Date helpers for record timestamps.

Spreadsheet exports are inconsistent about date formats, so record dates are
kept as text and only interpreted here when a calendar date is needed
(month bucketing, year-to-date filtering).
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

MONTH_NAMES: tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# Tried in order after ISO parsing fails.
_FALLBACK_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m-%d-%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def parse_record_date(text: Optional[str]) -> Optional[date]:
    """Interpret a record's date text as a calendar date.

    Accepts ISO dates (``2024-01-15``), ISO datetimes (with or without a
    trailing ``Z``), US sheet dates (``1/15/2024``, ``1/15/24``) and
    spelled-out months (``January 15, 2024``).

    Returns:
        The calendar date, or ``None`` if the text is empty or unrecognised.
    """
    if not text:
        return None
    value = text.strip()
    if not value:
        return None

    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def month_name(month: int) -> str:
    """Return the full English month name for a 1-based month number."""
    return MONTH_NAMES[month - 1]


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)
