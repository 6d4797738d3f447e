"""Calendar-day arithmetic on ISO ``YYYY-MM-DD`` strings.

All values are plain ``datetime.date`` objects: a proleptic Gregorian day
count with no time of day and no time zone.  Differences are therefore exact
whole days and never affected by daylight-saving transitions or the host
locale.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Iterable

# Strict ASCII pattern; ``date.fromisoformat`` alone also accepts "20240101"
# and other ISO 8601 variants.
_ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class InvalidDateFormat(ValueError):
    """Raised when a value is not a real ``YYYY-MM-DD`` calendar date."""

    def __init__(self, value: object, reason: str | None = None) -> None:
        self.value = value
        message = f"Invalid date {value!r}: expected YYYY-MM-DD"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


def is_iso_date(value: object) -> bool:
    """Return True if *value* matches the ``YYYY-MM-DD`` shape.

    Only the pattern is checked; "2024-02-30" passes here and fails in
    :func:`parse_date`.
    """
    return isinstance(value, str) and _ISO_DATE_RE.fullmatch(value) is not None


def parse_date(value: str | date) -> date:
    """Parse a strict ``YYYY-MM-DD`` string.

    ``date`` instances are returned unchanged so callers may pass either form.

    Raises:
        InvalidDateFormat: If the string does not match the pattern or does
            not denote a real calendar date.
    """
    if isinstance(value, date):
        return value
    if not is_iso_date(value):
        raise InvalidDateFormat(value)
    year, month, day = (int(part) for part in value.split("-"))
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDateFormat(value, str(exc)) from exc


def format_date(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def diff_days(a: date, b: date) -> int:
    """Signed number of whole days from *a* to *b* (``b - a``)."""
    return (b - a).days


def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def sort_dates(values: Iterable[str]) -> list[str]:
    """Sort ISO date strings ascending.

    The fixed-width format makes lexicographic order chronological.
    """
    return sorted(values)
