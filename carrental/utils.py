"""Shared date and time-of-day utilities used across the booking evaluator.

All values are local wall-clock values; no timezone conversion happens here.
Time-of-day strings are ``HH:MM`` (24-hour) and are expected to have been
validated upstream (see ``carrental.checkout.booking_form``).
"""

from datetime import date, datetime, time, timedelta
from typing import Iterator, Union

WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

MINUTES_PER_HOUR = 60


def day_of_week(value: date) -> str:
    """Return the canonical weekday name for a calendar date.

    Examples:
        >>> day_of_week(date(2024, 6, 10))
        'Monday'
        >>> day_of_week(date(2024, 6, 15))
        'Saturday'
    """
    return WEEKDAYS[value.weekday()]


def to_minutes(value: str) -> int:
    """Convert an ``HH:MM`` string to minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * MINUTES_PER_HOUR + int(minutes)


def time_in_range(value: str, start: str, end: str) -> bool:
    """Check ``start <= value <= end`` on minutes since midnight (inclusive)."""
    return to_minutes(start) <= to_minutes(value) <= to_minutes(end)


def format_date(value: date) -> str:
    """Format a date as zero-padded ``YYYY-MM-DD``."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_time(value: Union[datetime, time]) -> str:
    """Format the time-of-day of a datetime or time as zero-padded ``HH:MM``."""
    return f"{value.hour:02d}:{value.minute:02d}"


def combine(day: date, hhmm: str) -> datetime:
    """Build a naive instant from a calendar date and an ``HH:MM`` string."""
    hours, minutes = hhmm.split(":")
    return datetime(day.year, day.month, day.day, int(hours), int(minutes))


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive.

    Datetimes are normalized to their calendar date first, so the walk is
    unaffected by the time components of the boundaries.
    """
    current = start.date() if isinstance(start, datetime) else start
    last = end.date() if isinstance(end, datetime) else end
    while current <= last:
        yield current
        current += timedelta(days=1)
