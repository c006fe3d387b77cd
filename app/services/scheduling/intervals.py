"""
Half-open interval helpers shared by the availability read path and the
booking write path. Every overlap decision in the engine goes through
``overlaps`` so both paths agree on boundaries.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import NamedTuple, Optional


class Interval(NamedTuple):
    """A half-open time range [start, end)."""
    start: datetime
    end: datetime


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """
    True when [a_start, a_end) and [b_start, b_end) share any instant.

    Touching endpoints (a_end == b_start or b_end == a_start) do not overlap.
    """
    return (
        (a_start >= b_start and a_start < b_end)
        or (a_end > b_start and a_end <= b_end)
        or (a_start <= b_start and a_end >= b_end)
    )


def as_utc(value: datetime, zone: Optional[tzinfo] = None) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive values are read in ``zone`` when given, otherwise as UTC
    (SQLite hands back naive datetimes for what was stored as UTC).
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=zone or timezone.utc)
    return value.astimezone(timezone.utc)


def to_utc(value: datetime, zone: Optional[tzinfo]) -> datetime:
    """
    Normalize an incoming datetime to aware UTC. Naive values are wall-clock
    time in ``zone``, or in the server's local zone when ``zone`` is None.
    """
    if value.tzinfo is None and zone is None:
        return value.astimezone(timezone.utc)
    return as_utc(value, zone)


def parse_clock(value) -> Optional[time]:
    """Parse "HH:MM" into a time, or None when missing or malformed."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        return None
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return time(hour, minute)


def at(day: date, clock: time, zone: Optional[tzinfo]) -> datetime:
    """
    The UTC instant of wall-clock ``clock`` on ``day`` in ``zone``. With no
    zone the server's local rules for that date apply.
    """
    if zone is None:
        return datetime.combine(day, clock).astimezone(timezone.utc)
    return datetime.combine(day, clock, tzinfo=zone).astimezone(timezone.utc)


def day_window(day: date, zone: Optional[tzinfo]) -> Interval:
    """[midnight, next midnight) of ``day`` in ``zone``, as UTC."""
    start = at(day, time(0, 0), zone)
    end = at(day + timedelta(days=1), time(0, 0), zone)
    return Interval(start, end)
