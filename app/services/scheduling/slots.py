from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, List, Mapping, Optional

from app.core import errors
from app.services.scheduling.intervals import Interval, as_utc, at, overlaps, parse_clock


def generate_slots(
    day: date,
    day_schedule: Mapping[str, str],
    slot_minutes: int,
    meeting_minutes: int,
    zone: Optional[tzinfo],
) -> List[datetime]:
    """
    Candidate start times (UTC) for ``day``.

    Steps from the opening time by ``slot_minutes`` and keeps a start only
    when the whole meeting ends at or before closing time. The schedule is
    assumed enabled and well formed; callers short-circuit otherwise.
    """
    if slot_minutes <= 0 or meeting_minutes <= 0:
        raise errors.ValidationError(
            "Slot and meeting durations must be positive",
            details={"slot_minutes": slot_minutes, "meeting_minutes": meeting_minutes},
        )

    opening = parse_clock(day_schedule.get("start"))
    closing = parse_clock(day_schedule.get("end"))
    if opening is None or closing is None:
        raise errors.ValidationError(
            "Day schedule needs start and end as HH:MM",
            details={"day_schedule": dict(day_schedule)},
        )

    start = at(day, opening, zone)
    end = at(day, closing, zone)
    step = timedelta(minutes=slot_minutes)
    length = timedelta(minutes=meeting_minutes)

    slots = []
    current = start
    while current < end:
        if current + length <= end:
            slots.append(current)
        current += step

    return slots


def expand_block(block, window: Interval) -> Interval:
    """The interval a block occupies; all-day blocks take the whole window."""
    if block.is_all_day:
        return window
    return Interval(as_utc(block.start_time), as_utc(block.end_time))


def filter_available(
    slots: Iterable[datetime],
    meeting_minutes: int,
    bookings: Iterable,
    blocks: Iterable,
    window: Interval,
) -> List[datetime]:
    """
    Drop every slot whose [start, start + meeting) overlaps a booking or an
    unavailable block. ``bookings`` and ``blocks`` need ``start_time`` and
    ``end_time`` (naive values are read as UTC); blocks also need ``is_all_day``.
    """
    length = timedelta(minutes=meeting_minutes)
    taken = [Interval(as_utc(b.start_time), as_utc(b.end_time)) for b in bookings]
    taken += [expand_block(b, window) for b in blocks]

    available = []
    for start in slots:
        end = start + length
        if any(overlaps(start, end, t.start, t.end) for t in taken):
            continue
        available.append(start)

    return available
