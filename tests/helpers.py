from datetime import date, datetime, timezone

# a Monday
MONDAY = date(2026, 10, 19)


def utc(day: date, hhmm: str) -> datetime:
    hour, minute = (int(p) for p in hhmm.split(":"))
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def parse_slot(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
