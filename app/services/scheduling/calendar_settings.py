import copy
import logging
import uuid
from datetime import datetime, tzinfo
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import errors
from app.core.config import settings
from app.models.calendar_settings import CalendarSettings
from app.services.scheduling.intervals import parse_clock

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

DEFAULT_WORKING_HOURS: Dict[str, Dict[str, Any]] = {
    day: {"start": "09:00", "end": "17:00", "enabled": day not in ("saturday", "sunday")}
    for day in WEEKDAYS
}


def default_calendar_settings(user_id: uuid.UUID) -> Dict[str, Any]:
    """The settings every host starts with."""
    return {
        "user_id": user_id,
        "timezone": settings.DEFAULT_TIMEZONE,
        "working_hours": copy.deepcopy(DEFAULT_WORKING_HOURS),
        "slot_duration_minutes": 30,
        "break_time_minutes": 60,
        "advance_booking_days": 30,
    }


def get_settings(db: Session, user_id: uuid.UUID, lock: bool = False) -> CalendarSettings | None:
    query = db.query(CalendarSettings).filter(CalendarSettings.user_id == user_id)
    if lock:
        query = query.with_for_update()
    return query.first()


def resolve_settings(db: Session, user_id: uuid.UUID) -> CalendarSettings:
    """
    Load the host's calendar settings, creating and persisting the defaults
    on first access. Repeated calls return the same row.
    """
    row = get_settings(db, user_id)
    if row:
        return row

    row = CalendarSettings(**default_calendar_settings(user_id))
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # another request created it first
        db.rollback()
        existing = get_settings(db, user_id)
        if existing:
            return existing
        raise errors.StorageError(
            "Failed to create calendar settings", details={"user_id": str(user_id)}
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error creating default calendar settings for %s: %s", user_id, exc)
        raise errors.StorageError(
            "Failed to create calendar settings", details={"user_id": str(user_id)}
        ) from exc

    db.refresh(row)
    logger.info("Created default calendar settings for user %s", user_id)
    return row


def validate_working_hours(working_hours: Dict[str, Any]) -> None:
    unknown = set(working_hours) - set(WEEKDAYS)
    if unknown:
        raise errors.ValidationError(
            "Unknown weekday in working hours", details={"days": sorted(unknown)}
        )

    for day, schedule in working_hours.items():
        if not schedule.get("enabled"):
            continue
        start = parse_clock(schedule.get("start"))
        end = parse_clock(schedule.get("end"))
        if start is None or end is None:
            raise errors.ValidationError(
                "Working hours need start and end as HH:MM", details={"day": day}
            )
        if start >= end:
            raise errors.ValidationError(
                "Working hours must end after they start", details={"day": day}
            )


def update_settings(db: Session, user_id: uuid.UUID, changes: Dict[str, Any]) -> CalendarSettings:
    """Upsert: merge ``changes`` into the host's settings (per weekday for working hours)."""
    row = resolve_settings(db, user_id)

    if "timezone" in changes and changes["timezone"] is not None:
        load_zone(changes["timezone"])
        row.timezone = changes["timezone"]

    if changes.get("working_hours"):
        merged = copy.deepcopy(row.working_hours or {})
        for day, schedule in changes["working_hours"].items():
            merged[day] = {**merged.get(day, {}), **schedule}
        validate_working_hours(merged)
        row.working_hours = merged

    for field in ("slot_duration_minutes", "break_time_minutes", "advance_booking_days"):
        if changes.get(field) is not None:
            setattr(row, field, changes[field])

    row.updated_at = datetime.utcnow()
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise errors.StorageError(
            "Failed to update calendar settings", details={"user_id": str(user_id)}
        ) from exc

    db.refresh(row)
    return row


def load_zone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise errors.ValidationError("Unknown timezone", details={"timezone": name}) from None


def host_zone(row: CalendarSettings) -> Optional[tzinfo]:
    """
    The zone working hours are read in. With APPLY_HOST_TIMEZONE off this is
    None: the server's local zone, whatever the host declared.
    """
    if not settings.APPLY_HOST_TIMEZONE:
        return None
    try:
        return load_zone(row.timezone or settings.DEFAULT_TIMEZONE)
    except errors.ValidationError:
        logger.warning("Host %s has unknown timezone %r, using %s",
                       row.user_id, row.timezone, settings.DEFAULT_TIMEZONE)
        return ZoneInfo(settings.DEFAULT_TIMEZONE)
