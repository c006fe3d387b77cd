import logging
import uuid
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.core import errors
from app.models.booking import Booking, BookingStatus
from app.models.meeting_type import MeetingType
from app.models.unavailable_time import UnavailableTime
from app.services.scheduling.calendar_settings import WEEKDAYS, host_zone, resolve_settings
from app.services.scheduling.intervals import Interval, day_window, parse_clock
from app.services.scheduling.slots import filter_available, generate_slots

logger = logging.getLogger(__name__)


def get_meeting_type(db: Session, meeting_type_id: uuid.UUID) -> MeetingType:
    meeting_type = db.query(MeetingType).filter(MeetingType.id == meeting_type_id).first()
    if not meeting_type:
        raise errors.NotFoundError(
            "Meeting type not found", details={"meeting_type_id": str(meeting_type_id)}
        )
    return meeting_type


def day_schedule_for(working_hours, day: date) -> Optional[dict]:
    """The schedule for ``day`` if it is enabled and well formed, else None."""
    schedule = (working_hours or {}).get(WEEKDAYS[day.weekday()])
    if not schedule or not schedule.get("enabled"):
        return None

    opening = parse_clock(schedule.get("start"))
    closing = parse_clock(schedule.get("end"))
    if opening is None or closing is None or opening >= closing:
        return None
    return schedule


def bookings_in_window(
    db: Session,
    host_user_id: uuid.UUID,
    window: Interval,
    exclude_booking_id: Optional[uuid.UUID] = None,
) -> List[Booking]:
    query = db.query(Booking).filter(
        Booking.host_user_id == host_user_id,
        Booking.status != BookingStatus.cancelled,
        Booking.start_time < window.end,
        Booking.end_time > window.start,
    )
    if exclude_booking_id:
        query = query.filter(Booking.id != exclude_booking_id)
    return query.all()


def blocks_in_window(db: Session, user_id: uuid.UUID, window: Interval) -> List[UnavailableTime]:
    return db.query(UnavailableTime).filter(
        UnavailableTime.user_id == user_id,
        or_(
            and_(
                UnavailableTime.start_time < window.end,
                UnavailableTime.end_time > window.start,
            ),
            and_(
                UnavailableTime.is_all_day.is_(True),
                UnavailableTime.start_time >= window.start,
                UnavailableTime.start_time < window.end,
            ),
        ),
    ).all()


def get_availability(
    db: Session,
    user_id: uuid.UUID,
    meeting_type_id: uuid.UUID,
    day: date,
    exclude_booking_id: Optional[uuid.UUID] = None,
) -> List[datetime]:
    """
    Open start times (UTC, ascending) for a meeting type on ``day``.

    Empty when the host does not work that day or everything is taken.
    ``exclude_booking_id`` leaves one booking out of the conflict set so it
    can be moved within its own slot.
    """
    calendar = resolve_settings(db, user_id)
    meeting_type = get_meeting_type(db, meeting_type_id)

    schedule = day_schedule_for(calendar.working_hours, day)
    if schedule is None:
        logger.debug("No working hours for user %s on %s", user_id, day)
        return []

    zone = host_zone(calendar)
    window = day_window(day, zone)

    bookings = bookings_in_window(db, user_id, window, exclude_booking_id)
    blocks = blocks_in_window(db, user_id, window)

    candidates = generate_slots(
        day,
        schedule,
        calendar.slot_duration_minutes,
        meeting_type.duration_minutes,
        zone,
    )
    available = filter_available(
        candidates,
        meeting_type.duration_minutes,
        bookings,
        blocks,
        window,
    )

    logger.debug(
        "Availability user=%s date=%s slot=%s meeting=%s bookings=%d blocks=%d candidates=%d available=%d",
        user_id, day, calendar.slot_duration_minutes, meeting_type.duration_minutes,
        len(bookings), len(blocks), len(candidates), len(available),
    )
    return available
