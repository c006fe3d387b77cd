"""
Booking writer: the write-path gate that keeps a host's live bookings from
overlapping.

Every write that places a booking on the calendar (create, reschedule)
locks the host's calendar-settings row, re-reads the host's non-cancelled
bookings, and runs the same overlap predicate as the availability filter
before committing. On PostgreSQL the ``bookings_no_overlap_per_host``
exclusion constraint backs this up; its violation surfaces as a
ConflictError like any other overlap.
"""

import logging
import uuid
from datetime import datetime, timedelta, tzinfo
from typing import Any, Dict, List, Optional

import pydantic
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import errors
from app.models.booking import Booking, BookingAnswer, BookingStatus, NO_OVERLAP_CONSTRAINT
from app.schemas.booking import BookingAnswerIn
from app.services.notifications import get_notifier
from app.services.scheduling.availability import get_meeting_type
from app.services.scheduling.calendar_settings import get_settings, host_zone, resolve_settings
from app.services.scheduling.intervals import as_utc, overlaps, to_utc

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Time slot is not available"

BOOKING_FIELDS = (
    "guest_name", "guest_email", "guest_phone", "notes",
    "meeting_link", "location", "client_id", "prospect_id",
)


def get_booking(db: Session, booking_id: uuid.UUID) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise errors.NotFoundError("Booking not found", details={"booking_id": str(booking_id)})
    return booking


def _lock_host(db: Session, host_user_id: uuid.UUID) -> Optional[tzinfo]:
    """
    Serialize writers for one host on its calendar-settings row and return
    the host zone. The lock is held until the caller commits or rolls back.
    """
    resolve_settings(db, host_user_id)
    row = get_settings(db, host_user_id, lock=True)
    return host_zone(row)


def find_conflicts(
    db: Session,
    host_user_id: uuid.UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_booking_id: Optional[uuid.UUID] = None,
) -> List[Booking]:
    """All of the host's live bookings overlapping [start_time, end_time)."""
    query = db.query(Booking).filter(
        Booking.host_user_id == host_user_id,
        Booking.status != BookingStatus.cancelled,
    )
    if exclude_booking_id:
        query = query.filter(Booking.id != exclude_booking_id)

    start, end = as_utc(start_time), as_utc(end_time)
    return [
        b for b in query.all()
        if overlaps(start, end, as_utc(b.start_time), as_utc(b.end_time))
    ]


def _check_interval(start: datetime, end: datetime) -> None:
    if end <= start:
        raise errors.ValidationError(
            "end_time must be after start_time",
            details={"start_time": start.isoformat(), "end_time": end.isoformat()},
        )


def _raise_conflict(db: Session, start: datetime, end: datetime, conflicts: List[Booking]):
    """Roll back the write and raise with a detached snapshot of the collisions."""
    summary = [
        {
            "id": b.id,
            "start_time": as_utc(b.start_time),
            "end_time": as_utc(b.end_time),
            "status": b.status,
        }
        for b in conflicts
    ]
    db.rollback()
    logger.info(
        "Rejected booking %s-%s: overlaps %s",
        start.isoformat(), end.isoformat(), [str(c["id"]) for c in summary],
    )
    raise errors.ConflictError(
        CONFLICT_MESSAGE,
        conflicts=summary,
        details={"requested_slot": {"start_time": start.isoformat(), "end_time": end.isoformat()}},
    )


def _is_overlap_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    constraint = getattr(diag, "constraint_name", "") or ""
    return constraint == NO_OVERLAP_CONSTRAINT or NO_OVERLAP_CONSTRAINT in str(orig)


def _commit_booking(db: Session, host_user_id: uuid.UUID, start: datetime, end: datetime, exclude_id=None):
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if _is_overlap_violation(exc):
            conflicts = find_conflicts(db, host_user_id, start, end, exclude_id)
            _raise_conflict(db, start, end, conflicts)
        raise errors.StorageError("Failed to save booking") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise errors.StorageError("Failed to save booking") from exc


def _save_answers(db: Session, booking: Booking, answers: List[Dict[str, Any]]) -> None:
    """Best effort: the booking is already committed when this runs."""
    try:
        for answer in answers:
            answer = BookingAnswerIn.model_validate(answer)
            db.add(BookingAnswer(
                booking_id=booking.id,
                question_id=answer.question_id,
                answer=answer.answer,
            ))
        db.commit()
    except (SQLAlchemyError, pydantic.ValidationError, TypeError) as exc:
        db.rollback()
        logger.error("Error saving answers for booking %s: %s", booking.id, exc)


def _notify(event: str, booking: Booking) -> None:
    try:
        get_notifier().notify(event, {
            "booking_id": str(booking.id),
            "host_user_id": str(booking.host_user_id),
            "meeting_type_id": str(booking.meeting_type_id),
            "start_time": as_utc(booking.start_time).isoformat(),
            "end_time": as_utc(booking.end_time).isoformat(),
            "status": booking.status.value,
        })
    except Exception:
        logger.exception("Failed to send %s notification for booking %s", event, booking.id)


def create_booking(db: Session, data: Dict[str, Any]) -> Booking:
    """
    Insert a booking after checking it against every live booking of the host.

    ``data`` carries host_user_id, meeting_type_id, start_time, end_time,
    guest fields and optionally client_id, prospect_id and answers.
    Naive times are read in the host's zone.
    """
    missing = [
        f for f in ("host_user_id", "meeting_type_id", "guest_name", "guest_email", "start_time", "end_time")
        if not data.get(f)
    ]
    if missing:
        raise errors.ValidationError("Missing required fields", details={"fields": missing})

    host_user_id = data["host_user_id"]
    get_meeting_type(db, data["meeting_type_id"])

    zone = _lock_host(db, host_user_id)
    start = to_utc(data["start_time"], zone)
    end = to_utc(data["end_time"], zone)
    _check_interval(start, end)

    conflicts = find_conflicts(db, host_user_id, start, end)
    if conflicts:
        _raise_conflict(db, start, end, conflicts)

    booking = Booking(
        host_user_id=host_user_id,
        meeting_type_id=data["meeting_type_id"],
        start_time=start,
        end_time=end,
        status=BookingStatus.confirmed,
        **{f: data.get(f) for f in BOOKING_FIELDS},
    )
    db.add(booking)
    _commit_booking(db, host_user_id, start, end)
    db.refresh(booking)
    logger.info("Booking created %s for host %s at %s", booking.id, host_user_id, start.isoformat())

    if data.get("answers"):
        _save_answers(db, booking, data["answers"])

    _notify("booking.created", booking)
    return booking


def update_booking(db: Session, booking_id: uuid.UUID, changes: Dict[str, Any]) -> Booking:
    """
    Apply ``changes`` to a booking. Moving it (start, end or meeting type)
    re-runs the conflict check with the booking itself left out. A new
    meeting type recomputes the end time from its duration.
    """
    booking = get_booking(db, booking_id)
    was_cancelled = booking.status == BookingStatus.cancelled

    new_status = changes.get("status")
    if new_status is not None:
        new_status = BookingStatus(new_status)
        if was_cancelled and new_status != BookingStatus.cancelled:
            raise errors.ValidationError(
                "A cancelled booking cannot be re-activated", details={"booking_id": str(booking_id)}
            )

    moving = any(changes.get(f) is not None for f in ("start_time", "end_time", "meeting_type_id"))
    edits = {
        f: changes[f] for f in BOOKING_FIELDS
        if changes.get(f) is not None and changes[f] != getattr(booking, f)
    }
    if not moving and not edits and new_status in (None, booking.status):
        return booking

    if moving:
        zone = _lock_host(db, booking.host_user_id)
        # stored values are UTC; only incoming naive values are host-local
        old_start, old_end = as_utc(booking.start_time), as_utc(booking.end_time)
        start = to_utc(changes["start_time"], zone) if changes.get("start_time") else old_start
        if changes.get("end_time"):
            end = to_utc(changes["end_time"], zone)
        else:
            # moving the start alone keeps the duration
            end = start + (old_end - old_start)

        if changes.get("meeting_type_id") is not None:
            meeting_type = get_meeting_type(db, changes["meeting_type_id"])
            booking.meeting_type_id = meeting_type.id
            end = start + timedelta(minutes=meeting_type.duration_minutes)

        _check_interval(start, end)

        live = not was_cancelled and new_status != BookingStatus.cancelled
        if live:
            conflicts = find_conflicts(db, booking.host_user_id, start, end, exclude_booking_id=booking.id)
            if conflicts:
                _raise_conflict(db, start, end, conflicts)

        booking.start_time = start
        booking.end_time = end
    else:
        start, end = as_utc(booking.start_time), as_utc(booking.end_time)

    for field, value in edits.items():
        setattr(booking, field, value)
    if new_status is not None:
        booking.status = new_status

    _commit_booking(db, booking.host_user_id, start, end, exclude_id=booking.id)
    db.refresh(booking)

    if new_status == BookingStatus.cancelled and not was_cancelled:
        _notify("booking.cancelled", booking)
    else:
        _notify("booking.updated", booking)
    return booking


def cancel_booking(db: Session, booking_id: uuid.UUID) -> Booking:
    return update_booking(db, booking_id, {"status": BookingStatus.cancelled})


def delete_booking(db: Session, booking_id: uuid.UUID) -> None:
    booking = get_booking(db, booking_id)
    db.delete(booking)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise errors.StorageError("Failed to delete booking") from exc
    logger.info("Booking deleted %s", booking_id)
