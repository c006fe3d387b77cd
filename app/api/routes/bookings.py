from datetime import datetime
from typing import Any, List, Optional
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.models.booking import Booking, BookingStatus
from app.schemas import booking as booking_schemas
from app.services.scheduling import bookings as booking_service
from app.services.scheduling.intervals import as_utc

router = APIRouter()


@router.get("", response_model=List[booking_schemas.Booking])
def read_bookings(
    *,
    db: Session = Depends(deps.get_db),
    user_id: uuid.UUID = Query(...),
    status: Optional[BookingStatus] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Any:
    """
    List a host's bookings ordered by start time.
    """
    query = db.query(Booking).filter(Booking.host_user_id == user_id)

    if status:
        query = query.filter(Booking.status == status)
    if start_date:
        query = query.filter(Booking.start_time >= as_utc(start_date))
    if end_date:
        query = query.filter(Booking.start_time <= as_utc(end_date))

    return query.order_by(Booking.start_time.asc()).all()


@router.post("", response_model=booking_schemas.Booking)
def create_booking(
    *,
    db: Session = Depends(deps.get_db),
    booking_in: booking_schemas.BookingCreate,
) -> Any:
    """
    Book a slot. Responds 409 with the colliding bookings when the slot is taken.
    """
    return booking_service.create_booking(db, booking_in.model_dump())


@router.get("/{id}", response_model=booking_schemas.Booking)
def read_booking(
    *,
    id: uuid.UUID,
    db: Session = Depends(deps.get_db),
) -> Any:
    return booking_service.get_booking(db, id)


@router.patch("/{id}", response_model=booking_schemas.Booking)
def update_booking(
    *,
    id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    booking_in: booking_schemas.BookingUpdate,
) -> Any:
    """
    Update or reschedule a booking. A new time is checked against the
    host's other bookings first.
    """
    return booking_service.update_booking(db, id, booking_in.model_dump(exclude_unset=True))


@router.patch("/{id}/cancel", response_model=booking_schemas.Booking)
def cancel_booking(
    *,
    id: uuid.UUID,
    db: Session = Depends(deps.get_db),
) -> Any:
    return booking_service.cancel_booking(db, id)


@router.delete("/{id}")
def delete_booking(
    *,
    id: uuid.UUID,
    db: Session = Depends(deps.get_db),
) -> Any:
    booking_service.delete_booking(db, id)
    return {"success": True}
