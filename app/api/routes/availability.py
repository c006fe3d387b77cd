from datetime import date
from typing import Optional
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.schemas.availability import AvailabilityOut
from app.services.scheduling.availability import get_availability
from app.services.scheduling.calendar_settings import resolve_settings


router = APIRouter()


@router.get("", response_model=AvailabilityOut)
def read_availability(
    *,
    db: Session = Depends(deps.get_db),
    user_id: uuid.UUID = Query(...),
    meeting_type_id: uuid.UUID = Query(...),
    date: date = Query(..., description="YYYY-MM-DD"),
    exclude_booking_id: Optional[uuid.UUID] = None,
):
    """
    Open start times for a meeting type on one day.
    exclude_booking_id leaves that booking out of the conflict set (rescheduling in place).
    """
    slots = get_availability(db, user_id, meeting_type_id, date, exclude_booking_id)
    calendar = resolve_settings(db, user_id)

    return {
        "date": date,
        "user_id": user_id,
        "meeting_type_id": meeting_type_id,
        "timezone": calendar.timezone,
        "available_slots": slots,
    }
