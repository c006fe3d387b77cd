from typing import Any, List
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.core import errors
from app.models.booking import Booking
from app.models.meeting_type import MeetingType, DEFAULT_COLOR
from app.schemas import meeting_type as meeting_type_schemas
from app.services.scheduling.availability import get_meeting_type

router = APIRouter()


@router.get("", response_model=List[meeting_type_schemas.MeetingType])
def read_meeting_types(
    *,
    db: Session = Depends(deps.get_db),
    user_id: uuid.UUID = Query(...),
) -> Any:
    """
    List a host's meeting types, newest first.
    """
    return db.query(MeetingType).filter(
        MeetingType.user_id == user_id
    ).order_by(MeetingType.created_at.desc()).all()


@router.post("", response_model=meeting_type_schemas.MeetingType)
def create_meeting_type(
    *,
    db: Session = Depends(deps.get_db),
    meeting_type_in: meeting_type_schemas.MeetingTypeCreate,
) -> Any:
    meeting_type = MeetingType(
        **meeting_type_in.model_dump(exclude={"color"}),
        color=meeting_type_in.color or DEFAULT_COLOR,
    )
    db.add(meeting_type)
    db.commit()
    db.refresh(meeting_type)
    return meeting_type


@router.get("/{id}", response_model=meeting_type_schemas.MeetingType)
def read_meeting_type(
    *,
    id: uuid.UUID,
    db: Session = Depends(deps.get_db),
) -> Any:
    return get_meeting_type(db, id)


@router.put("/{id}", response_model=meeting_type_schemas.MeetingType)
def update_meeting_type(
    *,
    id: uuid.UUID,
    db: Session = Depends(deps.get_db),
    meeting_type_in: meeting_type_schemas.MeetingTypeUpdate,
) -> Any:
    """
    Update a meeting type. Existing bookings keep their times.
    """
    meeting_type = get_meeting_type(db, id)

    for field, value in meeting_type_in.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(meeting_type, field, value)

    db.add(meeting_type)
    db.commit()
    db.refresh(meeting_type)
    return meeting_type


@router.delete("/{id}")
def delete_meeting_type(
    *,
    id: uuid.UUID,
    db: Session = Depends(deps.get_db),
) -> Any:
    meeting_type = get_meeting_type(db, id)

    in_use = db.query(Booking.id).filter(Booking.meeting_type_id == id).first()
    if in_use:
        raise errors.ConflictError(
            "Meeting type has bookings; deactivate it instead",
            details={"meeting_type_id": str(id)},
        )

    db.delete(meeting_type)
    db.commit()
    return {"success": True}
