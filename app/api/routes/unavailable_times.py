from datetime import datetime
from typing import Any, List, Optional
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.core import errors
from app.models.unavailable_time import UnavailableTime
from app.schemas import unavailable_time as unavailable_schemas
from app.services.scheduling.calendar_settings import host_zone, resolve_settings
from app.services.scheduling.intervals import as_utc, to_utc

router = APIRouter()


@router.get("", response_model=List[unavailable_schemas.UnavailableTime])
def read_unavailable_times(
    *,
    db: Session = Depends(deps.get_db),
    user_id: uuid.UUID = Query(...),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Any:
    """
    List a host's blocks, optionally only those overlapping [start, end).
    """
    query = db.query(UnavailableTime).filter(UnavailableTime.user_id == user_id)
    if end:
        query = query.filter(UnavailableTime.start_time < as_utc(end))
    if start:
        query = query.filter(UnavailableTime.end_time > as_utc(start))
    return query.order_by(UnavailableTime.start_time).all()


@router.post("", response_model=unavailable_schemas.UnavailableTime)
def create_unavailable_time(
    *,
    db: Session = Depends(deps.get_db),
    block_in: unavailable_schemas.UnavailableTimeCreate,
) -> Any:
    zone = host_zone(resolve_settings(db, block_in.user_id))
    start = to_utc(block_in.start_time, zone)
    end = to_utc(block_in.end_time, zone)

    if end < start or (end == start and not block_in.is_all_day):
        raise errors.ValidationError(
            "end_time must be after start_time",
            details={"start_time": start.isoformat(), "end_time": end.isoformat()},
        )

    block = UnavailableTime(
        user_id=block_in.user_id,
        start_time=start,
        end_time=end,
        is_all_day=block_in.is_all_day,
        reason=block_in.reason,
    )
    db.add(block)
    db.commit()
    db.refresh(block)
    return block


@router.delete("/{id}")
def delete_unavailable_time(
    *,
    id: uuid.UUID,
    db: Session = Depends(deps.get_db),
) -> Any:
    block = db.query(UnavailableTime).filter(UnavailableTime.id == id).first()
    if not block:
        raise errors.NotFoundError("Unavailable time not found", details={"id": str(id)})

    db.delete(block)
    db.commit()
    return {"success": True}
