from typing import Any
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.schemas import calendar_settings as settings_schemas
from app.services.scheduling.calendar_settings import resolve_settings, update_settings

router = APIRouter()


@router.get("", response_model=settings_schemas.CalendarSettings)
def read_calendar_settings(
    *,
    db: Session = Depends(deps.get_db),
    user_id: uuid.UUID = Query(...),
) -> Any:
    """
    Get a host's calendar settings, creating the defaults on first access.
    """
    return resolve_settings(db, user_id)


@router.put("", response_model=settings_schemas.CalendarSettings)
def update_calendar_settings(
    *,
    db: Session = Depends(deps.get_db),
    user_id: uuid.UUID = Query(...),
    settings_in: settings_schemas.CalendarSettingsUpdate,
) -> Any:
    changes = settings_in.model_dump(exclude_none=True)
    if "working_hours" in changes:
        changes["working_hours"] = {
            day: schedule for day, schedule in changes["working_hours"].items() if schedule
        }
    return update_settings(db, user_id, changes)
