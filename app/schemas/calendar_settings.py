from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID
from typing import Dict, Any, Optional


class DayScheduleUpdate(BaseModel):
    start: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    end: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    enabled: Optional[bool] = None


class CalendarSettingsUpdate(BaseModel):
    timezone: Optional[str] = None
    working_hours: Optional[Dict[str, DayScheduleUpdate]] = None
    slot_duration_minutes: Optional[int] = Field(None, gt=0)
    break_time_minutes: Optional[int] = Field(None, ge=0)
    advance_booking_days: Optional[int] = Field(None, ge=0)


class CalendarSettings(BaseModel):
    id: UUID
    user_id: UUID
    timezone: str
    working_hours: Dict[str, Dict[str, Any]]
    slot_duration_minutes: int
    break_time_minutes: int
    advance_booking_days: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
