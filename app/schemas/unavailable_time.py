from pydantic import BaseModel, field_validator
from datetime import datetime
from uuid import UUID
from typing import Optional

from app.services.scheduling.intervals import as_utc


class UnavailableTimeCreate(BaseModel):
    user_id: UUID
    start_time: datetime
    end_time: datetime
    is_all_day: bool = False
    reason: Optional[str] = None


class UnavailableTime(BaseModel):
    id: UUID
    user_id: UUID
    start_time: datetime
    end_time: datetime
    is_all_day: bool
    reason: Optional[str]
    created_at: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    class Config:
        from_attributes = True
