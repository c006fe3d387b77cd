from pydantic import BaseModel
from datetime import date as date_type, datetime
from uuid import UUID
from typing import List


class AvailabilityOut(BaseModel):
    date: date_type
    user_id: UUID
    meeting_type_id: UUID
    timezone: str
    available_slots: List[datetime]
