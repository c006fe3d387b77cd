from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from uuid import UUID
from typing import List, Optional

from app.models.booking import BookingStatus
from app.services.scheduling.intervals import as_utc


class BookingAnswerIn(BaseModel):
    question_id: str
    answer: Optional[str] = None


class BookingCreate(BaseModel):
    meeting_type_id: UUID
    host_user_id: UUID

    guest_name: str = Field(min_length=1)
    guest_email: EmailStr
    guest_phone: Optional[str] = None

    start_time: datetime
    end_time: datetime

    notes: Optional[str] = None
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    client_id: Optional[UUID] = None
    prospect_id: Optional[UUID] = None

    answers: Optional[List[BookingAnswerIn]] = None


class BookingUpdate(BaseModel):
    meeting_type_id: Optional[UUID] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: Optional[BookingStatus] = None

    guest_name: Optional[str] = Field(None, min_length=1)
    guest_email: Optional[EmailStr] = None
    guest_phone: Optional[str] = None
    notes: Optional[str] = None
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    client_id: Optional[UUID] = None
    prospect_id: Optional[UUID] = None


class BookingAnswer(BaseModel):
    question_id: str
    answer: Optional[str]

    class Config:
        from_attributes = True


class MeetingTypeSummary(BaseModel):
    id: UUID
    name: str
    duration_minutes: int
    color: str

    class Config:
        from_attributes = True


class BookingSlot(BaseModel):
    """The part of a booking shown to someone it collides with."""
    id: UUID
    start_time: datetime
    end_time: datetime
    status: BookingStatus

    @field_validator("start_time", "end_time")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    class Config:
        from_attributes = True


class Booking(BookingSlot):
    host_user_id: UUID
    meeting_type_id: UUID
    meeting_type: Optional[MeetingTypeSummary] = None

    guest_name: str
    guest_email: str
    guest_phone: Optional[str]

    notes: Optional[str]
    meeting_link: Optional[str]
    location: Optional[str]
    client_id: Optional[UUID]
    prospect_id: Optional[UUID]

    answers: List[BookingAnswer] = []

    created_at: datetime
    updated_at: datetime
