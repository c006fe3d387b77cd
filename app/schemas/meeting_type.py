from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from typing import Optional


class MeetingTypeCreate(BaseModel):
    user_id: UUID
    name: str = Field(min_length=1)
    description: Optional[str] = None
    duration_minutes: int = Field(gt=0)
    price: Optional[Decimal] = None
    color: Optional[str] = None
    is_active: bool = True


class MeetingTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    price: Optional[Decimal] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None


class MeetingType(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    description: Optional[str]
    duration_minutes: int
    price: Optional[Decimal]
    color: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
