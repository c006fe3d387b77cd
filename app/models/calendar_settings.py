import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class CalendarSettings(Base):
    __tablename__ = "user_calendar_settings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    timezone = Column(String, nullable=False, default="Europe/Paris")

    # {"monday": {"start": "09:00", "end": "17:00", "enabled": true}, ...}
    working_hours = Column(JSON, nullable=False)

    slot_duration_minutes = Column(Integer, nullable=False, default=30)
    break_time_minutes = Column(Integer, nullable=False, default=60)
    advance_booking_days = Column(Integer, nullable=False, default=30)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    user = relationship("User", back_populates="calendar_settings")
