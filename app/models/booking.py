import uuid, enum
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Text, CheckConstraint, DDL, event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.db.base_class import Base

class BookingStatus(str, enum.Enum):
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"
    no_show = "no_show"


NO_OVERLAP_CONSTRAINT = "bookings_no_overlap_per_host"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    host_user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    meeting_type_id = Column(
        UUID(as_uuid=True),
        ForeignKey("meeting_types.id"),
        nullable=False,
    )

    guest_name = Column(String, nullable=False)
    guest_email = Column(String, nullable=False, index=True)
    guest_phone = Column(String, nullable=True)

    # always stored as UTC
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)

    status = Column(
        Enum(BookingStatus, name="booking_status"),
        nullable=False,
        default=BookingStatus.confirmed,
    )

    notes = Column(Text, nullable=True)
    meeting_link = Column(String, nullable=True)
    location = Column(String, nullable=True)

    # CRM records live in other services
    client_id = Column(UUID(as_uuid=True), nullable=True)
    prospect_id = Column(UUID(as_uuid=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    meeting_type = relationship("MeetingType", back_populates="bookings")
    answers = relationship(
        "BookingAnswer",
        back_populates="booking",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_bookings_end_after_start"),
    )


class BookingAnswer(Base):
    __tablename__ = "booking_answers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    booking_id = Column(
        UUID(as_uuid=True),
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    question_id = Column(String, nullable=False)
    answer = Column(Text, nullable=True)

    booking = relationship("Booking", back_populates="answers")


# Postgres only: the database itself refuses overlapping live bookings per host.
event.listen(
    Base.metadata,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Booking.__table__,
    "after_create",
    DDL(
        f"ALTER TABLE bookings ADD CONSTRAINT {NO_OVERLAP_CONSTRAINT} "
        "EXCLUDE USING gist ("
        "host_user_id WITH =, "
        "tstzrange(start_time, end_time, '[)') WITH &&"
        ") WHERE (status <> 'cancelled')"
    ).execute_if(dialect="postgresql"),
)
