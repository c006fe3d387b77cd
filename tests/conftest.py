import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["NOTIFICATION_BACKEND"] = "log"
os.environ["APPLY_HOST_TIMEZONE"] = "true"

import time as time_module
import uuid

import pytest
from fastapi.testclient import TestClient

from app.db.base import Base
from app.db.session import engine, SessionLocal
from app.main import app
from app.models.booking import Booking, BookingStatus
from app.models.calendar_settings import CalendarSettings
from app.models.meeting_type import MeetingType
from app.models.unavailable_time import UnavailableTime
from app.models.user import User
from app.services.scheduling.calendar_settings import default_calendar_settings


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def host(db):
    user = User(email=f"host-{uuid.uuid4().hex[:8]}@example.com", full_name="Camille Host")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def utc_calendar(db, host):
    """Default working hours, read in UTC so expectations stay readable."""
    row = CalendarSettings(**{**default_calendar_settings(host.id), "timezone": "UTC"})
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def make_meeting_type(db, host):
    def _make(duration_minutes=30, name="Intro call"):
        meeting_type = MeetingType(user_id=host.id, name=name, duration_minutes=duration_minutes)
        db.add(meeting_type)
        db.commit()
        db.refresh(meeting_type)
        return meeting_type
    return _make


@pytest.fixture
def make_booking(db, host, make_meeting_type):
    def _make(start, end, status=BookingStatus.confirmed, meeting_type=None):
        meeting_type = meeting_type or make_meeting_type()
        booking = Booking(
            host_user_id=host.id,
            meeting_type_id=meeting_type.id,
            guest_name="Guest",
            guest_email="guest@example.com",
            start_time=start,
            end_time=end,
            status=status,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking
    return _make


@pytest.fixture
def make_block(db, host):
    def _make(start, end, is_all_day=False):
        block = UnavailableTime(user_id=host.id, start_time=start, end_time=end, is_all_day=is_all_day)
        db.add(block)
        db.commit()
        db.refresh(block)
        return block
    return _make


@pytest.fixture
def paris_server(monkeypatch):
    """Run the test with the server's local zone set to Europe/Paris."""
    if not hasattr(time_module, "tzset"):
        pytest.skip("needs time.tzset")
    monkeypatch.setenv("TZ", "Europe/Paris")
    time_module.tzset()
    yield
    monkeypatch.undo()
    time_module.tzset()
