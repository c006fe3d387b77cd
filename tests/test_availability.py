import uuid
from datetime import date, timedelta

import pytest

from app.core import errors
from app.core.config import settings
from app.models.booking import BookingStatus
from app.services.scheduling.availability import get_availability
from app.services.scheduling.calendar_settings import update_settings
from tests.helpers import MONDAY, parse_slot, utc

SATURDAY = MONDAY + timedelta(days=5)


def get_slots(client, host, meeting_type, day=MONDAY, **params):
    response = client.get("/api/v1/availability", params={
        "user_id": str(host.id),
        "meeting_type_id": str(meeting_type.id),
        "date": day.isoformat(),
        **params,
    })
    assert response.status_code == 200, response.text
    return [parse_slot(s) for s in response.json()["available_slots"]]


def test_open_day_lists_every_half_hour(client, host, utc_calendar, make_meeting_type):
    slots = get_slots(client, host, make_meeting_type(30))

    assert slots == [utc(MONDAY, "09:00") + timedelta(minutes=30 * i) for i in range(16)]


def test_existing_booking_removes_its_slot(client, host, utc_calendar, make_meeting_type, make_booking):
    meeting_type = make_meeting_type(30)
    make_booking(utc(MONDAY, "10:00"), utc(MONDAY, "10:30"), meeting_type=meeting_type)

    slots = get_slots(client, host, meeting_type)

    assert utc(MONDAY, "10:00") not in slots
    assert utc(MONDAY, "09:30") in slots
    assert utc(MONDAY, "10:30") in slots
    assert len(slots) == 15


def test_hour_meeting_in_one_hour_window(client, db, host, utc_calendar, make_meeting_type):
    update_settings(db, host.id, {"working_hours": {"monday": {"start": "09:00", "end": "10:00"}}})

    assert get_slots(client, host, make_meeting_type(60)) == [utc(MONDAY, "09:00")]


def test_all_day_block_empties_the_day(client, host, utc_calendar, make_meeting_type, make_block):
    make_block(utc(MONDAY, "00:00"), utc(MONDAY, "00:00"), is_all_day=True)

    assert get_slots(client, host, make_meeting_type(30)) == []


def test_all_day_block_on_another_day_is_ignored(client, host, utc_calendar, make_meeting_type, make_block):
    tuesday = MONDAY + timedelta(days=1)
    make_block(utc(tuesday, "00:00"), utc(tuesday, "23:59"), is_all_day=True)

    assert len(get_slots(client, host, make_meeting_type(30))) == 16


def test_timed_block_spanning_from_previous_day(client, host, utc_calendar, make_meeting_type, make_block):
    sunday = MONDAY - timedelta(days=1)
    make_block(utc(sunday, "20:00"), utc(MONDAY, "10:00"))

    slots = get_slots(client, host, make_meeting_type(30))

    assert slots[0] == utc(MONDAY, "10:00")
    assert len(slots) == 14


def test_disabled_day_is_empty(client, host, utc_calendar, make_meeting_type):
    assert get_slots(client, host, make_meeting_type(30), day=SATURDAY) == []


def test_malformed_day_schedule_is_empty(db, host, utc_calendar, make_meeting_type):
    utc_calendar.working_hours = {**utc_calendar.working_hours,
                                  "monday": {"start": "9h", "end": "17:00", "enabled": True}}
    db.commit()

    assert get_availability(db, host.id, make_meeting_type(30).id, MONDAY) == []


def test_cancelled_booking_does_not_block(client, host, utc_calendar, make_meeting_type, make_booking):
    meeting_type = make_meeting_type(30)
    make_booking(utc(MONDAY, "10:00"), utc(MONDAY, "10:30"),
                 status=BookingStatus.cancelled, meeting_type=meeting_type)

    assert utc(MONDAY, "10:00") in get_slots(client, host, meeting_type)


def test_excluded_booking_frees_its_slot(client, host, utc_calendar, make_meeting_type, make_booking):
    meeting_type = make_meeting_type(30)
    booking = make_booking(utc(MONDAY, "10:00"), utc(MONDAY, "10:30"), meeting_type=meeting_type)

    slots = get_slots(client, host, meeting_type, exclude_booking_id=str(booking.id))

    assert utc(MONDAY, "10:00") in slots


def test_other_hosts_bookings_do_not_block(client, db, host, utc_calendar, make_meeting_type, make_booking):
    from app.models.user import User

    other = User(email="other@example.com", full_name="Other Host")
    db.add(other)
    db.commit()
    booking = make_booking(utc(MONDAY, "10:00"), utc(MONDAY, "10:30"))
    booking.host_user_id = other.id
    db.commit()

    assert utc(MONDAY, "10:00") in get_slots(client, host, make_meeting_type(30))


def test_host_zone_is_applied_to_working_hours(client, host, make_meeting_type):
    # no settings yet: the Europe/Paris default is created
    slots = get_slots(client, host, make_meeting_type(30))

    assert slots[0] == utc(MONDAY, "07:00")
    assert slots[-1] == utc(MONDAY, "14:30")


@pytest.mark.parametrize("day, first", [
    (MONDAY, "07:00"),             # CEST, UTC+2
    (date(2026, 12, 7), "08:00"),  # CET, UTC+1
])
def test_server_zone_when_host_zone_is_off(db, host, make_meeting_type, monkeypatch, paris_server, day, first):
    monkeypatch.setattr(settings, "APPLY_HOST_TIMEZONE", False)

    slots = get_availability(db, host.id, make_meeting_type(30).id, day)

    assert slots[0] == utc(day, first)
    assert slots[-1] == utc(day, first) + timedelta(hours=7, minutes=30)


def test_unknown_meeting_type_is_404(client, host, utc_calendar):
    response = client.get("/api/v1/availability", params={
        "user_id": str(host.id),
        "meeting_type_id": str(uuid.uuid4()),
        "date": MONDAY.isoformat(),
    })

    assert response.status_code == 404
    assert response.json()["error"] == "Meeting type not found"


def test_unknown_meeting_type_raises_not_found(db, host, utc_calendar):
    with pytest.raises(errors.NotFoundError):
        get_availability(db, host.id, uuid.uuid4(), MONDAY)


@pytest.mark.parametrize("params", [
    {"date": "2026-13-01"},
    {"date": None},
    {"meeting_type_id": "not-a-uuid"},
])
def test_malformed_query_is_rejected(client, host, make_meeting_type, params):
    query = {
        "user_id": str(host.id),
        "meeting_type_id": str(make_meeting_type(30).id),
        "date": MONDAY.isoformat(),
    }
    query.update(params)
    query = {k: v for k, v in query.items() if v is not None}

    response = client.get("/api/v1/availability", params=query)

    assert response.status_code == 422


def test_response_carries_host_timezone(client, host, utc_calendar, make_meeting_type):
    response = client.get("/api/v1/availability", params={
        "user_id": str(host.id),
        "meeting_type_id": str(make_meeting_type(30).id),
        "date": MONDAY.isoformat(),
    })

    body = response.json()
    assert body["timezone"] == "UTC"
    assert body["date"] == MONDAY.isoformat()
