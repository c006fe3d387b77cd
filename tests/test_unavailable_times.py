import uuid
from datetime import timedelta

from tests.helpers import MONDAY, parse_slot, utc


def test_block_lifecycle(client, host, utc_calendar, make_meeting_type):
    meeting_type = make_meeting_type(30)

    response = client.post("/api/v1/unavailable-times", json={
        "user_id": str(host.id),
        "start_time": utc(MONDAY, "12:00").isoformat(),
        "end_time": utc(MONDAY, "13:00").isoformat(),
        "reason": "Lunch",
    })
    assert response.status_code == 200, response.text
    block = response.json()
    assert parse_slot(block["start_time"]) == utc(MONDAY, "12:00")

    slots = client.get("/api/v1/availability", params={
        "user_id": str(host.id),
        "meeting_type_id": str(meeting_type.id),
        "date": MONDAY.isoformat(),
    }).json()["available_slots"]
    assert len(slots) == 14

    assert client.delete(f"/api/v1/unavailable-times/{block['id']}").json() == {"success": True}
    assert client.delete(f"/api/v1/unavailable-times/{block['id']}").status_code == 404


def test_list_blocks_in_range(client, host, utc_calendar, make_block):
    make_block(utc(MONDAY, "12:00"), utc(MONDAY, "13:00"))
    make_block(utc(MONDAY + timedelta(days=3), "12:00"), utc(MONDAY + timedelta(days=3), "13:00"))

    everything = client.get("/api/v1/unavailable-times", params={"user_id": str(host.id)}).json()
    assert len(everything) == 2

    monday_only = client.get("/api/v1/unavailable-times", params={
        "user_id": str(host.id),
        "start": utc(MONDAY, "00:00").isoformat(),
        "end": utc(MONDAY + timedelta(days=1), "00:00").isoformat(),
    }).json()
    assert len(monday_only) == 1


def test_block_must_end_after_start(client, host, utc_calendar):
    response = client.post("/api/v1/unavailable-times", json={
        "user_id": str(host.id),
        "start_time": utc(MONDAY, "13:00").isoformat(),
        "end_time": utc(MONDAY, "12:00").isoformat(),
    })
    assert response.status_code == 400


def test_all_day_block_may_have_empty_range(client, host, utc_calendar):
    response = client.post("/api/v1/unavailable-times", json={
        "user_id": str(host.id),
        "start_time": utc(MONDAY, "00:00").isoformat(),
        "end_time": utc(MONDAY, "00:00").isoformat(),
        "is_all_day": True,
    })
    assert response.status_code == 200
    assert response.json()["is_all_day"] is True


def test_unknown_block(client):
    assert client.delete(f"/api/v1/unavailable-times/{uuid.uuid4()}").status_code == 404
