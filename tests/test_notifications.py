import json
import logging

from app.core.config import settings
from app.services import notifications
from app.services.notifications import LogNotificationSink, RedisNotificationSink, get_notifier


def test_log_backend_is_the_default(monkeypatch):
    monkeypatch.setattr(settings, "NOTIFICATION_BACKEND", "log")
    assert isinstance(get_notifier(), LogNotificationSink)


def test_log_sink_logs_event(caplog):
    with caplog.at_level(logging.INFO):
        LogNotificationSink().notify("booking.created", {"booking_id": "b1"})

    assert "booking.created" in caplog.text
    assert "b1" in caplog.text


def test_redis_sink_publishes_json(monkeypatch):
    published = []

    class FakeRedis:
        def publish(self, channel, message):
            published.append((channel, json.loads(message)))

    sink = RedisNotificationSink("redis://localhost:6379", "bookings")
    monkeypatch.setattr(sink, "client", FakeRedis())

    sink.notify("booking.cancelled", {"booking_id": "b2"})

    assert published == [("bookings", {"event": "booking.cancelled", "payload": {"booking_id": "b2"}})]


def test_redis_backend_is_selected_and_reused(monkeypatch):
    monkeypatch.setattr(settings, "NOTIFICATION_BACKEND", "redis")
    notifications._redis_sink.cache_clear()

    first = get_notifier()
    second = get_notifier()

    assert isinstance(first, RedisNotificationSink)
    assert first is second
    assert first.channel == settings.NOTIFICATION_CHANNEL
