from functools import lru_cache

from app.core.config import settings
from .base import NotificationSink
from .log import LogNotificationSink
from .redis_pubsub import RedisNotificationSink


@lru_cache()
def _redis_sink(url: str, channel: str) -> RedisNotificationSink:
    return RedisNotificationSink(url, channel)


def get_notifier() -> NotificationSink:
    if settings.NOTIFICATION_BACKEND == "redis":
        return _redis_sink(settings.REDIS_URL, settings.NOTIFICATION_CHANNEL)
    return LogNotificationSink()
