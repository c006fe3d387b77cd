import json
from typing import Any, Dict

import redis

from .base import NotificationSink


class RedisNotificationSink(NotificationSink):
    """Publishes events on a pub/sub channel for the notification workers."""

    def __init__(self, url: str, channel: str):
        self.channel = channel
        self.client = redis.Redis.from_url(url)

    def notify(self, event: str, payload: Dict[str, Any]) -> None:
        message = json.dumps({"event": event, "payload": payload})
        self.client.publish(self.channel, message)
