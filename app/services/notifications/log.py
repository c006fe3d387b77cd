import logging
from typing import Any, Dict

from .base import NotificationSink

logger = logging.getLogger(__name__)


class LogNotificationSink(NotificationSink):

    def notify(self, event: str, payload: Dict[str, Any]) -> None:
        logger.info("[%s] %s", event, payload)
