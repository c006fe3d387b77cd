from abc import ABC, abstractmethod
from typing import Any, Dict


class NotificationSink(ABC):

    @abstractmethod
    def notify(self, event: str, payload: Dict[str, Any]) -> None:
        """Deliver a booking event. Callers treat delivery as best effort."""
        pass
