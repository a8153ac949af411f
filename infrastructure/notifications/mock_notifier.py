import logging
from typing import Any, Dict, List, Tuple

from .interface import NotificationChannelInterface


logger = logging.getLogger(__name__)


class MockNotifier(NotificationChannelInterface):
    """Keeps published events in memory for assertions."""

    def __init__(self):
        self.published: List[Tuple[str, Dict[str, Any]]] = []

    def publish(self, order_id: str, event: Dict[str, Any]) -> bool:
        logger.info(f"[MOCK NOTIFY] order={order_id} event={event.get('event_type')}")
        self.published.append((str(order_id), event))
        return True

    def events_of_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [event for _, event in self.published if event.get("event_type") == event_type]

    def clear(self):
        self.published.clear()
