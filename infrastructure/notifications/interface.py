"""
Notification Channel Interface
==============================

Realtime fan-out of order events (new messages, status changes) to the
participants subscribed to an order's room.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


def order_group_name(order_id) -> str:
    """Channel layer group for an order's room."""
    return f"order_{order_id}"


class NotificationChannelInterface(ABC):
    """
    Publishing is fire-and-forget: implementations log delivery failures and
    return False, they never raise into the caller.

    Concrete implementations:
        - ChannelLayerNotifier: Django Channels group_send
        - MockNotifier: records published events in memory
    """

    @abstractmethod
    def publish(self, order_id: str, event: Dict[str, Any]) -> bool:
        """
        Push an event to everyone subscribed to ``order_id``.

        Args:
            order_id: Order whose room receives the event
            event: JSON-serializable event body (``event_type``, ``occurred_at``, ``payload``)

        Returns:
            True if the event was handed to the transport
        """
