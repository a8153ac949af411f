"""
Channels Notifier
=================

Publishes order events to the Django Channels layer. The websocket consumer
in ``chat.api.consumers`` relays them to connected clients.
"""

import logging
from typing import Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from .interface import NotificationChannelInterface, order_group_name


logger = logging.getLogger(__name__)


class ChannelLayerNotifier(NotificationChannelInterface):
    def __init__(self, channel_layer=None):
        self.channel_layer = channel_layer or get_channel_layer()

    def publish(self, order_id: str, event: Dict[str, Any]) -> bool:
        if self.channel_layer is None:
            logger.warning(f"No channel layer configured. Event {event.get('event_type')} dropped.")
            return False

        group_name = order_group_name(order_id)
        try:
            # "order.event" dispatches to OrderRoomConsumer.order_event
            async_to_sync(self.channel_layer.group_send)(group_name, {"type": "order.event", "event": event})
        except Exception as e:
            logger.error(f"Failed to publish {event.get('event_type')} to {group_name}: {str(e)}")
            return False

        logger.debug(f"Published {event.get('event_type')} to {group_name}")
        return True
