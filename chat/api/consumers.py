import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError

from chat.infra.metrics import websocket_connections
from infrastructure.container import container
from infrastructure.notifications import order_group_name
from marketplace.ordering.domain.authorization import is_participant
from marketplace.ordering.domain.models.order import Order


logger = logging.getLogger(__name__)


class OrderRoomConsumer(AsyncWebsocketConsumer):
    """
    One socket per client; the client subscribes to the rooms of the
    orders it takes part in and receives their events as ``order.event``.
    """

    async def connect(self):
        self.user = self.scope["user"]
        self.order_groups = set()

        if not self.user.is_authenticated:
            logger.warning(f"Unauthenticated connection attempt to {self.channel_name}")
            await self.close(code=4001)  # Unauthorized
            return

        await self.accept()
        websocket_connections.inc()
        logger.info(f"User {self.user.id} connected to order rooms")

    async def disconnect(self, close_code):
        for group_name in getattr(self, "order_groups", ()):
            await self.channel_layer.group_discard(group_name, self.channel_name)
        if getattr(self, "user", None) is not None and self.user.is_authenticated:
            websocket_connections.dec()

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except json.JSONDecodeError:
            await self.send_error("Invalid JSON", code="invalid_json")
            return
        if not isinstance(data, dict):
            await self.send_error("Frames must be JSON objects", code="invalid_json")
            return

        msg_type = data.get("type")
        try:
            if msg_type == "subscribe":
                await self.subscribe(data.get("order_id"))
            elif msg_type == "unsubscribe":
                await self.unsubscribe(data.get("order_id"))
            elif msg_type == "chat.message":
                await self.post_message(data)
            elif msg_type == "ping":
                await self.send_json({"type": "pong"})
            else:
                await self.send_error("Unknown message type", code="unknown_type")
        except Exception as e:
            logger.error(f"Error in receive: {e}")
            await self.send_error("Internal server error", code="internal_error")

    async def subscribe(self, order_id):
        if not order_id:
            await self.send_error("order_id is required", code="validation_error")
            return

        if not await self.is_order_member(order_id):
            logger.warning(f"User {self.user.id} denied access to order {order_id}")
            await self.send_error("Not a participant of this order", code="forbidden", order_id=order_id)
            return

        group_name = order_group_name(order_id)
        await self.channel_layer.group_add(group_name, self.channel_name)
        self.order_groups.add(group_name)
        await self.send_json({"type": "subscribed", "order_id": str(order_id)})

    async def unsubscribe(self, order_id):
        group_name = order_group_name(order_id)
        if group_name in self.order_groups:
            await self.channel_layer.group_discard(group_name, self.channel_name)
            self.order_groups.discard(group_name)
        await self.send_json({"type": "unsubscribed", "order_id": str(order_id)})

    async def post_message(self, data):
        """Persist a message sent over the socket; the room gets it as ``message.new``."""
        try:
            message = await self.send_order_message(
                data.get("order_id"), data.get("receiver_id"), data.get("content", "")
            )
        except ObjectDoesNotExist:
            await self.send_error("Order not found", code="order_not_found")
        except PermissionDenied as e:
            await self.send_error(str(e), code="forbidden")
        except ValidationError as e:
            await self.send_error(e.messages[0], code="validation_error")
        else:
            await self.send_json({"type": "message.sent", "message_id": str(message.id)})

    async def order_event(self, event):
        """
        Handler for 'order.event' messages sent from the Channel Layer.
        """
        await self.send_json({"type": "order.event", "data": event["event"]})

    async def send_json(self, content):
        await self.send(text_data=json.dumps(content))

    async def send_error(self, message, code="error", **extra):
        await self.send_json({"type": "error", "code": code, "message": message, **extra})

    @database_sync_to_async
    def is_order_member(self, order_id):
        try:
            order = Order.objects.get(id=order_id)
        except (Order.DoesNotExist, ValidationError, ValueError):
            return False
        return is_participant(self.user, order)

    @database_sync_to_async
    def send_order_message(self, order_id, receiver_id, content):
        return container.messaging_service().send_message(self.user, order_id, receiver_id, content)
