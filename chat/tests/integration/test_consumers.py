from asgiref.sync import sync_to_async
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.test import TransactionTestCase

from chat.api.consumers import OrderRoomConsumer
from chat.models import Message
from infrastructure.container import container
from infrastructure.notifications import ChannelLayerNotifier
from marketplace.tests.factories import ClientFactory, OrderFactory


class OrderRoomConsumerTests(TransactionTestCase):
    def setUp(self):
        container.configure_for_testing()
        self.order = OrderFactory()
        self.buyer = self.order.buyer
        self.seller = self.order.seller

    async def connect(self, user):
        communicator = WebsocketCommunicator(OrderRoomConsumer.as_asgi(), "/ws/orders/")
        communicator.scope["user"] = user
        connected, subprotocol = await communicator.connect()
        return communicator, connected, subprotocol

    async def test_anonymous_connection_is_closed(self):
        _, connected, code = await self.connect(AnonymousUser())
        self.assertFalse(connected)
        self.assertEqual(code, 4001)

    async def test_ping(self):
        communicator, connected, _ = await self.connect(self.buyer)
        self.assertTrue(connected)

        await communicator.send_json_to({"type": "ping"})
        self.assertEqual(await communicator.receive_json_from(), {"type": "pong"})
        await communicator.disconnect()

    async def test_subscriber_receives_order_events(self):
        communicator, _, _ = await self.connect(self.seller)

        await communicator.send_json_to({"type": "subscribe", "order_id": str(self.order.id)})
        response = await communicator.receive_json_from()
        self.assertEqual(response, {"type": "subscribed", "order_id": str(self.order.id)})

        notifier = ChannelLayerNotifier(channel_layer=get_channel_layer())
        event = {"event_type": "order.status_changed", "payload": {"order_id": str(self.order.id)}}
        await sync_to_async(notifier.publish)(str(self.order.id), event)

        response = await communicator.receive_json_from()
        self.assertEqual(response["type"], "order.event")
        self.assertEqual(response["data"]["event_type"], "order.status_changed")
        await communicator.disconnect()

    async def test_non_participant_cannot_subscribe(self):
        outsider = await database_sync_to_async(ClientFactory)()
        communicator, _, _ = await self.connect(outsider)

        await communicator.send_json_to({"type": "subscribe", "order_id": str(self.order.id)})
        response = await communicator.receive_json_from()

        self.assertEqual(response["type"], "error")
        self.assertEqual(response["code"], "forbidden")
        await communicator.disconnect()

    async def test_unsubscribe(self):
        communicator, _, _ = await self.connect(self.buyer)
        await communicator.send_json_to({"type": "subscribe", "order_id": str(self.order.id)})
        await communicator.receive_json_from()

        await communicator.send_json_to({"type": "unsubscribe", "order_id": str(self.order.id)})
        response = await communicator.receive_json_from()

        self.assertEqual(response["type"], "unsubscribed")
        await communicator.disconnect()

    async def test_send_chat_message(self):
        communicator, _, _ = await self.connect(self.buyer)

        await communicator.send_json_to(
            {
                "type": "chat.message",
                "order_id": str(self.order.id),
                "receiver_id": str(self.seller.id),
                "content": "Hello over the socket",
            }
        )
        response = await communicator.receive_json_from()

        self.assertEqual(response["type"], "message.sent")
        exists = await database_sync_to_async(Message.objects.filter(id=response["message_id"]).exists)()
        self.assertTrue(exists)
        await communicator.disconnect()

    async def test_invalid_json(self):
        communicator, _, _ = await self.connect(self.buyer)

        await communicator.send_to(text_data="not json")
        response = await communicator.receive_json_from()

        self.assertEqual(response["code"], "invalid_json")
        await communicator.disconnect()
