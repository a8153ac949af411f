import pytest
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase

from chat.models import Message
from infrastructure.container import container
from marketplace.tests.factories import ClientFactory, MessageFactory, OrderFactory


@pytest.mark.unit
class MessagingServiceSendTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.notifier = container.notifier()
        self.service = container.messaging_service()
        self.order = OrderFactory()
        self.buyer = self.order.buyer
        self.seller = self.order.seller

    def test_send_message_broadcasts_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True):
            message = self.service.send_message(self.buyer, self.order.id, self.seller.id, "  Hi there  ")

        self.assertEqual(message.content, "Hi there")
        self.assertEqual(message.receiver, self.seller)
        self.assertFalse(message.is_read)

        events = self.notifier.events_of_type("message.new")
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0]["payload"]["message"]["id"], str(message.id))
        self.assertEqual(self.notifier.published[0][0], str(self.order.id))

    def test_seller_can_reply(self):
        message = self.service.send_message(self.seller, self.order.id, self.buyer.id, "Working on it")
        self.assertEqual(message.receiver, self.buyer)

    def test_outsider_cannot_send(self):
        with self.assertRaises(PermissionDenied):
            self.service.send_message(ClientFactory(), self.order.id, self.seller.id, "Hello")
        self.assertFalse(Message.objects.exists())

    def test_receiver_must_be_other_party(self):
        with self.assertRaises(PermissionDenied):
            self.service.send_message(self.buyer, self.order.id, ClientFactory().id, "Hello")

    def test_cannot_message_self(self):
        with self.assertRaises(ValidationError):
            self.service.send_message(self.buyer, self.order.id, self.buyer.id, "Note to self")

    def test_blank_content(self):
        with self.assertRaises(ValidationError):
            self.service.send_message(self.buyer, self.order.id, self.seller.id, "   ")

    def test_file_message_needs_url(self):
        with self.assertRaises(ValidationError):
            self.service.send_message(self.buyer, self.order.id, self.seller.id, "See file", message_type="file")

        message = self.service.send_message(
            self.buyer,
            self.order.id,
            self.seller.id,
            "See file",
            message_type="file",
            file_url="https://cdn.example.com/brief.pdf",
        )
        self.assertEqual(message.message_type, Message.MessageType.FILE)

    def test_unknown_order(self):
        with self.assertRaises(ObjectDoesNotExist):
            self.service.send_message(self.buyer, "not-a-uuid", self.seller.id, "Hello")

    def test_upload_attachment(self):
        upload = SimpleUploadedFile("brief.png", b"png", content_type="image/png")

        stored = self.service.upload_attachment(self.buyer, self.order.id, upload)

        self.assertIn(f"messages/{self.order.id}", stored["url"])
        self.assertEqual(stored["message_type"], Message.MessageType.IMAGE)

    def test_delete_own_message_only(self):
        message = MessageFactory(order=self.order)

        with self.assertRaises(PermissionDenied):
            self.service.delete_message(self.seller, message.id)

        self.service.delete_message(self.buyer, message.id)
        self.assertFalse(Message.objects.filter(id=message.id).exists())


@pytest.mark.unit
class MessagingServiceReadTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.notifier = container.notifier()
        self.service = container.messaging_service()
        self.order = OrderFactory()
        self.buyer = self.order.buyer
        self.seller = self.order.seller
        self.to_seller = [MessageFactory(order=self.order) for _ in range(3)]
        self.to_buyer = MessageFactory(order=self.order, sender=self.seller, receiver=self.buyer)

    def test_conversation_marks_received_messages_read(self):
        with self.captureOnCommitCallbacks(execute=True):
            page = self.service.get_conversation(self.seller, self.order.id)

        self.assertEqual(page["count"], 4)
        self.assertEqual(page["marked_read"], 3)
        self.assertEqual(Message.objects.filter(receiver=self.seller, is_read=False).count(), 0)
        self.assertFalse(Message.objects.get(id=self.to_buyer.id).is_read)
        self.assertEqual(len(self.notifier.events_of_type("message.read")), 1)

    def test_conversation_page_is_chronological(self):
        page = self.service.get_conversation(self.buyer, self.order.id, page_size=2)

        created = [m.created_at for m in page["results"]]
        self.assertEqual(created, sorted(created))
        self.assertTrue(page["has_next"])

    def test_outsider_cannot_read_conversation(self):
        outsider = ClientFactory()

        with self.assertRaises(PermissionDenied):
            self.service.get_conversation(outsider, self.order.id)

        self.assertEqual(Message.objects.filter(is_read=True).count(), 0)

    def test_mark_as_read_is_idempotent(self):
        ids = [m.id for m in self.to_seller]

        self.assertEqual(self.service.mark_as_read(self.seller, ids), 3)
        self.assertEqual(self.service.mark_as_read(self.seller, ids), 0)

    def test_mark_as_read_ignores_other_receivers(self):
        self.assertEqual(self.service.mark_as_read(self.buyer, [m.id for m in self.to_seller]), 0)

    def test_mark_as_read_requires_ids(self):
        with self.assertRaises(ValidationError):
            self.service.mark_as_read(self.seller, [])

    def test_unread_count(self):
        self.assertEqual(self.service.unread_count(self.seller), 3)
        self.assertEqual(self.service.unread_count(self.buyer), 1)

    def test_list_conversations(self):
        OrderFactory(buyer=self.buyer)  # no messages, not listed

        result = self.service.list_conversations(self.seller)

        self.assertEqual(result["count"], 1)
        conversation = result["results"][0]
        self.assertEqual(conversation["order"], self.order)
        self.assertEqual(conversation["other_party"], self.buyer)
        self.assertEqual(conversation["unread_count"], 3)
