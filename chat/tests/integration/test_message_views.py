from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from chat.models import Message
from infrastructure.container import container
from marketplace.tests.factories import ClientFactory, MessageFactory, OrderFactory


class MessageViewIntegrationTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.order = OrderFactory()
        self.buyer = self.order.buyer
        self.seller = self.order.seller

    def conversation_url(self, order_id):
        return reverse("chat:conversation", kwargs={"order_id": order_id})

    def test_send_and_fetch_conversation(self):
        self.client.force_authenticate(user=self.buyer)
        response = self.client.post(
            reverse("chat:message_send"),
            {"order_id": str(self.order.id), "receiver_id": str(self.seller.id), "content": "Hello"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["sender"]["id"], str(self.buyer.id))

        self.client.force_authenticate(user=self.seller)
        response = self.client.get(self.conversation_url(self.order.id))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["marked_read"], 1)
        self.assertTrue(response.data["results"][0]["is_read"])

    def test_invalid_receiver(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            reverse("chat:message_send"),
            {"order_id": str(self.order.id), "receiver_id": str(ClientFactory().id), "content": "Hello"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "permission_denied")
        self.assertFalse(Message.objects.exists())

    def test_outsider_conversation_is_forbidden(self):
        MessageFactory(order=self.order)
        self.client.force_authenticate(user=ClientFactory())

        response = self.client.get(self.conversation_url(self.order.id))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertNotIn("results", response.data)
        self.assertFalse(Message.objects.filter(is_read=True).exists())

    def test_conversation_for_missing_order(self):
        self.client.force_authenticate(user=self.buyer)
        response = self.client.get(self.conversation_url("00000000-0000-0000-0000-000000000000"))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "order_not_found")

    def test_mark_read_twice(self):
        messages = [MessageFactory(order=self.order) for _ in range(2)]
        self.client.force_authenticate(user=self.seller)
        payload = {"message_ids": [str(m.id) for m in messages]}

        response = self.client.patch(reverse("chat:mark_read"), payload, format="json")
        self.assertEqual(response.data["updated_count"], 2)

        response = self.client.patch(reverse("chat:mark_read"), payload, format="json")
        self.assertEqual(response.data["updated_count"], 0)

    def test_mark_read_empty_list(self):
        self.client.force_authenticate(user=self.seller)
        response = self.client.patch(reverse("chat:mark_read"), {"message_ids": []}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unread_count_and_conversations(self):
        MessageFactory(order=self.order)
        self.client.force_authenticate(user=self.seller)

        response = self.client.get(reverse("chat:unread_count"))
        self.assertEqual(response.data["unread_count"], 1)

        response = self.client.get(reverse("chat:conversation_list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["results"][0]["order"]["id"], str(self.order.id))
        self.assertEqual(response.data["results"][0]["unread_count"], 1)

    def test_upload_attachment(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            reverse("chat:attachment_upload"),
            {"order_id": str(self.order.id), "file": SimpleUploadedFile("brief.pdf", b"%PDF", content_type="application/pdf")},
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message_type"], "file")

    def test_delete_message(self):
        message = MessageFactory(order=self.order)

        self.client.force_authenticate(user=self.seller)
        response = self.client.delete(reverse("chat:message_detail", kwargs={"message_id": message.id}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.buyer)
        response = self.client.delete(reverse("chat:message_detail", kwargs={"message_id": message.id}))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.delete(reverse("chat:message_detail", kwargs={"message_id": message.id}))
        self.assertEqual(response.data["error"], "message_not_found")
