import uuid

from django.conf import settings
from django.db import models


class Message(models.Model):
    """
    A message exchanged by the two parties of an order.

    Read state belongs to the receiver: only their read actions set
    ``is_read`` / ``read_at``.
    """

    class MessageType(models.TextChoices):
        TEXT = "text", "Text"
        FILE = "file", "File"
        IMAGE = "image", "Image"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey("marketplace.Order", on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_messages")
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="received_messages"
    )

    # Content
    content = models.TextField()
    message_type = models.CharField(max_length=10, choices=MessageType.choices, default=MessageType.TEXT)
    file_url = models.URLField(max_length=500, blank=True, default="")

    # Meta
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        app_label = "chat"
        indexes = [
            models.Index(fields=["order", "-created_at"], name="message_order_created_idx"),
            models.Index(fields=["receiver", "is_read"], name="message_receiver_unread_idx"),
        ]

    def __str__(self):
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"{self.sender_id} -> {self.receiver_id}: {preview}"
