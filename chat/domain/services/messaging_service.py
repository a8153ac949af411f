import logging
from collections import defaultdict
from typing import Iterable

from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import Count, Max, Q
from django.utils import timezone

from chat.domain.events import MessagesReadEvent, MessageSentEvent
from chat.domain.models import Message
from chat.infra.metrics import messages_marked_read_total, messages_sent_total
from infrastructure.notifications import NotificationChannelInterface
from infrastructure.storage import StorageInterface
from marketplace.ordering.domain.authorization import is_participant
from marketplace.ordering.domain.models.order import Order


logger = logging.getLogger(__name__)


def message_payload(message: Message) -> dict:
    """Wire form of a message for realtime events."""
    return {
        "id": str(message.id),
        "order_id": str(message.order_id),
        "sender_id": str(message.sender_id),
        "receiver_id": str(message.receiver_id),
        "content": message.content,
        "message_type": message.message_type,
        "file_url": message.file_url,
        "is_read": message.is_read,
        "created_at": message.created_at.isoformat(),
    }


class MessagingService:
    """
    Order-scoped messaging between a buyer and a seller.

    Failures raise Django exceptions: ``ObjectDoesNotExist`` for missing
    orders/messages, ``PermissionDenied`` for non-participants and
    ``ValidationError`` for bad input.
    """

    def __init__(self, storage: StorageInterface, notifier: NotificationChannelInterface):
        self.storage = storage
        self.notifier = notifier

    def send_message(
        self,
        sender,
        order_id,
        receiver_id,
        content: str,
        message_type: str = Message.MessageType.TEXT,
        file_url: str = "",
    ) -> Message:
        """
        Persist a message and broadcast it to the order's room.
        """
        # 1. Validation
        order = self._get_order(order_id)
        if not is_participant(sender, order):
            raise PermissionDenied("User is not a participant of this order")

        if str(receiver_id) == str(sender.pk):
            raise ValidationError("You cannot send a message to yourself")
        other_party_id = order.seller_id if order.buyer_id == sender.pk else order.buyer_id
        if str(receiver_id) != str(other_party_id):
            raise PermissionDenied("Invalid receiver")

        if not content or not content.strip():
            raise ValidationError("Message content is required")
        if message_type not in Message.MessageType.values:
            raise ValidationError(f"Unknown message type '{message_type}'")
        if message_type != Message.MessageType.TEXT and not file_url:
            raise ValidationError("File and image messages need a file_url")

        # 2. Persistence
        with transaction.atomic():
            message = Message.objects.create(
                order=order,
                sender=sender,
                receiver_id=other_party_id,
                content=content.strip(),
                message_type=message_type,
                file_url=file_url or "",
            )
            # 3. Broadcast once committed
            event = MessageSentEvent(order_id=str(order.id), message=message_payload(message))
            transaction.on_commit(lambda: self._publish(event))

        messages_sent_total.labels(message_type=message.message_type).inc()
        logger.info(f"Message {message.id} on order {order.id} from {sender.pk}")
        return message

    def get_conversation(self, user, order_id, page: int = 1, page_size: int = 50) -> dict:
        """
        One page of an order's messages.

        Pages count back from the newest message; each page is returned in
        chronological order. Unread messages on the page addressed to
        ``user`` are marked read.
        """
        order = self._get_order(order_id)
        if not is_participant(user, order):
            raise PermissionDenied("User is not a participant of this order")

        messages_qs = Message.objects.filter(order=order).select_related("sender").order_by("-created_at", "-id")
        paginator = Paginator(messages_qs, page_size)
        page_obj = paginator.get_page(page)
        messages = list(reversed(page_obj.object_list))

        unread_ids = [m.id for m in messages if m.receiver_id == user.pk and not m.is_read]
        marked = 0
        if unread_ids:
            marked = self._mark_read(user, Message.objects.filter(id__in=unread_ids))
            now = timezone.now()
            for message in messages:
                if message.id in unread_ids:
                    message.is_read = True
                    message.read_at = now

        return {
            "order_id": str(order.id),
            "results": messages,
            "count": paginator.count,
            "page": page_obj.number,
            "page_size": page_size,
            "num_pages": paginator.num_pages,
            "has_next": page_obj.has_next(),
            "has_previous": page_obj.has_previous(),
            "marked_read": marked,
        }

    def list_conversations(self, user, page: int = 1, page_size: int = 20) -> dict:
        """
        Orders the user takes part in that have messages, most recent
        activity first, each with its last message and the user's unread count.
        """
        orders = (
            Order.objects.filter(Q(buyer=user) | Q(seller=user))
            .select_related("buyer", "seller")
            .annotate(
                last_message_at=Max("messages__created_at"),
                unread_count=Count("messages", filter=Q(messages__receiver=user, messages__is_read=False)),
            )
            .filter(last_message_at__isnull=False)
            .order_by("-last_message_at", "-id")
        )
        paginator = Paginator(orders, page_size)
        page_obj = paginator.get_page(page)

        conversations = []
        for order in page_obj.object_list:
            last_message = order.messages.order_by("-created_at", "-id").first()
            conversations.append(
                {
                    "order": order,
                    "other_party": order.seller if order.buyer_id == user.pk else order.buyer,
                    "last_message": last_message,
                    "unread_count": order.unread_count,
                }
            )

        return {
            "results": conversations,
            "count": paginator.count,
            "page": page_obj.number,
            "page_size": page_size,
            "num_pages": paginator.num_pages,
            "has_next": page_obj.has_next(),
            "has_previous": page_obj.has_previous(),
        }

    def mark_as_read(self, user, message_ids: Iterable) -> int:
        """
        Mark the given messages read for their receiver.

        Messages the user did not receive, or already read, are left alone,
        so calling this twice with the same ids updates nothing the second time.
        """
        message_ids = list(message_ids or [])
        if not message_ids:
            raise ValidationError("message_ids must be a non-empty list")

        return self._mark_read(user, Message.objects.filter(id__in=message_ids))

    def unread_count(self, user) -> int:
        return Message.objects.filter(receiver=user, is_read=False).count()

    def delete_message(self, user, message_id) -> None:
        try:
            message = Message.objects.get(id=message_id)
        except (Message.DoesNotExist, ValidationError, ValueError):
            raise ObjectDoesNotExist("Message not found")

        if message.sender_id != user.pk:
            raise PermissionDenied("You can only delete your own messages")

        message.delete()
        logger.info(f"Message {message_id} deleted by {user.pk}")

    def upload_attachment(self, user, order_id, file) -> dict:
        """
        Store a file for use as a message's ``file_url``.

        Raises:
            StorageException: If the file store fails
        """
        order = self._get_order(order_id)
        if not is_participant(user, order):
            raise PermissionDenied("User is not a participant of this order")

        content_type = getattr(file, "content_type", None)
        stored = self.storage.upload(file, folder=f"messages/{order.id}", content_type=content_type)
        kind = Message.MessageType.IMAGE if (content_type or "").startswith("image/") else Message.MessageType.FILE

        logger.info(f"Attachment {stored.key} uploaded to order {order.id} by {user.pk}")
        return {**stored.to_dict(), "message_type": kind}

    # Helpers

    def _get_order(self, order_id) -> Order:
        try:
            return Order.objects.get(id=order_id)
        except (Order.DoesNotExist, ValidationError, ValueError):
            raise ObjectDoesNotExist("Order not found")

    def _mark_read(self, user, messages) -> int:
        with transaction.atomic():
            targets = list(messages.filter(receiver=user, is_read=False).values_list("id", "order_id"))
            if not targets:
                return 0
            updated = Message.objects.filter(id__in=[pk for pk, _ in targets], is_read=False).update(
                is_read=True, read_at=timezone.now()
            )

            by_order = defaultdict(list)
            for pk, order_id in targets:
                by_order[str(order_id)].append(str(pk))
            events = [
                MessagesReadEvent(order_id=order_id, reader_id=str(user.pk), message_ids=ids)
                for order_id, ids in by_order.items()
            ]
            transaction.on_commit(lambda: self._publish(*events))

        messages_marked_read_total.inc(updated)
        return updated

    def _publish(self, *events) -> None:
        for event in events:
            self.notifier.publish(event.order_id, event.to_dict())

