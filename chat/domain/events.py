from dataclasses import dataclass
from typing import List

from marketplace.domain.events.base import DomainEvent


@dataclass
class MessageSentEvent(DomainEvent):
    """Event: a participant posted a message on an order."""

    def __init__(self, order_id: str, message: dict):
        super().__init__(event_type="message.new", payload={"order_id": order_id, "message": message})


@dataclass
class MessagesReadEvent(DomainEvent):
    """Event: the receiver read some of an order's messages."""

    def __init__(self, order_id: str, reader_id: str, message_ids: List[str]):
        super().__init__(
            event_type="message.read",
            payload={"order_id": order_id, "reader_id": reader_id, "message_ids": message_ids},
        )
