from .base import DomainEvent
from .order_events import OrderPlacedEvent, OrderStatusChangedEvent, RevisionRequestedEvent
from .review_events import ReviewPostedEvent


__all__ = [
    "DomainEvent",
    "OrderPlacedEvent",
    "OrderStatusChangedEvent",
    "RevisionRequestedEvent",
    "ReviewPostedEvent",
]
