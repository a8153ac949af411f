from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from .base import DomainEvent


@dataclass
class OrderPlacedEvent(DomainEvent):
    """Event: buyer placed an order against a gig plan."""

    def __init__(self, order_id: str, buyer_id: str, seller_id: str, plan_tier: str, amount: Decimal):
        super().__init__(
            event_type="order.created",
            payload={
                "order_id": order_id,
                "buyer_id": buyer_id,
                "seller_id": seller_id,
                "plan_tier": plan_tier,
                "amount": str(amount),
            },
        )


@dataclass
class OrderStatusChangedEvent(DomainEvent):
    """Event: an order moved along a lifecycle edge."""

    def __init__(
        self,
        order_id: str,
        actor_id: str,
        action: str,
        from_status: str,
        to_status: str,
        delivery_files: Optional[List[str]] = None,
    ):
        payload = {
            "order_id": order_id,
            "actor_id": actor_id,
            "action": action,
            "from_status": from_status,
            "to_status": to_status,
        }
        if delivery_files:
            payload["delivery_files"] = delivery_files
        super().__init__(event_type="order.status_changed", payload=payload)


@dataclass
class RevisionRequestedEvent(DomainEvent):
    """Event: buyer sent a delivered order back for revision."""

    def __init__(self, order_id: str, buyer_id: str, note: str, revisions_left: int):
        super().__init__(
            event_type="order.revision_requested",
            payload={
                "order_id": order_id,
                "buyer_id": buyer_id,
                "note": note,
                "revisions_left": revisions_left,
            },
        )
