from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from django.utils import timezone


@dataclass
class DomainEvent:
    """
    Base class for marketplace events.

    Events are pushed to the order's realtime room after the producing
    transaction commits; ``to_dict`` is the wire form clients receive.
    """

    event_type: str
    occurred_at: datetime = field(default_factory=timezone.now)
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def order_id(self) -> Optional[str]:
        return self.payload.get("order_id")

    def to_dict(self) -> dict:
        return {"event_type": self.event_type, "occurred_at": self.occurred_at.isoformat(), "payload": self.payload}
