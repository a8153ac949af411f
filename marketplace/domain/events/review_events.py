from dataclasses import dataclass

from .base import DomainEvent


@dataclass
class ReviewPostedEvent(DomainEvent):
    """Event: buyer reviewed a completed order."""

    def __init__(self, order_id: str, review_id: str, reviewer_id: str, reviewed_user_id: str, rating: int):
        super().__init__(
            event_type="review.posted",
            payload={
                "order_id": order_id,
                "review_id": review_id,
                "reviewer_id": reviewer_id,
                "reviewed_user_id": reviewed_user_id,
                "rating": rating,
            },
        )
