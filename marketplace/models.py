from marketplace.catalog.domain.models import Gig, GigFaq, PricePlan
from marketplace.ordering.domain.models import Order, RevisionNote
from marketplace.reviews.domain.models import Review


__all__ = [
    "Gig",
    "PricePlan",
    "GigFaq",
    "Order",
    "RevisionNote",
    "Review",
]
