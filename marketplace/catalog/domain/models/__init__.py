from .gig import Gig, GigFaq, PricePlan


__all__ = [
    "Gig",
    "PricePlan",
    "GigFaq",
]
