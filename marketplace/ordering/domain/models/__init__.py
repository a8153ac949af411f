from .order import Order, RevisionNote


__all__ = [
    "Order",
    "RevisionNote",
]
