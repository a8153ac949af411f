"""
Order authorization predicate.

Every order operation asks the same question: how is this user related to
this order, and does that relation satisfy what the operation requires?
"""

from enum import Enum
from typing import Optional


class Relation(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    EITHER = "either"


class OrderAccessDenied(Exception):
    """The user is not related to the order the way the operation requires."""

    def __init__(self, required: Relation, actual: Optional[Relation]):
        self.required = required
        self.actual = actual
        if actual is None:
            message = "You are not a participant of this order"
        else:
            message = f"Only the {required.value} of this order can do this"
        super().__init__(message)

    @property
    def is_participant(self) -> bool:
        return self.actual is not None


def relation_of(user, order) -> Optional[Relation]:
    """BUYER or SELLER for the order's parties, None for everyone else."""
    user_id = getattr(user, "pk", None)
    if user_id is None:
        return None
    if order.buyer_id == user_id:
        return Relation.BUYER
    if order.seller_id == user_id:
        return Relation.SELLER
    return None


def is_authorized(user, order, required: Relation) -> bool:
    actual = relation_of(user, order)
    if actual is None:
        return False
    return required == Relation.EITHER or actual == required


def authorize(user, order, required: Relation) -> Relation:
    """
    Return the user's relation to the order or raise OrderAccessDenied.
    """
    if not is_authorized(user, order, required):
        raise OrderAccessDenied(required, relation_of(user, order))
    return relation_of(user, order)


def is_participant(user, order) -> bool:
    return is_authorized(user, order, Relation.EITHER)
