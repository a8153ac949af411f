"""
Order status state machine.

``TRANSITIONS`` is the complete list of legal edges. Every status change
(seller status update, buyer completion, cancellation, revision request)
goes through ``apply_transition`` so the table is checked in one place.

    pending ──start──> in_progress ──deliver──> delivered ──complete──> completed
       │                  │   ^                     │
       └──cancel──┐  ┌────┘   └──request_revision───┘
                  v  v
               cancelled
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from django.utils import timezone

from marketplace.ordering.domain.models.order import Order

from .authorization import Relation, authorize


Status = Order.Status


@dataclass(frozen=True)
class Transition:
    source: str
    target: str
    action: str
    allowed: Relation


TRANSITIONS: Dict[Tuple[str, str], Transition] = {
    (t.source, t.target): t
    for t in (
        Transition(Status.PENDING, Status.IN_PROGRESS, "start", Relation.SELLER),
        Transition(Status.PENDING, Status.CANCELLED, "cancel", Relation.EITHER),
        Transition(Status.IN_PROGRESS, Status.DELIVERED, "deliver", Relation.SELLER),
        Transition(Status.IN_PROGRESS, Status.CANCELLED, "cancel", Relation.EITHER),
        Transition(Status.DELIVERED, Status.COMPLETED, "complete", Relation.EITHER),
        Transition(Status.DELIVERED, Status.IN_PROGRESS, "request_revision", Relation.BUYER),
    )
}

TERMINAL_STATUSES = frozenset({Status.COMPLETED, Status.CANCELLED})


class InvalidTransition(Exception):
    """The requested status change is not an edge of the state machine."""

    error_code = "invalid_transition"

    def __init__(self, current: str, requested: str, message: Optional[str] = None):
        self.current = current
        self.requested = requested
        super().__init__(message or f"Cannot move order from '{current}' to '{requested}'")


class RevisionLimitReached(InvalidTransition):
    error_code = "no_revisions_left"

    def __init__(self, current: str, requested: str):
        super().__init__(current, requested, "No revisions left for this order")


def find_transition(current: str, requested: str) -> Transition:
    if requested not in Status.values:
        raise InvalidTransition(current, requested, f"Unknown order status '{requested}'")
    transition = TRANSITIONS.get((current, requested))
    if transition is None:
        raise InvalidTransition(current, requested)
    return transition


def allowed_targets(current: str) -> List[str]:
    return [target for (source, target) in TRANSITIONS if source == current]


def apply_transition(order: Order, requested: str, user, *, expected_action: Optional[str] = None) -> Transition:
    """
    Validate and apply one status change to ``order`` in memory.

    Checks run in order: the user must be a participant, the edge must exist
    (and match ``expected_action`` when the caller asked for a specific
    action), the user's relation must satisfy the edge, and a revision needs
    budget left. Nothing on the order changes unless every check passes.
    The caller is responsible for locking the row and saving.

    Raises:
        OrderAccessDenied: non-participant, or participant with the wrong relation
        InvalidTransition: edge not in TRANSITIONS
        RevisionLimitReached: revision requested with ``revisions_left == 0``
    """
    authorize(user, order, Relation.EITHER)

    current = order.status
    transition = find_transition(current, requested)
    if expected_action and transition.action != expected_action:
        verb = expected_action.replace("_", " ")
        raise InvalidTransition(current, requested, f"Cannot {verb} an order in '{current}'")

    authorize(user, order, transition.allowed)

    if transition.action == "request_revision" and order.revisions_left <= 0:
        raise RevisionLimitReached(current, requested)

    now = timezone.now()
    order.status = transition.target
    if transition.action == "start":
        order.started_at = now
    elif transition.action == "deliver":
        order.delivered_at = now
    elif transition.action == "complete":
        order.completed_at = now
    elif transition.action == "cancel":
        order.cancelled_at = now
        order.cancelled_by = user
    elif transition.action == "request_revision":
        order.revisions_left -= 1

    return transition
