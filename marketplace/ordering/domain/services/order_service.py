"""
OrderService - Order Lifecycle Management

Places orders against a gig's price plan and moves them through the
lifecycle table in ``marketplace.ordering.domain.state_machine``. Every
mutation locks the order row, re-validates the persisted status and
publishes the resulting event to the order's realtime room once the
transaction commits.
"""

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import Count, F, Sum

from infrastructure.notifications import NotificationChannelInterface
from infrastructure.storage import StorageException, StorageInterface
from marketplace.catalog.domain.models.gig import Gig
from marketplace.domain.events import (
    DomainEvent,
    OrderPlacedEvent,
    OrderStatusChangedEvent,
    RevisionRequestedEvent,
)
from marketplace.infra.observability.metrics import order_transitions_total, order_value, orders_placed_total
from marketplace.ordering.domain.authorization import OrderAccessDenied, relation_of
from marketplace.ordering.domain.models.order import Order, RevisionNote
from marketplace.ordering.domain.state_machine import InvalidTransition, RevisionLimitReached, apply_transition
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

User = get_user_model()
logger = logging.getLogger(__name__)


class OrderService(BaseService):
    """
    Service for the order lifecycle.

    Responsibilities:
    - Place orders (plan snapshot, revision budget)
    - List / fetch orders for participants
    - Seller status updates, buyer completion and revision requests, cancellation
    - Order statistics per side

    Dependencies:
    - StorageInterface: delivery file uploads
    - NotificationChannelInterface: post-commit fan-out to the order room
    """

    def __init__(self, storage: StorageInterface, notifier: NotificationChannelInterface):
        super().__init__()
        self.storage = storage
        self.notifier = notifier

    # Creation

    @BaseService.log_performance
    def create_order(self, user: User, gig_id, plan_tier: str, requirements: str = "") -> ServiceResult[Order]:
        """
        Place an order for one of a gig's price plans.

        The plan's fields are copied onto the order so later gig edits never
        change what was bought.

        Example:
            >>> result = order_service.create_order(buyer, gig.id, "Basic", "Logo for a bakery")
            >>> result.value.revisions_left == plan.revisions
        """
        try:
            gig = Gig.objects.select_related("owner").prefetch_related("price_plans").get(id=gig_id)
        except (Gig.DoesNotExist, DjangoValidationError, ValueError):
            return service_err(ErrorCodes.GIG_NOT_FOUND, f"Gig {gig_id} not found")

        plan = gig.find_plan(plan_tier)
        if plan is None:
            return service_err(ErrorCodes.PLAN_NOT_FOUND, f"Gig has no '{plan_tier}' plan")

        if gig.owner_id == user.pk:
            return service_err(ErrorCodes.VALIDATION_ERROR, "You cannot order your own gig")

        try:
            with transaction.atomic():
                order = Order.objects.create(
                    buyer=user,
                    seller=gig.owner,
                    gig=gig,
                    gig_title=gig.title,
                    plan_tier=plan.tier,
                    plan_price=plan.price,
                    plan_delivery_time=plan.delivery_time,
                    plan_revisions=plan.revisions,
                    plan_features=list(plan.features or []),
                    requirements=requirements or "",
                    status=Order.Status.PENDING,
                    amount=plan.price,
                    revisions_left=plan.revisions,
                )
                event = OrderPlacedEvent(
                    order_id=str(order.id),
                    buyer_id=str(user.pk),
                    seller_id=str(gig.owner_id),
                    plan_tier=plan.tier,
                    amount=plan.price,
                )
                transaction.on_commit(lambda: self._publish(event))
        except Exception as e:
            self.logger.error(f"Error creating order for gig {gig_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        orders_placed_total.labels(status=order.status).inc()
        order_value.observe(float(order.amount))
        self.logger.info(f"Created order {order.id} on gig {gig.id} ({plan.tier}) for buyer {user.pk}")
        return service_ok(order)

    # Queries

    @BaseService.log_performance
    def get_order(self, user: User, order_id) -> ServiceResult[Order]:
        """Fetch one order; only its buyer and seller can see it."""
        order = self._load(order_id)
        if order is None:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
        if relation_of(user, order) is None:
            return service_err(ErrorCodes.NOT_ORDER_PARTICIPANT, "You are not a participant of this order")
        return service_ok(order)

    @BaseService.log_performance
    def list_orders(
        self, user: User, status: Optional[str] = None, page: int = 1, page_size: int = 10
    ) -> ServiceResult[Dict]:
        """
        Orders on the user's side of the market, newest first.

        Clients see orders they bought, freelancers orders they sell.
        ``status`` of ``None``, ``""`` or ``"all"`` disables the filter.
        """
        if status and status != "all" and status not in Order.Status.values:
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown order status '{status}'")

        queryset = self._side_queryset(user).select_related("buyer", "seller", "gig")
        if status and status != "all":
            queryset = queryset.filter(status=status)
        queryset = queryset.order_by("-created_at", "-id")

        paginator = Paginator(queryset, page_size)
        current = paginator.get_page(page)

        return service_ok(
            {
                "results": list(current.object_list),
                "count": paginator.count,
                "page": current.number,
                "page_size": page_size,
                "num_pages": paginator.num_pages,
                "has_next": current.has_next(),
                "has_previous": current.has_previous(),
            }
        )

    @BaseService.log_performance
    def get_order_stats(self, user: User) -> ServiceResult[Dict]:
        rows = self._side_queryset(user).order_by().values("status").annotate(count=Count("id"), amount=Sum("amount"))

        by_status = {value: {"count": 0, "amount": Decimal("0.00")} for value in Order.Status.values}
        total_orders = 0
        total_amount = Decimal("0.00")
        for row in rows:
            amount = row["amount"] or Decimal("0.00")
            by_status[row["status"]] = {"count": row["count"], "amount": amount}
            total_orders += row["count"]
            total_amount += amount

        return service_ok({"total_orders": total_orders, "total_amount": total_amount, "by_status": by_status})

    @BaseService.log_performance
    def get_revision_notes(self, user: User, order_id) -> ServiceResult[List[RevisionNote]]:
        result = self.get_order(user, order_id)
        if not result.ok:
            return result
        return service_ok(list(result.value.revision_notes.select_related("requested_by")))

    # Lifecycle

    @BaseService.log_performance
    def update_status(
        self,
        user: User,
        order_id,
        status: str,
        delivery_files: Optional[List[str]] = None,
        files: Iterable = (),
    ) -> ServiceResult[Order]:
        """
        Move an order to ``status`` along a lifecycle edge.

        When moving to ``delivered``, ``delivery_files`` (already stored URLs)
        and ``files`` (uploads, stored here) are appended to the order's
        delivery list.
        """
        if (delivery_files or files) and status != Order.Status.DELIVERED:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Delivery files can only be attached when delivering")
        return self._transition(user, order_id, status, delivery_files=delivery_files or [], files=files)

    @BaseService.log_performance
    def request_revision(self, user: User, order_id, note: str = "") -> ServiceResult[Order]:
        """Buyer sends a delivered order back, spending one revision."""
        return self._transition(
            user, order_id, Order.Status.IN_PROGRESS, expected_action="request_revision", note=note or ""
        )

    @BaseService.log_performance
    def complete_order(self, user: User, order_id) -> ServiceResult[Order]:
        return self._transition(user, order_id, Order.Status.COMPLETED, expected_action="complete")

    @BaseService.log_performance
    def cancel_order(self, user: User, order_id, reason: str = "") -> ServiceResult[Order]:
        return self._transition(user, order_id, Order.Status.CANCELLED, expected_action="cancel", reason=reason or "")

    def _transition(
        self,
        user: User,
        order_id,
        requested: str,
        *,
        expected_action: Optional[str] = None,
        note: str = "",
        reason: str = "",
        delivery_files: Optional[List[str]] = None,
        files: Iterable = (),
    ) -> ServiceResult[Order]:
        action_label = expected_action or "status_update"
        uploaded: List[str] = []
        try:
            with transaction.atomic():
                try:
                    order = Order.objects.select_for_update().get(id=order_id)
                except (Order.DoesNotExist, DjangoValidationError, ValueError):
                    order_transitions_total.labels(action=action_label, outcome="not_found").inc()
                    return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

                from_status = order.status
                transition = apply_transition(order, requested, user, expected_action=expected_action)
                update_fields = ["status", "updated_at"]

                if transition.action == "start":
                    update_fields.append("started_at")
                elif transition.action == "deliver":
                    added = list(delivery_files or [])
                    for upload in files:
                        stored = self.storage.upload(
                            upload, folder=f"deliveries/{order.id}", content_type=getattr(upload, "content_type", None)
                        )
                        uploaded.append(stored.url)
                        added.append(stored.url)
                    order.delivery_files = list(order.delivery_files or []) + added
                    update_fields += ["delivered_at", "delivery_files"]
                elif transition.action == "complete":
                    update_fields.append("completed_at")
                elif transition.action == "cancel":
                    order.cancellation_reason = reason
                    update_fields += ["cancelled_at", "cancelled_by", "cancellation_reason"]
                elif transition.action == "request_revision":
                    # Guarded write; the row lock already serializes requests
                    decremented = Order.objects.filter(pk=order.pk, revisions_left__gt=0).update(
                        revisions_left=F("revisions_left") - 1
                    )
                    if not decremented:
                        raise RevisionLimitReached(from_status, requested)
                    RevisionNote.objects.create(order=order, note=note, requested_by=user)

                order.save(update_fields=update_fields)

                events: List[DomainEvent] = [
                    OrderStatusChangedEvent(
                        order_id=str(order.id),
                        actor_id=str(user.pk),
                        action=transition.action,
                        from_status=from_status,
                        to_status=order.status,
                        delivery_files=order.delivery_files if transition.action == "deliver" else None,
                    )
                ]
                if transition.action == "request_revision":
                    events.append(
                        RevisionRequestedEvent(
                            order_id=str(order.id),
                            buyer_id=str(user.pk),
                            note=note,
                            revisions_left=order.revisions_left,
                        )
                    )
                transaction.on_commit(lambda: self._publish(*events))

        except OrderAccessDenied as e:
            order_transitions_total.labels(action=action_label, outcome="forbidden").inc()
            code = ErrorCodes.PERMISSION_DENIED if e.is_participant else ErrorCodes.NOT_ORDER_PARTICIPANT
            return service_err(code, str(e))
        except RevisionLimitReached as e:
            order_transitions_total.labels(action=action_label, outcome="no_revisions_left").inc()
            return service_err(ErrorCodes.NO_REVISIONS_LEFT, str(e))
        except InvalidTransition as e:
            order_transitions_total.labels(action=action_label, outcome="invalid").inc()
            return service_err(ErrorCodes.INVALID_TRANSITION, str(e))
        except StorageException as e:
            self._discard(uploaded)
            self.logger.error(f"Delivery upload failed for order {order_id}: {e}")
            return service_err(ErrorCodes.STORAGE_ERROR, "Could not store delivery files")
        except Exception as e:
            self._discard(uploaded)
            self.logger.error(f"Error moving order {order_id} to {requested}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        order_transitions_total.labels(action=transition.action, outcome="applied").inc()
        self.logger.info(f"Order {order.id}: {from_status} -> {order.status} ({transition.action}) by {user.pk}")
        return service_ok(order)

    # Helpers

    def _discard(self, references: Iterable[str]) -> None:
        for reference in references:
            try:
                self.storage.delete(reference)
            except StorageException as e:
                self.logger.warning(f"Could not delete stored file {reference}: {e}")

    def _load(self, order_id) -> Optional[Order]:
        try:
            return Order.objects.select_related("buyer", "seller", "gig").get(id=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            return None

    def _side_queryset(self, user: User):
        if getattr(user, "role", None) == User.Role.FREELANCER:
            return Order.objects.filter(seller=user)
        return Order.objects.filter(buyer=user)

    def _publish(self, *events: DomainEvent) -> None:
        for event in events:
            self.notifier.publish(event.order_id, event.to_dict())

