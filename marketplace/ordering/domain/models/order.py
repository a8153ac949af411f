import uuid

from django.contrib.auth import get_user_model
from django.db import models

from marketplace.catalog.domain.models.gig import Gig


User = get_user_model()


class Order(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        IN_PROGRESS = "in_progress", "In Progress"
        DELIVERED = "delivered", "Delivered"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(User, on_delete=models.PROTECT, related_name="orders_as_buyer")
    seller = models.ForeignKey(User, on_delete=models.PROTECT, related_name="orders_as_seller")
    gig = models.ForeignKey(Gig, on_delete=models.SET_NULL, null=True, blank=True, related_name="orders")

    # Snapshot of the gig and plan at order time; later gig edits do not touch these
    gig_title = models.CharField(max_length=200)
    plan_tier = models.CharField(max_length=20)
    plan_price = models.DecimalField(max_digits=10, decimal_places=2)
    plan_delivery_time = models.PositiveIntegerField(help_text="Days")
    plan_revisions = models.PositiveIntegerField()
    plan_features = models.JSONField(default=list, blank=True)

    requirements = models.TextField(blank=True, default="")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    amount = models.DecimalField(max_digits=10, decimal_places=2)

    # Lifecycle bookkeeping
    revisions_left = models.PositiveIntegerField()
    delivery_files = models.JSONField(default=list, blank=True)  # append-only

    # Copied from the order's review, set once
    feedback_rating = models.PositiveSmallIntegerField(null=True, blank=True)
    feedback_comment = models.TextField(blank=True, default="")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    started_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="cancelled_orders"
    )
    cancellation_reason = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["buyer", "status"], name="order_buyer_status_idx"),
            models.Index(fields=["seller", "status"], name="order_seller_status_idx"),
            models.Index(fields=["-created_at"], name="order_created_idx"),
        ]

    def __str__(self):
        return f"Order {str(self.id)[:8]} ({self.status})"


class RevisionNote(models.Model):
    """One accepted revision request on a delivered order."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="revision_notes")
    note = models.TextField(blank=True, default="")
    requested_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="revision_requests"
    )
    requested_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["requested_at", "id"]
        app_label = "marketplace"

    def __str__(self):
        return f"Revision on {str(self.order_id)[:8]} at {self.requested_at}"
