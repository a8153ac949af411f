import uuid

from django.contrib.auth import get_user_model
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from marketplace.catalog.domain.models.gig import Gig
from marketplace.ordering.domain.models.order import Order


User = get_user_model()


class Review(models.Model):
    class Category(models.TextChoices):
        COMMUNICATION = "communication", "Communication"
        QUALITY = "quality", "Quality"
        VALUE = "value", "Value"
        DELIVERY = "delivery", "Delivery"
        OVERALL = "overall", "Overall"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name="review")
    reviewer = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reviews_written")
    reviewed_user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reviews_received")
    gig = models.ForeignKey(Gig, on_delete=models.SET_NULL, null=True, blank=True, related_name="reviews")

    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.CharField(max_length=500)
    category = models.CharField(max_length=20, choices=Category.choices, default=Category.OVERALL)
    is_public = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["reviewed_user", "is_public"], name="review_user_public_idx"),
            models.Index(fields=["gig", "is_public"], name="review_gig_public_idx"),
        ]

    def __str__(self):
        return f"{self.rating}/5 for order {str(self.order_id)[:8]}"
