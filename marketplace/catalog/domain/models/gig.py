import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator
from django.db import models


User = get_user_model()


class Gig(models.Model):
    class Category(models.TextChoices):
        DESIGN = "design", "Design"
        DEVELOPMENT = "development", "Development"
        MARKETING = "marketing", "Marketing"
        BUSINESS = "business", "Business"
        WRITING = "writing", "Writing"
        VIDEO = "video", "Video"
        MUSIC = "music", "Music"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name="gigs")

    title = models.CharField(max_length=200)
    description = models.TextField()
    category = models.CharField(max_length=20, choices=Category.choices)
    keywords = models.JSONField(default=list, blank=True)
    requirements = models.TextField(blank=True, default="", help_text="What the buyer should provide")

    # Media (URLs returned by the file store)
    thumbnail = models.URLField(max_length=500, blank=True, default="")
    images = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["category", "-created_at"], name="gig_category_created_idx"),
            models.Index(fields=["owner", "-created_at"], name="gig_owner_created_idx"),
        ]

    def find_plan(self, tier: str):
        """First plan whose tier matches exactly, in position order."""
        for plan in self.price_plans.all():
            if plan.tier == tier:
                return plan
        return None

    @property
    def starting_price(self):
        prices = [plan.price for plan in self.price_plans.all()]
        return min(prices) if prices else None

    def __str__(self):
        return self.title


class PricePlan(models.Model):
    class Tier(models.TextChoices):
        BASIC = "Basic", "Basic"
        STANDARD = "Standard", "Standard"
        PREMIUM = "Premium", "Premium"

    gig = models.ForeignKey(Gig, on_delete=models.CASCADE, related_name="price_plans")
    tier = models.CharField(max_length=20, choices=Tier.choices)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("5.00"))])
    delivery_time = models.PositiveIntegerField(validators=[MinValueValidator(1)], help_text="Days")
    revisions = models.PositiveIntegerField(default=0)
    features = models.JSONField(default=list, blank=True)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]
        app_label = "marketplace"

    def __str__(self):
        return f"{self.gig.title} - {self.tier}"


class GigFaq(models.Model):
    gig = models.ForeignKey(Gig, on_delete=models.CASCADE, related_name="faqs")
    question = models.CharField(max_length=300)
    answer = models.TextField()
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]
        app_label = "marketplace"

    def __str__(self):
        return self.question
