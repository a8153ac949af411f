import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    class Role(models.TextChoices):
        CLIENT = "client", "Client"
        FREELANCER = "freelancer", "Freelancer"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CLIENT)
    bio = models.TextField(blank=True, default="")
    skills = models.JSONField(default=list, blank=True)
    profile_pic = models.URLField(max_length=500, blank=True, default="")

    # Derived from public reviews; only RatingService writes it
    rating = models.DecimalField(max_digits=2, decimal_places=1, default=Decimal("0.0"))

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        app_label = "authentication"

    def is_client(self):
        return self.role == self.Role.CLIENT

    def is_freelancer(self):
        return self.role == self.Role.FREELANCER

    def __str__(self):
        return self.email
