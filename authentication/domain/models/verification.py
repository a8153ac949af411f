import secrets
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


class PasswordResetCodeQuerySet(models.QuerySet):
    def for_email(self, email: str):
        return self.filter(email__iexact=email)

    def expired(self):
        return self.filter(expires_at__lte=timezone.now())

    def valid(self):
        return self.filter(expires_at__gt=timezone.now())


class PasswordResetCode(models.Model):
    """
    One-time code mailed to a user who forgot their password.

    Codes are keyed by email rather than user so a request never reveals
    more than the email the caller already typed.
    """

    email = models.EmailField(db_index=True)
    code = models.CharField(max_length=6)
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()

    objects = PasswordResetCodeQuerySet.as_manager()

    class Meta:
        app_label = "authentication"
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if not self.code:
            self.code = self.generate_code()
        if not self.expires_at:
            ttl = getattr(settings, "PASSWORD_RESET_CODE_TTL_MINUTES", 10)
            self.expires_at = timezone.now() + timedelta(minutes=ttl)
        super().save(*args, **kwargs)

    @staticmethod
    def generate_code() -> str:
        return f"{secrets.randbelow(900000) + 100000}"

    def is_expired(self):
        return timezone.now() >= self.expires_at

    def __str__(self):
        return f"Reset code for {self.email}"
