"""
AuthService - account and credential business logic.

Registration, login, profile maintenance and the emailed one-time-code
password reset. Mail and file storage are injected so tests can run against
the mock email service and in-memory storage.
"""

import logging
from typing import Dict, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import transaction

from authentication.api.serializers.jwt_serializers import CustomRefreshToken
from authentication.domain.models import PasswordResetCode
from infrastructure.email import EmailException, EmailServiceInterface
from infrastructure.storage import StorageException, StorageInterface

from .results import AuthErrorCodes, LoginResult, Result


User = get_user_model()
logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service encapsulating account business logic.
    """

    EDITABLE_PROFILE_FIELDS = ("name", "bio", "skills")
    RESTRICTED_PROFILE_FIELDS = ("role", "email", "password")

    def __init__(self, email_service: EmailServiceInterface, storage: StorageInterface):
        """
        Args:
            email_service: Mail sender used for password reset codes
            storage: File store used for profile pictures
        """
        self.email_service = email_service
        self.storage = storage

    @transaction.atomic
    def register(self, name: str, email: str, password: str, role: str) -> LoginResult:
        """
        Create an account and return a JWT pair for it.

        Business Logic:
        1. All of name, email, password, role are required
        2. Role must be client or freelancer
        3. Email must not already be registered
        4. Password must pass Django's password validators
        """
        errors = {}
        for field_name, value in (("name", name), ("email", email), ("password", password), ("role", role)):
            if not value:
                errors[field_name] = "This field is required."
        if role and role not in User.Role.values:
            errors["role"] = f"Role must be one of: {', '.join(User.Role.values)}."
        if errors:
            return LoginResult(
                success=False,
                error="Please provide valid registration details.",
                error_code=AuthErrorCodes.VALIDATION_ERROR,
                errors=errors,
            )

        email = User.objects.normalize_email(email).lower()
        if User.objects.filter(email__iexact=email).exists():
            return LoginResult(
                success=False, error="User with this email already exists.", error_code=AuthErrorCodes.EMAIL_TAKEN
            )

        try:
            validate_password(password)
        except ValidationError as e:
            return LoginResult(
                success=False,
                error="Password is too weak.",
                error_code=AuthErrorCodes.VALIDATION_ERROR,
                errors={"password": " ".join(e.messages)},
            )

        user = User.objects.create_user(username=email, email=email, password=password, name=name, role=role)
        logger.info(f"Registered {role} account {user.id}")

        return self._issue_tokens(user, message="Registration successful")

    def login(self, email: str, password: str) -> LoginResult:
        if not email or not password:
            return LoginResult(
                success=False,
                error="Email and password are required.",
                error_code=AuthErrorCodes.VALIDATION_ERROR,
            )

        user = User.objects.filter(email__iexact=email).first()
        if user is None or not user.is_active:
            return LoginResult(
                success=False,
                error="No account found with this email address.",
                error_code=AuthErrorCodes.USER_NOT_FOUND,
            )

        if not user.check_password(password):
            logger.info(f"Failed login for user {user.id}: wrong password")
            return LoginResult(
                success=False,
                error="Incorrect password. Please try again.",
                error_code=AuthErrorCodes.INVALID_CREDENTIALS,
            )

        return self._issue_tokens(user, message="Login successful")

    def _issue_tokens(self, user, message: str) -> LoginResult:
        refresh = CustomRefreshToken.for_user(user)
        return LoginResult(
            success=True,
            user=user,
            access_token=str(refresh.access_token),
            refresh_token=str(refresh),
            message=message,
        )

    def update_profile(self, user, data: Dict) -> Result:
        """
        Update editable profile fields.

        ``role``, ``email`` and ``password`` cannot be changed here; sending any
        of them rejects the whole update.
        """
        restricted = [name for name in self.RESTRICTED_PROFILE_FIELDS if name in data]
        if restricted:
            return Result(
                success=False,
                error=f"Cannot update restricted fields: {', '.join(restricted)}",
                error_code=AuthErrorCodes.VALIDATION_ERROR,
            )

        update_fields = []
        for field_name in self.EDITABLE_PROFILE_FIELDS:
            if field_name in data:
                setattr(user, field_name, data[field_name])
                update_fields.append(field_name)

        if update_fields:
            user.save(update_fields=update_fields)

        return Result(success=True, message="Profile updated", data={"user": user})

    def update_profile_picture(self, user, file) -> Result:
        """Upload a new picture and drop the previous one from storage (best effort)."""
        try:
            stored = self.storage.upload(file, folder=f"profile-pics/{user.id}")
        except StorageException as e:
            logger.error(f"Profile picture upload failed for user {user.id}: {e}")
            return Result(
                success=False, error="Failed to upload profile picture.", error_code=AuthErrorCodes.STORAGE_ERROR
            )

        previous = user.profile_pic
        user.profile_pic = stored.url
        user.save(update_fields=["profile_pic"])

        if previous:
            try:
                self.storage.delete(previous)
            except StorageException as e:
                logger.warning(f"Could not delete previous profile picture for user {user.id}: {e}")

        return Result(success=True, message="Profile picture updated", data={"user": user})

    @transaction.atomic
    def delete_account(self, user) -> Result:
        """
        Remove an account.

        Orders are kept as history, so an account that took part in any order
        is deactivated (and its gigs removed) instead of deleted.
        """
        from marketplace.models import Gig, Order

        has_orders = Order.objects.filter(buyer=user).exists() or Order.objects.filter(seller=user).exists()
        if has_orders:
            Gig.objects.filter(owner=user).delete()
            user.is_active = False
            user.save(update_fields=["is_active"])
            logger.info(f"Deactivated account {user.id} (has order history)")
            return Result(success=True, message="Account deactivated", data={"deactivated": True})

        user_id = user.id
        user.delete()
        logger.info(f"Deleted account {user_id}")
        return Result(success=True, message="Account deleted", data={"deactivated": False})

    def list_freelancers(self):
        return User.objects.filter(role=User.Role.FREELANCER, is_active=True).order_by("-rating", "name")

    def request_password_reset(self, email: Optional[str]) -> Result:
        """
        Issue a fresh 6-digit code and mail it.

        Older codes for the email are discarded. The new code stays valid even
        when the mail sender fails; the caller learns about the failure through
        ``data["email_sent"]``.
        """
        if not email:
            return Result(success=False, error="Email is required.", error_code=AuthErrorCodes.VALIDATION_ERROR)

        user = User.objects.filter(email__iexact=email, is_active=True).first()
        if user is None:
            return Result(success=False, error="User not found.", error_code=AuthErrorCodes.USER_NOT_FOUND)

        with transaction.atomic():
            PasswordResetCode.objects.for_email(user.email).delete()
            reset_code = PasswordResetCode.objects.create(email=user.email)

        ttl_minutes = getattr(settings, "PASSWORD_RESET_CODE_TTL_MINUTES", 10)
        try:
            sent = self.email_service.send_password_reset_code(user.email, reset_code.code, ttl_minutes)
        except EmailException as e:
            logger.error(f"Failed to send password reset code to user {user.id}: {e}")
            sent = False

        if not sent:
            return Result(
                success=False,
                error="Could not send the reset code email. Please try again.",
                error_code=AuthErrorCodes.EMAIL_FAILED,
                data={"email_sent": False},
            )

        logger.info(f"Password reset code sent to user {user.id}")
        return Result(success=True, message="OTP sent to email", data={"email_sent": True})

    @transaction.atomic
    def verify_password_reset(self, email: str, code: str, new_password: str) -> Result:
        if not email or not code or not new_password:
            return Result(
                success=False,
                error="Email, code and new password are required.",
                error_code=AuthErrorCodes.VALIDATION_ERROR,
            )

        reset_code = PasswordResetCode.objects.for_email(email).valid().filter(code=code).first()
        if reset_code is None:
            return Result(success=False, error="Invalid or expired OTP.", error_code=AuthErrorCodes.INVALID_CODE)

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            return Result(success=False, error="User not found.", error_code=AuthErrorCodes.USER_NOT_FOUND)

        try:
            validate_password(new_password, user=user)
        except ValidationError as e:
            return Result(success=False, error=" ".join(e.messages), error_code=AuthErrorCodes.VALIDATION_ERROR)

        user.set_password(new_password)
        user.save(update_fields=["password"])
        PasswordResetCode.objects.for_email(email).delete()

        logger.info(f"Password reset completed for user {user.id}")
        return Result(success=True, message="Password reset successful")

    def purge_expired_reset_codes(self) -> int:
        deleted, _ = PasswordResetCode.objects.expired().delete()
        if deleted:
            logger.info(f"Purged {deleted} expired password reset codes")
        return deleted
