"""
Result objects for the authentication service layer.

Service methods return these dataclasses instead of raising for expected
failures; ``error_code`` tells the view which HTTP status to use.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class AuthErrorCodes:
    VALIDATION_ERROR = "validation_error"
    EMAIL_TAKEN = "email_taken"
    USER_NOT_FOUND = "user_not_found"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_CODE = "invalid_code"
    EMAIL_FAILED = "email_failed"
    STORAGE_ERROR = "storage_error"
    INTERNAL_ERROR = "internal_error"


@dataclass
class LoginResult:
    """Result of login or registration: the user plus a JWT pair."""

    success: bool
    user: Optional[Any] = None  # CustomUser instance
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    errors: Optional[Dict[str, str]] = None  # Field-level errors
    message: Optional[str] = None


@dataclass
class Result:
    """Generic result for simple operations."""

    success: bool
    message: str = ""
    data: Optional[Dict[str, Any]] = field(default_factory=dict)
    error: Optional[str] = None
    error_code: Optional[str] = None
