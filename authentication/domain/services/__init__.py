"""
Business logic services for authentication.

Services encapsulate business rules and coordinate between
infrastructure (email, storage) and domain models.
"""

from .auth_service import AuthService
from .results import AuthErrorCodes, LoginResult, Result


__all__ = [
    "AuthService",
    "AuthErrorCodes",
    "LoginResult",
    "Result",
]
