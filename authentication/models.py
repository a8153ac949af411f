from authentication.domain.models.user import CustomUser
from authentication.domain.models.verification import PasswordResetCode


__all__ = [
    "CustomUser",
    "PasswordResetCode",
]
