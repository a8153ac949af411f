from .user import CustomUser
from .verification import PasswordResetCode

__all__ = [
    "CustomUser",
    "PasswordResetCode",
]
