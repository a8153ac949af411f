from .auth_serializers import (
    LoginRequestSerializer,
    PasswordResetRequestSerializer,
    PasswordResetVerifySerializer,
    ProfilePictureUploadSerializer,
    ProfileUpdateSerializer,
    PublicUserSerializer,
    RegisterRequestSerializer,
    UserSerializer,
    UserSummarySerializer,
)


__all__ = [
    "UserSerializer",
    "PublicUserSerializer",
    "UserSummarySerializer",
    "RegisterRequestSerializer",
    "LoginRequestSerializer",
    "ProfileUpdateSerializer",
    "ProfilePictureUploadSerializer",
    "PasswordResetRequestSerializer",
    "PasswordResetVerifySerializer",
]
