from .auth_views import LoginAPIView, PasswordResetRequestView, PasswordResetVerifyView, RegisterAPIView
from .profile_views import AccountDeleteView, FreelancerListView, MeView, ProfilePictureUploadView, ProfileUpdateView


__all__ = [
    "LoginAPIView",
    "RegisterAPIView",
    "PasswordResetRequestView",
    "PasswordResetVerifyView",
    "MeView",
    "ProfileUpdateView",
    "ProfilePictureUploadView",
    "AccountDeleteView",
    "FreelancerListView",
]
