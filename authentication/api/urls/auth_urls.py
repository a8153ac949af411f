from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from authentication.api.views import (
    AccountDeleteView,
    FreelancerListView,
    LoginAPIView,
    MeView,
    PasswordResetRequestView,
    PasswordResetVerifyView,
    ProfilePictureUploadView,
    ProfileUpdateView,
    RegisterAPIView,
)


urlpatterns = [
    # Auth
    path("register/", RegisterAPIView.as_view(), name="register"),
    path("login/", LoginAPIView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    # Password reset
    path("request-reset/", PasswordResetRequestView.as_view(), name="request_reset"),
    path("verify-otp/", PasswordResetVerifyView.as_view(), name="verify_otp"),
    # Profile
    path("me/", MeView.as_view(), name="me"),
    path("update/", ProfileUpdateView.as_view(), name="profile_update"),
    path("profile-pic/", ProfilePictureUploadView.as_view(), name="profile_pic"),
    path("delete/", AccountDeleteView.as_view(), name="account_delete"),
    path("freelancers/", FreelancerListView.as_view(), name="freelancers"),
]
