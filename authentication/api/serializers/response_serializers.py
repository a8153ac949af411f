"""
Response Serializers for API Documentation

These serializers describe response bodies for the OpenAPI schema. They are
not used for validation.
"""

from rest_framework import serializers

from .auth_serializers import UserSerializer


class AuthTokenResponseSerializer(serializers.Serializer):
    """Response for successful login or registration"""

    message = serializers.CharField(help_text="Success message")
    access = serializers.CharField(help_text="JWT access token")
    refresh = serializers.CharField(help_text="JWT refresh token")
    user = UserSerializer(help_text="Account details")


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class PasswordResetResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    email_sent = serializers.BooleanField()


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    error = serializers.CharField(help_text="Machine readable error code")
    detail = serializers.CharField(help_text="Human readable error message")
    errors = serializers.DictField(required=False, help_text="Field-specific validation errors")
