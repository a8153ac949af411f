from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import (
    LoginRequestSerializer,
    PasswordResetRequestSerializer,
    PasswordResetVerifySerializer,
    RegisterRequestSerializer,
    UserSerializer,
)
from authentication.api.serializers.response_serializers import (
    AuthTokenResponseSerializer,
    ErrorResponseSerializer,
    MessageResponseSerializer,
    PasswordResetResponseSerializer,
)
from authentication.domain.services.results import AuthErrorCodes
from infrastructure.container import container


AUTH_ERROR_STATUS = {
    AuthErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    AuthErrorCodes.INVALID_CREDENTIALS: status.HTTP_400_BAD_REQUEST,
    AuthErrorCodes.INVALID_CODE: status.HTTP_400_BAD_REQUEST,
    AuthErrorCodes.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuthErrorCodes.EMAIL_TAKEN: status.HTTP_409_CONFLICT,
    AuthErrorCodes.EMAIL_FAILED: status.HTTP_502_BAD_GATEWAY,
    AuthErrorCodes.STORAGE_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def get_auth_service():
    """Factory to get AuthService instance with dependencies."""
    return container.auth_service()


def auth_error_response(result, **extra) -> Response:
    body = {"error": result.error_code, "detail": result.error}
    errors = getattr(result, "errors", None)
    if errors:
        body["errors"] = errors
    body.update(extra)
    return Response(body, status=AUTH_ERROR_STATUS.get(result.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR))


def token_response(result, status_code: int) -> Response:
    return Response(
        {
            "message": result.message,
            "access": result.access_token,
            "refresh": result.refresh_token,
            "user": UserSerializer(result.user).data,
        },
        status=status_code,
    )


class RegisterAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_register",
        summary="Register a client or freelancer account",
        description="""
        **What it receives:**
        - `name`, `email`, `password`
        - `role`: `client` or `freelancer`

        **What it returns:**
        - JWT access/refresh pair and the new account
        """,
        request=RegisterRequestSerializer,
        responses={
            201: OpenApiResponse(response=AuthTokenResponseSerializer, description="Account created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Missing or invalid fields"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Email already registered"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        result = get_auth_service().register(
            name=request.data.get("name"),
            email=request.data.get("email"),
            password=request.data.get("password"),
            role=request.data.get("role"),
        )
        if not result.success:
            return auth_error_response(result)
        return token_response(result, status.HTTP_201_CREATED)


class LoginAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_login",
        summary="Login with email and password",
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(
                response=AuthTokenResponseSerializer,
                description="Login successful",
                examples=[
                    OpenApiExample(
                        "Successful Login",
                        value={
                            "message": "Login successful",
                            "access": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                            "refresh": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                            "user": {
                                "id": "123e4567-e89b-12d3-a456-426614174000",
                                "name": "Ada Lovelace",
                                "email": "ada@example.com",
                                "role": "freelancer",
                            },
                        },
                    )
                ],
            ),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Wrong password"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown email"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        result = get_auth_service().login(request.data.get("email"), request.data.get("password"))
        if not result.success:
            return auth_error_response(result)
        return token_response(result, status.HTTP_200_OK)


class PasswordResetRequestView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_request_reset",
        summary="Email a password reset code",
        description="""
        Sends a 6-digit code valid for 10 minutes. Previously issued codes stop working.
        If the email cannot be delivered the response is 502 with `email_sent: false`.
        """,
        request=PasswordResetRequestSerializer,
        responses={
            200: OpenApiResponse(response=PasswordResetResponseSerializer, description="Code sent"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown email"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Mail sender failed"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        result = get_auth_service().request_password_reset(request.data.get("email"))
        if not result.success:
            return auth_error_response(result, **(result.data or {}))
        return Response({"message": result.message, "email_sent": True}, status=status.HTTP_200_OK)


class PasswordResetVerifyView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_verify_otp",
        summary="Reset password with an emailed code",
        request=PasswordResetVerifySerializer,
        responses={
            200: OpenApiResponse(response=MessageResponseSerializer, description="Password changed"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid or expired code"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        result = get_auth_service().verify_password_reset(
            email=request.data.get("email"),
            code=request.data.get("otp"),
            new_password=request.data.get("new_password"),
        )
        if not result.success:
            return auth_error_response(result)
        return Response({"message": result.message}, status=status.HTTP_200_OK)
