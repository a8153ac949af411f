from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import generics, permissions, status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import (
    ProfilePictureUploadSerializer,
    ProfileUpdateSerializer,
    PublicUserSerializer,
    UserSerializer,
)
from authentication.api.serializers.response_serializers import ErrorResponseSerializer, MessageResponseSerializer

from .auth_views import auth_error_response, get_auth_service


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="profile_me",
        summary="Get own account",
        responses={200: OpenApiResponse(response=UserSerializer, description="Current account")},
        tags=["Profile"],
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data, status=status.HTTP_200_OK)


class ProfileUpdateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="profile_update",
        summary="Update own profile",
        description="""
        Editable fields: `name`, `bio`, `skills`.
        Requests containing `role`, `email` or `password` are rejected.
        """,
        request=ProfileUpdateSerializer,
        responses={
            200: OpenApiResponse(response=UserSerializer, description="Profile updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Restricted or invalid fields"),
        },
        tags=["Profile"],
    )
    def put(self, request):
        service = get_auth_service()

        # Restricted fields are reported by the service, so check them before field validation drops them
        restricted = [name for name in service.RESTRICTED_PROFILE_FIELDS if name in request.data]
        data = request.data
        if not restricted:
            serializer = ProfileUpdateSerializer(data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

        result = service.update_profile(request.user, data)
        if not result.success:
            return auth_error_response(result)
        return Response(UserSerializer(result.data["user"]).data, status=status.HTTP_200_OK)


class ProfilePictureUploadView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="profile_picture_upload",
        summary="Upload profile picture",
        request={"multipart/form-data": ProfilePictureUploadSerializer},
        responses={
            200: OpenApiResponse(response=UserSerializer, description="Picture stored"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="No file uploaded"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Storage failure"),
        },
        tags=["Profile"],
    )
    def put(self, request):
        upload = request.FILES.get("profile_pic")
        if not upload:
            return Response(
                {"error": "validation_error", "detail": "No file uploaded"}, status=status.HTTP_400_BAD_REQUEST
            )

        result = get_auth_service().update_profile_picture(request.user, upload)
        if not result.success:
            return auth_error_response(result)
        return Response(UserSerializer(result.data["user"]).data, status=status.HTTP_200_OK)


class AccountDeleteView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="profile_delete_account",
        summary="Delete own account",
        description="Accounts with order history are deactivated instead of deleted.",
        responses={200: OpenApiResponse(response=MessageResponseSerializer, description="Account removed")},
        tags=["Profile"],
    )
    def delete(self, request):
        result = get_auth_service().delete_account(request.user)
        if not result.success:
            return auth_error_response(result)
        return Response({"message": result.message, **result.data}, status=status.HTTP_200_OK)


class FreelancerListView(generics.ListAPIView):
    """Public directory of freelancers, best rated first."""

    serializer_class = PublicUserSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        return get_auth_service().list_freelancers()

    @extend_schema(operation_id="freelancers_list", summary="List freelancers", tags=["Profile"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)
