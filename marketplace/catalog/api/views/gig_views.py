from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from authentication.permissions import IsFreelancer
from infrastructure.container import container
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    GigListResponseSerializer,
    GigSerializer,
    GigWriteSerializer,
)
from marketplace.api.views.common import error_response, int_param, validation_error_response


GIG_FILTER_PARAMS = ["category", "min_price", "max_price", "search", "owner"]


class GigViewSet(viewsets.ViewSet):
    """
    Gig catalog. Browsing is public; writing requires a freelancer account
    and, for existing gigs, ownership.
    """

    parser_classes = [JSONParser, MultiPartParser, FormParser]
    lookup_value_regex = "[0-9a-fA-F-]{36}"

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [permissions.AllowAny()]
        if self.action in ("create", "my"):
            return [IsFreelancer()]
        return [permissions.IsAuthenticated()]

    def get_service(self):
        return container.catalog_service()

    @extend_schema(
        operation_id="gigs_list",
        summary="Browse gigs",
        description="""
        **What it receives:**
        - Optional filters: `category`, `min_price`, `max_price`, `search`, `owner`
        - Pagination parameters (page, page_size)

        **What it returns:**
        - Paginated gigs, newest first, with plans and FAQs
        """,
        parameters=[
            OpenApiParameter(name="category", type=str, description="Gig category"),
            OpenApiParameter(name="min_price", type=float, description="Lowest plan price bound"),
            OpenApiParameter(name="max_price", type=float, description="Highest plan price bound"),
            OpenApiParameter(name="search", type=str, description="Matches title, description and keywords"),
            OpenApiParameter(name="owner", type=str, description="Owner user id"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={
            200: OpenApiResponse(response=GigListResponseSerializer, description="Gigs retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid filter value"),
        },
        tags=["Marketplace - Gigs"],
    )
    def list(self, request):
        filters = {key: request.query_params[key] for key in GIG_FILTER_PARAMS if request.query_params.get(key)}
        result = self.get_service().list_gigs(
            filters, page=int_param(request, "page", 1, maximum=10_000), page_size=int_param(request, "page_size", 20)
        )
        if not result.ok:
            return error_response(result)

        data = dict(result.value)
        data["results"] = GigSerializer(result.value["results"], many=True).data
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="gigs_create",
        summary="Publish a gig",
        description="""
        **What it receives:**
        - `title`, `description`, `category`, optional `keywords`, `requirements`
        - `price_plans`: at least one of Basic / Standard / Premium, each tier once
        - Optional `faqs`, `thumbnail` file and `images` files (multipart)

        **What it returns:**
        - The created gig
        """,
        request=GigWriteSerializer,
        responses={
            201: OpenApiResponse(response=GigSerializer, description="Gig created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid gig data"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a freelancer"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Media upload failed"),
        },
        tags=["Marketplace - Gigs"],
    )
    def create(self, request):
        serializer = GigWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = dict(serializer.validated_data)
        thumbnail = data.pop("thumbnail", None)
        images = data.pop("images", [])

        result = self.get_service().create_gig(request.user, data, thumbnail=thumbnail, images=images)
        if not result.ok:
            return error_response(result)
        return Response(GigSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="gigs_retrieve",
        summary="Get gig details",
        responses={
            200: OpenApiResponse(response=GigSerializer, description="Gig retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Gig not found"),
        },
        tags=["Marketplace - Gigs"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_gig(pk)
        if not result.ok:
            return error_response(result)
        return Response(GigSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="gigs_partial_update",
        summary="Edit a gig",
        description="""
        **What it receives:**
        - Any subset of the create fields
        - `price_plans` / `faqs`, when sent, replace the existing ones

        **What it returns:**
        - The updated gig. Existing orders keep their plan snapshot.
        """,
        request=GigWriteSerializer,
        responses={
            200: OpenApiResponse(response=GigSerializer, description="Gig updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid gig data"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the gig owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Gig not found"),
        },
        tags=["Marketplace - Gigs"],
    )
    def partial_update(self, request, pk=None):
        serializer = GigWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = dict(serializer.validated_data)
        thumbnail = data.pop("thumbnail", None)
        images = data.pop("images", [])

        result = self.get_service().update_gig(request.user, pk, data, thumbnail=thumbnail, images=images)
        if not result.ok:
            return error_response(result)
        return Response(GigSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="gigs_destroy",
        summary="Delete a gig",
        responses={
            204: OpenApiResponse(description="Gig deleted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the gig owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Gig not found"),
        },
        tags=["Marketplace - Gigs"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_gig(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="gigs_my",
        summary="List the current freelancer's gigs",
        responses={200: OpenApiResponse(response=GigSerializer(many=True), description="Own gigs")},
        tags=["Marketplace - Gigs"],
    )
    @action(detail=False, methods=["get"], url_path="my")
    def my(self, request):
        result = self.get_service().list_my_gigs(request.user)
        if not result.ok:
            return error_response(result)
        return Response(GigSerializer(result.value, many=True).data, status=status.HTTP_200_OK)
