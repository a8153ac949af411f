from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from authentication.permissions import IsClient
from infrastructure.container import container
from marketplace.api.serializers import (
    CreateReviewRequestSerializer,
    ErrorResponseSerializer,
    ReviewListResponseSerializer,
    ReviewSerializer,
    UpdateReviewRequestSerializer,
)
from marketplace.api.views.common import error_response, int_param, validation_error_response


PAGINATION_PARAMS = [
    OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
    OpenApiParameter(name="page_size", type=int, description="Items per page (default: 10)"),
]


class ReviewViewSet(viewsets.ViewSet):
    """Reviews of completed orders, written by buyers about sellers."""

    lookup_value_regex = "[0-9a-fA-F-]{36}"

    def get_permissions(self):
        if self.action in ("gig", "user"):
            return [permissions.AllowAny()]
        if self.action == "create":
            return [IsClient()]
        return [permissions.IsAuthenticated()]

    def get_service(self):
        return container.review_service()

    @extend_schema(
        operation_id="reviews_create",
        summary="Review a completed order",
        description="""
        **What it receives:**
        - `order_id` (UUID): Completed order the user bought
        - `rating` (1-5), `comment` (max 500 chars), optional `category`

        **What it returns:**
        - The review. The seller's rating is recomputed after the write commits.
        """,
        request=CreateReviewRequestSerializer,
        responses={
            201: OpenApiResponse(response=ReviewSerializer, description="Review created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Order not completed or invalid data"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the buyer of this order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Order already reviewed"),
        },
        tags=["Marketplace - Reviews"],
    )
    def create(self, request):
        serializer = CreateReviewRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = self.get_service().create_review(
            request.user, data["order_id"], data["rating"], data["comment"], data["category"]
        )
        if not result.ok:
            return error_response(result)
        return Response(ReviewSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="reviews_update",
        summary="Edit your review",
        request=UpdateReviewRequestSerializer,
        responses={
            200: OpenApiResponse(response=ReviewSerializer, description="Review updated"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the review author"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Review not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def update(self, request, pk=None):
        serializer = UpdateReviewRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().update_review(request.user, pk, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(ReviewSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="reviews_destroy",
        summary="Delete your review",
        responses={
            204: OpenApiResponse(description="Review deleted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the review author"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Review not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_review(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="reviews_for_gig",
        summary="Public reviews of a gig",
        parameters=[
            OpenApiParameter(name="rating", type=int, description="Only reviews with this star rating"),
            *PAGINATION_PARAMS,
        ],
        responses={
            200: OpenApiResponse(response=ReviewListResponseSerializer, description="Reviews with stats"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Gig not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    @action(detail=False, methods=["get"], url_path=r"gig/(?P<gig_id>[0-9a-fA-F-]{36})")
    def gig(self, request, gig_id=None):
        rating = request.query_params.get("rating")
        if rating is not None:
            try:
                rating = int(rating)
            except ValueError:
                return validation_error_response({"rating": ["Must be an integer between 1 and 5."]})

        result = self.get_service().list_gig_reviews(
            gig_id,
            page=int_param(request, "page", 1, maximum=10_000),
            page_size=int_param(request, "page_size", 10),
            rating=rating,
        )
        return self._listing_response(result)

    @extend_schema(
        operation_id="reviews_for_user",
        summary="Public reviews a user received",
        parameters=PAGINATION_PARAMS,
        responses={
            200: OpenApiResponse(response=ReviewListResponseSerializer, description="Reviews with stats"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>[0-9a-fA-F-]{36})")
    def user(self, request, user_id=None):
        result = self.get_service().list_user_reviews(
            user_id,
            page=int_param(request, "page", 1, maximum=10_000),
            page_size=int_param(request, "page_size", 10),
        )
        return self._listing_response(result)

    def _listing_response(self, result):
        if not result.ok:
            return error_response(result)
        data = dict(result.value)
        data["results"] = ReviewSerializer(result.value["results"], many=True).data
        data["stats"] = dict(data["stats"], average_rating=str(data["stats"]["average_rating"]))
        return Response(data, status=status.HTTP_200_OK)
