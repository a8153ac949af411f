from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from authentication.permissions import IsClient, IsFreelancer
from infrastructure.container import container
from marketplace.api.serializers import (
    CancelOrderRequestSerializer,
    CreateOrderRequestSerializer,
    ErrorResponseSerializer,
    OrderListResponseSerializer,
    OrderSerializer,
    OrderStatsResponseSerializer,
    RevisionNoteSerializer,
    RevisionRequestSerializer,
    StatusUpdateRequestSerializer,
)
from marketplace.api.views.common import error_response, int_param, validation_error_response
from marketplace.ordering.domain.services import OrderService


ORDER_ERROR_RESPONSES = {
    403: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed for this participant"),
    404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
}


class OrderViewSet(viewsets.ViewSet):
    """
    Orders and their lifecycle. Clients buy, freelancers deliver; which
    participant may take each step is decided by the order state machine.
    """

    parser_classes = [JSONParser, MultiPartParser, FormParser]
    lookup_value_regex = "[0-9a-fA-F-]{36}"

    def get_permissions(self):
        if self.action in ("create", "request_revision", "complete"):
            return [IsClient()]
        if self.action == "update_status":
            return [IsFreelancer()]
        return [permissions.IsAuthenticated()]

    def get_service(self) -> OrderService:
        return container.order_service()

    @extend_schema(
        operation_id="orders_create",
        summary="Order a gig plan",
        description="""
        **What it receives:**
        - `gig_id` (UUID): Gig to order
        - `plan_tier`: `Basic`, `Standard` or `Premium` (exact match)
        - `requirements` (optional): Brief for the freelancer

        **What it returns:**
        - The pending order with a snapshot of the chosen plan
        """,
        request=CreateOrderRequestSerializer,
        responses={
            201: OpenApiResponse(response=OrderSerializer, description="Order created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown plan or invalid data"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Only clients can order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Gig not found"),
        },
        tags=["Marketplace - Orders"],
    )
    def create(self, request):
        serializer = CreateOrderRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().create_order(request.user, **serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="orders_my_orders",
        summary="List the current user's orders",
        description="""
        **What it receives:**
        - Optional `status` filter (`all` or empty for every status)
        - Pagination parameters (page, page_size)

        **What it returns:**
        - Clients: orders they placed. Freelancers: orders they received.
        """,
        parameters=[
            OpenApiParameter(name="status", type=str, description="Filter by order status"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 10)"),
        ],
        responses={
            200: OpenApiResponse(response=OrderListResponseSerializer, description="Orders retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown status filter"),
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=False, methods=["get"], url_path="my-orders")
    def my_orders(self, request):
        default_size = getattr(settings, "ORDER_LIST_PAGE_SIZE", 10)
        result = self.get_service().list_orders(
            request.user,
            status=request.query_params.get("status"),
            page=int_param(request, "page", 1, maximum=10_000),
            page_size=int_param(request, "page_size", default_size),
        )
        if not result.ok:
            return error_response(result)

        data = dict(result.value)
        data["results"] = OrderSerializer(result.value["results"], many=True).data
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_stats",
        summary="Order totals by status for the current user",
        responses={200: OpenApiResponse(response=OrderStatsResponseSerializer, description="Order statistics")},
        tags=["Marketplace - Orders"],
    )
    @action(detail=False, methods=["get"])
    def stats(self, request):
        result = self.get_service().get_order_stats(request.user)
        if not result.ok:
            return error_response(result)
        return Response(OrderStatsResponseSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_retrieve",
        summary="Get order details",
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order retrieved"),
            **ORDER_ERROR_RESPONSES,
        },
        tags=["Marketplace - Orders"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_order(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_update_status",
        summary="Move an order to a new status (seller)",
        description="""
        **What it receives:**
        - `status`: target status (`in_progress`, `delivered`, `completed`, `cancelled`)
        - When delivering: `delivery_files` (stored URLs) and/or `files` (multipart uploads)

        **What it returns:**
        - The updated order. Steps outside the order lifecycle are rejected with 400.
        """,
        request=StatusUpdateRequestSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Status updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid transition"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Delivery upload failed"),
            **ORDER_ERROR_RESPONSES,
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request, pk=None):
        serializer = StatusUpdateRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = self.get_service().update_status(
            request.user,
            pk,
            data["status"],
            delivery_files=data.get("delivery_files"),
            files=data.get("files", []),
        )
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_request_revision",
        summary="Send a delivered order back for revision (buyer)",
        description="""
        **What it receives:**
        - `note` (optional): What should change

        **What it returns:**
        - The order back in progress with one revision fewer left
        """,
        request=RevisionRequestSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Revision requested"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Not delivered or no revisions left"),
            **ORDER_ERROR_RESPONSES,
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["post"], url_path="revision")
    def request_revision(self, request, pk=None):
        serializer = RevisionRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().request_revision(request.user, pk, serializer.validated_data["note"])
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_complete",
        summary="Accept a delivered order (buyer)",
        request=None,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order completed"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Order is not delivered"),
            **ORDER_ERROR_RESPONSES,
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["patch"])
    def complete(self, request, pk=None):
        result = self.get_service().complete_order(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_cancel",
        summary="Cancel a pending or in-progress order",
        request=CancelOrderRequestSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order cancelled"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Order can no longer be cancelled"),
            **ORDER_ERROR_RESPONSES,
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["patch"])
    def cancel(self, request, pk=None):
        serializer = CancelOrderRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().cancel_order(request.user, pk, serializer.validated_data["reason"])
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_revisions",
        summary="Revision history of an order",
        responses={
            200: OpenApiResponse(response=RevisionNoteSerializer(many=True), description="Revision notes"),
            **ORDER_ERROR_RESPONSES,
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["get"])
    def revisions(self, request, pk=None):
        result = self.get_service().get_revision_notes(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(RevisionNoteSerializer(result.value, many=True).data, status=status.HTTP_200_OK)
