import logging

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from chat.api.serializers.message_serializers import (
    AttachmentSerializer,
    AttachmentUploadSerializer,
    ConversationListSerializer,
    ConversationPageSerializer,
    MarkReadSerializer,
    MessageSerializer,
    SendMessageSerializer,
)
from infrastructure.container import container
from infrastructure.storage import StorageException
from marketplace.api.serializers import ErrorResponseSerializer
from marketplace.api.views.common import int_param, validation_error_response


logger = logging.getLogger(__name__)

TAGS = ["Chat - Messages"]


def get_messaging_service():
    return container.messaging_service()


def run_service(call, not_found_code: str = "order_not_found"):
    """
    Run a messaging call and translate its Django exceptions.

    Returns ``(value, None)`` on success or ``(None, Response)`` on failure.
    """
    try:
        return call(), None
    except ObjectDoesNotExist as e:
        body, code = {"error": not_found_code, "detail": str(e)}, status.HTTP_404_NOT_FOUND
    except PermissionDenied as e:
        body, code = {"error": "permission_denied", "detail": str(e)}, status.HTTP_403_FORBIDDEN
    except ValidationError as e:
        body, code = {"error": "validation_error", "detail": e.messages[0]}, status.HTTP_400_BAD_REQUEST
    except StorageException as e:
        logger.error(f"Attachment storage failed: {e}")
        body, code = {"error": "storage_error", "detail": "Could not store attachment"}, status.HTTP_502_BAD_GATEWAY
    return None, Response(body, status=code)


class SendMessageView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="messages_send",
        summary="Send a message on an order",
        description="""
        **What it receives:**
        - `order_id`, `receiver_id` (the other party of the order)
        - `content`, optional `message_type` (`text`, `file`, `image`) and `file_url`

        **What it returns:**
        - The stored message; it is also pushed to the order's websocket room
        """,
        request=SendMessageSerializer,
        responses={
            201: OpenApiResponse(response=MessageSerializer, description="Message sent"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid message"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a participant or invalid receiver"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=TAGS,
    )
    def post(self, request):
        serializer = SendMessageSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        message, error = run_service(
            lambda: get_messaging_service().send_message(
                request.user,
                data["order_id"],
                data["receiver_id"],
                data["content"],
                message_type=data["message_type"],
                file_url=data["file_url"],
            )
        )
        if error:
            return error
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


class ConversationView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="messages_conversation",
        summary="Messages of an order",
        description="""
        **What it receives:**
        - `order_id` (UUID in URL), pagination parameters

        **What it returns:**
        - One page of messages in chronological order (page 1 is the most recent).
          Unread messages on the page addressed to the caller are marked read.
        """,
        parameters=[
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 50)"),
        ],
        responses={
            200: OpenApiResponse(response=ConversationPageSerializer, description="Conversation page"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a participant"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=TAGS,
    )
    def get(self, request, order_id):
        page_size = int_param(request, "page_size", getattr(settings, "CONVERSATION_PAGE_SIZE", 50))
        conversation, error = run_service(
            lambda: get_messaging_service().get_conversation(
                request.user, order_id, page=int_param(request, "page", 1, maximum=10_000), page_size=page_size
            )
        )
        if error:
            return error
        return Response(ConversationPageSerializer(conversation).data, status=status.HTTP_200_OK)


class ConversationListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="messages_conversations",
        summary="Orders with messages, most recent first",
        parameters=[
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={200: OpenApiResponse(response=ConversationListSerializer, description="Conversations")},
        tags=TAGS,
    )
    def get(self, request):
        conversations = get_messaging_service().list_conversations(
            request.user,
            page=int_param(request, "page", 1, maximum=10_000),
            page_size=int_param(request, "page_size", 20),
        )
        return Response(ConversationListSerializer(conversations).data, status=status.HTTP_200_OK)


class MarkReadView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="messages_mark_read",
        summary="Mark received messages as read",
        request=MarkReadSerializer,
        responses={
            200: OpenApiResponse(description="`updated_count`: messages that changed"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Empty or invalid id list"),
        },
        tags=TAGS,
    )
    def patch(self, request):
        serializer = MarkReadSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        updated, error = run_service(
            lambda: get_messaging_service().mark_as_read(request.user, serializer.validated_data["message_ids"])
        )
        if error:
            return error
        return Response({"updated_count": updated}, status=status.HTTP_200_OK)


class UnreadCountView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="messages_unread_count",
        summary="Number of unread messages addressed to the caller",
        responses={200: OpenApiResponse(description="`unread_count`")},
        tags=TAGS,
    )
    def get(self, request):
        return Response({"unread_count": get_messaging_service().unread_count(request.user)})


class AttachmentUploadView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="messages_upload_attachment",
        summary="Upload a file to reference from a message",
        request={"multipart/form-data": AttachmentUploadSerializer},
        responses={
            201: OpenApiResponse(response=AttachmentSerializer, description="Stored file, use `url` as `file_url`"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a participant"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Storage failure"),
        },
        tags=TAGS,
    )
    def post(self, request):
        serializer = AttachmentUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        stored, error = run_service(
            lambda: get_messaging_service().upload_attachment(request.user, data["order_id"], data["file"])
        )
        if error:
            return error
        return Response(AttachmentSerializer(stored).data, status=status.HTTP_201_CREATED)


class MessageDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="messages_delete",
        summary="Delete a message you sent",
        responses={
            204: OpenApiResponse(description="Message deleted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the sender"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Message not found"),
        },
        tags=TAGS,
    )
    def delete(self, request, message_id):
        _, error = run_service(
            lambda: get_messaging_service().delete_message(request.user, message_id),
            not_found_code="message_not_found",
        )
        if error:
            return error
        return Response(status=status.HTTP_204_NO_CONTENT)
