from rest_framework import serializers

from authentication.api.serializers import UserSummarySerializer
from chat.domain.models import Message


class MessageSerializer(serializers.ModelSerializer):
    sender = UserSummarySerializer(read_only=True)

    class Meta:
        model = Message
        fields = (
            "id",
            "order",
            "sender",
            "receiver",
            "content",
            "message_type",
            "file_url",
            "is_read",
            "read_at",
            "created_at",
        )
        read_only_fields = fields


class SendMessageSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    receiver_id = serializers.UUIDField()
    content = serializers.CharField()
    message_type = serializers.ChoiceField(choices=Message.MessageType.choices, default=Message.MessageType.TEXT)
    file_url = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class MarkReadSerializer(serializers.Serializer):
    message_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class AttachmentUploadSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    file = serializers.FileField()


class ConversationOrderSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    gig_title = serializers.CharField()
    plan_tier = serializers.CharField()
    status = serializers.CharField()


class ConversationSerializer(serializers.Serializer):
    order = ConversationOrderSerializer()
    other_party = UserSummarySerializer()
    last_message = MessageSerializer(allow_null=True)
    unread_count = serializers.IntegerField()


class ConversationPageSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    results = MessageSerializer(many=True)
    count = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    num_pages = serializers.IntegerField()
    has_next = serializers.BooleanField()
    has_previous = serializers.BooleanField()
    marked_read = serializers.IntegerField()


class ConversationListSerializer(serializers.Serializer):
    results = ConversationSerializer(many=True)
    count = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    num_pages = serializers.IntegerField()
    has_next = serializers.BooleanField()
    has_previous = serializers.BooleanField()


class AttachmentSerializer(serializers.Serializer):
    key = serializers.CharField()
    url = serializers.URLField()
    size = serializers.IntegerField()
    content_type = serializers.CharField(allow_null=True)
    message_type = serializers.CharField()
