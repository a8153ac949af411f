from rest_framework import serializers

from authentication.api.serializers import UserSummarySerializer
from marketplace.catalog.api.serializers.gig_serializers import FlexibleJSONField
from marketplace.ordering.domain.models.order import Order, RevisionNote
from marketplace.ordering.domain.state_machine import allowed_targets


class RevisionNoteSerializer(serializers.ModelSerializer):
    requested_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = RevisionNote
        fields = ["id", "note", "requested_by", "requested_at"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    buyer = UserSummarySerializer(read_only=True)
    seller = UserSummarySerializer(read_only=True)
    next_statuses = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "buyer",
            "seller",
            "gig",
            "gig_title",
            "plan_tier",
            "plan_price",
            "plan_delivery_time",
            "plan_revisions",
            "plan_features",
            "requirements",
            "status",
            "amount",
            "revisions_left",
            "delivery_files",
            "feedback_rating",
            "feedback_comment",
            "next_statuses",
            "created_at",
            "updated_at",
            "started_at",
            "delivered_at",
            "completed_at",
            "cancelled_at",
            "cancelled_by",
            "cancellation_reason",
        ]
        read_only_fields = fields

    def get_next_statuses(self, obj) -> list:
        return allowed_targets(obj.status)


class CreateOrderRequestSerializer(serializers.Serializer):
    gig_id = serializers.UUIDField()
    plan_tier = serializers.CharField(max_length=20)
    requirements = serializers.CharField(required=False, allow_blank=True, default="")


class StatusUpdateRequestSerializer(serializers.Serializer):
    """
    Seller status change. ``delivery_files`` are already-stored URLs and
    ``files`` are uploads; both only make sense when delivering.
    """

    status = serializers.ChoiceField(choices=Order.Status.choices)
    delivery_files = FlexibleJSONField(required=False)
    files = serializers.ListField(child=serializers.FileField(), required=False, write_only=True)

    def validate_delivery_files(self, value):
        field = serializers.URLField(max_length=500)
        return [field.run_validation(url) for url in value]


class RevisionRequestSerializer(serializers.Serializer):
    note = serializers.CharField(required=False, allow_blank=True, default="")


class CancelOrderRequestSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")
