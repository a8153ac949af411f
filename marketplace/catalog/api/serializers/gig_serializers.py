import json
import logging

from django.contrib.auth import get_user_model
from rest_framework import serializers

from authentication.api.serializers import PublicUserSerializer
from marketplace.catalog.domain.models.gig import Gig, GigFaq, PricePlan


logger = logging.getLogger(__name__)
User = get_user_model()


class FlexibleJSONField(serializers.Field):
    """List field that also accepts a JSON string, for multipart form uploads"""

    def to_internal_value(self, data):
        if isinstance(data, str):
            try:
                data = json.loads(data) if data.strip() else []
            except (json.JSONDecodeError, ValueError):
                logger.debug(f"Ignoring malformed JSON for field '{self.field_name}'")
                return []
        if isinstance(data, list):
            return data
        return []

    def to_representation(self, value):
        return value if value is not None else []


class PricePlanSerializer(serializers.ModelSerializer):
    class Meta:
        model = PricePlan
        fields = ["tier", "price", "delivery_time", "revisions", "features"]


class GigFaqSerializer(serializers.ModelSerializer):
    class Meta:
        model = GigFaq
        fields = ["question", "answer"]


class GigSerializer(serializers.ModelSerializer):
    """Full gig representation for detail and list endpoints"""

    owner = PublicUserSerializer(read_only=True)
    price_plans = PricePlanSerializer(many=True, read_only=True)
    faqs = GigFaqSerializer(many=True, read_only=True)
    starting_price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Gig
        fields = [
            "id",
            "owner",
            "title",
            "description",
            "category",
            "keywords",
            "requirements",
            "thumbnail",
            "images",
            "price_plans",
            "faqs",
            "starting_price",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class GigWriteSerializer(serializers.Serializer):
    """
    Create/update payload. Accepts JSON or multipart; in multipart requests
    ``keywords``, ``price_plans`` and ``faqs`` arrive as JSON strings.
    """

    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    category = serializers.ChoiceField(choices=Gig.Category.choices)
    keywords = FlexibleJSONField(required=False)
    requirements = serializers.CharField(required=False, allow_blank=True)
    price_plans = FlexibleJSONField()
    faqs = FlexibleJSONField(required=False)
    thumbnail = serializers.FileField(required=False, write_only=True)
    images = serializers.ListField(child=serializers.FileField(), required=False, write_only=True)

    def validate_keywords(self, value):
        return [str(keyword).strip() for keyword in value if str(keyword).strip()]

    def validate_price_plans(self, value):
        plans = PricePlanSerializer(data=value, many=True)
        plans.is_valid(raise_exception=True)
        return [dict(plan) for plan in plans.validated_data]

    def validate_faqs(self, value):
        faqs = GigFaqSerializer(data=value, many=True)
        faqs.is_valid(raise_exception=True)
        return [dict(faq) for faq in faqs.validated_data]
