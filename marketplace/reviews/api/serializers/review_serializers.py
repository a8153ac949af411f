from rest_framework import serializers

from authentication.api.serializers import UserSummarySerializer
from marketplace.reviews.domain.models.review import Review


class ReviewSerializer(serializers.ModelSerializer):
    reviewer = UserSummarySerializer(read_only=True)

    class Meta:
        model = Review
        fields = [
            "id",
            "order",
            "reviewer",
            "reviewed_user",
            "gig",
            "rating",
            "comment",
            "category",
            "is_public",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CreateReviewRequestSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(max_length=500)
    category = serializers.ChoiceField(choices=Review.Category.choices, default=Review.Category.OVERALL)


class UpdateReviewRequestSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    comment = serializers.CharField(max_length=500, required=False)
    category = serializers.ChoiceField(choices=Review.Category.choices, required=False)
