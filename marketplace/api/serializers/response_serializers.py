"""
Response Serializers for API Documentation

These serializers describe response bodies for the OpenAPI schema. They are
not used for validation.
"""

from rest_framework import serializers

from marketplace.catalog.api.serializers.gig_serializers import GigSerializer
from marketplace.ordering.api.serializers.order_serializers import OrderSerializer
from marketplace.reviews.api.serializers.review_serializers import ReviewSerializer


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    error = serializers.CharField(help_text="Machine readable error code")
    detail = serializers.CharField(help_text="Human readable error message")
    errors = serializers.DictField(required=False, help_text="Field-specific validation errors")


class SuccessResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class PaginationSerializer(serializers.Serializer):
    count = serializers.IntegerField(help_text="Total number of items")
    page = serializers.IntegerField(help_text="Current page number")
    page_size = serializers.IntegerField(help_text="Items per page")
    num_pages = serializers.IntegerField(help_text="Total number of pages")
    has_next = serializers.BooleanField()
    has_previous = serializers.BooleanField()


class GigListResponseSerializer(PaginationSerializer):
    results = GigSerializer(many=True)


class OrderListResponseSerializer(PaginationSerializer):
    results = OrderSerializer(many=True)


class StatusBucketSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class OrderStatsResponseSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    by_status = serializers.DictField(child=StatusBucketSerializer(), help_text="Keyed by order status")


class ReviewStatsSerializer(serializers.Serializer):
    average_rating = serializers.DecimalField(max_digits=2, decimal_places=1)
    total_reviews = serializers.IntegerField()
    rating_distribution = serializers.DictField(
        child=serializers.IntegerField(), required=False, help_text="Review count per star, gigs only"
    )


class ReviewListResponseSerializer(PaginationSerializer):
    results = ReviewSerializer(many=True)
    stats = ReviewStatsSerializer()
