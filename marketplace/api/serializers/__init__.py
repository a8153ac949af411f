# Marketplace API Serializers

from marketplace.catalog.api.serializers.gig_serializers import (
    FlexibleJSONField,
    GigFaqSerializer,
    GigSerializer,
    GigWriteSerializer,
    PricePlanSerializer,
)
from marketplace.ordering.api.serializers.order_serializers import (
    CancelOrderRequestSerializer,
    CreateOrderRequestSerializer,
    OrderSerializer,
    RevisionNoteSerializer,
    RevisionRequestSerializer,
    StatusUpdateRequestSerializer,
)
from marketplace.reviews.api.serializers.review_serializers import (
    CreateReviewRequestSerializer,
    ReviewSerializer,
    UpdateReviewRequestSerializer,
)

# Import response serializers for API documentation
from .response_serializers import (
    ErrorResponseSerializer,
    GigListResponseSerializer,
    OrderListResponseSerializer,
    OrderStatsResponseSerializer,
    ReviewListResponseSerializer,
    SuccessResponseSerializer,
)


__all__ = [
    # Catalog
    "FlexibleJSONField",
    "GigFaqSerializer",
    "GigSerializer",
    "GigWriteSerializer",
    "PricePlanSerializer",
    # Ordering
    "CancelOrderRequestSerializer",
    "CreateOrderRequestSerializer",
    "OrderSerializer",
    "RevisionNoteSerializer",
    "RevisionRequestSerializer",
    "StatusUpdateRequestSerializer",
    # Reviews
    "CreateReviewRequestSerializer",
    "ReviewSerializer",
    "UpdateReviewRequestSerializer",
    # Responses
    "ErrorResponseSerializer",
    "GigListResponseSerializer",
    "OrderListResponseSerializer",
    "OrderStatsResponseSerializer",
    "ReviewListResponseSerializer",
    "SuccessResponseSerializer",
]
