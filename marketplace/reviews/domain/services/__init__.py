from .rating_service import RatingService, average_rating
from .review_service import ReviewService


__all__ = [
    "RatingService",
    "ReviewService",
    "average_rating",
]
