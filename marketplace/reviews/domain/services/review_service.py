"""
ReviewService - Order Review Management

One review per completed order, written by the buyer about the seller.
Review mutations schedule a rating recomputation for the reviewed user
after the transaction commits.
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.paginator import Paginator
from django.db import IntegrityError, transaction
from django.db.models import Count

from infrastructure.notifications import NotificationChannelInterface
from marketplace.catalog.domain.models.gig import Gig
from marketplace.domain.events import ReviewPostedEvent
from marketplace.infra.observability.metrics import reviews_posted_total
from marketplace.ordering.domain.authorization import Relation, relation_of
from marketplace.ordering.domain.models.order import Order
from marketplace.reviews.domain.models.review import Review
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

from .rating_service import RatingService, average_rating

User = get_user_model()
logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 500


class ReviewService(BaseService):
    """
    Service for order reviews.

    Responsibilities:
    - Create review (buyer of a completed order, once)
    - Update / delete review (reviewer only)
    - Public review listings per gig and per user, with stats

    Dependencies:
    - RatingService: recomputes the seller's rating after commit
    - NotificationChannelInterface: announces new reviews in the order room
    """

    def __init__(self, rating_service: RatingService, notifier: NotificationChannelInterface):
        super().__init__()
        self.rating_service = rating_service
        self.notifier = notifier

    @BaseService.log_performance
    def create_review(
        self, user: User, order_id, rating: int, comment: str, category: str = Review.Category.OVERALL
    ) -> ServiceResult[Review]:
        """
        Review a completed order.

        The order row is locked while checking for an existing review; a
        concurrent insert that still hits the unique constraint is reported
        as the same conflict.

        Example:
            >>> result = review_service.create_review(buyer, order.id, 5, "Fast and friendly")
            >>> result.value.reviewed_user == order.seller
        """
        problem = _review_problem(rating, comment, category)
        if problem:
            return service_err(ErrorCodes.VALIDATION_ERROR, problem)

        try:
            with transaction.atomic():
                try:
                    order = Order.objects.select_for_update().get(id=order_id)
                except (Order.DoesNotExist, DjangoValidationError, ValueError):
                    return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

                relation = relation_of(user, order)
                if relation is None:
                    return service_err(ErrorCodes.NOT_ORDER_PARTICIPANT, "You are not a participant of this order")
                if relation != Relation.BUYER:
                    return service_err(ErrorCodes.PERMISSION_DENIED, "Only the buyer can review this order")
                if order.status != Order.Status.COMPLETED:
                    return service_err(ErrorCodes.ORDER_NOT_COMPLETED, "You can only review completed orders")
                if Review.objects.filter(order=order).exists():
                    return service_err(ErrorCodes.DUPLICATE_REVIEW, "This order has already been reviewed")

                review = Review.objects.create(
                    order=order,
                    reviewer=user,
                    reviewed_user_id=order.seller_id,
                    gig_id=order.gig_id,
                    rating=rating,
                    comment=comment.strip(),
                    category=category,
                )

                if order.feedback_rating is None:
                    order.feedback_rating = review.rating
                    order.feedback_comment = review.comment
                    order.save(update_fields=["feedback_rating", "feedback_comment", "updated_at"])

                event = ReviewPostedEvent(
                    order_id=str(order.id),
                    review_id=str(review.id),
                    reviewer_id=str(user.pk),
                    reviewed_user_id=str(order.seller_id),
                    rating=review.rating,
                )
                seller_id = order.seller_id
                transaction.on_commit(lambda: self.rating_service.recompute_user_rating(seller_id))
                transaction.on_commit(lambda: self.notifier.publish(event.order_id, event.to_dict()))
        except IntegrityError:
            return service_err(ErrorCodes.DUPLICATE_REVIEW, "This order has already been reviewed")
        except Exception as e:
            self.logger.error(f"Error creating review for order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        reviews_posted_total.labels(rating=str(review.rating)).inc()
        self.logger.info(f"Review {review.id} ({review.rating}/5) posted on order {order_id}")
        return service_ok(review)

    @BaseService.log_performance
    def update_review(self, user: User, review_id, data: Dict[str, Any]) -> ServiceResult[Review]:
        """Edit rating, comment or category of the user's own review."""
        rating = data.get("rating")
        comment = data.get("comment")
        category = data.get("category")
        problem = _review_problem(rating, comment, category, partial=True)
        if problem:
            return service_err(ErrorCodes.VALIDATION_ERROR, problem)

        with transaction.atomic():
            try:
                review = Review.objects.select_for_update().get(id=review_id)
            except (Review.DoesNotExist, DjangoValidationError, ValueError):
                return service_err(ErrorCodes.REVIEW_NOT_FOUND, f"Review {review_id} not found")
            if review.reviewer_id != user.pk:
                return service_err(ErrorCodes.NOT_REVIEW_AUTHOR, "You can only edit your own reviews")

            updated_fields = ["updated_at"]
            if rating is not None:
                review.rating = rating
                updated_fields.append("rating")
            if comment is not None:
                review.comment = comment.strip()
                updated_fields.append("comment")
            if category is not None:
                review.category = category
                updated_fields.append("category")
            review.save(update_fields=updated_fields)

            reviewed_user_id = review.reviewed_user_id
            transaction.on_commit(lambda: self.rating_service.recompute_user_rating(reviewed_user_id))

        self.logger.info(f"Updated review {review.id}, fields={updated_fields}")
        return service_ok(review)

    @BaseService.log_performance
    def delete_review(self, user: User, review_id) -> ServiceResult[bool]:
        with transaction.atomic():
            try:
                review = Review.objects.select_for_update().get(id=review_id)
            except (Review.DoesNotExist, DjangoValidationError, ValueError):
                return service_err(ErrorCodes.REVIEW_NOT_FOUND, f"Review {review_id} not found")
            if review.reviewer_id != user.pk:
                return service_err(ErrorCodes.NOT_REVIEW_AUTHOR, "You can only delete your own reviews")

            reviewed_user_id = review.reviewed_user_id
            review.delete()
            transaction.on_commit(lambda: self.rating_service.recompute_user_rating(reviewed_user_id))

        self.logger.info(f"Deleted review {review_id} by user {user.pk}")
        return service_ok(True)

    @BaseService.log_performance
    def list_gig_reviews(
        self, gig_id, page: int = 1, page_size: int = 10, rating: Optional[int] = None
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Public reviews left on a gig's orders, newest first.

        ``stats`` covers every public review of the gig regardless of the
        ``rating`` filter.
        """
        try:
            gig = Gig.objects.get(id=gig_id)
        except (Gig.DoesNotExist, DjangoValidationError, ValueError):
            return service_err(ErrorCodes.GIG_NOT_FOUND, f"Gig {gig_id} not found")

        if rating is not None and rating not in range(1, 6):
            return service_err(ErrorCodes.VALIDATION_ERROR, "Rating filter must be between 1 and 5")

        reviews = Review.objects.filter(gig=gig, is_public=True)
        rows = reviews.order_by().values("rating").annotate(count=Count("id"))
        counts = {row["rating"]: row["count"] for row in rows}
        stats = {
            "average_rating": average_rating(reviews),
            "total_reviews": sum(counts.values()),
            "rating_distribution": {star: counts.get(star, 0) for star in range(1, 6)},
        }

        listed = reviews.filter(rating=rating) if rating is not None else reviews
        return service_ok(self._paginate(listed, page, page_size, stats))

    @BaseService.log_performance
    def list_user_reviews(self, user_id, page: int = 1, page_size: int = 10) -> ServiceResult[Dict[str, Any]]:
        try:
            reviewed = User.objects.get(pk=user_id)
        except (User.DoesNotExist, DjangoValidationError, ValueError):
            return service_err(ErrorCodes.USER_NOT_FOUND, f"User {user_id} not found")

        reviews = Review.objects.filter(reviewed_user=reviewed, is_public=True)
        stats = {"average_rating": average_rating(reviews), "total_reviews": reviews.count()}
        return service_ok(self._paginate(reviews, page, page_size, stats))

    def _paginate(self, reviews, page: int, page_size: int, stats: Dict[str, Any]) -> Dict[str, Any]:
        queryset = reviews.select_related("reviewer", "gig").order_by("-created_at", "-id")
        paginator = Paginator(queryset, page_size)
        page_obj = paginator.get_page(page)
        return {
            "results": list(page_obj.object_list),
            "count": paginator.count,
            "page": page_obj.number,
            "page_size": page_size,
            "num_pages": paginator.num_pages,
            "has_next": page_obj.has_next(),
            "has_previous": page_obj.has_previous(),
            "stats": stats,
        }


def _review_problem(rating, comment, category, partial: bool = False) -> Optional[str]:
    if rating is not None or not partial:
        if not isinstance(rating, int) or isinstance(rating, bool) or not 1 <= rating <= 5:
            return "Rating must be an integer between 1 and 5"
    if comment is not None or not partial:
        if not comment or not comment.strip():
            return "Comment is required"
        if len(comment.strip()) > MAX_COMMENT_LENGTH:
            return f"Comment must be at most {MAX_COMMENT_LENGTH} characters"
    if category is not None and category not in Review.Category.values:
        return f"Unknown review category '{category}'"
    return None
