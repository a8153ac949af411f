"""
RatingService - Seller rating aggregation

A freelancer's ``rating`` is the mean of the public reviews they received,
rounded half-up to one decimal. It is recomputed from the review rows on
every trigger, never adjusted incrementally.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from django.contrib.auth import get_user_model
from django.db.models import Count, QuerySet, Sum

from marketplace.infra.observability.metrics import rating_recompute_failures_total
from marketplace.reviews.domain.models.review import Review
from marketplace.services.base import BaseService

User = get_user_model()
logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")


def average_rating(reviews: QuerySet) -> Decimal:
    """Mean ``rating`` of a review queryset, one decimal, ``0.0`` when empty."""
    totals = reviews.order_by().aggregate(total=Sum("rating"), count=Count("id"))
    if not totals["count"]:
        return Decimal("0.0")
    mean = Decimal(totals["total"]) / Decimal(totals["count"])
    return mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


class RatingService(BaseService):
    """
    Recomputes ``User.rating``.

    Called from ``transaction.on_commit`` hooks, so failures here are logged
    and counted but never propagate into the review request that triggered
    them.
    """

    @BaseService.log_performance
    def recompute_user_rating(self, user_id) -> Optional[Decimal]:
        try:
            rating = average_rating(Review.objects.filter(reviewed_user_id=user_id, is_public=True))
            updated = User.objects.filter(pk=user_id).update(rating=rating)
            if not updated:
                self.logger.warning(f"Rating recompute skipped, user {user_id} no longer exists")
                return None
            self.logger.info(f"Recomputed rating for user {user_id}: {rating}")
            return rating
        except Exception as e:
            rating_recompute_failures_total.inc()
            self.logger.error(f"Rating recompute failed for user {user_id}: {e}", exc_info=True)
            return None
