from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import IntegrityError
from django.test import TestCase

from infrastructure.container import container
from marketplace.models import Order, Review
from marketplace.reviews.domain.services import RatingService, average_rating
from marketplace.services import ErrorCodes
from marketplace.tests.factories import (
    ClientFactory,
    FreelancerFactory,
    GigFactory,
    OrderFactory,
    ReviewFactory,
)


@pytest.mark.unit
class ReviewServiceCreateTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.notifier = container.notifier()
        self.service = container.review_service()
        self.seller = FreelancerFactory()
        self.buyer = ClientFactory()
        self.gig = GigFactory(owner=self.seller)
        self.order = OrderFactory(buyer=self.buyer, gig=self.gig, status=Order.Status.COMPLETED)

    def test_review_updates_rating_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True):
            result = self.service.create_review(self.buyer, self.order.id, 5, "Great work")

        self.assertTrue(result.ok, result.error_detail)
        self.assertEqual(result.value.reviewed_user, self.seller)
        self.assertEqual(result.value.gig, self.gig)
        self.seller.refresh_from_db()
        self.assertEqual(self.seller.rating, Decimal("5.0"))
        self.assertEqual(len(self.notifier.events_of_type("review.posted")), 1)

    def test_feedback_copied_onto_order(self):
        self.service.create_review(self.buyer, self.order.id, 4, "  Solid  ")

        self.order.refresh_from_db()
        self.assertEqual(self.order.feedback_rating, 4)
        self.assertEqual(self.order.feedback_comment, "Solid")

    def test_second_review_conflicts(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.service.create_review(self.buyer, self.order.id, 5, "Great")

        with patch.object(self.service.rating_service, "recompute_user_rating") as recompute:
            with self.captureOnCommitCallbacks(execute=True):
                result = self.service.create_review(self.buyer, self.order.id, 1, "Changed my mind")

        self.assertEqual(result.error, ErrorCodes.DUPLICATE_REVIEW)
        recompute.assert_not_called()
        self.assertEqual(Review.objects.count(), 1)
        first = Review.objects.get(order=self.order)
        self.assertEqual(first.rating, 5)
        self.assertEqual(first.comment, "Great")
        self.seller.refresh_from_db()
        self.assertEqual(self.seller.rating, Decimal("5.0"))
        self.assertEqual(len(self.notifier.events_of_type("review.posted")), 1)

    def test_unique_constraint_race_reports_duplicate(self):
        with patch.object(Review.objects, "create", side_effect=IntegrityError("UNIQUE constraint failed")):
            result = self.service.create_review(self.buyer, self.order.id, 4, "Racing")

        self.assertEqual(result.error, ErrorCodes.DUPLICATE_REVIEW)
        self.assertFalse(Review.objects.exists())

    def test_order_must_be_completed(self):
        Order.objects.filter(id=self.order.id).update(status=Order.Status.DELIVERED)

        result = self.service.create_review(self.buyer, self.order.id, 5, "Great")

        self.assertEqual(result.error, ErrorCodes.ORDER_NOT_COMPLETED)

    def test_seller_cannot_review_own_order(self):
        result = self.service.create_review(self.seller, self.order.id, 5, "I am great")
        self.assertEqual(result.error, ErrorCodes.PERMISSION_DENIED)

    def test_stranger_cannot_review(self):
        result = self.service.create_review(ClientFactory(), self.order.id, 5, "Nice")
        self.assertEqual(result.error, ErrorCodes.NOT_ORDER_PARTICIPANT)

    def test_rating_bounds(self):
        for rating in (0, 6, "5"):
            result = self.service.create_review(self.buyer, self.order.id, rating, "Ok")
            self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)

    def test_comment_length(self):
        result = self.service.create_review(self.buyer, self.order.id, 3, "x" * 501)
        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)


@pytest.mark.unit
class ReviewServiceEditTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.service = container.review_service()
        self.review = ReviewFactory(rating=2)
        self.author = self.review.reviewer

    def test_update_recomputes_rating(self):
        with self.captureOnCommitCallbacks(execute=True):
            result = self.service.update_review(self.author, self.review.id, {"rating": 4})

        self.assertTrue(result.ok)
        self.review.reviewed_user.refresh_from_db()
        self.assertEqual(self.review.reviewed_user.rating, Decimal("4.0"))

    def test_only_author_can_edit(self):
        result = self.service.update_review(self.review.reviewed_user, self.review.id, {"rating": 5})
        self.assertEqual(result.error, ErrorCodes.NOT_REVIEW_AUTHOR)

    def test_delete_resets_rating(self):
        with self.captureOnCommitCallbacks(execute=True):
            result = self.service.delete_review(self.author, self.review.id)

        self.assertTrue(result.ok)
        self.review.reviewed_user.refresh_from_db()
        self.assertEqual(self.review.reviewed_user.rating, Decimal("0.0"))

    def test_missing_review(self):
        result = self.service.delete_review(self.author, "00000000-0000-0000-0000-000000000000")
        self.assertEqual(result.error, ErrorCodes.REVIEW_NOT_FOUND)


@pytest.mark.unit
class ReviewListingTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.service = container.review_service()
        self.gig = GigFactory()
        for rating in (5, 4, 4):
            ReviewFactory(order=OrderFactory(gig=self.gig, status=Order.Status.COMPLETED), rating=rating)
        ReviewFactory(order=OrderFactory(gig=self.gig, status=Order.Status.COMPLETED), rating=1, is_public=False)

    def test_gig_stats_cover_public_reviews(self):
        result = self.service.list_gig_reviews(self.gig.id)

        stats = result.value["stats"]
        self.assertEqual(stats["total_reviews"], 3)
        self.assertEqual(stats["average_rating"], Decimal("4.3"))
        self.assertEqual(stats["rating_distribution"], {1: 0, 2: 0, 3: 0, 4: 2, 5: 1})

    def test_rating_filter_keeps_stats(self):
        result = self.service.list_gig_reviews(self.gig.id, rating=4)

        self.assertEqual(result.value["count"], 2)
        self.assertEqual(result.value["stats"]["total_reviews"], 3)

    def test_user_reviews(self):
        result = self.service.list_user_reviews(self.gig.owner.pk)
        self.assertEqual(result.value["stats"]["total_reviews"], 3)

    def test_unknown_user(self):
        result = self.service.list_user_reviews("00000000-0000-0000-0000-000000000000")
        self.assertEqual(result.error, ErrorCodes.USER_NOT_FOUND)


@pytest.mark.unit
class RatingServiceTest(TestCase):
    def test_average_rounds_half_up(self):
        seller = FreelancerFactory()
        for rating in (4, 5):
            ReviewFactory(order=OrderFactory(gig=GigFactory(owner=seller), status=Order.Status.COMPLETED), rating=rating)

        self.assertEqual(average_rating(Review.objects.filter(reviewed_user=seller)), Decimal("4.5"))
        self.assertEqual(RatingService().recompute_user_rating(seller.pk), Decimal("4.5"))

    def test_empty_average(self):
        self.assertEqual(average_rating(Review.objects.none()), Decimal("0.0"))

    def test_recompute_failure_is_contained(self):
        with patch("marketplace.reviews.domain.services.rating_service.average_rating", side_effect=RuntimeError):
            self.assertIsNone(RatingService().recompute_user_rating(FreelancerFactory().pk))
