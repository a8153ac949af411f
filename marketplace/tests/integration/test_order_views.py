from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import Order
from marketplace.tests.factories import (
    ClientFactory,
    FreelancerFactory,
    GigWithPlansFactory,
    OrderFactory,
)


User = get_user_model()


class OrderViewIntegrationTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()

        self.buyer = ClientFactory()
        self.seller = FreelancerFactory()
        self.gig = GigWithPlansFactory(
            owner=self.seller,
            plans=[("Basic", Decimal("40.00"), 0), ("Standard", Decimal("100.00"), 2)],
        )

        self.order_create_url = reverse("marketplace:order-list")
        self.my_orders_url = reverse("marketplace:order-my-orders")

    def status_url(self, order_id):
        return reverse("marketplace:order-update-status", args=[order_id])

    def revision_url(self, order_id):
        return reverse("marketplace:order-request-revision", args=[order_id])

    def complete_url(self, order_id):
        return reverse("marketplace:order-complete", args=[order_id])

    def as_user(self, user):
        self.client.force_authenticate(user=user)
        return self.client

    def test_order_lifecycle_through_review(self):
        # Buyer orders the Standard plan
        response = self.as_user(self.buyer).post(
            self.order_create_url, {"gig_id": str(self.gig.id), "plan_tier": "Standard"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["status"], "pending")
        self.assertEqual(response.data["amount"], "100.00")
        self.assertEqual(response.data["revisions_left"], 2)
        order_id = response.data["id"]

        # Seller starts and delivers
        for target in ("in_progress", "delivered"):
            response = self.as_user(self.seller).patch(self.status_url(order_id), {"status": target}, format="json")
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data["status"], target)

        # Buyer asks for a revision
        response = self.as_user(self.buyer).post(self.revision_url(order_id), {"note": "Darker blue"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "in_progress")
        self.assertEqual(response.data["revisions_left"], 1)

        # Seller delivers again, buyer accepts
        response = self.as_user(self.seller).patch(self.status_url(order_id), {"status": "delivered"}, format="json")
        self.assertEqual(response.data["status"], "delivered")

        response = self.as_user(self.buyer).patch(self.complete_url(order_id), format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "completed")

        # Buyer reviews; the seller's rating follows after commit
        with self.captureOnCommitCallbacks(execute=True):
            response = self.as_user(self.buyer).post(
                reverse("marketplace:review-list"),
                {"order_id": order_id, "rating": 5, "comment": "Excellent"},
                format="json",
            )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        self.seller.refresh_from_db()
        self.assertEqual(self.seller.rating, Decimal("5.0"))

        revisions = self.as_user(self.buyer).get(reverse("marketplace:order-revisions", args=[order_id]))
        self.assertEqual([note["note"] for note in revisions.data], ["Darker blue"])

    def test_revision_on_pending_order_fails(self):
        order = OrderFactory(buyer=self.buyer, gig=self.gig, plan_revisions=2)

        response = self.as_user(self.buyer).post(self.revision_url(order.id), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid_transition")
        order.refresh_from_db()
        self.assertEqual(order.status, Order.Status.PENDING)
        self.assertEqual(order.revisions_left, 2)

    def test_unknown_plan_tier(self):
        response = self.as_user(self.buyer).post(
            self.order_create_url, {"gig_id": str(self.gig.id), "plan_tier": "Premium"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "plan_not_found")

    def test_freelancer_cannot_place_orders(self):
        response = self.as_user(FreelancerFactory()).post(
            self.order_create_url, {"gig_id": str(self.gig.id), "plan_tier": "Basic"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unauthenticated(self):
        response = self.client.get(self.my_orders_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_outsider_cannot_view_order(self):
        order = OrderFactory(buyer=self.buyer, gig=self.gig)

        response = self.as_user(ClientFactory()).get(reverse("marketplace:order-detail", args=[order.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "not_order_participant")

    def test_order_not_found(self):
        response = self.as_user(self.buyer).get(
            reverse("marketplace:order-detail", args=["00000000-0000-0000-0000-000000000000"])
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cancel_by_seller(self):
        order = OrderFactory(buyer=self.buyer, gig=self.gig, status=Order.Status.IN_PROGRESS)

        response = self.as_user(self.seller).patch(
            reverse("marketplace:order-cancel", args=[order.id]), {"reason": "Out of office"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "cancelled")
        self.assertEqual(response.data["cancellation_reason"], "Out of office")
        self.assertEqual(response.data["next_statuses"], [])

    def test_my_orders_filters_and_paginates(self):
        for _ in range(3):
            OrderFactory(buyer=self.buyer, gig=self.gig)
        OrderFactory(buyer=self.buyer, gig=self.gig, status=Order.Status.COMPLETED)

        response = self.as_user(self.buyer).get(self.my_orders_url, {"status": "pending", "page_size": 2})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 3)
        self.assertEqual(len(response.data["results"]), 2)
        self.assertTrue(response.data["has_next"])

        response = self.as_user(self.seller).get(self.my_orders_url, {"status": "bogus"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stats(self):
        OrderFactory(buyer=self.buyer, gig=self.gig, plan_price=Decimal("40.00"))
        OrderFactory(buyer=self.buyer, gig=self.gig, plan_price=Decimal("100.00"), status=Order.Status.COMPLETED)

        response = self.as_user(self.seller).get(reverse("marketplace:order-stats"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_orders"], 2)
        self.assertEqual(response.data["by_status"]["completed"]["count"], 1)

    def test_invalid_status_value(self):
        order = OrderFactory(buyer=self.buyer, gig=self.gig)

        response = self.as_user(self.seller).patch(self.status_url(order.id), {"status": "shipped"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "validation_error")
