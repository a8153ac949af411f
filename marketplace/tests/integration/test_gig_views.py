import json
from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import Gig
from marketplace.tests.factories import ClientFactory, FreelancerFactory, GigWithPlansFactory


class GigViewIntegrationTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.freelancer = FreelancerFactory()
        self.list_url = reverse("marketplace:gig-list")

    def detail_url(self, gig_id):
        return reverse("marketplace:gig-detail", args=[gig_id])

    def test_public_listing(self):
        GigWithPlansFactory(plans=[("Basic", Decimal("30.00"), 1)])
        GigWithPlansFactory(category=Gig.Category.WRITING, plans=[("Basic", Decimal("80.00"), 1)])

        response = self.client.get(self.list_url, {"category": "writing"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["starting_price"], "80.00")

    def test_invalid_filter(self):
        response = self.client.get(self.list_url, {"min_price": "cheap"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_gig_json(self):
        self.client.force_authenticate(user=self.freelancer)
        payload = {
            "title": "I will write your landing page",
            "description": "Conversion focused copy",
            "category": "writing",
            "keywords": ["copy", "landing"],
            "price_plans": [
                {"tier": "Basic", "price": "25.00", "delivery_time": 2, "revisions": 1},
                {"tier": "Standard", "price": "60.00", "delivery_time": 4, "revisions": 2},
            ],
            "faqs": [{"question": "Do you research?", "answer": "Yes"}],
        }

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(len(response.data["price_plans"]), 2)
        self.assertEqual(response.data["owner"]["id"], str(self.freelancer.id))

    def test_create_gig_multipart_with_thumbnail(self):
        self.client.force_authenticate(user=self.freelancer)
        payload = {
            "title": "Product photos",
            "description": "White background shots",
            "category": "design",
            "price_plans": json.dumps([{"tier": "Basic", "price": "15.00", "delivery_time": 1}]),
            "thumbnail": SimpleUploadedFile("thumb.png", b"png", content_type="image/png"),
        }

        response = self.client.post(self.list_url, payload, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn(f"gigs/{self.freelancer.pk}", response.data["thumbnail"])

    def test_price_below_minimum(self):
        self.client.force_authenticate(user=self.freelancer)
        payload = {
            "title": "Tiny job",
            "description": "Too cheap",
            "category": "design",
            "price_plans": [{"tier": "Basic", "price": "1.00", "delivery_time": 1}],
        }

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_client_cannot_create(self):
        self.client.force_authenticate(user=ClientFactory())
        response = self.client.post(self.list_url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_and_delete_require_owner(self):
        gig = GigWithPlansFactory()
        self.client.force_authenticate(user=self.freelancer)

        response = self.client.patch(self.detail_url(gig.id), {"title": "Taken"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "not_gig_owner")

        response = self.client.delete(self.detail_url(gig.id))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_owner_updates_and_deletes(self):
        gig = GigWithPlansFactory(owner=self.freelancer)
        self.client.force_authenticate(user=self.freelancer)

        response = self.client.patch(self.detail_url(gig.id), {"title": "Sharper title"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["title"], "Sharper title")
        self.assertEqual(len(response.data["price_plans"]), 3)

        response = self.client.delete(self.detail_url(gig.id))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Gig.objects.filter(id=gig.id).exists())

    def test_my_gigs(self):
        GigWithPlansFactory(owner=self.freelancer)
        GigWithPlansFactory()
        self.client.force_authenticate(user=self.freelancer)

        response = self.client.get(reverse("marketplace:gig-my"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_retrieve_missing(self):
        response = self.client.get(self.detail_url("00000000-0000-0000-0000-000000000000"))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "gig_not_found")
