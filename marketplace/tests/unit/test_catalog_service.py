from datetime import timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.utils import timezone

from infrastructure.storage import StorageException, StoredFile
from marketplace.catalog.domain.services import CatalogService
from marketplace.models import Gig, Order, PricePlan
from marketplace.services import ErrorCodes
from marketplace.tests.factories import (
    ClientFactory,
    FreelancerFactory,
    GigFaqFactory,
    GigWithPlansFactory,
    OrderFactory,
)


def gig_payload(**overrides):
    data = {
        "title": "I will design a minimal logo",
        "description": "Two concepts and vector files",
        "category": "design",
        "keywords": ["logo", "minimal"],
        "price_plans": [
            {"tier": "Basic", "price": Decimal("25.00"), "delivery_time": 3, "revisions": 1, "features": ["1 concept"]},
            {"tier": "Premium", "price": Decimal("90.00"), "delivery_time": 5, "revisions": 3},
        ],
        "faqs": [{"question": "Do you do icons?", "answer": "Yes"}],
    }
    data.update(overrides)
    return data


@pytest.mark.unit
class CatalogServiceWriteTest(TestCase):
    def setUp(self):
        self.storage = MagicMock()
        self.storage.upload.side_effect = lambda file, folder, content_type=None: StoredFile(
            key=f"{folder}/{file.name}", url=f"https://cdn.example.com/{folder}/{file.name}", size=1
        )
        self.service = CatalogService(storage=self.storage)
        self.freelancer = FreelancerFactory()

    def test_create_gig_with_plans_and_faqs(self):
        result = self.service.create_gig(self.freelancer, gig_payload())

        self.assertTrue(result.ok, result.error_detail)
        gig = result.value
        self.assertEqual([p.tier for p in gig.price_plans.all()], ["Basic", "Premium"])
        self.assertEqual(gig.faqs.count(), 1)
        self.assertEqual(gig.starting_price, Decimal("25.00"))

    def test_create_gig_uploads_media(self):
        thumb = SimpleUploadedFile("thumb.png", b"t", content_type="image/png")
        image = SimpleUploadedFile("shot.png", b"i", content_type="image/png")

        result = self.service.create_gig(self.freelancer, gig_payload(), thumbnail=thumb, images=[image])

        self.assertTrue(result.value.thumbnail.endswith(f"gigs/{self.freelancer.pk}/thumb.png"))
        self.assertEqual(len(result.value.images), 1)

    def test_client_cannot_create_gig(self):
        result = self.service.create_gig(ClientFactory(), gig_payload())
        self.assertEqual(result.error, ErrorCodes.PERMISSION_DENIED)

    def test_gig_needs_a_plan(self):
        result = self.service.create_gig(self.freelancer, gig_payload(price_plans=[]))
        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)

    def test_duplicate_tiers_rejected(self):
        plan = {"tier": "Basic", "price": Decimal("25.00"), "delivery_time": 3}
        result = self.service.create_gig(self.freelancer, gig_payload(price_plans=[plan, dict(plan)]))

        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)
        self.assertFalse(Gig.objects.exists())

    def test_storage_failure_discards_uploads(self):
        self.storage.upload.side_effect = [
            StoredFile(key="gigs/x/thumb.png", url="https://cdn.example.com/gigs/x/thumb.png", size=1),
            StorageException("bucket unavailable"),
        ]

        result = self.service.create_gig(
            self.freelancer,
            gig_payload(),
            thumbnail=SimpleUploadedFile("thumb.png", b"t"),
            images=[SimpleUploadedFile("a.png", b"a")],
        )

        self.assertEqual(result.error, ErrorCodes.STORAGE_ERROR)
        self.storage.delete.assert_called_once_with("https://cdn.example.com/gigs/x/thumb.png")
        self.assertFalse(Gig.objects.exists())

    def test_update_replaces_plans_but_not_order_snapshots(self):
        gig = GigWithPlansFactory(owner=self.freelancer)
        order = OrderFactory(gig=gig, plan_price=Decimal("50.00"))

        result = self.service.update_gig(
            self.freelancer,
            gig.id,
            {"title": "New title", "price_plans": [{"tier": "Basic", "price": Decimal("70.00"), "delivery_time": 2}]},
        )

        self.assertTrue(result.ok, result.error_detail)
        self.assertEqual(result.value.title, "New title")
        self.assertEqual(list(PricePlan.objects.filter(gig=gig).values_list("price", flat=True)), [Decimal("70.00")])
        order.refresh_from_db()
        self.assertEqual(order.amount, Decimal("50.00"))

    def test_update_keeps_faqs_when_absent(self):
        gig = GigWithPlansFactory(owner=self.freelancer)
        GigFaqFactory(gig=gig)

        self.service.update_gig(self.freelancer, gig.id, {"description": "Updated"})

        self.assertEqual(gig.faqs.count(), 1)

    def test_update_requires_owner(self):
        gig = GigWithPlansFactory()
        result = self.service.update_gig(self.freelancer, gig.id, {"title": "Mine now"})
        self.assertEqual(result.error, ErrorCodes.NOT_GIG_OWNER)

    def test_new_thumbnail_discards_old_one(self):
        gig = GigWithPlansFactory(owner=self.freelancer, thumbnail="https://cdn.example.com/old.png")

        self.service.update_gig(self.freelancer, gig.id, {}, thumbnail=SimpleUploadedFile("new.png", b"n"))

        self.storage.delete.assert_called_once_with("https://cdn.example.com/old.png")

    def test_delete_gig_keeps_orders(self):
        gig = GigWithPlansFactory(owner=self.freelancer)
        order = OrderFactory(gig=gig)

        result = self.service.delete_gig(self.freelancer, gig.id)

        self.assertTrue(result.ok)
        order = Order.objects.get(id=order.id)
        self.assertIsNone(order.gig)
        self.assertEqual(order.gig_title, gig.title)


@pytest.mark.unit
class CatalogServiceBrowseTest(TestCase):
    def setUp(self):
        self.service = CatalogService(storage=MagicMock())
        self.owner = FreelancerFactory()
        self.cheap = GigWithPlansFactory(
            owner=self.owner, title="Quick logo", plans=[("Basic", Decimal("10.00"), 0)]
        )
        self.pricey = GigWithPlansFactory(
            category=Gig.Category.DEVELOPMENT,
            title="Django API",
            keywords=["python", "rest"],
            plans=[("Basic", Decimal("400.00"), 1)],
        )
        Gig.objects.filter(id=self.cheap.id).update(created_at=timezone.now() - timedelta(days=1))

    def test_list_all_newest_first(self):
        result = self.service.list_gigs()
        self.assertEqual([g.id for g in result.value["results"]], [self.pricey.id, self.cheap.id])

    def test_filter_by_category(self):
        result = self.service.list_gigs({"category": "development"})
        self.assertEqual([g.id for g in result.value["results"]], [self.pricey.id])

    def test_price_bounds(self):
        result = self.service.list_gigs({"max_price": "50"})
        self.assertEqual([g.id for g in result.value["results"]], [self.cheap.id])

    def test_search_matches_keywords(self):
        result = self.service.list_gigs({"search": "python"})
        self.assertEqual(result.value["count"], 1)

    def test_filter_by_owner(self):
        result = self.service.list_gigs({"owner": str(self.owner.pk)})
        self.assertEqual([g.id for g in result.value["results"]], [self.cheap.id])

    def test_invalid_filter(self):
        result = self.service.list_gigs({"category": "cooking"})
        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)

    def test_get_gig_not_found(self):
        self.assertEqual(self.service.get_gig("bogus").error, ErrorCodes.GIG_NOT_FOUND)
