"""
Service Container Tests
========================

Unit tests for dependency injection container.
"""

from unittest.mock import MagicMock, patch

from django.test import TestCase, override_settings

from infrastructure.container import ServiceContainer, container, get_email, get_notifier, get_storage
from infrastructure.email import EmailServiceInterface, MockEmailService
from infrastructure.notifications import ChannelLayerNotifier, MockNotifier
from infrastructure.storage import LocalStorageAdapter, S3StorageAdapter, StorageInterface


class ServiceContainerTest(TestCase):
    """Test ServiceContainer implementation."""

    def setUp(self):
        container.reset()

    def tearDown(self):
        container.configure_for_testing()

    def test_container_is_singleton(self):
        container1 = ServiceContainer()
        container2 = ServiceContainer()

        self.assertIs(container1, container2)
        self.assertIs(container1, container)

    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_s3_storage_from_settings(self, mock_storage):
        mock_storage.return_value = MagicMock()

        with override_settings(INFRASTRUCTURE={"STORAGE_BACKEND": "s3"}):
            storage = container.storage()

        self.assertIsInstance(storage, S3StorageAdapter)
        # Second call should return cached instance
        self.assertIs(storage, container.storage())

    def test_local_storage_from_settings(self):
        storage = get_storage()

        self.assertIsInstance(storage, StorageInterface)
        self.assertIsInstance(storage, LocalStorageAdapter)

    def test_get_email_service(self):
        email = get_email()

        self.assertIsInstance(email, EmailServiceInterface)
        self.assertIsInstance(email, MockEmailService)
        self.assertIs(email, container.email())

    def test_email_with_explicit_backend_rebuilds(self):
        first = container.email()
        second = container.email(backend="mock")

        self.assertIsNot(first, second)
        self.assertIs(second, container.email())

    def test_notifier_backends(self):
        self.assertIsInstance(get_notifier(), MockNotifier)
        self.assertIsInstance(container.notifier(backend="channels"), ChannelLayerNotifier)

    def test_services_share_collaborators(self):
        container.configure_for_testing()

        orders = container.order_service()
        messaging = container.messaging_service()
        reviews = container.review_service()

        self.assertIs(orders.notifier, container.notifier())
        self.assertIs(messaging.notifier, container.notifier())
        self.assertIs(orders.storage, container.storage())
        self.assertIs(reviews.rating_service, container.rating_service())
        self.assertIs(container.auth_service().email_service, container.email())

    def test_reset_drops_instances(self):
        service = container.catalog_service()
        container.reset()
        self.assertIsNot(service, container.catalog_service())
