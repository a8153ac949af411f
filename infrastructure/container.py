"""
Dependency Injection Container
================================

Single place where infrastructure collaborators and domain services are
built and wired together. Views ask the container for services; tests call
``container.reset()`` / ``configure_for_testing()`` to swap in mocks.

Usage:
    from infrastructure.container import container

    orders = container.order_service()
    storage = container.storage()
"""

import logging
from typing import Optional

from .email import EmailFactory, EmailServiceInterface
from .notifications import NotificationChannelInterface, NotificationFactory
from .storage import StorageFactory, StorageInterface


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Lazily builds and caches service instances (singleton).
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._clear()
            self._initialized = True
            logger.info("Service container initialized")

    def _clear(self):
        self._storage: Optional[StorageInterface] = None
        self._email: Optional[EmailServiceInterface] = None
        self._notifier: Optional[NotificationChannelInterface] = None

        # Domain Services
        self._auth_service = None
        self._catalog_service = None
        self._order_service = None
        self._rating_service = None
        self._review_service = None
        self._messaging_service = None

    # Infrastructure

    def storage(self) -> StorageInterface:
        """File store (S3 or local, from settings)."""
        if self._storage is None:
            self._storage = StorageFactory.create()
            logger.debug(f"Created storage service: {type(self._storage).__name__}")
        return self._storage

    def email(self, backend: Optional[str] = None) -> EmailServiceInterface:
        """
        Mail sender.

        Args:
            backend: 'smtp' or 'mock'. Passing a backend rebuilds the cached instance.
        """
        if self._email is None or backend is not None:
            self._email = EmailFactory.create(backend)
            logger.debug(f"Created email service: {type(self._email).__name__}")
        return self._email

    def notifier(self, backend: Optional[str] = None) -> NotificationChannelInterface:
        """Realtime notification channel for order rooms."""
        if self._notifier is None or backend is not None:
            self._notifier = NotificationFactory.create(backend)
            logger.debug(f"Created notifier: {type(self._notifier).__name__}")
        return self._notifier

    # Domain services

    def auth_service(self):
        if self._auth_service is None:
            from authentication.domain.services.auth_service import AuthService

            self._auth_service = AuthService(email_service=self.email(), storage=self.storage())
            logger.debug("Created AuthService")
        return self._auth_service

    def catalog_service(self):
        if self._catalog_service is None:
            from marketplace.catalog.domain.services import CatalogService

            self._catalog_service = CatalogService(storage=self.storage())
            logger.debug("Created CatalogService")
        return self._catalog_service

    def order_service(self):
        if self._order_service is None:
            from marketplace.ordering.domain.services import OrderService

            self._order_service = OrderService(storage=self.storage(), notifier=self.notifier())
            logger.debug("Created OrderService")
        return self._order_service

    def rating_service(self):
        if self._rating_service is None:
            from marketplace.reviews.domain.services import RatingService

            self._rating_service = RatingService()
            logger.debug("Created RatingService")
        return self._rating_service

    def review_service(self):
        if self._review_service is None:
            from marketplace.reviews.domain.services import ReviewService

            self._review_service = ReviewService(rating_service=self.rating_service(), notifier=self.notifier())
            logger.debug("Created ReviewService")
        return self._review_service

    def messaging_service(self):
        if self._messaging_service is None:
            from chat.domain.services.messaging_service import MessagingService

            self._messaging_service = MessagingService(storage=self.storage(), notifier=self.notifier())
            logger.debug("Created MessagingService")
        return self._messaging_service

    def reset(self):
        """Drop every cached instance."""
        self._clear()
        logger.info("Service container reset")

    def configure_for_testing(self):
        """
        Wire in-process collaborators:
            - local (Django default) storage
            - mock email
            - mock notifier
        """
        self._clear()
        self._storage = StorageFactory.create("local")
        self._email = EmailFactory.create("mock")
        self._notifier = NotificationFactory.create("mock")
        logger.info("Service container configured for testing")


# Global singleton instance
container = ServiceContainer()


def get_storage() -> StorageInterface:
    return container.storage()


def get_email() -> EmailServiceInterface:
    return container.email()


def get_notifier() -> NotificationChannelInterface:
    return container.notifier()
