import logging
from typing import Optional

from django.conf import settings

from .channels_notifier import ChannelLayerNotifier
from .interface import NotificationChannelInterface
from .mock_notifier import MockNotifier


logger = logging.getLogger(__name__)


class NotificationFactory:
    """Builds the notifier selected by ``settings.INFRASTRUCTURE["NOTIFICATION_BACKEND"]``."""

    @staticmethod
    def create(backend: Optional[str] = None) -> NotificationChannelInterface:
        backend_type = backend or getattr(settings, "INFRASTRUCTURE", {}).get("NOTIFICATION_BACKEND", "channels")
        logger.info(f"Creating notification backend: {backend_type}")

        if backend_type == "channels":
            return ChannelLayerNotifier()
        elif backend_type == "mock":
            return MockNotifier()
        raise ValueError(f"Invalid notification backend: {backend_type}. Must be 'channels' or 'mock'")
