"""
Notification Channel Abstraction Layer
========================================
"""

from .channels_notifier import ChannelLayerNotifier
from .factory import NotificationFactory
from .interface import NotificationChannelInterface, order_group_name
from .mock_notifier import MockNotifier

__all__ = [
    "NotificationChannelInterface",
    "ChannelLayerNotifier",
    "MockNotifier",
    "NotificationFactory",
    "order_group_name",
]
