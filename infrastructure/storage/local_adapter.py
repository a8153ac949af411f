"""
Local Storage Adapter
=====================

File store backed by Django's default storage (MEDIA_ROOT on disk, or the
in-memory storage configured for tests).
"""

from django.conf import settings
from django.core.files.storage import default_storage

from .django_adapter import DjangoStorageAdapter


class LocalStorageAdapter(DjangoStorageAdapter):
    def __init__(self, storage=None):
        super().__init__(storage or default_storage)

    def url_prefixes(self) -> list:
        return [settings.MEDIA_URL.lstrip("/")]
