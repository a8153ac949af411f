"""
Storage Factory
===============

Builds the file store selected by ``settings.INFRASTRUCTURE["STORAGE_BACKEND"]``.
"""

import logging
from typing import Optional

from django.conf import settings

from .interface import StorageInterface
from .local_adapter import LocalStorageAdapter
from .s3_adapter import S3StorageAdapter


logger = logging.getLogger(__name__)


class StorageFactory:
    """
    Usage:
        storage = StorageFactory.create()          # from settings
        storage = StorageFactory.create("local")   # explicit
    """

    @staticmethod
    def create(backend: Optional[str] = None) -> StorageInterface:
        backend_type = backend or getattr(settings, "INFRASTRUCTURE", {}).get("STORAGE_BACKEND", "s3")
        logger.info(f"Creating storage backend: {backend_type}")

        if backend_type == "s3":
            return S3StorageAdapter()
        elif backend_type == "local":
            return LocalStorageAdapter()
        raise ValueError(f"Invalid storage backend: {backend_type}. Must be 's3' or 'local'")
