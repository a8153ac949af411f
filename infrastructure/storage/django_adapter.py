"""
Django Storage Adapter
======================

Shared StorageInterface implementation on top of a Django ``Storage``
backend. Subclasses only choose the backend and how URLs map back to keys.
"""

import logging
import os
import uuid
from typing import BinaryIO, Optional
from urllib.parse import urlparse

from django.core.files.storage import Storage

from .interface import StorageException, StoredFile, StorageInterface


logger = logging.getLogger(__name__)


class DjangoStorageAdapter(StorageInterface):
    storage: Storage

    def __init__(self, storage: Storage):
        self.storage = storage

    def upload(self, file: BinaryIO, folder: str, content_type: Optional[str] = None) -> StoredFile:
        key = self.build_key(folder, getattr(file, "name", "") or "")
        try:
            saved_key = self.storage.save(key, file)
            size = self.storage.size(saved_key)
            url = self.storage.url(saved_key)
        except Exception as e:
            logger.error(f"Failed to upload file to {key}: {str(e)}")
            raise StorageException(f"Upload failed: {str(e)}") from e

        logger.info(f"Uploaded file {saved_key} ({size} bytes)")
        return StoredFile(
            key=saved_key,
            url=url,
            size=size,
            content_type=content_type or getattr(file, "content_type", None),
        )

    def delete(self, reference: str) -> bool:
        key = self.key_from_reference(reference)
        if not key:
            return False
        try:
            if not self.storage.exists(key):
                logger.warning(f"File not found, cannot delete: {key}")
                return False
            self.storage.delete(key)
        except Exception as e:
            logger.error(f"Failed to delete file {key}: {str(e)}")
            raise StorageException(f"Deletion failed: {str(e)}") from e

        logger.info(f"Deleted file {key}")
        return True

    def url(self, key: str) -> str:
        try:
            return self.storage.url(key)
        except Exception as e:
            raise StorageException(f"URL generation failed: {str(e)}") from e

    def exists(self, key: str) -> bool:
        try:
            return self.storage.exists(key)
        except Exception as e:
            logger.error(f"Error checking existence of {key}: {str(e)}")
            return False

    @staticmethod
    def build_key(folder: str, filename: str) -> str:
        _, ext = os.path.splitext(filename)
        return f"{folder.strip('/')}/{uuid.uuid4().hex}{ext.lower()}"

    def key_from_reference(self, reference: str) -> str:
        """Turn a stored URL back into a key; plain keys pass through."""
        if not reference:
            return ""
        if "://" not in reference and not reference.startswith("/"):
            return reference
        path = urlparse(reference).path.lstrip("/")
        for prefix in self.url_prefixes():
            if prefix and path.startswith(prefix):
                path = path[len(prefix) :]
        return path

    def url_prefixes(self) -> list:
        return []
