"""
Storage Interface
=================

Contract for the file store holding profile pictures, gig media, delivery
files and message attachments. Domain rows keep the returned URL as the
file reference.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Optional


@dataclass
class StoredFile:
    """
    A file persisted in the store.

    Attributes:
        key: Path of the object inside the store
        url: Public URL clients use to fetch the file
        size: File size in bytes
        content_type: MIME type reported by the uploader
    """

    key: str
    url: str
    size: int
    content_type: Optional[str] = None

    def to_dict(self) -> dict:
        return {"key": self.key, "url": self.url, "size": self.size, "content_type": self.content_type}


class StorageInterface(ABC):
    """
    Abstract file store.

    Concrete implementations:
        - S3StorageAdapter: S3 / MinIO bucket through django-storages
        - LocalStorageAdapter: Django's default storage (filesystem or in-memory)
    """

    @abstractmethod
    def upload(self, file: BinaryIO, folder: str, content_type: Optional[str] = None) -> StoredFile:
        """
        Store a file under ``folder`` with a generated unique name.

        Raises:
            StorageException: If the upload fails
        """

    @abstractmethod
    def delete(self, reference: str) -> bool:
        """
        Delete a file given its key or the URL returned by ``upload``.

        Returns:
            True if a file was removed, False if nothing matched

        Raises:
            StorageException: If the backend fails
        """

    @abstractmethod
    def url(self, key: str) -> str:
        """Public URL for a stored key."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check whether a key is present."""


class StorageException(Exception):
    """Raised when the file store fails."""

    pass
