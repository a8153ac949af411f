"""
Storage Abstraction Layer
==========================
"""

from .factory import StorageFactory
from .interface import StorageException, StoredFile, StorageInterface
from .local_adapter import LocalStorageAdapter
from .s3_adapter import S3StorageAdapter

__all__ = [
    "StorageInterface",
    "StoredFile",
    "StorageException",
    "S3StorageAdapter",
    "LocalStorageAdapter",
    "StorageFactory",
]
