"""
S3 Storage Adapter
==================

File store backed by an S3 (or MinIO) bucket via django-storages.
"""

from django.conf import settings
from storages.backends.s3boto3 import S3Boto3Storage

from .django_adapter import DjangoStorageAdapter


class S3StorageAdapter(DjangoStorageAdapter):
    """
    Configuration (in settings.py):
        AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_STORAGE_BUCKET_NAME,
        AWS_S3_REGION_NAME, AWS_S3_ENDPOINT_URL (MinIO), AWS_S3_CUSTOM_DOMAIN
    """

    def __init__(self):
        super().__init__(S3Boto3Storage())
        self.bucket_name = getattr(settings, "AWS_STORAGE_BUCKET_NAME", "freelancehub-media")

    def url_prefixes(self) -> list:
        # Path-style endpoints (MinIO) put the bucket in the URL path
        location = getattr(self.storage, "location", "") or ""
        return [f"{self.bucket_name}/", f"{location.strip('/')}/" if location else ""]
