"""Factory for creating object storage clients based on configuration."""

import logging
import os

from .base import ObjectStorageClient

log = logging.getLogger(__name__)

SUPPORTED_STORAGE_TYPES = ("gcs", "s3", "memory")


def create_storage_client(
    bucket_name: str,
    storage_type: str | None = None,
) -> ObjectStorageClient:
    """Create an ObjectStorageClient for the given bucket.

    Backend type and credentials are read from environment variables.
    The bucket name always comes from the caller.

    Args:
        bucket_name: Bucket name. Required.
        storage_type: Override backend type. Reads OBJECT_STORAGE_TYPE env var if None. Defaults to "gcs".

    Returns:
        Configured ObjectStorageClient instance.

    Raises:
        ValueError: If bucket_name is empty or storage_type is unsupported.
    """
    if not bucket_name:
        raise ValueError("bucket_name cannot be empty")

    backend = (storage_type or os.getenv("OBJECT_STORAGE_TYPE", "gcs")).lower()
    log.debug("Creating %s storage client for bucket %s", backend, bucket_name)

    if backend == "gcs":
        return _create_gcs_client(bucket_name)
    if backend == "s3":
        return _create_s3_client(bucket_name)
    if backend == "memory":
        return _create_memory_client(bucket_name)

    raise ValueError(
        f"Unsupported storage type: {backend!r}. Supported: {', '.join(SUPPORTED_STORAGE_TYPES)}"
    )


def _create_gcs_client(bucket_name: str) -> ObjectStorageClient:
    from .gcs_client import GcsStorageClient

    return GcsStorageClient(
        bucket_name=bucket_name,
        project=os.getenv("GCS_PROJECT"),
        credentials_path=os.getenv("GOOGLE_APPLICATION_CREDENTIALS"),
    )


def _create_s3_client(bucket_name: str) -> ObjectStorageClient:
    from .s3_client import S3StorageClient

    return S3StorageClient(
        bucket_name=bucket_name,
        region=os.getenv("S3_REGION", "us-east-1"),
        endpoint_url=os.getenv("S3_ENDPOINT_URL"),
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
    )


def _create_memory_client(bucket_name: str) -> ObjectStorageClient:
    from .memory_client import InMemoryStorageClient

    return InMemoryStorageClient(bucket_name=bucket_name)
