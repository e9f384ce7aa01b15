"""Byte-range addressable object storage abstraction supporting GCS, S3 and memory."""

from .base import ObjectInfo, ObjectStorageClient
from .exceptions import (
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageRangeError,
)
from .factory import create_storage_client
from .memory_client import InMemoryStorageClient

__all__ = [
    "ObjectInfo",
    "ObjectStorageClient",
    "InMemoryStorageClient",
    "StorageError",
    "StorageNotFoundError",
    "StoragePermissionError",
    "StorageConnectionError",
    "StorageRangeError",
    "create_storage_client",
]
