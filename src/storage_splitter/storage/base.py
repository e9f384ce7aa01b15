"""Abstract base class for byte-range addressable object storage backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class ObjectInfo:
    """Metadata of a stored object as reported by the backend."""

    key: str
    size: int
    content_type: str = DEFAULT_CONTENT_TYPE


class ObjectStorageClient(ABC):
    """Backend-agnostic interface for blob storage operations.

    All offsets are byte offsets and all ranges are inclusive on both ends.
    Existing objects are never modified; writes always create a new object.
    """

    @abstractmethod
    def head_object(self, key: str) -> ObjectInfo:
        """Return size and content type. Raises StorageNotFoundError if missing."""

    @abstractmethod
    def read_range(self, key: str, start: int, end: int | None = None) -> bytes:
        """Read bytes ``[start, end]``. ``end=None`` reads to the end of the object."""

    @abstractmethod
    def put_object(
        self,
        key: str,
        content: bytes,
        content_type: str,
    ) -> str:
        """Upload content and return the key."""

    @abstractmethod
    def copy_range(
        self,
        source_key: str,
        start: int,
        end: int,
        destination_key: str,
        content_type: str,
    ) -> str:
        """Copy bytes ``[start, end]`` of one object into a new object and return its key."""

    @abstractmethod
    def compose(
        self,
        source_keys: list[str],
        destination_key: str,
        content_type: str,
    ) -> str:
        """Concatenate objects in the given order into a new object and return its key."""

    @abstractmethod
    def delete_object(self, key: str) -> None:
        """Delete a single object. No-op if the key doesn't exist."""
