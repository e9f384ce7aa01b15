"""In-process storage client backed by a dict."""

import threading

from .base import DEFAULT_CONTENT_TYPE, ObjectInfo, ObjectStorageClient
from .exceptions import StorageNotFoundError, StorageRangeError


class InMemoryStorageClient(ObjectStorageClient):
    """Keeps objects in memory. Used for tests and local dry runs."""

    def __init__(self, bucket_name: str = "memory"):
        self._bucket_name = bucket_name
        self._objects: dict[str, tuple[bytes, str]] = {}
        self._lock = threading.Lock()

    @property
    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._objects)

    def head_object(self, key: str) -> ObjectInfo:
        content, content_type = self._get(key)
        return ObjectInfo(key=key, size=len(content), content_type=content_type)

    def read_range(self, key: str, start: int, end: int | None = None) -> bytes:
        content, _ = self._get(key)
        if start >= len(content) and len(content) > 0:
            raise StorageRangeError(
                f"Range start {start} is beyond object size {len(content)}", key=key
            )
        stop = len(content) if end is None else end + 1
        return content[start:stop]

    def put_object(
        self,
        key: str,
        content: bytes,
        content_type: str,
    ) -> str:
        with self._lock:
            self._objects[key] = (bytes(content), content_type or DEFAULT_CONTENT_TYPE)
        return key

    def copy_range(
        self,
        source_key: str,
        start: int,
        end: int,
        destination_key: str,
        content_type: str,
    ) -> str:
        return self.put_object(destination_key, self.read_range(source_key, start, end), content_type)

    def compose(
        self,
        source_keys: list[str],
        destination_key: str,
        content_type: str,
    ) -> str:
        parts = [self._get(key)[0] for key in source_keys]
        return self.put_object(destination_key, b"".join(parts), content_type)

    def delete_object(self, key: str) -> None:
        with self._lock:
            self._objects.pop(key, None)

    def _get(self, key: str) -> tuple[bytes, str]:
        with self._lock:
            try:
                return self._objects[key]
            except KeyError:
                raise StorageNotFoundError(
                    f"No such object: {self._bucket_name}/{key}", key=key
                ) from None
