"""Google Cloud Storage client."""

import logging

from google.api_core.exceptions import Forbidden, NotFound, RequestRangeNotSatisfiable
from google.cloud import storage as gcs
from google.oauth2 import service_account

from .base import DEFAULT_CONTENT_TYPE, ObjectInfo, ObjectStorageClient
from .exceptions import (
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageRangeError,
)

log = logging.getLogger(__name__)

# GCS rejects compose requests with more source objects than this.
MAX_COMPOSE_SOURCES = 32


class GcsStorageClient(ObjectStorageClient):
    """Google Cloud Storage client."""

    def __init__(
        self,
        bucket_name: str,
        project: str | None = None,
        credentials_path: str | None = None,
    ):
        self._bucket_name = bucket_name
        kwargs: dict = {}
        if project:
            kwargs["project"] = project
        if credentials_path:
            kwargs["credentials"] = service_account.Credentials.from_service_account_file(credentials_path)

        self._gcs_client = gcs.Client(**kwargs)
        self._bucket = self._gcs_client.bucket(bucket_name)

    def head_object(self, key: str) -> ObjectInfo:
        try:
            blob = self._bucket.get_blob(key)
        except Exception as e:
            raise self._translate_error(e, key) from e
        if blob is None:
            raise StorageNotFoundError(f"No such object: gs://{self._bucket_name}/{key}", key=key)
        return ObjectInfo(
            key=key,
            size=int(blob.size or 0),
            content_type=blob.content_type or DEFAULT_CONTENT_TYPE,
        )

    def read_range(self, key: str, start: int, end: int | None = None) -> bytes:
        try:
            return self._bucket.blob(key).download_as_bytes(start=start, end=end)
        except Exception as e:
            raise self._translate_error(e, key) from e

    def put_object(
        self,
        key: str,
        content: bytes,
        content_type: str,
    ) -> str:
        try:
            blob = self._bucket.blob(key)
            blob.upload_from_string(content, content_type=content_type)
            return key
        except Exception as e:
            raise self._translate_error(e, key) from e

    def copy_range(
        self,
        source_key: str,
        start: int,
        end: int,
        destination_key: str,
        content_type: str,
    ) -> str:
        source = self._bucket.blob(source_key)
        destination = self._bucket.blob(destination_key)
        destination.content_type = content_type
        try:
            # Streams the range through a resumable upload instead of buffering it.
            with destination.open("wb", ignore_flush=True) as writer:
                source.download_to_file(writer, start=start, end=end)
            log.debug(
                "Copied gs://%s/%s [%d, %d] to %s",
                self._bucket_name,
                source_key,
                start,
                end,
                destination_key,
            )
            return destination_key
        except Exception as e:
            raise self._translate_error(e, destination_key) from e

    def compose(
        self,
        source_keys: list[str],
        destination_key: str,
        content_type: str,
    ) -> str:
        if not source_keys:
            raise ValueError("compose requires at least one source object")
        if len(source_keys) > MAX_COMPOSE_SOURCES:
            raise ValueError(
                f"GCS can compose at most {MAX_COMPOSE_SOURCES} objects, got {len(source_keys)}"
            )
        try:
            destination = self._bucket.blob(destination_key)
            destination.content_type = content_type
            destination.compose([self._bucket.blob(key) for key in source_keys])
            return destination_key
        except Exception as e:
            raise self._translate_error(e, destination_key) from e

    def delete_object(self, key: str) -> None:
        try:
            blob = self._bucket.blob(key)
            blob.delete()
        except Exception as e:
            translated = self._translate_error(e, key)
            if isinstance(translated, StorageNotFoundError):
                return
            raise translated from e

    def _translate_error(self, error: Exception, key: str | None = None) -> StorageError:
        if isinstance(error, NotFound):
            return StorageNotFoundError(str(error), key=key, cause=error)
        if isinstance(error, Forbidden):
            return StoragePermissionError(str(error), key=key, cause=error)
        if isinstance(error, RequestRangeNotSatisfiable):
            return StorageRangeError(str(error), key=key, cause=error)
        if isinstance(error, ValueError) and "credentials" in str(error).lower():
            return StoragePermissionError(str(error), key=key, cause=error)
        if isinstance(error, ConnectionError):
            return StorageConnectionError(str(error), key=key, cause=error)
        return StorageError(str(error), key=key, cause=error)
