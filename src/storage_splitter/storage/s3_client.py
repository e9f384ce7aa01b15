"""S3-compatible storage client (AWS S3, SeaweedFS, MinIO)."""

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .base import DEFAULT_CONTENT_TYPE, ObjectInfo, ObjectStorageClient
from .exceptions import (
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageRangeError,
)

log = logging.getLogger(__name__)

_ERROR_CODE_MAP = {
    "NoSuchKey": StorageNotFoundError,
    "404": StorageNotFoundError,
    "NotFound": StorageNotFoundError,
    "AccessDenied": StoragePermissionError,
    "403": StoragePermissionError,
    "InvalidAccessKeyId": StoragePermissionError,
    "SignatureDoesNotMatch": StoragePermissionError,
    "InvalidRange": StorageRangeError,
    "416": StorageRangeError,
}

# Multipart limits: every part but the last must be at least MIN_PART_SIZE,
# and a single upload_part_copy may not exceed MAX_PART_SIZE.
MIN_PART_SIZE = 5 * 1024 * 1024
MAX_PART_SIZE = 5 * 1024 * 1024 * 1024


def _balanced_parts(start: int, end: int, max_part_size: int = MAX_PART_SIZE) -> list[tuple[int, int]]:
    """Cut ``[start, end]`` into near-equal inclusive ranges no larger than max_part_size."""
    length = end - start + 1
    count = -(-length // max_part_size)
    part_size = -(-length // count)
    return [(offset, min(offset + part_size - 1, end)) for offset in range(start, end + 1, part_size)]


class _MultipartUpload:
    """Lazily started multipart upload that accepts both raw bytes and server-side range copies."""

    def __init__(self, client, bucket: str, key: str, content_type: str):
        self._client = client
        self._bucket = bucket
        self._key = key
        self._content_type = content_type
        self._upload_id: str | None = None
        self._parts: list[dict] = []

    @property
    def started(self) -> bool:
        return self._upload_id is not None

    def _ensure_started(self) -> str:
        if self._upload_id is None:
            response = self._client.create_multipart_upload(
                Bucket=self._bucket,
                Key=self._key,
                ContentType=self._content_type,
            )
            self._upload_id = response["UploadId"]
        return self._upload_id

    def upload_bytes(self, content: bytes) -> None:
        upload_id = self._ensure_started()
        part_number = len(self._parts) + 1
        response = self._client.upload_part(
            Bucket=self._bucket,
            Key=self._key,
            UploadId=upload_id,
            PartNumber=part_number,
            Body=content,
        )
        self._parts.append({"PartNumber": part_number, "ETag": response["ETag"]})

    def copy_range(self, source_key: str, start: int, end: int) -> None:
        upload_id = self._ensure_started()
        for part_start, part_end in _balanced_parts(start, end):
            part_number = len(self._parts) + 1
            response = self._client.upload_part_copy(
                Bucket=self._bucket,
                Key=self._key,
                UploadId=upload_id,
                PartNumber=part_number,
                CopySource={"Bucket": self._bucket, "Key": source_key},
                CopySourceRange=f"bytes={part_start}-{part_end}",
            )
            self._parts.append(
                {"PartNumber": part_number, "ETag": response["CopyPartResult"]["ETag"]}
            )

    def complete(self) -> None:
        self._client.complete_multipart_upload(
            Bucket=self._bucket,
            Key=self._key,
            UploadId=self._upload_id,
            MultipartUpload={"Parts": self._parts},
        )

    def abort(self) -> None:
        if self._upload_id is None:
            return
        try:
            self._client.abort_multipart_upload(
                Bucket=self._bucket,
                Key=self._key,
                UploadId=self._upload_id,
            )
        except (ClientError, BotoCoreError) as e:
            log.warning("Failed to abort multipart upload for %s: %s", self._key, e)


class S3StorageClient(ObjectStorageClient):
    """S3-compatible object storage client.

    S3 has no native compose, so ``copy_range`` and ``compose`` are built on
    multipart uploads with ``upload_part_copy``. Sources smaller than the
    minimum part size are read and buffered until a valid part can be sent.
    """

    def __init__(
        self,
        bucket_name: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
    ):
        self._bucket = bucket_name
        self._region = region
        self._endpoint_url = endpoint_url

        kwargs: dict = {
            "config": Config(
                region_name=region,
                signature_version="s3v4",
                retries={"max_attempts": 1, "mode": "standard"},
            ),
        }
        if aws_access_key_id and aws_secret_access_key:
            kwargs["aws_access_key_id"] = aws_access_key_id
            kwargs["aws_secret_access_key"] = aws_secret_access_key
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self._client = boto3.client("s3", **kwargs)

    def head_object(self, key: str) -> ObjectInfo:
        try:
            response = self._client.head_object(Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, key) from e
        return ObjectInfo(
            key=key,
            size=int(response["ContentLength"]),
            content_type=response.get("ContentType", DEFAULT_CONTENT_TYPE),
        )

    def read_range(self, key: str, start: int, end: int | None = None) -> bytes:
        byte_range = f"bytes={start}-" if end is None else f"bytes={start}-{end}"
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key, Range=byte_range)
            return response["Body"].read()
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, key) from e

    def put_object(
        self,
        key: str,
        content: bytes,
        content_type: str,
    ) -> str:
        try:
            self._client.put_object(Bucket=self._bucket, Key=key, Body=content, ContentType=content_type)
            return key
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, key) from e

    def copy_range(
        self,
        source_key: str,
        start: int,
        end: int,
        destination_key: str,
        content_type: str,
    ) -> str:
        upload = _MultipartUpload(self._client, self._bucket, destination_key, content_type)
        try:
            upload.copy_range(source_key, start, end)
            upload.complete()
        except Exception as e:
            upload.abort()
            if isinstance(e, (ClientError, BotoCoreError)):
                raise self._translate_error(e, destination_key) from e
            raise
        log.debug("Copied s3://%s/%s [%d, %d] to %s", self._bucket, source_key, start, end, destination_key)
        return destination_key

    def compose(
        self,
        source_keys: list[str],
        destination_key: str,
        content_type: str,
    ) -> str:
        if not source_keys:
            raise ValueError("compose requires at least one source object")
        upload = _MultipartUpload(self._client, self._bucket, destination_key, content_type)
        pending = bytearray()
        try:
            for key in source_keys:
                size = self.head_object(key).size
                offset = 0
                if pending and len(pending) < MIN_PART_SIZE:
                    offset = min(size, MIN_PART_SIZE - len(pending))
                    if offset:
                        pending += self.read_range(key, 0, offset - 1)
                remaining = size - offset
                if remaining == 0:
                    continue
                if remaining < MIN_PART_SIZE:
                    pending += self.read_range(key, offset, size - 1)
                    continue
                if pending:
                    upload.upload_bytes(bytes(pending))
                    pending.clear()
                upload.copy_range(key, offset, size - 1)

            if not upload.started:
                return self.put_object(destination_key, bytes(pending), content_type)
            if pending:
                upload.upload_bytes(bytes(pending))
            upload.complete()
            return destination_key
        except Exception as e:
            upload.abort()
            if isinstance(e, (ClientError, BotoCoreError)):
                raise self._translate_error(e, destination_key) from e
            raise

    def delete_object(self, key: str) -> None:
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, key) from e

    def _translate_error(self, error: Exception, key: str | None = None) -> StorageError:
        if isinstance(error, BotoCoreError):
            return StorageConnectionError(str(error), key=key, cause=error)
        code = error.response.get("Error", {}).get("Code", "")
        exc_cls = _ERROR_CODE_MAP.get(code, StorageError)
        return exc_cls(str(error), key=key, cause=error)
