"""Unit tests for the Google Cloud Storage client."""

from unittest.mock import MagicMock, patch

import pytest
from google.api_core.exceptions import Forbidden, NotFound, RequestRangeNotSatisfiable

from storage_splitter.storage.exceptions import (
    StorageConnectionError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageRangeError,
)
from storage_splitter.storage.gcs_client import MAX_COMPOSE_SOURCES, GcsStorageClient


@pytest.fixture()
def mock_bucket():
    with patch("storage_splitter.storage.gcs_client.gcs") as mock_gcs:
        bucket = MagicMock()
        blobs: dict[str, MagicMock] = {}

        def blob(name):
            if name not in blobs:
                blobs[name] = MagicMock(name=f"blob:{name}")
            return blobs[name]

        bucket.blob.side_effect = blob
        bucket.blobs = blobs
        mock_gcs.Client.return_value.bucket.return_value = bucket
        yield bucket


@pytest.fixture()
def gcs_client(mock_bucket):
    return GcsStorageClient(bucket_name="test-bucket", project="proj")


class TestGcsHeadObject:
    def test_returns_size_and_content_type(self, gcs_client, mock_bucket):
        mock_bucket.get_blob.return_value = MagicMock(size=2048, content_type="text/csv")

        info = gcs_client.head_object("data.csv")

        assert info.size == 2048
        assert info.content_type == "text/csv"

    def test_missing_blob_raises_not_found(self, gcs_client, mock_bucket):
        mock_bucket.get_blob.return_value = None

        with pytest.raises(StorageNotFoundError) as exc_info:
            gcs_client.head_object("missing.csv")
        assert exc_info.value.key == "missing.csv"

    def test_defaults_content_type(self, gcs_client, mock_bucket):
        mock_bucket.get_blob.return_value = MagicMock(size=1, content_type=None)

        assert gcs_client.head_object("x").content_type == "application/octet-stream"


class TestGcsReadRange:
    def test_passes_inclusive_bounds(self, gcs_client, mock_bucket):
        blob = mock_bucket.blob("data.csv")
        blob.download_as_bytes.return_value = b"abc"

        assert gcs_client.read_range("data.csv", 10, 12) == b"abc"
        blob.download_as_bytes.assert_called_once_with(start=10, end=12)

    @pytest.mark.parametrize(
        ("error", "expected_type"),
        [
            (NotFound("gone"), StorageNotFoundError),
            (Forbidden("denied"), StoragePermissionError),
            (RequestRangeNotSatisfiable("bad range"), StorageRangeError),
            (ConnectionError("reset"), StorageConnectionError),
        ],
    )
    def test_errors_are_translated(self, gcs_client, mock_bucket, error, expected_type):
        mock_bucket.blob("data.csv").download_as_bytes.side_effect = error

        with pytest.raises(expected_type) as exc_info:
            gcs_client.read_range("data.csv", 0, 1)
        assert exc_info.value.cause is error


class TestGcsCopyRange:
    def test_streams_range_into_destination(self, gcs_client, mock_bucket):
        source = mock_bucket.blob("data.csv")
        destination = mock_bucket.blob("data.csv-0-of-2")
        writer = destination.open.return_value.__enter__.return_value

        result = gcs_client.copy_range("data.csv", 0, 99, "data.csv-0-of-2", "text/csv")

        assert result == "data.csv-0-of-2"
        assert destination.content_type == "text/csv"
        destination.open.assert_called_once_with("wb", ignore_flush=True)
        source.download_to_file.assert_called_once_with(writer, start=0, end=99)

    def test_failure_is_translated(self, gcs_client, mock_bucket):
        mock_bucket.blob("data.csv").download_to_file.side_effect = Forbidden("denied")

        with pytest.raises(StoragePermissionError):
            gcs_client.copy_range("data.csv", 0, 9, "out", "text/csv")


class TestGcsCompose:
    def test_composes_sources_in_order_with_content_type(self, gcs_client, mock_bucket):
        header = mock_bucket.blob("_header_1")
        source = mock_bucket.blob("data.csv")
        destination = mock_bucket.blob("data.csv_w_header")

        result = gcs_client.compose(["_header_1", "data.csv"], "data.csv_w_header", "text/csv")

        assert result == "data.csv_w_header"
        assert destination.content_type == "text/csv"
        destination.compose.assert_called_once_with([header, source])

    def test_rejects_too_many_sources(self, gcs_client):
        with pytest.raises(ValueError):
            gcs_client.compose([f"p{i}" for i in range(MAX_COMPOSE_SOURCES + 1)], "out", "text/plain")

    def test_rejects_empty_sources(self, gcs_client):
        with pytest.raises(ValueError):
            gcs_client.compose([], "out", "text/plain")


class TestGcsDeleteObject:
    def test_missing_object_is_ignored(self, gcs_client, mock_bucket):
        mock_bucket.blob("gone").delete.side_effect = NotFound("gone")

        gcs_client.delete_object("gone")

    def test_other_errors_propagate(self, gcs_client, mock_bucket):
        mock_bucket.blob("locked").delete.side_effect = Forbidden("denied")

        with pytest.raises(StoragePermissionError):
            gcs_client.delete_object("locked")
