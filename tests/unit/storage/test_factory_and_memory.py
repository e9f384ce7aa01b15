"""Unit tests for the storage client factory and the in-memory client."""

from unittest.mock import MagicMock, patch

import pytest

from storage_splitter.storage.exceptions import StorageNotFoundError, StorageRangeError
from storage_splitter.storage.factory import create_storage_client
from storage_splitter.storage.gcs_client import GcsStorageClient
from storage_splitter.storage.memory_client import InMemoryStorageClient
from storage_splitter.storage.s3_client import S3StorageClient


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in [
        "OBJECT_STORAGE_TYPE",
        "S3_ENDPOINT_URL",
        "S3_REGION",
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "GCS_PROJECT",
        "GOOGLE_APPLICATION_CREDENTIALS",
    ]:
        monkeypatch.delenv(var, raising=False)


class TestCreateStorageClient:
    def test_defaults_to_gcs(self):
        with patch("storage_splitter.storage.gcs_client.gcs") as mock_gcs:
            client = create_storage_client("bucket")

        assert isinstance(client, GcsStorageClient)
        mock_gcs.Client.return_value.bucket.assert_called_once_with("bucket")

    def test_gcs_reads_project_from_env(self, monkeypatch):
        monkeypatch.setenv("GCS_PROJECT", "my-project")
        with patch("storage_splitter.storage.gcs_client.gcs") as mock_gcs:
            create_storage_client("bucket", "gcs")

        mock_gcs.Client.assert_called_once_with(project="my-project")

    def test_env_selects_s3(self, monkeypatch):
        monkeypatch.setenv("OBJECT_STORAGE_TYPE", "S3")
        monkeypatch.setenv("S3_ENDPOINT_URL", "http://localhost:9000")
        with patch("storage_splitter.storage.s3_client.boto3") as mock_boto3:
            mock_boto3.client.return_value = MagicMock()
            client = create_storage_client("bucket")

        assert isinstance(client, S3StorageClient)
        assert mock_boto3.client.call_args.kwargs["endpoint_url"] == "http://localhost:9000"

    def test_explicit_type_overrides_env(self, monkeypatch):
        monkeypatch.setenv("OBJECT_STORAGE_TYPE", "s3")

        assert isinstance(create_storage_client("bucket", "memory"), InMemoryStorageClient)

    def test_unsupported_type_raises(self):
        with pytest.raises(ValueError, match="Unsupported storage type"):
            create_storage_client("bucket", "ftp")

    def test_empty_bucket_raises(self):
        with pytest.raises(ValueError):
            create_storage_client("", "memory")


class TestInMemoryStorageClient:
    @pytest.fixture()
    def client(self):
        client = InMemoryStorageClient()
        client.put_object("a.txt", b"hello\nworld\n", "text/plain")
        return client

    def test_head_object(self, client):
        info = client.head_object("a.txt")
        assert info.size == 12
        assert info.content_type == "text/plain"

    def test_read_range_is_inclusive(self, client):
        assert client.read_range("a.txt", 0, 4) == b"hello"

    def test_read_range_past_end_is_truncated(self, client):
        assert client.read_range("a.txt", 6, 100) == b"world\n"

    def test_read_range_starting_past_end_raises(self, client):
        with pytest.raises(StorageRangeError):
            client.read_range("a.txt", 12, 20)

    def test_missing_key_raises_not_found(self, client):
        with pytest.raises(StorageNotFoundError):
            client.head_object("missing")

    def test_copy_range_and_compose(self, client):
        client.copy_range("a.txt", 6, 11, "b.txt", "text/csv")
        client.compose(["b.txt", "a.txt"], "c.txt", "text/csv")

        assert client.read_range("c.txt", 0) == b"world\nhello\nworld\n"
        assert client.head_object("c.txt").content_type == "text/csv"

    def test_delete_is_idempotent(self, client):
        client.delete_object("a.txt")
        client.delete_object("a.txt")

        assert client.keys == []
