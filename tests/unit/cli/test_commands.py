"""Unit tests for the storage-splitter CLI."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from storage_splitter import __version__
from storage_splitter.cli.main import cli
from storage_splitter.storage.exceptions import StorageError
from storage_splitter.storage.memory_client import InMemoryStorageClient

CONTENT = b"".join(f"row-{i:03d}\n".encode() for i in range(50))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in [
        "OBJECT_STORAGE_TYPE",
        "OBJECT_STORAGE_BUCKET_NAME",
        "SPLIT_SIZE",
        "SPLIT_PROBE_WIDTH",
        "SPLIT_MAX_CONCURRENT_COPIES",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("storage_splitter.cli.commands.common.setup_colored_logging"):
        yield


@pytest.fixture()
def store():
    client = InMemoryStorageClient(bucket_name="exports")
    client.put_object("rows.txt", CONTENT, "text/plain")
    with patch("storage_splitter.storage_utils.create_storage_client", return_value=client) as factory:
        client.factory = factory
        yield client


@pytest.fixture()
def runner():
    return CliRunner()


def _stdout_lines(result) -> list[str]:
    return [line for line in result.stdout.splitlines() if line]


class TestCliGroup:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["-h"])

        assert result.exit_code == 0
        for command in ("split", "plan", "add-header"):
            assert command in result.output


class TestSplitCommand:
    def test_prints_segment_names(self, runner, store):
        result = runner.invoke(cli, ["split", "exports", "rows.txt", "--split-size", "150", "-u", "-s", "memory"])

        assert result.exit_code == 0, result.output
        names = _stdout_lines(result)
        assert len(names) == 3
        assert names[0] == "rows.txt-0-of-3"
        assert b"".join(store.read_range(name, 0) for name in names) == CONTENT
        store.factory.assert_called_once_with("exports", "memory")

    def test_small_object_prints_original_name(self, runner, store):
        result = runner.invoke(cli, ["split", "exports", "rows.txt", "-u"])

        assert result.exit_code == 0, result.output
        assert _stdout_lines(result) == ["rows.txt"]

    def test_storage_failure_exits_with_status_one(self, runner, store):
        with patch.object(store, "copy_range", side_effect=StorageError("write failed")):
            result = runner.invoke(cli, ["split", "exports", "rows.txt", "--split-size", "200", "-u"])

        assert result.exit_code == 1

    def test_line_longer_than_split_size_exits_with_status_one(self, runner, store):
        result = runner.invoke(cli, ["split", "exports", "rows.txt", "--split-size", "5", "-u"])

        assert result.exit_code == 1

    def test_rejects_zero_split_size(self, runner, store):
        result = runner.invoke(cli, ["split", "exports", "rows.txt", "--split-size", "0", "-u"])

        assert result.exit_code == 2


class TestPlanCommand:
    def test_prints_ranges_without_writing(self, runner, store):
        result = runner.invoke(cli, ["plan", "exports", "rows.txt", "--split-size", "200", "-u"])

        assert result.exit_code == 0, result.output
        rows = [line.split("\t") for line in _stdout_lines(result)]
        assert rows[0] == ["0", "0", "199", "200"]
        assert rows[-1][2] == str(len(CONTENT) - 1)
        assert store.keys == ["rows.txt"]

    def test_uses_config_file(self, runner, store, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("storage_splitter:\n  storage:\n    type: memory\n  split:\n    split_size: 300\n")

        result = runner.invoke(cli, ["plan", "exports", "rows.txt", "-c", str(config_path), "-u"])

        assert result.exit_code == 0, result.output
        assert len(_stdout_lines(result)) == 2
        store.factory.assert_called_once_with("exports", "memory")


class TestInvalidConfiguration:
    @pytest.mark.parametrize("value", ["ten", "0"])
    def test_bad_split_size_env_exits_without_traceback(self, runner, store, monkeypatch, value):
        monkeypatch.setenv("SPLIT_SIZE", value)

        result = runner.invoke(cli, ["plan", "exports", "rows.txt", "-u"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid configuration" in result.output


class TestAddHeaderCommand:
    def test_prints_output_name(self, runner, store):
        result = runner.invoke(cli, ["add-header", "exports", "rows.txt", "id", "-u"])

        assert result.exit_code == 0, result.output
        assert _stdout_lines(result) == ["rows.txt_w_header"]
        assert store.read_range("rows.txt_w_header", 0) == b"id\n" + CONTENT

    def test_custom_output_name(self, runner, store):
        result = runner.invoke(cli, ["add-header", "exports", "rows.txt", "id", "-o", "out.txt", "-u"])

        assert result.exit_code == 0, result.output
        assert _stdout_lines(result) == ["out.txt"]

    def test_missing_source_exits_with_status_one(self, runner, store):
        result = runner.invoke(cli, ["add-header", "exports", "missing.txt", "id", "-u"])

        assert result.exit_code == 1
