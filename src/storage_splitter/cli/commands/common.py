"""Options and helpers shared by the storage-splitter commands."""

import asyncio
import logging
import sys

import click
from dotenv import find_dotenv, load_dotenv

from ...common.logging_config import setup_colored_logging
from ...config import StorageSplitterConfig
from ...splitting import SplitError
from ...storage import StorageError
from ...storage.factory import SUPPORTED_STORAGE_TYPES
from ...storage_utils import StorageUtils

log = logging.getLogger(__name__)


_COMMON_OPTIONS = (
    click.option(
        "-c",
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        help="Path to YAML configuration file",
    ),
    click.option(
        "-s",
        "--storage-type",
        type=click.Choice(SUPPORTED_STORAGE_TYPES, case_sensitive=False),
        default=None,
        help="Storage backend; overrides the configuration and OBJECT_STORAGE_TYPE.",
    ),
    click.option(
        "-l",
        "--log-level",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
        default="INFO",
        help="Logging level",
    ),
    click.option(
        "-u",
        "--system-env",
        is_flag=True,
        default=False,
        help="Use system environment variables only; do not load .env file.",
    ),
)


def common_options(func):
    """Attach config, backend, logging and env options to a command."""
    for option in reversed(_COMMON_OPTIONS):
        func = option(func)
    return func


def prepare_environment(log_level: str, system_env: bool) -> None:
    """Set up logging and load ``.env`` unless system env only was requested."""
    setup_colored_logging(level=getattr(logging, log_level))

    if system_env:
        log.debug("Using system environment variables only (--system-env flag)")
        return
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(dotenv_path=env_path, override=True)
        log.info("Loaded environment variables from: %s", env_path)


def load_config(config_path: str | None, storage_type: str | None, bucket: str) -> StorageSplitterConfig:
    """Read the configuration from a YAML file or the environment and apply CLI overrides."""
    try:
        if config_path:
            config = StorageSplitterConfig.from_yaml_file(config_path)
        else:
            config = StorageSplitterConfig.from_env()
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    storage = config.storage.model_copy(update={"bucket_name": bucket})
    if storage_type:
        storage = storage.model_copy(update={"type": storage_type.lower()})
    return config.model_copy(update={"storage": storage})


def build_utils(config: StorageSplitterConfig, object_name: str) -> StorageUtils:
    try:
        return StorageUtils.from_config(config, object_name)
    except (ValueError, ImportError) as e:
        raise click.ClickException(str(e)) from e


def run_or_exit(coro):
    """Run a coroutine; storage and split failures are logged and exit with status 1."""
    try:
        return asyncio.run(coro)
    except (StorageError, SplitError) as e:
        log.error("%s", e)
        sys.exit(1)
