"""
Configuration for storage-splitter.

This module defines the configuration options for:
- The object storage backend
- Split parameters (segment size, probe width, copy concurrency)
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .splitting import DEFAULT_PROBE_WIDTH, DEFAULT_SPLIT_SIZE


class StorageConfig(BaseModel):
    """Object storage configuration."""

    type: str = Field(
        default="gcs",
        description="Storage backend: gcs, s3, memory"
    )
    bucket_name: Optional[str] = Field(
        default=None,
        description="Bucket holding the source objects"
    )


class SplitConfig(BaseModel):
    """Split parameters."""

    split_size: int = Field(
        default=DEFAULT_SPLIT_SIZE,
        gt=0,
        description="Maximum size in bytes of each output object"
    )
    probe_width: int = Field(
        default=DEFAULT_PROBE_WIDTH,
        gt=0,
        description="Bytes read per backward probe when looking for a line break"
    )
    line_breaker: str = Field(
        default="\n",
        description="Single-byte line separator"
    )
    max_concurrent_copies: int = Field(
        default=4,
        gt=0,
        description="Maximum number of segment copies in flight"
    )

    @field_validator("line_breaker")
    @classmethod
    def _single_byte(cls, value: str) -> str:
        if len(value.encode("utf-8")) != 1:
            raise ValueError("line_breaker must encode to exactly one byte")
        return value

    @property
    def line_breaker_bytes(self) -> bytes:
        return self.line_breaker.encode("utf-8")


class StorageSplitterConfig(BaseModel):
    """
    Complete storage-splitter configuration.

    Example YAML:
    ```yaml
    storage_splitter:
      storage:
        type: gcs
        bucket_name: my-exports
      split:
        split_size: 999000000
        probe_width: 1000
        max_concurrent_copies: 4
    ```
    """

    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Object storage configuration"
    )
    split: SplitConfig = Field(
        default_factory=SplitConfig,
        description="Split parameters"
    )

    @classmethod
    def from_dict(cls, config_dict: dict) -> "StorageSplitterConfig":
        """Create configuration from dictionary."""
        return cls(**config_dict)

    @classmethod
    def from_yaml_file(cls, path: str) -> "StorageSplitterConfig":
        """Load configuration from YAML file."""
        import yaml
        with open(path, "r") as f:
            config_dict = yaml.safe_load(f) or {}
        return cls.from_dict(config_dict.get("storage_splitter", {}))

    @classmethod
    def from_env(cls) -> "StorageSplitterConfig":
        """Create configuration from environment variables, keeping defaults for unset ones."""
        storage: dict = {}
        split: dict = {}
        if os.getenv("OBJECT_STORAGE_TYPE"):
            storage["type"] = os.environ["OBJECT_STORAGE_TYPE"]
        if os.getenv("OBJECT_STORAGE_BUCKET_NAME"):
            storage["bucket_name"] = os.environ["OBJECT_STORAGE_BUCKET_NAME"]
        for env_var, field_name in (
            ("SPLIT_SIZE", "split_size"),
            ("SPLIT_PROBE_WIDTH", "probe_width"),
            ("SPLIT_MAX_CONCURRENT_COPIES", "max_concurrent_copies"),
        ):
            value = os.getenv(env_var)
            if value:
                try:
                    split[field_name] = int(value)
                except ValueError as e:
                    raise ValueError(f"{env_var} must be an integer, got {value!r}") from e
        return cls(storage=StorageConfig(**storage), split=SplitConfig(**split))
