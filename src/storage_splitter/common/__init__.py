"""Shared helpers."""

from .logging_config import ColoredFormatter, setup_colored_logging  # noqa: F401

__all__ = ["ColoredFormatter", "setup_colored_logging"]
