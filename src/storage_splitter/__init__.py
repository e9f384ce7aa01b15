"""
storage-splitter: line-safe splitting and header prepending for large text
objects in Google Cloud Storage, S3 and compatible stores.
"""

from .config import StorageSplitterConfig  # noqa: F401
from .splitting import ByteRange, LineBreakLocator, NoLineBreakFoundError, SplitPlan  # noqa: F401
from .storage_utils import StorageUtils  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "StorageUtils",
    "StorageSplitterConfig",
    "ByteRange",
    "SplitPlan",
    "LineBreakLocator",
    "NoLineBreakFoundError",
]
