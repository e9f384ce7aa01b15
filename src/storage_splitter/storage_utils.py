"""
Line-safe utilities for large text objects in remote storage.

There are two main usages:
1. Prepend a header line to an object, creating a new object by server-side compose;
2. Split a big object into several objects no larger than a given size,
   without breaking any line.
"""

import asyncio
import logging
import time
from typing import Optional

from .config import StorageSplitterConfig
from .splitting import (
    DEFAULT_LINE_BREAKER,
    DEFAULT_PROBE_WIDTH,
    DEFAULT_SPLIT_SIZE,
    LineBreakLocator,
    SplitPlan,
    compute_split_plan,
)
from .storage import ObjectStorageClient, StorageError, create_storage_client

log = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT_COPIES = 4
HEADER_OBJECT_PREFIX = "_header_"
HEADER_OUTPUT_SUFFIX = "_w_header"


class StorageUtils:
    """
    Operations on a single object of a bucket.

    Every remote call goes through ``asyncio.to_thread`` so the synchronous
    storage SDKs never block the event loop.
    """

    def __init__(
        self,
        client: ObjectStorageClient,
        file_name: str,
        *,
        split_size: int = DEFAULT_SPLIT_SIZE,
        probe_width: int = DEFAULT_PROBE_WIDTH,
        line_breaker: bytes = DEFAULT_LINE_BREAKER,
        max_concurrent_copies: int = DEFAULT_MAX_CONCURRENT_COPIES,
    ):
        if not file_name:
            raise ValueError("file_name cannot be empty")
        if split_size <= 0:
            raise ValueError("split_size must be positive")
        if max_concurrent_copies <= 0:
            raise ValueError("max_concurrent_copies must be positive")
        self.client = client
        self.file_name = file_name
        self.split_size = split_size
        self.max_concurrent_copies = max_concurrent_copies
        self.locator = LineBreakLocator(
            self.load_content,
            probe_width=probe_width,
            line_breaker=line_breaker,
            key=file_name,
        )

    @classmethod
    def from_config(
        cls,
        config: StorageSplitterConfig,
        file_name: str,
        client: Optional[ObjectStorageClient] = None,
    ) -> "StorageUtils":
        """Build an instance for ``file_name``, creating the storage client unless one is given."""
        if client is None:
            if not config.storage.bucket_name:
                raise ValueError("A bucket name is required to create a storage client")
            client = create_storage_client(config.storage.bucket_name, config.storage.type)
        return cls(
            client,
            file_name,
            split_size=config.split.split_size,
            probe_width=config.split.probe_width,
            line_breaker=config.split.line_breaker_bytes,
            max_concurrent_copies=config.split.max_concurrent_copies,
        )

    async def load_content(self, start: int = 0, end: Optional[int] = None) -> bytes:
        """
        Load the bytes between ``start`` and ``end`` (both included).

        A negative start is moved to 0. An end before the start returns no
        content without calling the store. ``end=None`` reads to the end of
        the object.
        """
        if start < 0:
            log.warning("Load 'start' before 0 [%d], move it to 0.", start)
            start = 0
        if end is not None and end < start:
            log.info("Load for [%d, %s], returns empty content.", start, end)
            return b""
        content = await asyncio.to_thread(self.client.read_range, self.file_name, start, end)
        log.debug("Get [%s] from %d to %s", self.file_name, start, end)
        return content

    async def get_file_size(self) -> int:
        info = await asyncio.to_thread(self.client.head_object, self.file_name)
        return info.size

    async def get_content_type(self, name: Optional[str] = None) -> str:
        info = await asyncio.to_thread(self.client.head_object, name or self.file_name)
        return info.content_type

    async def add_header(
        self,
        header: str,
        source_name: Optional[str] = None,
        output_name: Optional[str] = None,
    ) -> str:
        """
        Create a new object with ``header`` as its first line followed by the source content.

        Useful when an export has no usable title line (for example column
        names that the exporting system does not allow).

        Args:
            header: Header line; the line breaker is appended when missing.
            source_name: Source object, defaults to the object of this instance.
            output_name: Output object, defaults to ``<source_name>_w_header``.

        Returns:
            The output object name.
        """
        source_name = source_name or self.file_name
        output_name = output_name or source_name + HEADER_OUTPUT_SUFFIX
        header_name = f"{HEADER_OBJECT_PREFIX}{int(time.time() * 1000)}"
        line_breaker = self.locator.line_breaker.decode("utf-8")
        if not header.endswith(line_breaker):
            header = header + line_breaker

        try:
            # Both calls finish before any failure is raised.
            content_type, uploaded = await asyncio.gather(
                self.get_content_type(source_name),
                asyncio.to_thread(
                    self.client.put_object, header_name, header.encode("utf-8"), "text/plain"
                ),
                return_exceptions=True,
            )
            for result in (content_type, uploaded):
                if isinstance(result, Exception):
                    raise result
            await asyncio.to_thread(
                self.client.compose, [header_name, source_name], output_name, content_type
            )
        except (StorageError, ValueError):
            await self._discard_header(header_name)
            raise

        await asyncio.to_thread(self.client.delete_object, header_name)
        log.info("Added header to %s as %s", source_name, output_name)
        return output_name

    async def _discard_header(self, header_name: str) -> None:
        try:
            await asyncio.to_thread(self.client.delete_object, header_name)
        except StorageError as e:
            log.warning("Failed to delete temporary header object %s: %s", header_name, e)

    async def split(self, split_size: Optional[int] = None) -> list[str]:
        """
        Split the object into objects no larger than ``split_size`` bytes.

        Lines are never broken, so output objects may be slightly smaller than
        the split size. When the object already fits, its own name is returned
        and nothing is copied.

        Returns:
            Output object names in content order.
        """
        if split_size is None:
            split_size = self.split_size
        if split_size <= 0:
            raise ValueError("split_size must be positive")
        info = await asyncio.to_thread(self.client.head_object, self.file_name)
        size = info.size
        if size <= split_size:
            log.info("File %s size %d fits in split size %d, no need to split.", self.file_name, size, split_size)
            return [self.file_name]

        log.info("Get file size: %d, split size: %d", size, split_size)
        plan = await self.get_split_ranges(size, split_size)
        content_type = info.content_type
        names = plan.segment_names(self.file_name)
        semaphore = asyncio.Semaphore(self.max_concurrent_copies)

        async def copy_segment(byte_range, name: str) -> str:
            async with semaphore:
                return await self.crop_file(byte_range.start, byte_range.end, name, content_type)

        tasks = [
            asyncio.create_task(copy_segment(byte_range, name)) for byte_range, name in zip(plan, names)
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # Copies still waiting for the semaphore must not start after a failure.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        log.info("Split %s into %d files", self.file_name, len(results))
        return list(results)

    async def get_split_ranges(self, file_size: int, split_size: Optional[int] = None) -> SplitPlan:
        """Compute where to cut the object, without writing anything."""
        return await compute_split_plan(
            file_size, self.split_size if split_size is None else split_size, self.locator
        )

    async def crop_file(
        self,
        start: int,
        end: int,
        cropped_file_name: str,
        content_type: Optional[str] = None,
    ) -> str:
        """Create a new object from bytes ``[start, end]`` (both included) of this object."""
        if content_type is None:
            content_type = await self.get_content_type()
        await asyncio.to_thread(
            self.client.copy_range, self.file_name, start, end, cropped_file_name, content_type
        )
        log.info("Cropped %s [%d, %d] into %s", self.file_name, start, end, cropped_file_name)
        return cropped_file_name
