"""
Split plans: contiguous byte ranges that cut an object on line boundaries.

Planning only reads through a LineBreakLocator, so it can be exercised
against any async range reader without touching a real store.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

from .line_locator import LineBreakLocator

log = logging.getLogger(__name__)

DEFAULT_SPLIT_SIZE = 999 * 1000 * 1000


@dataclass(frozen=True)
class ByteRange:
    """Inclusive ``[start, end]`` byte range of one output segment."""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid byte range [{self.start}, {self.end}]")

    @property
    def length(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class SplitPlan:
    """Ordered ranges covering ``[0, source_size - 1]`` exactly once."""

    source_size: int
    ranges: tuple[ByteRange, ...]

    def __post_init__(self):
        if self.source_size == 0:
            if self.ranges:
                raise ValueError("An empty object has no ranges")
            return
        if not self.ranges or self.ranges[0].start != 0:
            raise ValueError("A split plan must start at byte 0")
        for previous, current in zip(self.ranges, self.ranges[1:]):
            if previous.end + 1 != current.start:
                raise ValueError(
                    f"Ranges [{previous.start}, {previous.end}] and "
                    f"[{current.start}, {current.end}] are not contiguous"
                )
        if self.ranges[-1].end != self.source_size - 1:
            raise ValueError(f"A split plan must end at byte {self.source_size - 1}")

    def __len__(self) -> int:
        return len(self.ranges)

    def __iter__(self) -> Iterator[ByteRange]:
        return iter(self.ranges)

    def __getitem__(self, index: int) -> ByteRange:
        return self.ranges[index]

    def segment_names(self, name: str) -> list[str]:
        """Names of the output objects, ``<name>-<index>-of-<count>``."""
        return [segment_name(name, index, len(self.ranges)) for index in range(len(self.ranges))]


def segment_name(name: str, index: int, count: int) -> str:
    return f"{name}-{index}-of-{count}"


async def compute_split_plan(
    source_size: int,
    split_size: int,
    locator: LineBreakLocator,
) -> SplitPlan:
    """
    Build the split plan for an object of ``source_size`` bytes.

    Each segment greedily extends ``split_size`` bytes from its start and is
    then pulled back to the last line break inside it. The following segment
    starts right after that break. The last segment takes whatever is left.

    Raises:
        ValueError: if split_size is not positive.
        NoLineBreakFoundError: if a single line is longer than split_size.
    """
    if split_size <= 0:
        raise ValueError("split_size must be positive")
    if source_size < 0:
        raise ValueError("source_size cannot be negative")
    if source_size == 0:
        return SplitPlan(source_size=0, ranges=())

    ranges: list[ByteRange] = []
    index = 0
    while index + split_size < source_size:
        naive_end = index + split_size - 1
        real_end = await locator.find_last_break_before(index, naive_end)
        ranges.append(ByteRange(index, real_end))
        log.debug("Planned segment %d: [%d, %d]", len(ranges) - 1, index, real_end)
        index = real_end + 1
    ranges.append(ByteRange(index, source_size - 1))

    return SplitPlan(source_size=source_size, ranges=tuple(ranges))
