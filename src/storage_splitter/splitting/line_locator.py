"""Backward search for the last line break before a split point."""

import logging
from typing import Awaitable, Callable

from .exceptions import NoLineBreakFoundError

log = logging.getLogger(__name__)

# How many bytes to look back per probe when searching for a line break.
DEFAULT_PROBE_WIDTH = 1000
DEFAULT_LINE_BREAKER = b"\n"

RangeReader = Callable[[int, int], Awaitable[bytes]]


class LineBreakLocator:
    """
    Finds the offset of the last line break inside a byte window of a remote object.

    Only small windows of ``probe_width`` bytes are read, starting right before
    the upper bound and stepping back towards the lower bound until a line
    break shows up. Most text files have lines far shorter than the probe
    width, so the common case costs a single small read.
    """

    def __init__(
        self,
        read_range: RangeReader,
        probe_width: int = DEFAULT_PROBE_WIDTH,
        line_breaker: bytes = DEFAULT_LINE_BREAKER,
        key: str | None = None,
    ):
        """
        Args:
            read_range: Async callable returning the bytes of ``[start, end]`` (inclusive).
            probe_width: Number of bytes read per probe.
            line_breaker: The single-byte line separator.
            key: Object name, only used in log messages and errors.
        """
        if probe_width <= 0:
            raise ValueError("probe_width must be positive")
        if len(line_breaker) != 1:
            raise ValueError("line_breaker must be exactly one byte")
        self._read_range = read_range
        self.probe_width = probe_width
        self.line_breaker = line_breaker
        self._key = key

    async def find_last_break_before(self, lower_bound: int, upper_bound: int) -> int:
        """
        Return the greatest offset in ``[lower_bound, upper_bound]`` holding a line break.

        Raises:
            NoLineBreakFoundError: if the whole window contains no line break.
        """
        if lower_bound < 0 or upper_bound < lower_bound:
            raise ValueError(f"Invalid search window [{lower_bound}, {upper_bound}]")

        window_end = upper_bound
        checkpoint = max(lower_bound, upper_bound - self.probe_width + 1)
        while True:
            content = await self._read_range(checkpoint, window_end)
            index = content.rfind(self.line_breaker)
            if index >= 0:
                return checkpoint + index
            if checkpoint <= lower_bound:
                break
            # [checkpoint, upper_bound] is known to be break-free; probe the slice in front of it.
            window_end = checkpoint - 1
            checkpoint = max(lower_bound, checkpoint - self.probe_width)

        log.error(
            "No line breaker in %s from %d to %d",
            self._key or "object",
            lower_bound,
            upper_bound,
        )
        raise NoLineBreakFoundError(lower_bound, upper_bound, key=self._key)
