"""Line-safe split planning for remote text objects."""

from .exceptions import NoLineBreakFoundError, SplitError
from .line_locator import DEFAULT_LINE_BREAKER, DEFAULT_PROBE_WIDTH, LineBreakLocator
from .plan import DEFAULT_SPLIT_SIZE, ByteRange, SplitPlan, compute_split_plan, segment_name

__all__ = [
    "ByteRange",
    "SplitPlan",
    "LineBreakLocator",
    "compute_split_plan",
    "segment_name",
    "SplitError",
    "NoLineBreakFoundError",
    "DEFAULT_SPLIT_SIZE",
    "DEFAULT_PROBE_WIDTH",
    "DEFAULT_LINE_BREAKER",
]
