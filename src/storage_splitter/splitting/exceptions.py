"""Exceptions raised while planning a line-safe split."""


class SplitError(Exception):
    """Base exception for split planning failures."""


class NoLineBreakFoundError(SplitError):
    """Raised when a byte window holds no line break, i.e. one line is longer than the split size."""

    def __init__(self, lower_bound: int, upper_bound: int, key: str | None = None):
        self.lower_bound = lower_bound
        self.upper_bound = upper_bound
        self.key = key
        location = f" in {key}" if key else ""
        super().__init__(f"No line break found{location} between bytes {lower_bound} and {upper_bound}")
