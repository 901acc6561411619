"""
Core value types shared by the token stream and the rules.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScanRange:
    """A half-open window ``[start, end)`` of token positions."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("start must be non-negative")
        if self.end < self.start:
            raise ValueError("end must be >= start")

    @property
    def length(self) -> int:
        """Number of positions in this window."""
        return self.end - self.start

    def contains(self, position: int) -> bool:
        """Check if a position falls inside this window (end exclusive)."""
        return self.start <= position < self.end
