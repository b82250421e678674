"""Core data contracts shared by the trackers, guess builder and decision window."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class DataPoint:
    time: float
    value: float


class SegmentMatch(str, Enum):
    """Which segment a buffered data point was classified into."""

    CURRENT = "current"
    NEXT = "next"


@dataclass(frozen=True)
class TaggedDataPoint:
    point: DataPoint
    matching: SegmentMatch


@dataclass(frozen=True)
class SimpleRange:
    """A closed interval [lower, upper].

    The range may be reversed (lower > upper) when time runs backwards; it
    then still describes the same interval, just in the direction of input.
    """

    lower: float
    upper: float

    @property
    def size(self) -> float:
        return self.upper - self.lower

    @property
    def midpoint(self) -> float:
        return (self.lower + self.upper) / 2

    @property
    def is_single_point(self) -> bool:
        return self.lower == self.upper

    @property
    def is_regular(self) -> bool:
        return self.lower <= self.upper

    def contains(self, value: float) -> bool:
        low, high = min(self.lower, self.upper), max(self.lower, self.upper)
        return low <= value <= high

    def denormalize(self, relative: SimpleRange) -> SimpleRange:
        """Map a range given relative to this one (0 = lower, 1 = upper) onto absolute values."""
        return SimpleRange(
            lower=self.lower + relative.lower * self.size,
            upper=self.lower + relative.upper * self.size,
        )


@dataclass(frozen=True)
class DecisionCharacteristics:
    """Describes how and when a segment advancement decision is made.

    ``points_matching_next_segment`` points must match the next segment
    (must be positive). While collecting them, at most
    ``max_intermediate_points_matching_current_segment`` points may match
    the current segment; one more cancels the decision (partially).
    """

    points_matching_next_segment: int
    max_intermediate_points_matching_current_segment: int

    @property
    def is_valid(self) -> bool:
        return (
            self.points_matching_next_segment >= 1
            and self.max_intermediate_points_matching_current_segment >= 0
        )
