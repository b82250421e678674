"""Side table of every point a composite tracker has seen, for plotting and debugging."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterator, List, Optional


class PointClassification(str, Enum):
    VALID = "valid"            # Added to the segment's tracker
    INVALID = "invalid"        # Failed the integrity check
    DISCARDED = "discarded"    # Left out by a decision (advance or cancel)
    DECIDING = "deciding"      # Currently buffered in the decision window


@dataclass(frozen=True)
class SegmentDataPoint:
    segment_index: int
    time: float
    value: float
    classification: PointClassification


class CompositeTrackerDataSet:
    def __init__(self, max_points: int = 10_000) -> None:
        self._points: Deque[SegmentDataPoint] = deque(maxlen=max_points)

    def add(self, value: float, time: float, segment_index: int, classification: PointClassification) -> None:
        self._points.append(
            SegmentDataPoint(
                segment_index=segment_index,
                time=time,
                value=value,
                classification=classification,
            )
        )

    def points_for_segments(self, first: int, last: Optional[int] = None) -> List[SegmentDataPoint]:
        """Points whose segment index lies in [first, last] (``last`` open if None)."""
        return [
            p for p in self._points
            if p.segment_index >= first and (last is None or p.segment_index <= last)
        ]

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[SegmentDataPoint]:
        return iter(self._points)
