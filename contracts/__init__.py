"""Shared data contracts for segment tracking."""

from .types import (
    DataPoint,
    DecisionCharacteristics,
    SegmentMatch,
    SimpleRange,
    TaggedDataPoint,
)

__all__ = [
    "DataPoint",
    "DecisionCharacteristics",
    "SegmentMatch",
    "SimpleRange",
    "TaggedDataPoint",
]
