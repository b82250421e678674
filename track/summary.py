"""Evaluation helpers for composite trackers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from log_config.logger import get_logger
from track.composite import CompositeTracker, Segment

logger = get_logger(__name__)


@dataclass(frozen=True)
class SegmentSummary:
    index: int
    points: int
    start_time: Optional[float]
    end_time: Optional[float]
    supposed_start_time: Optional[float]
    has_regression: bool
    has_guesses: bool
    rmse: Optional[float]


def summarize_segment(segment: Segment) -> SegmentSummary:
    tracker = segment.tracker
    times = tracker.times
    return SegmentSummary(
        index=segment.index,
        points=len(times),
        start_time=times[0] if times else None,
        end_time=times[-1] if times else None,
        supposed_start_time=segment.supposed_start_time,
        has_regression=tracker.regression is not None,
        has_guesses=segment.guesses is not None,
        rmse=_rmse(segment),
    )


def summarize(tracker: CompositeTracker) -> List[SegmentSummary]:
    return [summarize_segment(segment) for segment in tracker.all_segments]


def log_segment_summary(tracker: CompositeTracker) -> List[SegmentSummary]:
    summaries = summarize(tracker)
    for summary in summaries:
        logger.info(
            f"composite.segment_summary tracker={tracker.name} index={summary.index} "
            f"points={summary.points} start={summary.start_time} end={summary.end_time} "
            f"supposed_start={summary.supposed_start_time} "
            f"rmse={f'{summary.rmse:.4f}' if summary.rmse is not None else 'n/a'}"
        )
    return summaries


def _rmse(segment: Segment) -> Optional[float]:
    tracker = segment.tracker
    regression = tracker.regression
    if regression is None or not tracker.times:
        return None
    predicted = np.array([regression.at(t) for t in tracker.times])
    residuals = predicted - np.array(tracker.values)
    return float(np.sqrt(np.mean(residuals * residuals)))


__all__ = ["SegmentSummary", "log_segment_summary", "summarize", "summarize_segment"]
