"""Shared fixtures: small concrete composite trackers."""

from __future__ import annotations

from typing import List, Optional

import pytest

from contracts import DecisionCharacteristics
from track.composite import CompositeTracker, Segment
from track.poly_trackers import LinearTracker
from track.tolerance import Absolute
from trajectory.functions import LinearFunction


class FixedGuessTracker(CompositeTracker[LinearTracker]):
    """Linear segments; every new segment is guessed to follow ``next_line``."""

    def __init__(self, next_line: Optional[LinearFunction], *args, **kwargs) -> None:
        self.next_line = next_line
        self.finalize_calls = 0
        self.updated_segments: List[int] = []
        super().__init__(*args, **kwargs)

    def tracker_for_next_segment(self) -> LinearTracker:
        return LinearTracker(tolerance_points=1)

    def guess_for_next_segment(self, time: float, value: float) -> Optional[LinearFunction]:
        return self.next_line

    def current_segment_updated(self, segment: Segment) -> Optional[float]:
        self.updated_segments.append(segment.index)
        times = segment.tracker.times
        return times[0] if times else None

    def will_finalize_and_advance(self) -> None:
        self.finalize_calls += 1


class ReflectingTracker(CompositeTracker[LinearTracker]):
    """Value moving with constant speed that flips direction at every segment switch."""

    def __init__(self, speed: float, *args, **kwargs) -> None:
        self.speed = speed
        super().__init__(*args, **kwargs)

    def tracker_for_next_segment(self) -> LinearTracker:
        return LinearTracker(tolerance_points=1)

    def guess_for_next_segment(self, time: float, value: float) -> LinearFunction:
        next_slope = -self.speed if self.current_segment_index % 2 == 0 else self.speed
        return LinearFunction.through_point(next_slope, time, value)

    def current_segment_updated(self, segment: Segment) -> Optional[float]:
        if not self.finalized_segments:
            return None
        previous = self.finalized_segments[-1].tracker.regression
        current = segment.tracker.regression
        if previous is None or current is None:
            return None
        return current.intersection(previous)

    def will_finalize_and_advance(self) -> None:
        pass


def feed(tracker: CompositeTracker, points) -> List[bool]:
    """integrity_check + add for every (time, value) pair; returns the check results."""
    results = []
    for time, value in points:
        valid = tracker.integrity_check(value, time)
        if valid:
            tracker.add(value, time)
        results.append(valid)
    return results


def bounce_stream():
    """Rising until t=10, falling until t=19, rising again."""
    points = [(float(t), float(t)) for t in range(0, 11)]
    points += [(float(t), float(20 - t)) for t in range(11, 20)]
    points += [(float(t), float(t - 18)) for t in range(20, 22)]
    return points


@pytest.fixture
def fixed_guess_tracker() -> FixedGuessTracker:
    return FixedGuessTracker(
        LinearFunction(slope=-3.0, intercept=1.1),
        tolerance=Absolute(0.1),
        decision_characteristics=DecisionCharacteristics(3, 1),
        name="fixed",
    )


@pytest.fixture
def reflecting_tracker() -> ReflectingTracker:
    return ReflectingTracker(
        1.0,
        tolerance=Absolute(0.05),
        decision_characteristics=DecisionCharacteristics(2, 0),
        name="reflecting",
    )
