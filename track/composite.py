"""Composite tracker: follows a piecewise defined function segment by segment.

Each segment is followed by its own leaf tracker. Points that do not match
the current segment but match the guess corridor for the next segment are
collected in a sliding decision window; once enough of them arrive, the
current segment is finalized and a new one is seeded with them.

Subclasses implement four hooks:

- ``tracker_for_next_segment``: create an empty leaf tracker for a new segment
- ``guess_for_next_segment``: the function a segment would follow if it began
  at a given split point
- ``current_segment_updated``: react to new points, return the supposed start time
- ``will_finalize_and_advance``: called exactly once per segment before it is finalized

Usage:
    tracker = MyTracker(tolerance=Absolute(0.1), decision_characteristics=...)
    if tracker.integrity_check(value, time):
        tracker.add(value, time)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, List, Optional, Tuple, TypeVar

from contracts import DataPoint, DecisionCharacteristics, SegmentMatch, SimpleRange
from exceptions import MonotonicityError
from log_config.logger import get_logger
from track.decision_window import SlidingDecisionWindow
from track.diagnostics import CompositeTrackerDataSet, PointClassification, SegmentDataPoint
from track.events import EventBus, SegmentAdvancedEvent, SegmentStartTimeUpdatedEvent
from track.guesses import Guesses, build_next_segment_guesses
from track.monotonicity import Direction, MonotonicityChecker
from track.tolerance import Tolerance
from track.tracker import FallbackMethod, LeafTracker
from trajectory.functions import Function

logger = get_logger(__name__)

T = TypeVar("T", bound=LeafTracker)


@dataclass
class Segment(Generic[T]):
    """The current segment or a finalized one.

    ``guesses`` are inherited from the previous segment and stand in for the
    regression while the tracker has too few points. ``supposed_start_time``
    is whatever ``current_segment_updated`` returned last.
    """

    index: int
    tracker: T
    guesses: Optional[Guesses] = None
    supposed_start_time: Optional[float] = None


class CompositeTracker(ABC, Generic[T]):
    def __init__(
        self,
        tolerance: Tolerance,
        decision_characteristics: DecisionCharacteristics,
        time_direction: Direction = Direction.BOTH,
        event_bus: Optional[EventBus] = None,
        name: Optional[str] = None,
    ) -> None:
        self.tolerance = tolerance
        self.name = name or type(self).__name__

        # Every point not matching the current segment counts as next-segment point; no guesses are made
        self.assume_no_invalid_data_points = False

        self.event_bus = event_bus or EventBus()
        self._window = SlidingDecisionWindow(
            decision_characteristics,
            on_flush=self._flush_to_current_segment,
            on_advance=self._advance_to_next_segment,
        )
        self._monotonicity = MonotonicityChecker(direction=time_direction, strict=True)
        self._data_set = CompositeTrackerDataSet()
        self._finalized: List[Segment[T]] = []
        self._most_recent_guesses: Optional[Guesses] = None

        tracker = self.tracker_for_next_segment()
        tracker.tolerance = tolerance
        self._current: Segment[T] = Segment(index=0, tracker=tracker)

    # Queries

    @property
    def current_segment(self) -> Segment[T]:
        return self._current

    @property
    def current_segment_index(self) -> int:
        return self._current.index

    @property
    def finalized_segments(self) -> Tuple[Segment[T], ...]:
        return tuple(self._finalized)

    @property
    def all_segments(self) -> Tuple[Segment[T], ...]:
        return tuple(self._finalized) + (self._current,)

    @property
    def most_recent_guesses(self) -> Optional[Guesses]:
        """Guesses for the next segment, as refreshed by the last check of a point."""
        return self._most_recent_guesses

    @property
    def decision_in_progress(self) -> bool:
        return self._window.is_deciding

    @property
    def decision_characteristics(self) -> DecisionCharacteristics:
        return self._window.characteristics

    def data_set(self, most_recent_segments: Optional[int] = None) -> List[SegmentDataPoint]:
        """All seen points of the most recent segments, plus the points currently being decided on."""
        if most_recent_segments is None:
            first = 0
        else:
            first = max(0, self._current.index - most_recent_segments + 1)

        points = self._data_set.points_for_segments(first)
        points.extend(
            SegmentDataPoint(
                segment_index=self._current.index,
                time=tagged.point.time,
                value=tagged.point.value,
                classification=PointClassification.DECIDING,
            )
            for tagged in self._window.buffered_points
        )
        return points

    # Input

    def integrity_check(self, value: float, time: float) -> bool:
        """Check whether a point may be added. Call this before ``add``.

        Raises:
            MonotonicityError: If ``time`` breaks the monotone time order
        """
        if not self._monotonicity.verify(time):
            previous = self._monotonicity.last_value
            direction = self._monotonicity.direction.value
            message = (
                f"{self.name}: time not in monotone order "
                f"(attempted {time}, previous {previous}, direction {direction})"
            )
            logger.error(message)
            raise MonotonicityError(message, attempted=time, previous=previous, direction=direction)

        if self._current_segment_matches(value, time):
            return True
        if self._next_segment_matches(value, time):
            return True

        self._data_set.add(value, time, self._current.index, PointClassification.INVALID)
        logger.debug(f"{self.name}: rejected ({time}, {value}) in segment {self._current.index}")
        return False

    def add(self, value: float, time: float) -> None:
        """Add a point which passed ``integrity_check``."""
        point = DataPoint(time=time, value=value)

        if self._current_segment_matches(value, time):
            self._window.add(point, SegmentMatch.CURRENT)
        elif self._next_segment_matches(value, time):
            self._window.add(point, SegmentMatch.NEXT)
        else:
            logger.warning(f"{self.name}: ignoring ({time}, {value}), it matches neither the current nor the next segment")

    # Matching

    def _current_segment_matches(self, value: float, time: float) -> bool:
        tracker = self._current.tracker
        tracker.tolerance = self.tolerance
        self._most_recent_guesses = None

        if tracker.regression is not None:
            return tracker.is_valid(value, time, fallback=FallbackMethod.VALID)

        if self._current.guesses is not None:
            return self._current.guesses.matches(value, time, self.tolerance)

        # Too few points
        return True

    def _next_segment_matches(self, value: float, time: float) -> bool:
        if self.assume_no_invalid_data_points:
            return True

        self._update_next_segment_guesses(time)
        if self._most_recent_guesses is None:
            return False
        return self._most_recent_guesses.matches(value, time, self.tolerance)

    def _update_next_segment_guesses(self, time: float) -> None:
        self._most_recent_guesses = None

        tracker = self._current.tracker
        times = tracker.times
        if not times:
            return

        # While a decision runs, the switch happened before the point that initiated it
        initiator = self._window.decision_initiator
        time_b = initiator.time if initiator is not None else time

        functions: Tuple[Function, ...]
        if tracker.regression is not None:
            functions = (tracker.regression,)
        elif self._current.guesses is not None:
            functions = self._current.guesses.all
        else:
            # Only the very first segment has neither
            return

        self._most_recent_guesses = build_next_segment_guesses(
            times[-1],
            time_b,
            functions,
            adapt_range=self.adapted_guess_range,
            guess_for_split=self.guess_for_next_segment,
        )

    # Decision window callbacks

    def _flush_to_current_segment(self, points: List[DataPoint], dropped: List[DataPoint]) -> None:
        segment = self._current
        for point in points:
            segment.tracker.add(point.value, point.time, update_regression=False)
            self._data_set.add(point.value, point.time, segment.index, PointClassification.VALID)
        for point in dropped:
            self._data_set.add(point.value, point.time, segment.index, PointClassification.DISCARDED)

        segment.tracker.update_regression()
        self._update_supposed_start_time(self.current_segment_updated(segment))

    def _advance_to_next_segment(self, points: List[DataPoint], discarded: List[DataPoint]) -> None:
        old = self._current
        for point in discarded:
            self._data_set.add(point.value, point.time, old.index, PointClassification.DISCARDED)

        self.will_finalize_and_advance()
        self._finalized.append(old)

        old_times = old.tracker.times
        start_time_guess = (old_times[-1] + points[0].time) / 2 if old_times else None
        logger.info(
            f"{self.name}: advancing from segment {old.index} to {old.index + 1} "
            f"(start near {start_time_guess}, {len(points)} seed points, {len(discarded)} discarded)"
        )
        self.event_bus.publish(
            SegmentAdvancedEvent(
                tracker_name=self.name,
                finalized_index=old.index,
                new_index=old.index + 1,
                start_time_guess=start_time_guess,
            )
        )

        tracker = self.tracker_for_next_segment()
        tracker.tolerance = self.tolerance
        for point in points:
            tracker.add(point.value, point.time, update_regression=False)
        tracker.update_regression()

        self._current = Segment(index=old.index + 1, tracker=tracker, guesses=self._most_recent_guesses)
        for point in points:
            self._data_set.add(point.value, point.time, self._current.index, PointClassification.VALID)

        self._update_supposed_start_time(self.current_segment_updated(self._current))
        self._most_recent_guesses = None

    def _update_supposed_start_time(self, start_time: Optional[float]) -> None:
        self._current.supposed_start_time = start_time
        self.event_bus.publish(
            SegmentStartTimeUpdatedEvent(
                tracker_name=self.name,
                segment_index=self._current.index,
                start_time=start_time,
            )
        )

    # Overridable

    def guess_range(self, time_span: SimpleRange, midpoint: float) -> SimpleRange:
        """Where inside ``time_span`` the next segment may have started, relative to the span.

        0 is the last point of the current segment, 1 the most recent point.
        """
        return SimpleRange(lower=0.0, upper=1.0)

    def adapted_guess_range(self, proposed: SimpleRange) -> SimpleRange:
        """Absolute time range in which guesses for the next segment are split off.

        Keep the direction of ``proposed``; it follows the direction of time input.
        """
        return proposed.denormalize(self.guess_range(proposed, proposed.midpoint))

    # Hooks

    @abstractmethod
    def current_segment_updated(self, segment: Segment[T]) -> Optional[float]:
        """Called whenever points were added to the current segment, at least once per segment.

        Returns:
            The time the segment supposedly started at, or None if unknown
        """

    @abstractmethod
    def will_finalize_and_advance(self) -> None:
        """Called exactly once per segment, right before it is finalized."""

    @abstractmethod
    def tracker_for_next_segment(self) -> T:
        """Create an empty leaf tracker; its tolerance is overwritten with ``self.tolerance``.

        Also called from ``__init__`` for the first segment.
        """

    @abstractmethod
    def guess_for_next_segment(self, time: float, value: float) -> Optional[Function]:
        """The function the next segment follows if it starts at (time, value); None if unknown."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, segment={self._current.index}, tracker={self._current.tracker!r})"


__all__ = ["CompositeTracker", "Segment"]
