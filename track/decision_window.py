"""Sliding window collecting points while a segment switch is being decided.

Once a point matches the next segment, it and the following points are
buffered here. When enough points match the next segment, the switch is
made; when too many match the current segment in between, the decision is
(partially) cancelled and the oldest points are flushed back to the current
segment.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from contracts import DataPoint, DecisionCharacteristics, SegmentMatch, TaggedDataPoint
from exceptions import TrackerConfigurationError
from log_config.logger import get_logger

logger = get_logger(__name__)

# (points for the current segment, dropped points that matched the next segment)
FlushCallback = Callable[[List[DataPoint], List[DataPoint]], None]
# (seed points for the next segment, discarded points that matched the current segment)
AdvanceCallback = Callable[[List[DataPoint], List[DataPoint]], None]


class SlidingDecisionWindow:
    def __init__(
        self,
        characteristics: DecisionCharacteristics,
        on_flush: FlushCallback,
        on_advance: AdvanceCallback,
    ) -> None:
        if not characteristics.is_valid:
            logger.error(f"Invalid decision characteristics: {characteristics}")
            raise TrackerConfigurationError(f"Invalid decision characteristics: {characteristics}")

        self._characteristics = characteristics
        self._on_flush = on_flush
        self._on_advance = on_advance

        # Oldest first
        self._points: List[TaggedDataPoint] = []

    @property
    def characteristics(self) -> DecisionCharacteristics:
        return self._characteristics

    @property
    def is_deciding(self) -> bool:
        return bool(self._points)

    @property
    def decision_initiator(self) -> Optional[DataPoint]:
        """The point that started the running decision, i.e. the oldest buffered point."""
        return self._points[0].point if self._points else None

    @property
    def buffered_points(self) -> Tuple[TaggedDataPoint, ...]:
        return tuple(self._points)

    def clear(self) -> None:
        self._points.clear()

    def add(self, point: DataPoint, matching: SegmentMatch) -> None:
        """Add a point; points must arrive in monotone time order.

        A decision is only initiated by a point matching the next segment;
        a current-segment point arriving while idle is flushed immediately.
        """
        if not self._points and matching == SegmentMatch.CURRENT:
            self._on_flush([point], [])
            return

        self._points.append(TaggedDataPoint(point=point, matching=matching))
        self._make_decision_if_possible()

    def _make_decision_if_possible(self) -> None:
        matching_next = [p.point for p in self._points if p.matching == SegmentMatch.NEXT]
        matching_current = [p.point for p in self._points if p.matching == SegmentMatch.CURRENT]

        if len(matching_next) == self._characteristics.points_matching_next_segment:
            self._points.clear()
            logger.debug(
                f"Decision window advancing with {len(matching_next)} points, "
                f"{len(matching_current)} discarded"
            )
            self._on_advance(matching_next, matching_current)
            return

        if len(matching_current) > self._characteristics.max_intermediate_points_matching_current_segment:
            self._cancel()

    def _cancel(self) -> None:
        """Drop the leading next-points and flush the following run of current-points.

        Remaining points stay buffered; they start with a next-point and may
        still complete a decision.
        """
        index = 0
        while index < len(self._points) and self._points[index].matching == SegmentMatch.NEXT:
            index += 1
        dropped = [p.point for p in self._points[:index]]

        end = index
        while end < len(self._points) and self._points[end].matching == SegmentMatch.CURRENT:
            end += 1
        flushed = [p.point for p in self._points[index:end]]

        del self._points[:end]
        logger.debug(
            f"Decision window cancelled: {len(dropped)} dropped, {len(flushed)} flushed, "
            f"{len(self._points)} still buffered"
        )
        self._on_flush(flushed, dropped)


__all__ = ["AdvanceCallback", "FlushCallback", "SlidingDecisionWindow"]
