"""Adapters and special-purpose trackers."""

from __future__ import annotations

import bisect
import math
from typing import List, Optional, Tuple

from track.tolerance import Tolerance
from track.tracker import FallbackMethod, LeafTracker, SimpleTracker
from trajectory.functions import Function


class FunctionToleranceChecker(SimpleTracker):
    """Disguises a fixed function as a tracker, to reuse tracker validity checks on guesses."""

    def __init__(self, function: Function, tolerance: Tolerance) -> None:
        self._function = function
        super().__init__(max_data_points=0, required_points_for_regression=0, tolerance=tolerance)
        self.update_regression()

    def calculate_regression(self) -> Function:
        return self._function


class AngularWrapper(LeafTracker):
    """Wraps a tracker whose values are angles in [0, 2pi).

    Incoming angles are unwrapped onto the branch nearest to the current
    prediction, so the wrapped tracker sees a continuous function on R.
    """

    def __init__(self, tracker: LeafTracker) -> None:
        self.tracker = tracker

    @property
    def tolerance(self) -> Tolerance:
        return self.tracker.tolerance

    @tolerance.setter
    def tolerance(self, tolerance: Tolerance) -> None:
        self.tracker.tolerance = tolerance

    @property
    def times(self) -> Tuple[float, ...]:
        return self.tracker.times

    @property
    def values(self) -> Tuple[float, ...]:
        return self.tracker.values

    @property
    def max_data_points(self) -> int:
        return self.tracker.max_data_points

    @property
    def required_points_for_regression(self) -> int:
        return self.tracker.required_points_for_regression

    @property
    def regression(self) -> Optional[Function]:
        return self.tracker.regression

    @property
    def variance(self) -> Optional[float]:
        return self.tracker.variance

    def update_regression(self) -> None:
        self.tracker.update_regression()

    def remove_last(self) -> None:
        self.tracker.remove_last()

    def reset(self) -> None:
        self.tracker.reset()

    def linearify(self, value: float, time: float) -> float:
        """Shift an angle by multiples of 2pi to lie within pi of the expected value.

        The expected value is the regression at ``time`` or, without
        regression, the last value. Without either, ``value`` is returned as is.
        """
        regression = self.regression
        if regression is not None:
            guess = regression.at(time)
        elif self.values:
            guess = self.values[-1]
        else:
            return value

        rotations = math.floor((guess - value + math.pi) / (2 * math.pi))
        return value + rotations * 2 * math.pi

    def add(self, value: float, time: float, update_regression: bool = True) -> None:
        self.tracker.add(self.linearify(value, time), time, update_regression=update_regression)

    def is_valid(
        self,
        value: float,
        time: float,
        tolerance: Optional[Tolerance] = None,
        fallback: FallbackMethod = FallbackMethod.VALID,
    ) -> bool:
        return self.tracker.is_valid(self.linearify(value, time), time, tolerance=tolerance, fallback=fallback)


class MedianTracker:
    """Running median of a value stream.

    When ``max_data_points`` is reached, a quarter of the values is dropped
    from each end of the sorted buffer.
    """

    def __init__(self, max_data_points: int = 100) -> None:
        self._values: List[float] = []
        self._max_data_points = max_data_points
        self.median: Optional[float] = None

    @property
    def values(self) -> Tuple[float, ...]:
        return tuple(self._values)

    def add(self, value: float) -> None:
        if len(self._values) >= self._max_data_points:
            quarter = self._max_data_points // 4
            if quarter:
                del self._values[:quarter]
                del self._values[-quarter:]
            else:
                self._values.clear()

        bisect.insort(self._values, value)

        n = len(self._values)
        if n % 2 == 0:
            self.median = (self._values[n // 2] + self._values[n // 2 - 1]) / 2
        else:
            self.median = self._values[n // 2]


__all__ = ["AngularWrapper", "FunctionToleranceChecker", "MedianTracker"]
