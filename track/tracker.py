"""Leaf tracker interface and shared default implementation.

A leaf tracker follows ONE closed-form function (constant, line, parabola)
over a bounded window of (time, value) pairs. Piecewise behaviour is handled
by the composite tracker, which owns one leaf tracker per segment.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from enum import Enum
from typing import Deque, Optional, Tuple

import numpy as np

from track.tolerance import Tolerance
from trajectory.functions import Function


class FallbackMethod(str, Enum):
    """What ``is_valid`` answers when no regression is available."""

    VALID = "valid"
    INVALID = "invalid"
    USE_LAST_VALUE = "use_last_value"


class LeafTracker(ABC):
    tolerance: Tolerance

    @property
    @abstractmethod
    def times(self) -> Tuple[float, ...]:
        raise NotImplementedError

    @property
    @abstractmethod
    def values(self) -> Tuple[float, ...]:
        raise NotImplementedError

    @property
    @abstractmethod
    def max_data_points(self) -> int:
        raise NotImplementedError

    @property
    @abstractmethod
    def required_points_for_regression(self) -> int:
        raise NotImplementedError

    @property
    @abstractmethod
    def regression(self) -> Optional[Function]:
        raise NotImplementedError

    @property
    def has_regression(self) -> bool:
        return self.regression is not None

    @property
    @abstractmethod
    def variance(self) -> Optional[float]:
        raise NotImplementedError

    @abstractmethod
    def add(self, value: float, time: float, update_regression: bool = True) -> None:
        """Add a data point, dropping the oldest one when over capacity."""

    @abstractmethod
    def update_regression(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_last(self) -> None:
        """Remove the most recent data point and update the regression."""

    @abstractmethod
    def reset(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def is_valid(
        self,
        value: float,
        time: float,
        tolerance: Optional[Tolerance] = None,
        fallback: FallbackMethod = FallbackMethod.VALID,
    ) -> bool:
        """Check a value against the regression at ``time``.

        Uses ``tolerance`` instead of ``self.tolerance`` if given.
        """

    def __len__(self) -> int:
        return len(self.times)


class SimpleTracker(LeafTracker):
    """Default leaf tracker; subclasses only provide ``calculate_regression``."""

    def __init__(self, max_data_points: int, required_points_for_regression: int, tolerance: Tolerance) -> None:
        self._times: Deque[float] = deque(maxlen=max_data_points)
        self._values: Deque[float] = deque(maxlen=max_data_points)
        self._max_data_points = max_data_points
        self._required_points_for_regression = required_points_for_regression
        self._regression: Optional[Function] = None
        self.tolerance = tolerance

    @property
    def times(self) -> Tuple[float, ...]:
        return tuple(self._times)

    @property
    def values(self) -> Tuple[float, ...]:
        return tuple(self._values)

    @property
    def max_data_points(self) -> int:
        return self._max_data_points

    @property
    def required_points_for_regression(self) -> int:
        return self._required_points_for_regression

    @property
    def regression(self) -> Optional[Function]:
        return self._regression

    def add(self, value: float, time: float, update_regression: bool = True) -> None:
        self._times.append(time)
        self._values.append(value)
        if update_regression:
            self.update_regression()

    def update_regression(self) -> None:
        if len(set(self._times)) >= self._required_points_for_regression:
            self._regression = self.calculate_regression()
        else:
            self._regression = None

    def remove_last(self) -> None:
        self._times.pop()
        self._values.pop()
        self.update_regression()

    def reset(self) -> None:
        self._times.clear()
        self._values.clear()
        self.update_regression()

    @property
    def variance(self) -> Optional[float]:
        """Mean squared residual of the data points against the regression."""
        if self._regression is None or not self._times:
            return None
        expected = np.array([self._regression.at(t) for t in self._times])
        return float(np.mean((expected - np.array(self._values)) ** 2))

    def is_valid(
        self,
        value: float,
        time: float,
        tolerance: Optional[Tolerance] = None,
        fallback: FallbackMethod = FallbackMethod.VALID,
    ) -> bool:
        if tolerance is None:
            tolerance = self.tolerance
        f = self._regression
        if f is None:
            if fallback == FallbackMethod.VALID:
                return True
            if fallback == FallbackMethod.INVALID:
                return False
            return self._is_valid_using_last_value(value, tolerance)

        return tolerance.allows(f, value, time)

    def _is_valid_using_last_value(self, value: float, tolerance: Tolerance) -> bool:
        if not self._values:
            return True
        last = self._values[-1]
        return abs(last - value) <= tolerance.band(last)

    @abstractmethod
    def calculate_regression(self) -> Optional[Function]:
        """Regression for the current points.

        Only called once at least ``required_points_for_regression`` distinct
        times are available.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(points={len(self._times)}, regression={self._regression!r})"


__all__ = ["FallbackMethod", "LeafTracker", "SimpleTracker"]
