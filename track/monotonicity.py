"""Checks that an incoming value stream is (strictly) monotone."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Direction(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    BOTH = "both"  # Decided by the first inequality, then fixed


class MonotonicityChecker:
    def __init__(self, direction: Direction = Direction.BOTH, strict: bool = True) -> None:
        self._direction = direction
        self._strict = strict
        self._last_value: Optional[float] = None

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def last_value(self) -> Optional[float]:
        return self._last_value

    def verify(self, value: float, still_update_on_failure: bool = False) -> bool:
        """Check if the value continues the monotone sequence and store it as most recent value.

        On failure the stored value is only replaced when ``still_update_on_failure`` is set.
        """
        if self._last_value is None:
            self._last_value = value
            return True

        last = self._last_value
        if self._direction == Direction.INCREASING:
            result = value > last if self._strict else value >= last
        elif self._direction == Direction.DECREASING:
            result = value < last if self._strict else value <= last
        else:
            if value == last:
                return not self._strict
            self._direction = Direction.INCREASING if value > last else Direction.DECREASING
            result = True

        if result or still_update_on_failure:
            self._last_value = value
        return result
