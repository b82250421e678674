"""Tolerance model: admissible deviation between a prediction and an observation.

Three variants exist:

- ``Absolute(delta)``: vertical band of half-width ``delta``.
- ``Relative(ratio)``: vertical band of half-width ``ratio * |predicted|``.
- ``Absolute2D(dy, dx)``: ellipse with radii ``(dx, dy)`` around the observed
  point. The point is valid if the ellipse touches the function graph, i.e.
  allowed deviations are ``(dx, 0)``, ``(0, dy)``, ``(0.7 dx, 0.7 dy)``, ...
  Used for angular trackers where time jitter and value noise have different
  natural units.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.optimize import minimize_scalar

from exceptions import TrackerConfigurationError
from trajectory.functions import Function, Polynomial


class Tolerance(ABC):
    @abstractmethod
    def is_within(self, predicted: float, actual: float, tangent_slope: Optional[float] = None) -> bool:
        """Pure check of an observed value against a predicted value."""

    @abstractmethod
    def band(self, predicted: float) -> float:
        """Half-width of the vertical tolerance band around ``predicted``."""

    def allows(self, function: Function, value: float, time: float) -> bool:
        """Check (time, value) against the graph of ``function``."""
        return self.is_within(function.at(time), value)


@dataclass(frozen=True)
class Absolute(Tolerance):
    delta: float

    def __post_init__(self) -> None:
        if self.delta < 0:
            raise TrackerConfigurationError(f"Absolute tolerance must be non-negative, got {self.delta}")

    def is_within(self, predicted: float, actual: float, tangent_slope: Optional[float] = None) -> bool:
        return abs(predicted - actual) <= self.delta

    def band(self, predicted: float) -> float:
        return self.delta


@dataclass(frozen=True)
class Relative(Tolerance):
    ratio: float

    def __post_init__(self) -> None:
        if self.ratio < 0:
            raise TrackerConfigurationError(f"Relative tolerance must be non-negative, got {self.ratio}")

    def is_within(self, predicted: float, actual: float, tangent_slope: Optional[float] = None) -> bool:
        return abs(predicted - actual) <= self.ratio * abs(predicted)

    def band(self, predicted: float) -> float:
        return self.ratio * abs(predicted)


@dataclass(frozen=True)
class Absolute2D(Tolerance):
    dy: float
    dx: float

    def __post_init__(self) -> None:
        if self.dy <= 0 or self.dx <= 0:
            raise TrackerConfigurationError(f"Absolute2D radii must be positive, got dy={self.dy}, dx={self.dx}")

    def is_within(self, predicted: float, actual: float, tangent_slope: Optional[float] = None) -> bool:
        # Distance of the ellipse center to the tangent line, in normalized units:
        # min_u (u/dx)^2 + ((s*u - d)/dy)^2 = d^2 / (dy^2 + s^2 dx^2)
        slope = tangent_slope or 0.0
        d = actual - predicted
        return d * d <= self.dy * self.dy + slope * slope * self.dx * self.dx

    def band(self, predicted: float) -> float:
        return self.dy

    def allows(self, function: Function, value: float, time: float) -> bool:
        predicted = function.at(time)

        # 1.: Vertical deviation only
        if abs(predicted - value) <= self.dy:
            return True

        # 2.: Horizontal deviation only - the graph crosses the value inside (time - dx, time + dx).
        # Assumes f is continuous on this interval.
        m = np.sign(predicted - value)
        left = np.sign(function.at(time - self.dx) - value)
        right = np.sign(function.at(time + self.dx) - value)
        if left != m or right != m:
            return True

        # 3.: Lines are their own tangent; the closed form is exact
        if isinstance(function, Polynomial) and function.degree <= 1:
            return self.is_within(predicted, value, tangent_slope=function.slope_at(time))

        # 4.: Nearest graph point in normalized ellipse metric
        result = minimize_scalar(
            lambda x: ((x - time) / self.dx) ** 2 + ((function.at(x) - value) / self.dy) ** 2,
            bounds=(time - self.dx, time + self.dx),
            method="bounded",
        )
        return bool(result.fun <= 1.0)


def is_within(
    tolerance: Tolerance,
    predicted: float,
    actual: float,
    at: Optional[float] = None,
    tangent_slope: Optional[float] = None,
) -> bool:
    """Check ``actual`` against ``predicted`` at time ``at``.

    ``at`` is informational for the value-only variants; ``tangent_slope`` is
    the slope of the predicting function at ``at`` and only matters for
    ``Absolute2D``.
    """
    return tolerance.is_within(predicted, actual, tangent_slope=tangent_slope)


__all__ = ["Absolute", "Absolute2D", "Relative", "Tolerance", "is_within"]
