"""Polynomial leaf trackers: constant, linear, parabola and arbitrary low degree."""

from __future__ import annotations

from typing import Optional

import numpy as np

from track.tolerance import Absolute, Tolerance
from track.tracker import FallbackMethod, SimpleTracker
from trajectory.functions import LinearFunction, Parabola, Polynomial
from trajectory.regression import linear_regression, poly_regression


class PolyTracker(SimpleTracker):
    """Least-squares polynomial of a fixed degree.

    ``tolerance_points`` is the number of points required on top of the
    ``degree + 1`` points that determine the polynomial exactly.
    """

    def __init__(
        self,
        degree: int,
        max_data_points: int = 500,
        tolerance_points: int = 1,
        tolerance: Tolerance = Absolute(0.0),
    ) -> None:
        super().__init__(
            max_data_points=max_data_points,
            required_points_for_regression=degree + tolerance_points + 1,
            tolerance=tolerance,
        )
        self.degree = degree

    def calculate_regression(self) -> Optional[Polynomial]:
        return poly_regression(self.times, self.values, self.degree)


class ConstantTracker(PolyTracker):
    """Running mean of a value stream.

    Time is irrelevant here, so the ``*_value`` methods use an internal
    counter as time.
    """

    def __init__(
        self,
        max_data_points: int = 50,
        tolerance_points: int = 1,
        tolerance: Tolerance = Absolute(0.0),
    ) -> None:
        super().__init__(
            degree=0,
            max_data_points=max_data_points,
            tolerance_points=tolerance_points,
            tolerance=tolerance,
        )
        self.count = 0

    def add_value(self, value: float, update_regression: bool = True) -> None:
        self.add(value, float(self.count), update_regression=update_regression)
        self.count += 1

    def is_value_valid(
        self,
        value: float,
        tolerance: Optional[Tolerance] = None,
        fallback: FallbackMethod = FallbackMethod.VALID,
    ) -> bool:
        return self.is_valid(value, float(self.count), tolerance=tolerance, fallback=fallback)

    def add_if_valid(self, value: float) -> bool:
        """Add the value unless it is an outlier with respect to the current average."""
        if not self.is_value_valid(value):
            return False
        self.add_value(value)
        return True

    @property
    def average(self) -> Optional[float]:
        if self.regression is None:
            return None
        return self.regression.at(0.0)

    @property
    def variance(self) -> Optional[float]:
        if self.average is None:
            return None
        return float(np.var(self.values))


class LinearTracker(SimpleTracker):
    def __init__(
        self,
        max_data_points: int = 500,
        tolerance_points: int = 1,
        tolerance: Tolerance = Absolute(0.0),
    ) -> None:
        super().__init__(
            max_data_points=max_data_points,
            required_points_for_regression=tolerance_points + 2,
            tolerance=tolerance,
        )

    @property
    def regression(self) -> Optional[LinearFunction]:
        return self._regression

    @property
    def slope(self) -> Optional[float]:
        return self._regression.slope if self._regression is not None else None

    @property
    def intercept(self) -> Optional[float]:
        return self._regression.intercept if self._regression is not None else None

    def calculate_regression(self) -> Optional[LinearFunction]:
        return linear_regression(self.times, self.values)


class ParabolaTracker(SimpleTracker):
    def __init__(
        self,
        max_data_points: int = 500,
        tolerance_points: int = 1,
        tolerance: Tolerance = Absolute(0.0),
    ) -> None:
        super().__init__(
            max_data_points=max_data_points,
            required_points_for_regression=tolerance_points + 3,
            tolerance=tolerance,
        )

    @property
    def regression(self) -> Optional[Parabola]:
        return self._regression

    def calculate_regression(self) -> Optional[Parabola]:
        polynomial = poly_regression(self.times, self.values, 2)
        if polynomial is None:
            return None
        return Parabola.from_polynomial(polynomial)


class PreliminaryTracker(ConstantTracker):
    """ConstantTracker whose most recent value may be preliminary.

    A preliminary value is replaced on every update until it is finalized,
    e.g. the slope of the current segment, which is only final once the
    segment ends.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._last_value_is_preliminary = False

    @property
    def has_preliminary_value(self) -> bool:
        return self._last_value_is_preliminary

    def add_final(self, value: float) -> None:
        """Add a final value; a current preliminary value is finalized, not removed."""
        self.finalize_preliminary_value()
        self.add_value(value)

    def add_preliminary(self, value: float) -> None:
        """Add a preliminary value; a current preliminary value is finalized, not removed."""
        self.finalize_preliminary_value()
        self.add_value(value)
        self._last_value_is_preliminary = True

    def finalize_preliminary_value(self) -> None:
        self._last_value_is_preliminary = False

    def remove_preliminary_value(self) -> None:
        if self._last_value_is_preliminary:
            self.remove_last()
            self.count -= 1
        self._last_value_is_preliminary = False

    def update_preliminary(self, value: float) -> None:
        self.remove_preliminary_value()
        self.add_preliminary(value)

    def update_preliminary_value_if_valid(self, value: float) -> bool:
        """Replace the preliminary value if ``value`` is valid; otherwise just drop it."""
        self.remove_preliminary_value()
        if not self.is_value_valid(value):
            return False
        self.add_preliminary(value)
        return True


__all__ = [
    "ConstantTracker",
    "LinearTracker",
    "ParabolaTracker",
    "PolyTracker",
    "PreliminaryTracker",
]
