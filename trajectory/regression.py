"""Least-squares regressions for low-degree segment models."""

from __future__ import annotations

import warnings
from typing import Optional, Sequence

import numpy as np
from numpy.exceptions import RankWarning
from numpy.polynomial import polynomial as P
from scipy import stats

from trajectory.functions import LinearFunction, Polynomial


def poly_regression(times: Sequence[float], values: Sequence[float], degree: int) -> Optional[Polynomial]:
    """Fit a polynomial of the given degree.

    Returns None if the fit is impossible (too few distinct times, singular
    system or non-finite coefficients).
    """
    if degree < 0 or len(times) != len(values) or len(times) == 0:
        return None
    if degree == 0:
        return Polynomial([float(np.mean(values))])
    if degree == 1:
        line = linear_regression(times, values)
        return Polynomial(line.coefficients) if line is not None else None
    if len(set(times)) <= degree:
        return None

    x = np.asarray(times, dtype=float)
    y = np.asarray(values, dtype=float)

    # Fit around the mean time so large absolute times stay well conditioned
    x_shift = float(np.mean(x))
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", RankWarning)
            shifted = P.polyfit(x - x_shift, y, degree)
    except (np.linalg.LinAlgError, RankWarning, ValueError):
        return None

    # p(t) = q(t - x_shift)
    composed = np.polynomial.Polynomial(shifted)(np.polynomial.Polynomial([-x_shift, 1.0]))
    coefficients = np.pad(composed.coef, (0, max(0, degree + 1 - composed.coef.size)))
    if not np.all(np.isfinite(coefficients)):
        return None
    return Polynomial(coefficients)


def linear_regression(times: Sequence[float], values: Sequence[float]) -> Optional[LinearFunction]:
    """Ordinary least-squares line through the given points."""
    if len(times) < 2 or len(times) != len(values) or len(set(times)) < 2:
        return None
    try:
        result = stats.linregress(np.asarray(times, dtype=float), np.asarray(values, dtype=float))
    except ValueError:
        return None
    if not (np.isfinite(result.slope) and np.isfinite(result.intercept)):
        return None
    return LinearFunction(slope=float(result.slope), intercept=float(result.intercept))


__all__ = ["linear_regression", "poly_regression"]
