"""Scalar functions of time produced by regressions and guesses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Union

import numpy as np
from numpy.polynomial import polynomial as P


class Function(ABC):
    """A scalar function f(time) -> value."""

    @abstractmethod
    def at(self, time: float) -> float:
        raise NotImplementedError

    def __call__(self, time: float) -> float:
        return self.at(time)


class Polynomial(Function):
    """Polynomial with coefficients ordered from the constant term upwards."""

    def __init__(self, coefficients: Sequence[float]) -> None:
        coefficients = np.asarray(coefficients, dtype=float)
        if coefficients.size == 0:
            coefficients = np.zeros(1)
        self._coefficients = coefficients

    @property
    def coefficients(self) -> np.ndarray:
        return self._coefficients.copy()

    @property
    def degree(self) -> int:
        nonzero = np.flatnonzero(self._coefficients)
        return int(nonzero[-1]) if nonzero.size else 0

    def at(self, time: float) -> float:
        return float(P.polyval(time, self._coefficients))

    def derivative(self) -> Polynomial:
        if self._coefficients.size <= 1:
            return Polynomial([0.0])
        return Polynomial(P.polyder(self._coefficients))

    def slope_at(self, time: float) -> float:
        return self.derivative().at(time)

    def solve(self, value: float = 0.0) -> List[float]:
        """Return all real times t with f(t) == value, ascending."""
        shifted = self._coefficients.copy()
        shifted[0] -= value
        if self.degree == 0:
            return []
        roots = P.polyroots(np.trim_zeros(shifted, "b"))
        real = [float(r.real) for r in roots if abs(r.imag) < 1e-9]
        return sorted(real)

    def solve_nearest(self, value: float, guess: float) -> Optional[float]:
        """Return the real solution of f(t) == value nearest to ``guess``, if any."""
        solutions = self.solve(value)
        if not solutions:
            return None
        return min(solutions, key=lambda t: abs(t - guess))

    def __add__(self, other: Union[Polynomial, float]) -> Polynomial:
        if isinstance(other, Polynomial):
            return Polynomial(P.polyadd(self._coefficients, other._coefficients))
        coefficients = self._coefficients.copy()
        coefficients[0] += other
        return Polynomial(coefficients)

    def __sub__(self, other: Union[Polynomial, float]) -> Polynomial:
        if isinstance(other, Polynomial):
            return Polynomial(P.polysub(self._coefficients, other._coefficients))
        return self + (-other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        a, b = self._coefficients, other._coefficients
        size = max(a.size, b.size)
        return bool(np.array_equal(np.pad(a, (0, size - a.size)), np.pad(b, (0, size - b.size))))

    def __hash__(self) -> int:
        return hash(tuple(np.trim_zeros(self._coefficients, "b")))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({[round(c, 6) for c in self._coefficients.tolist()]})"


class LinearFunction(Polynomial):
    """f(t) = slope * t + intercept."""

    def __init__(self, slope: float, intercept: float) -> None:
        super().__init__([intercept, slope])

    @classmethod
    def through_point(cls, slope: float, time: float, value: float) -> LinearFunction:
        return cls(slope=slope, intercept=value - slope * time)

    @property
    def slope(self) -> float:
        return float(self._coefficients[1])

    @property
    def intercept(self) -> float:
        return float(self._coefficients[0])

    def intersection(self, other: LinearFunction) -> Optional[float]:
        """Time where both lines meet; None for parallel lines."""
        slope_diff = self.slope - other.slope
        if slope_diff == 0:
            return None
        return (other.intercept - self.intercept) / slope_diff

    def __repr__(self) -> str:
        return f"LinearFunction(slope={self.slope:.6g}, intercept={self.intercept:.6g})"


class Parabola(Polynomial):
    """f(t) = a * t^2 + b * t + c."""

    def __init__(self, a: float, b: float, c: float) -> None:
        super().__init__([c, b, a])

    @classmethod
    def from_polynomial(cls, polynomial: Polynomial) -> Parabola:
        coefficients = np.pad(polynomial.coefficients, (0, 3))[:3]
        return cls(a=coefficients[2], b=coefficients[1], c=coefficients[0])

    @property
    def a(self) -> float:
        return float(self._coefficients[2])

    @property
    def b(self) -> float:
        return float(self._coefficients[1])

    @property
    def c(self) -> float:
        return float(self._coefficients[0])

    @property
    def vertex_time(self) -> Optional[float]:
        if self.a == 0:
            return None
        return -self.b / (2 * self.a)

    def __repr__(self) -> str:
        return f"Parabola(a={self.a:.6g}, b={self.b:.6g}, c={self.c:.6g})"


__all__ = ["Function", "LinearFunction", "Parabola", "Polynomial"]
