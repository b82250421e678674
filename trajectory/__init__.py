"""Closed-form functions, regression and synthetic streams."""

from trajectory.functions import Function, LinearFunction, Parabola, Polynomial
from trajectory.regression import linear_regression, poly_regression
from trajectory.sim import SimConfig, simulate_linear, simulate_piecewise

__all__ = [
    "Function",
    "LinearFunction",
    "Parabola",
    "Polynomial",
    "SimConfig",
    "linear_regression",
    "poly_regression",
    "simulate_linear",
    "simulate_piecewise",
]
