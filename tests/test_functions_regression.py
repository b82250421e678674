import numpy as np
import pytest

from trajectory.functions import LinearFunction, Parabola, Polynomial
from trajectory.regression import linear_regression, poly_regression


class TestFunctions:
    def test_polynomial_evaluation(self) -> None:
        p = Polynomial([1.0, 2.0, 3.0])
        assert p.at(2.0) == pytest.approx(17.0)
        assert p(0.0) == pytest.approx(1.0)
        assert p.degree == 2
        assert Polynomial([4.0, 0.0, 0.0]).degree == 0

    def test_derivative_and_slope(self) -> None:
        p = Polynomial([1.0, 2.0, 3.0])
        assert p.derivative() == Polynomial([2.0, 6.0])
        assert p.slope_at(1.0) == pytest.approx(8.0)
        assert Polynomial([5.0]).slope_at(3.0) == 0.0

    def test_solve(self) -> None:
        assert Polynomial([-1.0, 0.0, 1.0]).solve() == pytest.approx([-1.0, 1.0])
        assert LinearFunction(2.0, 1.0).solve(5.0) == pytest.approx([2.0])
        assert Polynomial([1.0, 0.0, 1.0]).solve() == []
        assert Polynomial([3.0]).solve(3.0) == []

    def test_solve_nearest(self) -> None:
        p = Polynomial([-4.0, 0.0, 1.0])
        assert p.solve_nearest(0.0, guess=-3.0) == pytest.approx(-2.0)
        assert p.solve_nearest(-10.0, guess=0.0) is None

    def test_arithmetic(self) -> None:
        p = Polynomial([1.0, 1.0]) + Polynomial([0.0, 0.0, 2.0])
        assert p == Polynomial([1.0, 1.0, 2.0])
        assert (p - 1.0).at(0.0) == pytest.approx(0.0)
        assert hash(Polynomial([1.0, 2.0])) == hash(Polynomial([1.0, 2.0, 0.0]))

    def test_linear_function(self) -> None:
        line = LinearFunction.through_point(2.0, time=1.0, value=5.0)
        assert line.slope == 2.0
        assert line.intercept == 3.0
        assert LinearFunction(1.0, 0.0).intersection(LinearFunction(-1.0, 20.0)) == pytest.approx(10.0)
        assert LinearFunction(1.0, 0.0).intersection(LinearFunction(1.0, 5.0)) is None

    def test_parabola(self) -> None:
        parabola = Parabola(1.0, -2.0, 1.0)
        assert parabola.vertex_time == pytest.approx(1.0)
        assert parabola.at(3.0) == pytest.approx(4.0)
        assert Parabola(0.0, 1.0, 0.0).vertex_time is None
        converted = Parabola.from_polynomial(Polynomial([1.0, 2.0]))
        assert (converted.a, converted.b, converted.c) == (0.0, 2.0, 1.0)


class TestRegression:
    def test_degree_zero_is_mean(self) -> None:
        result = poly_regression([0.0, 1.0, 2.0], [1.0, 2.0, 6.0], 0)
        assert result.at(10.0) == pytest.approx(3.0)

    def test_linear(self) -> None:
        line = linear_regression([0.0, 1.0, 2.0, 3.0], [1.0, 3.0, 5.0, 7.0])
        assert line.slope == pytest.approx(2.0)
        assert line.intercept == pytest.approx(1.0)
        assert isinstance(poly_regression([0.0, 1.0], [1.0, 3.0], 1), Polynomial)

    def test_quadratic_far_from_origin(self) -> None:
        times = [10.0, 11.0, 12.0, 13.0, 14.0]
        values = [t * t - 2 * t + 1 for t in times]

        result = poly_regression(times, values, 2)

        assert result.coefficients == pytest.approx([1.0, -2.0, 1.0], abs=1e-6)

    def test_least_squares_with_noise(self) -> None:
        rng = np.random.default_rng(1)
        times = np.linspace(0.0, 10.0, 200)
        values = 0.5 * times ** 3 - times + 2.0 + rng.uniform(-0.01, 0.01, times.size)

        result = poly_regression(times.tolist(), values.tolist(), 3)

        assert result.coefficients == pytest.approx([2.0, -1.0, 0.0, 0.5], abs=0.05)

    def test_degenerate_inputs(self) -> None:
        assert poly_regression([1.0, 1.0, 1.0], [1.0, 2.0, 3.0], 2) is None
        assert poly_regression([], [], 1) is None
        assert poly_regression([0.0, 1.0], [1.0], 1) is None
        assert linear_regression([2.0, 2.0], [1.0, 3.0]) is None
        assert linear_regression([2.0], [1.0]) is None
