import pytest

from contracts import SimpleRange
from track.guesses import Guesses, build_next_segment_guesses, create_guesses
from track.tolerance import Absolute
from trajectory.functions import LinearFunction


def reflect(time: float, value: float) -> LinearFunction:
    return LinearFunction.through_point(-1.0, time, value)


def identity(proposed: SimpleRange) -> SimpleRange:
    return proposed


def test_guesses_require_a_function() -> None:
    with pytest.raises(ValueError):
        Guesses(all=(), all_start_times=())


def test_matches_between_or_near_guesses() -> None:
    guesses = Guesses(all=(LinearFunction(0.0, 0.0), LinearFunction(0.0, 2.0)), all_start_times=(0.0, 1.0))
    tolerance = Absolute(0.5)

    assert guesses.bounds_at(3.0) == (0.0, 2.0)
    assert guesses.matches(1.0, 3.0, tolerance)
    assert guesses.matches(2.4, 3.0, tolerance)
    assert guesses.matches(-0.5, 3.0, tolerance)
    assert not guesses.matches(2.6, 3.0, tolerance)


def test_create_guesses_orders_by_most_recent_value() -> None:
    guesses = create_guesses([LinearFunction(1.0, 0.0)], [10.0, 11.0], 11.0, reflect)

    low, high = guesses.all
    assert low.at(11.0) == pytest.approx(9.0)
    assert high.at(11.0) == pytest.approx(11.0)
    assert guesses.all_start_times == (10.0, 11.0)


def test_create_guesses_single_candidate() -> None:
    guesses = create_guesses([LinearFunction(1.0, 0.0)], [4.0], 4.0, reflect)

    assert len(guesses.all) == 1
    assert guesses.all_start_times == (4.0,)


def test_create_guesses_without_usable_guess() -> None:
    assert create_guesses([LinearFunction(1.0, 0.0)], [1.0, 2.0], 2.0, lambda t, v: None) is None
    assert create_guesses([], [1.0], 1.0, reflect) is None
    assert create_guesses([LinearFunction(1.0, 0.0)], [], 1.0, reflect) is None


def test_create_guesses_from_two_functions() -> None:
    functions = [LinearFunction(0.0, 0.0), LinearFunction(0.0, 4.0)]

    guesses = create_guesses(functions, [1.0, 2.0], 2.0, reflect)

    # Four candidates, the extreme ones at t=2 are kept
    low, high = guesses.all
    assert low.at(2.0) == pytest.approx(-1.0)
    assert high.at(2.0) == pytest.approx(4.0)


def test_build_next_segment_guesses_uses_adapted_range() -> None:
    def collapse(proposed: SimpleRange) -> SimpleRange:
        return SimpleRange(proposed.lower, proposed.lower)

    guesses = build_next_segment_guesses(10.0, 12.0, [LinearFunction(1.0, 0.0)], collapse, reflect)

    assert len(guesses.all) == 1
    assert guesses.all_start_times == (10.0,)
    assert guesses.all[0].at(12.0) == pytest.approx(8.0)


def test_build_next_segment_guesses_needs_current_data() -> None:
    assert build_next_segment_guesses(None, 1.0, [LinearFunction(1.0, 0.0)], identity, reflect) is None
    assert build_next_segment_guesses(0.0, 1.0, [], identity, reflect) is None


def test_reversed_time_range() -> None:
    guesses = build_next_segment_guesses(-10.0, -11.0, [LinearFunction(1.0, 0.0)], identity, reflect)

    assert guesses.all_start_times == (-11.0, -10.0)
    low, high = guesses.all
    assert low.at(-11.0) <= high.at(-11.0)
