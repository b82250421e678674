import pytest

from conftest import bounce_stream, feed
from track.summary import log_segment_summary, summarize
from trajectory.functions import LinearFunction, Parabola
from trajectory.sim import SimConfig, simulate_piecewise


def test_segment_summary(reflecting_tracker) -> None:
    feed(reflecting_tracker, bounce_stream())

    summaries = summarize(reflecting_tracker)

    assert [s.index for s in summaries] == [0, 1, 2]
    first = summaries[0]
    assert first.points == 11
    assert first.start_time == 0.0
    assert first.end_time == 10.0
    assert first.has_regression
    assert not first.has_guesses
    assert first.rmse == pytest.approx(0.0, abs=1e-9)

    last = summaries[-1]
    assert not last.has_regression
    assert last.has_guesses
    assert last.rmse is None


def test_log_segment_summary_returns_summaries(fixed_guess_tracker) -> None:
    summaries = log_segment_summary(fixed_guess_tracker)

    assert len(summaries) == 1
    assert summaries[0].points == 0
    assert summaries[0].start_time is None


def test_simulate_piecewise_bounded_noise() -> None:
    config = SimConfig(dt_s=0.5, noise=0.1, seed=11)
    pieces = [(LinearFunction(1.0, 0.0), 10), (Parabola(0.0, 0.0, 7.0), 5)]

    points = simulate_piecewise(pieces, config)

    assert len(points) == 15
    assert [p.time for p in points[:3]] == [0.0, 0.5, 1.0]
    for p in points[:10]:
        assert abs(p.value - p.time) <= 0.1
    for p in points[10:]:
        assert abs(p.value - 7.0) <= 0.1


def test_simulate_outliers() -> None:
    config = SimConfig(outlier_prob=1.0, outlier_offset=50.0)

    points = simulate_piecewise([(LinearFunction(0.0, 1.0), 3)], config)

    assert [p.value for p in points] == [51.0, 51.0, 51.0]
