from typing import List, Tuple

import pytest

from contracts import DataPoint, DecisionCharacteristics, SegmentMatch
from exceptions import TrackerConfigurationError
from track.decision_window import SlidingDecisionWindow

C = SegmentMatch.CURRENT
N = SegmentMatch.NEXT


class Recorder:
    def __init__(self) -> None:
        self.flushes: List[Tuple[List[float], List[float]]] = []
        self.advances: List[Tuple[List[float], List[float]]] = []

    def on_flush(self, points, dropped) -> None:
        self.flushes.append(([p.time for p in points], [p.time for p in dropped]))

    def on_advance(self, points, discarded) -> None:
        self.advances.append(([p.time for p in points], [p.time for p in discarded]))


def make_window(n: int, m: int) -> Tuple[SlidingDecisionWindow, Recorder]:
    recorder = Recorder()
    window = SlidingDecisionWindow(DecisionCharacteristics(n, m), recorder.on_flush, recorder.on_advance)
    return window, recorder


def add_all(window: SlidingDecisionWindow, tags) -> None:
    for i, tag in enumerate(tags):
        window.add(DataPoint(time=float(i), value=0.0), tag)


@pytest.mark.parametrize("n, m", [(0, 0), (1, -1)])
def test_invalid_characteristics(n: int, m: int) -> None:
    with pytest.raises(TrackerConfigurationError):
        make_window(n, m)


def test_idle_current_point_flushed_immediately() -> None:
    window, recorder = make_window(3, 1)

    add_all(window, [C, C])

    assert recorder.flushes == [([0.0], []), ([1.0], [])]
    assert not window.is_deciding
    assert window.decision_initiator is None


def test_advance_with_intermediate_points() -> None:
    window, recorder = make_window(3, 1)

    add_all(window, [N, C, N, N])

    assert recorder.advances == [([0.0, 2.0, 3.0], [1.0])]
    assert recorder.flushes == []
    assert window.buffered_points == ()


def test_single_point_decision() -> None:
    window, recorder = make_window(1, 0)

    add_all(window, [C, N])

    assert recorder.advances == [([1.0], [])]


def test_full_cancel() -> None:
    window, recorder = make_window(3, 1)

    add_all(window, [N, N, C, C])

    assert recorder.flushes == [([2.0, 3.0], [0.0, 1.0])]
    assert recorder.advances == []
    assert not window.is_deciding


def test_partial_cancel_keeps_remaining_points() -> None:
    window, recorder = make_window(3, 1)

    add_all(window, [N, C, N, C])

    assert recorder.flushes == [([1.0], [0.0])]
    assert [p.point.time for p in window.buffered_points] == [2.0, 3.0]
    assert window.decision_initiator == DataPoint(time=2.0, value=0.0)

    window.add(DataPoint(time=4.0, value=0.0), N)
    window.add(DataPoint(time=5.0, value=0.0), N)
    assert recorder.advances == [([2.0, 4.0, 5.0], [3.0])]


def test_zero_intermediate_points_allowed() -> None:
    window, recorder = make_window(2, 0)

    add_all(window, [N, C])

    assert recorder.flushes == [([1.0], [0.0])]
    assert not window.is_deciding


def test_buffer_always_starts_with_next_point() -> None:
    window, _ = make_window(4, 1)

    add_all(window, [N, C, N, C, C, N, C])

    buffered = window.buffered_points
    assert not buffered or buffered[0].matching == N


def test_clear() -> None:
    window, recorder = make_window(3, 1)
    add_all(window, [N])

    window.clear()

    assert not window.is_deciding
    assert recorder.flushes == [] and recorder.advances == []
