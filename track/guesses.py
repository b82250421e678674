"""Guess corridors for segments that have no regression of their own yet.

Guesses serve two purposes:

- checking whether a point matches the *next* segment, which cannot have a
  regression before it is created;
- checking whether a point matches the *current* segment while that segment
  has too few points for a regression (the guesses are inherited from the
  moment it was created).
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from typing import Callable, List, Optional, Sequence, Tuple

from contracts import SimpleRange
from track.tolerance import Tolerance
from trajectory.functions import Function

# (split_time, split_value) -> function the next segment would follow, if it began there
GuessFactory = Callable[[float, float], Optional[Function]]
RangeAdapter = Callable[[SimpleRange], SimpleRange]


@dataclass(frozen=True)
class Guesses:
    """One or two functions enclosing the expected course of a segment."""

    all: Tuple[Function, ...]
    all_start_times: Tuple[float, ...]

    def __post_init__(self) -> None:
        if not self.all:
            raise ValueError("Guesses require at least one function")

    def bounds_at(self, time: float) -> Tuple[float, float]:
        values = [f.at(time) for f in self.all]
        return min(values), max(values)

    def matches(self, value: float, time: float, tolerance: Tolerance) -> bool:
        """True if the value lies between the guesses or within tolerance of any of them."""
        lower, upper = self.bounds_at(time)
        if lower <= value <= upper:
            return True
        return any(tolerance.allows(f, value, time) for f in self.all)


def create_guesses(
    functions: Sequence[Function],
    timeslots: Sequence[float],
    most_recent_time: float,
    guess_for_split: GuessFactory,
) -> Optional[Guesses]:
    """Create enclosing (min and max) guesses.

    A guess is requested for every function/timeslot combination, splitting
    at ``(time, function.at(time))``. Guesses are ordered by their value at
    ``most_recent_time``. Candidates that cross between the timeslots are not
    bounded exactly by this ordering.
    """
    if not functions or not timeslots:
        return None

    candidates: List[Tuple[Function, float]] = []
    for function, time in product(functions, timeslots):
        guess = guess_for_split(time, function.at(time))
        if guess is not None:
            candidates.append((guess, time))

    if not candidates:
        return None

    lowest = min(candidates, key=lambda c: c[0].at(most_recent_time))
    highest = max(candidates, key=lambda c: c[0].at(most_recent_time))

    if len(candidates) == 1:
        return Guesses(all=(lowest[0],), all_start_times=(lowest[1],))
    return Guesses(all=(lowest[0], highest[0]), all_start_times=(lowest[1], highest[1]))


def build_next_segment_guesses(
    time_a: Optional[float],
    time_b: float,
    functions: Sequence[Function],
    adapt_range: RangeAdapter,
    guess_for_split: GuessFactory,
) -> Optional[Guesses]:
    """Guesses for a segment starting somewhere between ``time_a`` and ``time_b``.

    ``time_a`` is the last time of the current segment, ``time_b`` the more
    recent end of the interval in which the switch could have happened.
    ``functions`` is the current regression or the current guesses.
    """
    if time_a is None or not functions:
        return None

    guess_range = adapt_range(SimpleRange(lower=time_a, upper=time_b))
    if guess_range.is_single_point:
        timeslots = [guess_range.lower]
    else:
        timeslots = [guess_range.lower, guess_range.upper]

    return create_guesses(functions, timeslots, guess_range.upper, guess_for_split)


__all__ = ["GuessFactory", "Guesses", "RangeAdapter", "build_next_segment_guesses", "create_guesses"]
