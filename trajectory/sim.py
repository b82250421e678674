"""Synthetic piecewise value streams for tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from contracts import DataPoint
from trajectory.functions import Function, LinearFunction


@dataclass(frozen=True)
class SimConfig:
    dt_s: float = 1.0
    start_time_s: float = 0.0
    noise: float = 0.0  # Uniform in [-noise, noise]
    outlier_prob: float = 0.0
    outlier_offset: float = 100.0
    seed: int = 7


def simulate_piecewise(
    pieces: Sequence[Tuple[Function, int]],
    config: SimConfig = SimConfig(),
) -> List[DataPoint]:
    """Sample each function for the given number of frames, one after another.

    Noise is bounded so tolerance checks stay deterministic; outliers are
    shifted by ``outlier_offset`` and should be rejected by any tracker.
    """
    rng = np.random.default_rng(config.seed)
    points: List[DataPoint] = []
    frame = 0
    for function, frames in pieces:
        for _ in range(frames):
            t = config.start_time_s + frame * config.dt_s
            value = function.at(t)
            if config.noise > 0:
                value += rng.uniform(-config.noise, config.noise)
            if config.outlier_prob > 0 and rng.random() < config.outlier_prob:
                value += config.outlier_offset
            points.append(DataPoint(time=float(t), value=float(value)))
            frame += 1
    return points


def simulate_linear(
    slope: float,
    intercept: float,
    frames: int,
    config: SimConfig = SimConfig(),
) -> List[DataPoint]:
    return simulate_piecewise([(LinearFunction(slope, intercept), frames)], config)


__all__ = ["SimConfig", "simulate_linear", "simulate_piecewise"]
