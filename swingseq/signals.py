"""Signal conditioning: segment scalars, smoothing, sample rate, velocity.

Raw per-sample angular momentum is too noisy for peak localization, so
every signal is smoothed before and after differentiation.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from .schema import MomentumSample, RotationSample, round_half_up

logger = logging.getLogger(__name__)


def moving_average(signal: Sequence[float], window: int = 5) -> np.ndarray:
    """Centered moving mean, clamped at the sequence boundaries.

    NaN samples are ignored; a neighbourhood containing only NaN
    yields 0.

    Args:
        signal: 1-D input samples.
        window: Window size. Each output averages ``window // 2`` samples
            on both sides, so an even size behaves like the next odd one.
    """
    s = pd.Series(np.asarray(signal, dtype=float))
    if s.empty:
        return np.array([], dtype=float)
    span = 2 * (int(window) // 2) + 1
    smoothed = s.rolling(span, min_periods=1, center=True).mean()
    return smoothed.fillna(0.0).to_numpy()


def segment_momentum(samples: Sequence[MomentumSample], segment: str) -> np.ndarray:
    """Scalar momentum of *segment* across a movement.

    Uses the absolute pre-projected value when the export provides the
    projection column, the Euclidean norm of the components otherwise.
    """
    if not samples:
        return np.array([], dtype=float)
    if samples[0].projections.get(segment) is not None:
        return np.abs(np.array([s.projections.get(segment) or 0.0 for s in samples], dtype=float))
    comps = np.array([s.components.get(segment, (0.0, 0.0, 0.0)) for s in samples], dtype=float)
    return np.sqrt(np.sum(comps ** 2, axis=1))


def estimate_sample_rate(times: Sequence[float], default: int = 300) -> int:
    """Sample rate (Hz) from timestamps.

    The reciprocal of the upper median of strictly positive time steps,
    rounded to an integer. Times at or below zero are ignored. *default*
    is returned when fewer than two usable times remain or the estimate
    rounds below 1 Hz.
    """
    t = np.asarray(times, dtype=float)
    t = t[np.isfinite(t) & (t > 0)]
    if len(t) < 2:
        return int(default)
    dt = np.diff(t)
    dt = np.sort(dt[dt > 0])
    if len(dt) == 0:
        return int(default)
    median_dt = dt[len(dt) // 2]
    rate = int(round_half_up(1.0 / median_dt))
    if rate < 1:
        # steps of two time units or more (e.g. milliseconds)
        logger.warning(f"Implausible sample rate from timestamps, using {default} Hz")
        return int(default)
    return rate


def compute_velocity(
    signal: Sequence[float],
    sample_rate: float,
    window: int = 7,
) -> np.ndarray:
    """First finite difference scaled by *sample_rate*, then smoothed.

    The first sample has zero velocity.
    """
    x = np.asarray(signal, dtype=float)
    if len(x) == 0:
        return np.array([], dtype=float)
    velocity = np.zeros(len(x))
    velocity[1:] = np.diff(x) * sample_rate
    return moving_average(velocity, window)


def separation_angle(rotation: Optional[List[RotationSample]]) -> Optional[np.ndarray]:
    """Absolute torso-pelvis rotation difference (x-factor) per sample."""
    if not rotation:
        return None
    pelvis = np.array([r.pelvis_rot for r in rotation], dtype=float)
    torso = np.array([r.torso_rot for r in rotation], dtype=float)
    return np.abs(torso - pelvis)
