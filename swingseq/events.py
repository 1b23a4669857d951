"""Swing event detection: ball contact and per-segment velocity peaks.

Contact is approximated as the global maximum of smoothed total
kinetic energy. A recording with a larger energy spike after contact
(e.g. a violent follow-through) will place contact on that spike; no
guard against this is applied.

Segment peaks are searched in a fixed-duration window that ends at
contact. Within that window a peak is the largest local maximum above
a fraction of the window maximum, which keeps small early bumps from
winning while still always returning an index.
"""

import logging
from typing import Dict, Tuple

import numpy as np
from scipy.signal import find_peaks

from .schema import round_half_up
from .signals import moving_average

logger = logging.getLogger(__name__)


def detect_contact(energy: np.ndarray, window: int = 9) -> int:
    """Index of the maximum of the smoothed kinetic energy.

    The first index wins on ties. An empty signal gives 0.
    """
    energy = np.nan_to_num(np.asarray(energy, dtype=float))
    if len(energy) == 0:
        return 0
    smoothed = moving_average(energy, window)
    return int(np.argmax(smoothed))


def analysis_window(contact_index: int, sample_rate: float,
                    window_ms: float = 500.0) -> Tuple[int, int]:
    """Pre-contact search window ``(start, end)``, end exclusive."""
    span = int(round_half_up(window_ms * sample_rate / 1000.0))
    start = max(0, contact_index - span)
    return start, contact_index


def _strict_local_maxima(segment: np.ndarray) -> np.ndarray:
    """Indices strictly greater than both neighbours."""
    candidates, _ = find_peaks(segment)
    if len(candidates) == 0:
        return candidates
    # find_peaks reports plateau midpoints; keep strict maxima only
    left = segment[candidates] > segment[candidates - 1]
    right = segment[candidates] > segment[candidates + 1]
    return candidates[left & right]


def find_peak_in_window(
    signal: np.ndarray,
    start: int,
    end: int,
    threshold_ratio: float = 0.3,
    min_samples: int = 10,
) -> int:
    """Locate the dominant peak of *signal* in ``[start, end)``.

    Parameters
    ----------
    signal : np.ndarray
        Velocity signal for the whole movement.
    start, end : int
        Window bounds (end exclusive).
    threshold_ratio : float
        Local maxima must exceed this fraction of the window maximum.
    min_samples : int
        Windows shorter than this return *start*.

    Returns
    -------
    int
        Absolute sample index of the peak.
    """
    segment = np.nan_to_num(np.asarray(signal[start:end], dtype=float))
    if len(segment) < min_samples:
        return int(start)

    threshold = float(np.max(segment)) * threshold_ratio
    peaks = _strict_local_maxima(segment)
    peaks = peaks[segment[peaks] > threshold]

    if len(peaks) > 0:
        best = peaks[int(np.argmax(segment[peaks]))]
        return int(start + best)

    return int(start + np.argmax(segment))


def detect_segment_peaks(
    velocities: Dict[str, np.ndarray],
    start: int,
    end: int,
    threshold_ratio: float = 0.3,
    min_samples: int = 10,
) -> Dict[str, int]:
    """Run :func:`find_peak_in_window` independently for each segment."""
    peaks = {}
    for seg, vel in velocities.items():
        peaks[seg] = find_peak_in_window(vel, start, end, threshold_ratio, min_samples)
    logger.debug(f"Segment peaks in [{start}, {end}): {peaks}")
    return peaks
