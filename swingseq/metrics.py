"""Derived kinematic-chain metrics.

Timing gap, whip timing, transfer ratio, deceleration before contact,
segment sequencing and data-quality checks. Every function resolves
numeric edge cases (empty windows, near-zero denominators) to a
defined value instead of raising.

References:
    Putnam CA. Sequential motions of body segments in striking and
    throwing skills: descriptions and explanations. J Biomech.
    1993;26 Suppl 1:125-135. doi:10.1016/0021-9290(93)90084-r
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from .constants import (
    SEGMENT_LABELS,
    SEGMENTS,
    SEQUENCE_SEPARATOR,
    TRANSFER_RATIO_BANDS,
    TRANSFER_RATIO_FALLBACK,
    WEAK_TORSO_SIGNAL,
)
from .schema import round_half_up

logger = logging.getLogger(__name__)


def timing_gap(pelvis_peak: int, torso_peak: int, sample_rate: float,
               window_length: int) -> Tuple[float, float]:
    """Pelvis-to-torso peak gap in ms and as % of the window length."""
    frames = torso_peak - pelvis_peak
    gap_ms = frames / sample_rate * 1000.0 if sample_rate > 0 else 0.0
    gap_pct = frames / window_length * 100.0 if window_length > 0 else 0.0
    return gap_ms, gap_pct


def whip_timing_pct(torso_peak: int, start: int, window_length: int) -> float:
    """Position of the torso peak within the window, in percent."""
    if window_length <= 0:
        return 50.0
    return (torso_peak - start) / window_length * 100.0


def transfer_ratio(pelvis_peak_velocity: float, torso_peak_velocity: float,
                   epsilon: float = 0.01) -> float:
    """``|torso / pelvis|`` peak velocity ratio, 0 for a negligible pelvis."""
    pelvis = float(np.nan_to_num(pelvis_peak_velocity))
    torso = float(np.nan_to_num(torso_peak_velocity))
    if abs(pelvis) <= epsilon:
        return 0.0
    ratio = abs(torso / pelvis)
    return ratio if np.isfinite(ratio) else 0.0


def rate_transfer_ratio(ratio: float) -> str:
    """Qualitative rating of a transfer ratio."""
    for rating, lower, upper, upper_inclusive in TRANSFER_RATIO_BANDS:
        if ratio >= lower and (ratio <= upper if upper_inclusive else ratio < upper):
            return rating
    return TRANSFER_RATIO_FALLBACK


def _value_at(signal: np.ndarray, index: int) -> float:
    if 0 <= index < len(signal):
        value = float(signal[index])
        return value if np.isfinite(value) else 0.0
    return 0.0


def peak_velocities(velocities: Dict[str, np.ndarray],
                    peaks: Dict[str, int]) -> Dict[str, float]:
    """Signed velocity of each segment at its own peak index."""
    return {seg: _value_at(velocities[seg], peaks[seg]) for seg in peaks}


def deceleration_flags(
    velocities: Dict[str, np.ndarray],
    peaks: Dict[str, int],
    contact_index: int,
    ratio: float = 0.5,
) -> Dict[str, bool]:
    """Whether each segment has slowed down before contact.

    A segment decelerates when its velocity at contact is below *ratio*
    times its velocity at its own peak. The ``"all"`` entry requires
    pelvis and torso only; arms deceleration is reported but optional.
    """
    flags = {}
    for seg in SEGMENTS:
        peak_vel = _value_at(velocities[seg], peaks[seg])
        contact_vel = _value_at(velocities[seg], contact_index)
        flags[seg] = bool(contact_vel < peak_vel * ratio)
    flags["all"] = flags["pelvis"] and flags["torso"]
    return flags


def sequence_label(peaks: Dict[str, int]) -> str:
    """Segment labels ordered by peak index, e.g. ``"P→T→A"``.

    Segments peaking on the same sample keep kinetic-chain order.
    """
    ordered = sorted(SEGMENTS, key=lambda seg: peaks[seg])
    return SEQUENCE_SEPARATOR.join(SEGMENT_LABELS[seg] for seg in ordered)


def sequence_tolerance_frames(sample_rate: float, tolerance_s: float = 0.015) -> int:
    return int(round_half_up(sample_rate * tolerance_s))


def is_sequence_correct(peaks: Dict[str, int], sample_rate: float,
                        tolerance_s: float = 0.015) -> bool:
    """Proximal-to-distal ordering check with a small frame tolerance."""
    tol = sequence_tolerance_frames(sample_rate, tolerance_s)
    return (peaks["pelvis"] <= peaks["torso"] + tol
            and peaks["torso"] <= peaks["arms"] + tol)


def data_quality_flags(
    momentum: Dict[str, np.ndarray],
    start: int,
    end: int,
    weak_ratio: float = 0.1,
) -> List[str]:
    """Flag instrumentation problems visible in the momentum window."""
    flags = []
    pelvis = momentum["pelvis"][start:end]
    torso = momentum["torso"][start:end]
    if len(pelvis) == 0 or len(torso) == 0:
        return flags
    if np.max(torso) < np.max(pelvis) * weak_ratio:
        flags.append(WEAK_TORSO_SIGNAL)
        logger.debug("Torso momentum below pelvis threshold")
    return flags


def separation_extrema(
    separation: Optional[np.ndarray],
    start: int,
    end: int,
) -> Tuple[Optional[float], Optional[float]]:
    """X-factor maximum over the window and value at contact.

    Returns ``(None, None)`` without rotation data. The maximum is
    ``None`` when the window holds no rotation samples; the contact
    value is 0 when the rotation recording is shorter than contact.
    """
    if separation is None or len(separation) == 0:
        return None, None
    window = separation[start:end]
    x_max = float(np.max(window)) if len(window) > 0 else None
    x_contact = _value_at(separation, end)
    return x_max, x_contact
