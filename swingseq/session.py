"""Session-level aggregation of per-movement results.

Functions
---------
summarize_session
    Combine movement results into a ``SessionSummary``.
profile_counts
    Count movements per motor profile in first-seen order.
"""

import logging
from typing import Dict, Sequence

import numpy as np

from .schema import MotorProfile, SessionSummary, SwingAnalysisResult

logger = logging.getLogger(__name__)


def profile_counts(results: Sequence[SwingAnalysisResult]) -> Dict[MotorProfile, int]:
    counts: Dict[MotorProfile, int] = {}
    for r in results:
        counts[r.motor_profile] = counts.get(r.motor_profile, 0) + 1
    return counts


def summarize_session(results: Sequence[SwingAnalysisResult]) -> SessionSummary:
    """Summarize all movements of one session.

    Parameters
    ----------
    results : sequence of SwingAnalysisResult
        Per-movement results, in session order.

    Returns
    -------
    SessionSummary
        The dominant profile is the most frequent one, ties going to
        the profile encountered first. Rates are fractions in [0, 1].
        Empty input gives a zero summary with no dominant profile.
        The mean timing gap averages gap magnitudes.
    """
    results = list(results)
    n = len(results)
    if n == 0:
        logger.info("No movements to summarize")
        return SessionSummary(
            movement_count=0,
            dominant_profile=None,
            profile_consistency=0.0,
            mean_timing_gap_ms=0.0,
            sequence_rate=0.0,
            decel_rate=0.0,
        )

    counts = profile_counts(results)
    best = max(counts.values())
    dominant = next(p for p, c in counts.items() if c == best)

    gaps = np.abs(np.array([r.peak_timing_gap_ms for r in results], dtype=float))
    return SessionSummary(
        movement_count=n,
        dominant_profile=dominant,
        profile_consistency=best / n,
        mean_timing_gap_ms=float(np.mean(gaps)),
        sequence_rate=sum(1 for r in results if r.sequence_correct) / n,
        decel_rate=sum(1 for r in results if r.all_segments_decel) / n,
    )
