"""Swing visualization with matplotlib.

All functions return ``matplotlib.figure.Figure`` objects for saving or
display.

Functions
---------
plot_kinematic_sequence
    Segment velocity curves with window, contact and peak markers.
plot_session_profiles
    Bar chart of motor profile counts for a session.
"""

import logging
from typing import Optional, Sequence

import numpy as np
import matplotlib
if matplotlib.get_backend() == "":
    matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .constants import SEGMENT_LABELS, SEGMENTS
from .schema import SwingAnalysisResult
from .session import profile_counts

logger = logging.getLogger(__name__)

_COLORS = {
    "pelvis": "#1f77b4",
    "torso": "#ff7f0e",
    "arms": "#2ca02c",
    "contact": "#d62728",
    "window": "#cccccc",
}


def plot_kinematic_sequence(
    trace,
    result: Optional[SwingAnalysisResult] = None,
    figsize: Optional[tuple] = None,
) -> plt.Figure:
    """Plot segment velocities around contact.

    Parameters
    ----------
    trace : KinematicTrace
        Output of ``build_kinematic_trace()``.
    result : SwingAnalysisResult, optional
        When given, segment peaks are marked and the profile is shown
        in the title.
    figsize : tuple, optional
        Figure size ``(width, height)`` in inches.

    Returns
    -------
    matplotlib.figure.Figure
    """
    if figsize is None:
        figsize = (10, 4)

    fig, ax = plt.subplots(figsize=figsize)
    t = np.arange(trace.n_samples) / float(trace.sample_rate)

    ax.axvspan(
        trace.window_start / trace.sample_rate,
        trace.window_end / trace.sample_rate,
        color=_COLORS["window"], alpha=0.3, label="Analysis window",
    )
    for seg in SEGMENTS:
        ax.plot(t, trace.velocity[seg], color=_COLORS[seg], lw=1.5,
                label=f"{seg.capitalize()} ({SEGMENT_LABELS[seg]})")
    ax.axvline(trace.contact_index / trace.sample_rate, color=_COLORS["contact"],
               ls="--", lw=1.2, label="Contact")

    title = f"Kinematic sequence - movement {trace.movement_id}"
    if result is not None:
        peaks = {
            "pelvis": result.pelvis_peak_index,
            "torso": result.torso_peak_index,
            "arms": result.arms_peak_index,
        }
        for seg, idx in peaks.items():
            if 0 <= idx < trace.n_samples:
                ax.scatter([t[idx]], [trace.velocity[seg][idx]], color=_COLORS[seg],
                           s=50, zorder=3)
        title += (f" | {result.sequence} | {result.motor_profile.value}"
                  f" ({result.motor_profile_confidence:.2f})")

    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Momentum rate")
    ax.set_title(title, fontsize=10)
    ax.legend(loc="upper left", fontsize=8)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig


def plot_session_profiles(
    results: Sequence[SwingAnalysisResult],
    figsize: Optional[tuple] = None,
) -> plt.Figure:
    """Bar chart of how often each motor profile occurs in a session.

    Raises
    ------
    ValueError
        If *results* is empty.
    """
    if not results:
        raise ValueError("No results to plot.")
    if figsize is None:
        figsize = (8, 4)

    counts = profile_counts(results)
    fig, ax = plt.subplots(figsize=figsize)
    labels = [p.value for p in counts]
    ax.bar(labels, list(counts.values()), color="#4c72b0")
    ax.set_ylabel("Movements")
    ax.set_title(f"Motor profiles ({len(results)} movements)")
    ax.tick_params(axis="x", labelrotation=20)
    fig.tight_layout()
    return fig
