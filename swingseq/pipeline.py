"""Swing analysis pipeline: momentum export -> per-movement results.

Quick start::

    from swingseq import analyze_session, summarize_session
    results = analyze_session(momentum_csv_text, rotation_csv_text)
    summary = summarize_session(results)

Each movement is analysed independently (pure, deterministic, no I/O),
so callers may map :func:`analyze_movement` over movements in parallel.

Functions
---------
build_kinematic_trace
    Smoothed momentum, velocity, contact and window for one movement.
analyze_movement
    Full analysis of one movement.
analyze_session
    Analyse every movement in a pair of export texts.
analyze_files
    File-path variant of ``analyze_session``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from .classify import ClassificationInput, classify
from .config import AnalysisConfig, analysis_config_from
from .constants import SEGMENTS
from .events import analysis_window, detect_contact, detect_segment_peaks
from .ingest import (
    group_by_movement,
    parse_table,
    to_momentum_samples,
    to_rotation_samples,
)
from .metrics import (
    data_quality_flags,
    deceleration_flags,
    is_sequence_correct,
    peak_velocities,
    rate_transfer_ratio,
    separation_extrema,
    sequence_label,
    timing_gap,
    transfer_ratio,
    whip_timing_pct,
)
from .schema import (
    MomentumSample,
    MotorProfile,
    RotationSample,
    SwingAnalysisResult,
    round_half_up,
)
from .signals import (
    compute_velocity,
    estimate_sample_rate,
    moving_average,
    segment_momentum,
    separation_angle,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KinematicTrace:
    """Conditioned signals and detected events of one movement."""

    movement_id: str
    time: np.ndarray
    sample_rate: int
    momentum: Dict[str, np.ndarray]
    velocity: Dict[str, np.ndarray]
    energy: np.ndarray
    contact_index: int
    window_start: int
    window_end: int

    @property
    def window_length(self) -> int:
        return self.window_end - self.window_start

    @property
    def n_samples(self) -> int:
        return len(self.time)


def build_kinematic_trace(
    samples: Sequence[MomentumSample],
    config: Optional[AnalysisConfig] = None,
) -> KinematicTrace:
    """Condition signals and locate contact for one movement.

    Raises
    ------
    ValueError
        If *samples* is empty.
    """
    if not samples:
        raise ValueError("Movement has no samples")
    if config is None:
        config = AnalysisConfig()

    time = np.array([s.time for s in samples], dtype=float)
    fs = estimate_sample_rate(time, default=config.default_sample_rate)

    energy = np.array([s.total_kinetic_energy for s in samples], dtype=float)
    contact = detect_contact(energy, window=config.energy_window)
    start, end = analysis_window(contact, fs, config.analysis_window_ms)

    momentum = {
        seg: moving_average(segment_momentum(samples, seg), config.momentum_window)
        for seg in SEGMENTS
    }
    velocity = {
        seg: compute_velocity(momentum[seg], fs, window=config.velocity_window)
        for seg in SEGMENTS
    }

    return KinematicTrace(
        movement_id=samples[0].movement_id,
        time=time,
        sample_rate=fs,
        momentum=momentum,
        velocity=velocity,
        energy=moving_average(energy, config.energy_window),
        contact_index=contact,
        window_start=start,
        window_end=end,
    )


def analyze_movement(
    samples: Sequence[MomentumSample],
    rotation: Optional[Sequence[RotationSample]] = None,
    config: Optional[AnalysisConfig] = None,
) -> SwingAnalysisResult:
    """Analyse a single movement.

    Parameters
    ----------
    samples : sequence of MomentumSample
        Time-ordered momentum rows of one movement.
    rotation : sequence of RotationSample, optional
        Rotation rows of the same movement, aligned sample-for-sample.
    config : AnalysisConfig, optional
        Analysis constants; defaults when ``None``.

    Returns
    -------
    SwingAnalysisResult

    Raises
    ------
    ValueError
        If *samples* is empty.
    """
    config = analysis_config_from(config)
    trace = build_kinematic_trace(samples, config)
    fs = trace.sample_rate
    start, end = trace.window_start, trace.window_end
    length = trace.window_length

    quality = data_quality_flags(trace.momentum, start, end, config.weak_signal_ratio)

    peaks = detect_segment_peaks(
        trace.velocity, start, end,
        threshold_ratio=config.peak_threshold_ratio,
        min_samples=config.min_peak_window,
    )
    peak_vel = peak_velocities(trace.velocity, peaks)

    gap_ms, gap_pct = timing_gap(peaks["pelvis"], peaks["torso"], fs, length)
    whip = whip_timing_pct(peaks["torso"], start, length)
    ratio = transfer_ratio(peak_vel["pelvis"], peak_vel["torso"], config.transfer_epsilon)
    decel = deceleration_flags(trace.velocity, peaks, trace.contact_index, config.decel_ratio)
    correct = is_sequence_correct(peaks, fs, config.sequence_tolerance_s)

    outcome = classify(
        ClassificationInput(
            timing_gap_ms=gap_ms,
            whip_timing_pct=whip,
            transfer_ratio=ratio,
            pelvis_decel=decel["pelvis"],
            all_segments_decel=decel["all"],
            sequence_correct=correct,
            data_quality_flags=tuple(quality),
        ),
        config,
    )

    x_max, x_contact = separation_extrema(separation_angle(list(rotation or [])), start, end)

    return SwingAnalysisResult(
        movement_id=trace.movement_id,
        sample_rate=fs,
        swing_duration_ms=length / fs * 1000.0 if fs > 0 else 0.0,
        pelvis_peak_index=peaks["pelvis"],
        torso_peak_index=peaks["torso"],
        arms_peak_index=peaks["arms"],
        contact_index=trace.contact_index,
        transfer_ratio=round_half_up(ratio, 2),
        transfer_ratio_rating=rate_transfer_ratio(ratio),
        peak_timing_gap_ms=int(round_half_up(gap_ms)),
        peak_timing_gap_pct=round_half_up(gap_pct, 1),
        whip_timing_pct=round_half_up(whip, 1),
        pelvis_decel_before_contact=decel["pelvis"],
        torso_decel_before_contact=decel["torso"],
        arms_decel_before_contact=decel["arms"],
        all_segments_decel=decel["all"],
        sequence=sequence_label(peaks),
        sequence_correct=correct,
        motor_profile=outcome.profile,
        motor_profile_confidence=round_half_up(outcome.confidence, 2),
        spinner_score=outcome.scores[MotorProfile.SPINNER],
        whipper_score=outcome.scores[MotorProfile.WHIPPER],
        slingshotter_score=outcome.scores[MotorProfile.SLINGSHOTTER],
        titan_score=outcome.scores[MotorProfile.TITAN],
        x_factor_max=x_max,
        x_factor_at_contact=x_contact,
        data_quality_flags=tuple(quality),
    )


def analyze_session(
    momentum_text: str,
    rotation_text: Optional[str] = None,
    config: Optional[Union[AnalysisConfig, dict]] = None,
) -> List[SwingAnalysisResult]:
    """Analyse every movement of a session export.

    Movements are returned in first-seen order. Movements with fewer
    than ``config.min_samples`` samples are skipped. A movement whose
    analysis raises is logged and omitted; the rest of the batch is
    unaffected.

    Parameters
    ----------
    momentum_text : str
        Momentum/energy export (required).
    rotation_text : str, optional
        Rotation export sharing the movement id column.
    config : AnalysisConfig or dict, optional
        Analysis constants.

    Returns
    -------
    list of SwingAnalysisResult
    """
    config = analysis_config_from(config)
    momentum = group_by_movement(to_momentum_samples(parse_table(momentum_text)))
    rotation = {}
    if rotation_text:
        rotation = group_by_movement(to_rotation_samples(parse_table(rotation_text)))
        if not rotation:
            logger.warning("Rotation export has no usable rows")

    if not momentum:
        logger.warning("Momentum export has no usable rows")
        return []

    results = []
    for movement_id, samples in momentum.items():
        if len(samples) < config.min_samples:
            logger.info(
                f"Skipping movement {movement_id}: {len(samples)} samples "
                f"(< {config.min_samples})"
            )
            continue
        try:
            results.append(analyze_movement(samples, rotation.get(movement_id), config))
        except Exception as e:
            logger.error(f"Error analyzing movement {movement_id}: {e}", exc_info=True)

    logger.info(f"Analyzed {len(results)}/{len(momentum)} movements")
    return results


def analyze_files(
    momentum_path: Union[str, Path],
    rotation_path: Optional[Union[str, Path]] = None,
    config: Optional[Union[AnalysisConfig, dict]] = None,
) -> List[SwingAnalysisResult]:
    """Read export files and run :func:`analyze_session`.

    Raises
    ------
    FileNotFoundError
        If either file does not exist.
    """
    momentum_path = Path(momentum_path)
    if not momentum_path.exists():
        raise FileNotFoundError(f"File not found: {momentum_path}")
    momentum_text = momentum_path.read_text(encoding="utf-8-sig")

    rotation_text = None
    if rotation_path is not None:
        rotation_path = Path(rotation_path)
        if not rotation_path.exists():
            raise FileNotFoundError(f"File not found: {rotation_path}")
        rotation_text = rotation_path.read_text(encoding="utf-8-sig")

    return analyze_session(momentum_text, rotation_text, config)
