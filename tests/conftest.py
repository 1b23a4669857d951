"""Shared test fixtures for swingseq test suite.

Provides synthetic momentum/rotation exports and result builders used
across all test modules.

Synthetic swings are Gaussian momentum bumps per segment. A Gaussian
centred on sample ``c`` with width ``sigma`` has its velocity peak near
``c - sigma``, so segments sharing ``sigma`` keep the sample gaps
between their centres in their velocity peaks.
"""

import numpy as np
import pytest

MOMENTUM_ID_COL = "org_movement_id"
SEGMENT_PREFIXES = ("lowertorso", "torso", "arms")


def _gauss(n, center, sigma, amplitude):
    i = np.arange(n, dtype=float)
    return amplitude * np.exp(-0.5 * ((i - center) / sigma) ** 2)


def _fmt(v):
    return f"{float(v):.10g}"


def make_momentum_rows(
    movement_id="swing_1",
    fs=300,
    duration=1.0,
    centers=(160, 167, 173),
    amplitudes=(10.0, 16.0, 25.0),
    sigma=15.0,
    energy_center=230,
    energy_sigma=20.0,
    projected=True,
    time_scale=1.0,
):
    """Rows (list of str) for one synthetic movement, without header.

    Default: pelvis -> torso -> arms cascade with gaps of 7 and 6
    samples (~23 ms and ~20 ms at 300 Hz), contact at sample 230.
    *time_scale* multiplies the time column (1000 gives milliseconds).
    """
    n = int(round(fs * duration))
    signals = [_gauss(n, c, sigma, a) for c, a in zip(centers, amplitudes)]
    energy = _gauss(n, energy_center, energy_sigma, 100.0) + 1.0
    rows = []
    for i in range(n):
        t = i / fs * time_scale
        cells = [str(i), _fmt(t), _fmt(i / max(n - 1, 1)), movement_id]
        for sig in signals:
            if projected:
                cells.append(_fmt(sig[i]))
            else:
                # 0.6/0.8 split keeps the component magnitude equal to sig
                cells.extend([_fmt(0.6 * sig[i]), _fmt(0.8 * sig[i]), "0"])
        cells.append(_fmt(energy[i]))
        cells.extend(["0.1", "1.0", _fmt(0.001 * i)])
        rows.append(",".join(cells))
    return rows


def momentum_header(projected=True):
    cols = ["index", "time", "norm_time", MOMENTUM_ID_COL]
    for prefix in SEGMENT_PREFIXES:
        if projected:
            cols.append(f"{prefix}_angular_momentum_proj")
        else:
            cols.extend(f"{prefix}_angular_momentum_{a}" for a in ("x", "y", "z"))
    cols.append("total_kinetic_energy")
    cols.extend(["center_of_mass_x", "center_of_mass_y", "center_of_mass_z"])
    return ",".join(cols)


def make_momentum_csv(projected=True, **kwargs):
    """CSV text for a single synthetic movement."""
    rows = make_momentum_rows(projected=projected, **kwargs)
    return "\n".join([momentum_header(projected)] + rows) + "\n"


def make_session_csv(movements, projected=True):
    """CSV text for several movements.

    Parameters
    ----------
    movements : list of dict
        Keyword arguments for :func:`make_momentum_rows`, one per movement.
    """
    lines = [momentum_header(projected)]
    for kwargs in movements:
        lines.extend(make_momentum_rows(projected=projected, **kwargs))
    return "\n".join(lines) + "\n"


def make_rotation_csv(movement_id="swing_1", fs=300, duration=1.0, slope=0.1):
    """Rotation export where torso-pelvis separation grows linearly."""
    n = int(round(fs * duration))
    lines = ["index,time,org_movement_id,pelvis_rot,torso_rot"]
    for i in range(n):
        lines.append(f"{i},{_fmt(i / fs)},{movement_id},0,{_fmt(slope * i)}")
    return "\n".join(lines) + "\n"


def make_result(**overrides):
    """A SwingAnalysisResult with plausible defaults."""
    from swingseq.schema import MotorProfile, SwingAnalysisResult

    values = dict(
        movement_id="swing_1",
        sample_rate=300,
        swing_duration_ms=500.0,
        pelvis_peak_index=145,
        torso_peak_index=152,
        arms_peak_index=158,
        contact_index=230,
        transfer_ratio=1.6,
        transfer_ratio_rating="elite",
        peak_timing_gap_ms=23,
        peak_timing_gap_pct=4.7,
        whip_timing_pct=48.0,
        pelvis_decel_before_contact=True,
        torso_decel_before_contact=True,
        arms_decel_before_contact=True,
        all_segments_decel=True,
        sequence="P→T→A",
        sequence_correct=True,
        motor_profile=MotorProfile.SPINNER,
        motor_profile_confidence=0.77,
        spinner_score=100,
        whipper_score=50,
        slingshotter_score=0,
        titan_score=0,
    )
    values.update(overrides)
    return SwingAnalysisResult(**values)


@pytest.fixture
def swing_csv():
    return make_momentum_csv()


@pytest.fixture
def swing_samples():
    from swingseq.ingest import parse_table, to_momentum_samples
    return to_momentum_samples(parse_table(make_momentum_csv()))
