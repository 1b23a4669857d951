"""Record types flowing through the swing analysis pipeline.

Samples are built from parsed export rows (``ingest.parse_table``);
results are produced once per movement and never mutated afterwards.

Classes
-------
MomentumSample
    One row of the momentum/energy export.
RotationSample
    One row of the rotation (inverse kinematics) export.
MotorProfile
    Classification outcome: four archetypes plus two override categories.
SwingAnalysisResult
    Per-movement analysis record, flat enough to map onto a table row.
SessionSummary
    Aggregate over all movements of a session.

Functions
---------
save_results
    Save analysis results to JSON with numpy type conversion.
load_results
    Load and validate a results JSON file.
"""

import json
import math
from dataclasses import MISSING, asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from .constants import (
    CENTER_OF_MASS_COLUMNS,
    ENERGY_COLUMN,
    MOVEMENT_ID_COLUMN,
    NORM_TIME_COLUMN,
    PELVIS_ROT_COLUMN,
    SEGMENTS,
    TIME_COLUMN,
    TORSO_ROT_COLUMN,
    component_columns,
    projection_column,
)


def _convert_numpy(obj: Any) -> Any:
    """Recursively convert numpy types to Python types for JSON serialization."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, dict):
        return {k: _convert_numpy(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_convert_numpy(v) for v in obj]
    if isinstance(obj, np.bool_):
        return bool(obj)
    return obj


def as_number(value: Any) -> float:
    """Numeric view of a parsed cell; text and non-finite values give 0.0."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        value = float(value)
        return value if math.isfinite(value) else 0.0
    return 0.0


def movement_key(value: Any) -> str:
    """Normalize a movement identifier cell to a string key."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with ties toward +inf (``Math.round`` semantics)."""
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale


# ── Input samples ────────────────────────────────────────────────────


@dataclass(frozen=True)
class MomentumSample:
    """One time-stamped row of the momentum/energy export.

    ``projections[segment]`` is ``None`` when the export carries no
    pre-projected column for that segment; the pipeline then falls back
    to the magnitude of ``components[segment]``.
    """

    time: float
    movement_id: str
    norm_time: float = 0.0
    projections: Dict[str, Optional[float]] = field(default_factory=dict)
    components: Dict[str, Tuple[float, float, float]] = field(default_factory=dict)
    total_kinetic_energy: float = 0.0
    center_of_mass: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    @classmethod
    def from_record(cls, record: dict) -> "MomentumSample":
        projections = {}
        components = {}
        for seg in SEGMENTS:
            col = projection_column(seg)
            projections[seg] = as_number(record[col]) if col in record else None
            components[seg] = tuple(as_number(record.get(c)) for c in component_columns(seg))
        return cls(
            time=as_number(record.get(TIME_COLUMN)),
            movement_id=movement_key(record.get(MOVEMENT_ID_COLUMN, "unknown")),
            norm_time=as_number(record.get(NORM_TIME_COLUMN)),
            projections=projections,
            components=components,
            total_kinetic_energy=as_number(record.get(ENERGY_COLUMN)),
            center_of_mass=tuple(as_number(record.get(c)) for c in CENTER_OF_MASS_COLUMNS),
        )


@dataclass(frozen=True)
class RotationSample:
    """Pelvis and torso rotation angles (degrees) for one time step."""

    time: float
    movement_id: str
    pelvis_rot: float = 0.0
    torso_rot: float = 0.0

    @classmethod
    def from_record(cls, record: dict) -> "RotationSample":
        return cls(
            time=as_number(record.get(TIME_COLUMN)),
            movement_id=movement_key(record.get(MOVEMENT_ID_COLUMN, "unknown")),
            pelvis_rot=as_number(record.get(PELVIS_ROT_COLUMN)),
            torso_rot=as_number(record.get(TORSO_ROT_COLUMN)),
        )


# ── Outputs ──────────────────────────────────────────────────────────


class MotorProfile(str, Enum):
    """Movement classification outcome."""

    SPINNER = "SPINNER"
    WHIPPER = "WHIPPER"
    SLINGSHOTTER = "SLINGSHOTTER"
    TITAN = "TITAN"
    SEQUENCE_ISSUE = "SEQUENCE_ISSUE"
    DATA_QUALITY_ISSUE = "DATA_QUALITY_ISSUE"

    @property
    def is_archetype(self) -> bool:
        return self in ARCHETYPES


ARCHETYPES = (
    MotorProfile.SPINNER,
    MotorProfile.WHIPPER,
    MotorProfile.SLINGSHOTTER,
    MotorProfile.TITAN,
)


@dataclass(frozen=True)
class SwingAnalysisResult:
    """Analysis of a single movement.

    Indices refer to sample positions in the movement's momentum
    recording. Archetype scores are always present and all zero for
    the override categories.
    """

    movement_id: str
    sample_rate: int
    swing_duration_ms: float
    pelvis_peak_index: int
    torso_peak_index: int
    arms_peak_index: int
    contact_index: int
    transfer_ratio: float
    transfer_ratio_rating: str
    peak_timing_gap_ms: int
    peak_timing_gap_pct: float
    whip_timing_pct: float
    pelvis_decel_before_contact: bool
    torso_decel_before_contact: bool
    arms_decel_before_contact: bool
    all_segments_decel: bool
    sequence: str
    sequence_correct: bool
    motor_profile: MotorProfile
    motor_profile_confidence: float
    spinner_score: int = 0
    whipper_score: int = 0
    slingshotter_score: int = 0
    titan_score: int = 0
    x_factor_max: Optional[float] = None
    x_factor_at_contact: Optional[float] = None
    data_quality_flags: Tuple[str, ...] = ()

    @property
    def archetype_scores(self) -> Dict[MotorProfile, int]:
        return {
            MotorProfile.SPINNER: self.spinner_score,
            MotorProfile.WHIPPER: self.whipper_score,
            MotorProfile.SLINGSHOTTER: self.slingshotter_score,
            MotorProfile.TITAN: self.titan_score,
        }

    def to_dict(self) -> dict:
        """Flat, JSON-safe representation (one key per column)."""
        return _convert_numpy(asdict(self))

    @classmethod
    def from_dict(cls, row: dict) -> "SwingAnalysisResult":
        """Rebuild a result from :meth:`to_dict` output.

        Raises
        ------
        ValueError
            If *row* is not a dict, lacks a required field or holds an
            unknown motor profile.
        """
        if not isinstance(row, dict):
            raise ValueError("Result row must be a dict")
        required = [f.name for f in fields(cls)
                    if f.default is MISSING and f.default_factory is MISSING]
        missing = [name for name in required if name not in row]
        if missing:
            raise ValueError(f"Missing result fields: {missing}")
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in row.items() if k in known}
        try:
            values["motor_profile"] = MotorProfile(values["motor_profile"])
        except ValueError:
            raise ValueError(f"Unknown motor profile: {values['motor_profile']!r}")
        values["data_quality_flags"] = tuple(values.get("data_quality_flags") or ())
        return cls(**values)


@dataclass(frozen=True)
class SessionSummary:
    """Aggregate statistics for one recording session."""

    movement_count: int
    dominant_profile: Optional[MotorProfile]
    profile_consistency: float
    mean_timing_gap_ms: float
    sequence_rate: float
    decel_rate: float

    def to_dict(self) -> dict:
        d = _convert_numpy(asdict(self))
        if self.dominant_profile is None:
            d["dominant_profile"] = "UNKNOWN"
        return d


# ── JSON I/O ─────────────────────────────────────────────────────────


def save_results(
    results: List[SwingAnalysisResult],
    path: Union[str, Path],
    summary: Optional[SessionSummary] = None,
    indent: int = 2,
) -> None:
    """Save analysis results to a JSON file.

    Parameters
    ----------
    results : list of SwingAnalysisResult
        Per-movement results.
    path : str or Path
        Output file path. Parent directories are created if needed.
    summary : SessionSummary, optional
        Session summary stored alongside the results.
    indent : int, optional
        JSON indentation level (default 2).
    """
    from . import __version__

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "swingseq_version": __version__,
        "results": [r.to_dict() for r in results],
        "summary": summary.to_dict() if summary is not None else None,
    }
    with open(path, "w") as f:
        json.dump(_convert_numpy(payload), f, indent=indent, ensure_ascii=False)


def load_results(path: Union[str, Path]) -> List[SwingAnalysisResult]:
    """Load results saved by :func:`save_results`.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the JSON content is not a results file.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError("JSON root must be a dict")
    if "results" not in data or not isinstance(data["results"], list):
        raise ValueError("Missing 'results' list in JSON")

    results = []
    for i, row in enumerate(data["results"]):
        try:
            results.append(SwingAnalysisResult.from_dict(row))
        except ValueError as e:
            raise ValueError(f"Invalid result at index {i}: {e}")
    return results
