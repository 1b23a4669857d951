"""swingseq -- Swing kinematic sequence analysis.

Quick start::

    from swingseq import analyze_session, summarize_session
    results = analyze_session(momentum_csv_text, rotation_csv_text)
    summary = summarize_session(results)

Single movement with custom thresholds::

    from swingseq import AnalysisConfig, analyze_movement, parse_table, to_momentum_samples
    samples = to_momentum_samples(parse_table(text))
    result = analyze_movement(samples, config=AnalysisConfig(decel_ratio=0.4))

Export and plots::

    from swingseq import to_dataframe, export_csv, plot_kinematic_sequence
    df = to_dataframe(results)
    export_csv(results, "./output")
"""

__version__ = "0.1.0"

from .config import (
    AnalysisConfig,
    DEFAULT_CONFIG,
    analysis_config_from,
    load_config,
    save_config,
)
from .schema import (
    MomentumSample,
    RotationSample,
    MotorProfile,
    SwingAnalysisResult,
    SessionSummary,
    save_results,
    load_results,
)
from .ingest import (
    parse_table,
    detect_table_kind,
    read_table,
    to_momentum_samples,
    to_rotation_samples,
    group_by_movement,
)
from .signals import (
    moving_average,
    segment_momentum,
    estimate_sample_rate,
    compute_velocity,
    separation_angle,
)
from .events import detect_contact, analysis_window, find_peak_in_window, detect_segment_peaks
from .metrics import (
    timing_gap,
    whip_timing_pct,
    transfer_ratio,
    rate_transfer_ratio,
    deceleration_flags,
    sequence_label,
    is_sequence_correct,
    data_quality_flags,
    separation_extrema,
)
from .classify import ClassificationInput, ClassificationRule, CLASSIFICATION_RULES, classify
from .pipeline import (
    KinematicTrace,
    build_kinematic_trace,
    analyze_movement,
    analyze_session,
    analyze_files,
)
from .session import summarize_session
from .flags import SwingFlag, derive_swing_flags
from .export import to_dataframe, export_csv, export_summary_json
from .plotting import plot_kinematic_sequence, plot_session_profiles

__all__ = [
    # Pipeline
    "analyze_session",
    "analyze_files",
    "analyze_movement",
    "build_kinematic_trace",
    "KinematicTrace",
    "summarize_session",
    # Ingestion
    "parse_table",
    "detect_table_kind",
    "read_table",
    "to_momentum_samples",
    "to_rotation_samples",
    "group_by_movement",
    # Signals & events
    "moving_average",
    "segment_momentum",
    "estimate_sample_rate",
    "compute_velocity",
    "separation_angle",
    "detect_contact",
    "analysis_window",
    "find_peak_in_window",
    "detect_segment_peaks",
    # Metrics
    "timing_gap",
    "whip_timing_pct",
    "transfer_ratio",
    "rate_transfer_ratio",
    "deceleration_flags",
    "sequence_label",
    "is_sequence_correct",
    "data_quality_flags",
    "separation_extrema",
    # Classification
    "ClassificationInput",
    "ClassificationRule",
    "CLASSIFICATION_RULES",
    "classify",
    # Records
    "MomentumSample",
    "RotationSample",
    "MotorProfile",
    "SwingAnalysisResult",
    "SessionSummary",
    "save_results",
    "load_results",
    # Flags
    "SwingFlag",
    "derive_swing_flags",
    # Export & plots
    "to_dataframe",
    "export_csv",
    "export_summary_json",
    "plot_kinematic_sequence",
    "plot_session_profiles",
    # Config
    "AnalysisConfig",
    "DEFAULT_CONFIG",
    "analysis_config_from",
    "load_config",
    "save_config",
    # Meta
    "__version__",
]
