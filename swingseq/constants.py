"""Column names, segment definitions and rating bands for momentum exports."""

# ── Segments ─────────────────────────────────────────────────────────────
# Kinetic chain order: proximal -> mid -> distal.

SEGMENTS = ("pelvis", "torso", "arms")

# Column prefix used by the momentum export for each segment.
SEGMENT_COLUMN_PREFIX = {
    "pelvis": "lowertorso",
    "torso": "torso",
    "arms": "arms",
}

# One-letter labels used to build sequence strings such as "P→T→A".
SEGMENT_LABELS = {
    "pelvis": "P",
    "torso": "T",
    "arms": "A",
}

SEQUENCE_SEPARATOR = "→"
CANONICAL_SEQUENCE = SEQUENCE_SEPARATOR.join(SEGMENT_LABELS[s] for s in SEGMENTS)

# ── Momentum / energy export ─────────────────────────────────────────────

MOVEMENT_ID_COLUMN = "org_movement_id"
TIME_COLUMN = "time"
NORM_TIME_COLUMN = "norm_time"
ENERGY_COLUMN = "total_kinetic_energy"
CENTER_OF_MASS_COLUMNS = ("center_of_mass_x", "center_of_mass_y", "center_of_mass_z")


def projection_column(segment: str) -> str:
    """Column holding the pre-projected scalar momentum of *segment*."""
    return f"{SEGMENT_COLUMN_PREFIX[segment]}_angular_momentum_proj"


def component_columns(segment: str) -> tuple:
    """Columns holding the x/y/z angular momentum of *segment*."""
    prefix = SEGMENT_COLUMN_PREFIX[segment]
    return tuple(f"{prefix}_angular_momentum_{axis}" for axis in ("x", "y", "z"))


# ── Rotation (inverse kinematics) export ─────────────────────────────────

PELVIS_ROT_COLUMN = "pelvis_rot"
TORSO_ROT_COLUMN = "torso_rot"

# ── Transfer ratio rating ────────────────────────────────────────────────
# (rating, lower bound inclusive, upper bound, upper inclusive)
TRANSFER_RATIO_BANDS = (
    ("elite", 1.5, 1.8, True),
    ("good", 1.3, 1.5, False),
    ("developing", 1.0, 1.3, False),
)
TRANSFER_RATIO_FALLBACK = "priority"

# ── Data quality flags ───────────────────────────────────────────────────

WEAK_TORSO_SIGNAL = "WEAK_TORSO_SIGNAL"

# Missing-cell literals coerced to zero during ingestion.
MISSING_VALUES = ("", "n/a", "NaN")
