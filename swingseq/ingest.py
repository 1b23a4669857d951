"""Delimited-text ingestion for momentum and rotation exports.

Parsing is deliberately lenient: sensor exports are often imperfect,
so malformed rows are dropped and unusable cells are coerced rather
than rejected.

Functions
---------
parse_table
    Parse delimited text with a header line into a list of records.
detect_table_kind
    Guess whether a header belongs to a momentum or rotation export.
read_table
    Read and parse a delimited file.
to_momentum_samples
    Convert parsed records to ``MomentumSample`` objects.
to_rotation_samples
    Convert parsed records to ``RotationSample`` objects.
group_by_movement
    Group samples by movement id, preserving first-seen order.
"""

import logging
import math
from pathlib import Path
from typing import Dict, List, Sequence, Union

from .constants import (
    ENERGY_COLUMN,
    MISSING_VALUES,
    PELVIS_ROT_COLUMN,
    SEGMENTS,
    TORSO_ROT_COLUMN,
    component_columns,
    projection_column,
)
from .schema import MomentumSample, RotationSample

logger = logging.getLogger(__name__)

_QUOTES = "\"'"


def _split_line(line: str) -> List[str]:
    """Split one line on commas, honouring double-quoted sections.

    Quote characters toggle the quoted state and are not kept.
    """
    fields = []
    current = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def _clean(value: str) -> str:
    value = value.strip()
    if value[:1] in _QUOTES:
        value = value[1:]
    if value[-1:] in _QUOTES:
        value = value[:-1]
    return value.strip()


def _coerce(value: str):
    """Convert a cleaned cell to int, float, 0 (missing) or text."""
    if value in MISSING_VALUES:
        return 0
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        return value
    return number if math.isfinite(number) else value


def parse_table(text: str) -> List[dict]:
    """Parse delimited text with a header line into records.

    Parameters
    ----------
    text : str
        Raw export text. The first non-blank line is the header.

    Returns
    -------
    list of dict
        One record per data line whose field count matches the header.
        Empty or header-only input yields an empty list.
    """
    if not text:
        return []
    lines = text.strip().splitlines()
    if len(lines) < 2:
        return []

    header = [_clean(h) for h in _split_line(lines[0])]
    n_cols = len(header)
    records = []
    dropped = 0

    for line in lines[1:]:
        values = _split_line(line)
        if len(values) != n_cols:
            dropped += 1
            continue
        records.append({key: _coerce(_clean(v)) for key, v in zip(header, values)})

    if dropped:
        logger.debug(f"Dropped {dropped} malformed rows")
    return records


def detect_table_kind(header: Sequence[str]) -> str:
    """Classify an export by its header.

    Returns
    -------
    str
        ``"momentum"``, ``"rotation"`` or ``"unknown"``.
    """
    cols = {str(h).strip().lower() for h in header}
    momentum_cols = {ENERGY_COLUMN}
    for seg in SEGMENTS:
        momentum_cols.add(projection_column(seg))
        momentum_cols.update(component_columns(seg))
    if cols & momentum_cols:
        return "momentum"
    if PELVIS_ROT_COLUMN in cols or TORSO_ROT_COLUMN in cols:
        return "rotation"
    return "unknown"


def read_table(path: Union[str, Path]) -> List[dict]:
    """Read a delimited export file and parse it with :func:`parse_table`.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    text = path.read_text(encoding="utf-8-sig")
    return parse_table(text)


def to_momentum_samples(records: List[dict]) -> List[MomentumSample]:
    return [MomentumSample.from_record(r) for r in records]


def to_rotation_samples(records: List[dict]) -> List[RotationSample]:
    return [RotationSample.from_record(r) for r in records]


def group_by_movement(samples: Sequence) -> Dict[str, list]:
    """Group samples by ``movement_id`` in first-seen order."""
    groups: Dict[str, list] = {}
    for s in samples:
        groups.setdefault(s.movement_id, []).append(s)
    return groups
