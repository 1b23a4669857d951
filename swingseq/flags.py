"""Coaching flags derived from a swing analysis result.

Flags are plain records for downstream storage or messaging; nothing
here persists them.
"""

from dataclasses import asdict, dataclass
from typing import List, Tuple

from .constants import CANONICAL_SEQUENCE
from .schema import SwingAnalysisResult

PILLAR_BODY = "BODY"


@dataclass(frozen=True)
class SwingFlag:
    flag_type: str
    segment: str
    severity: str  # info, warning, critical
    message: str
    pillar: str = PILLAR_BODY
    drill_tags: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        d = asdict(self)
        d["drill_tags"] = list(self.drill_tags)
        return d


def _flag_segment(flag: str) -> str:
    name = flag.lower()
    if "torso" in name:
        return "torso"
    if "arms" in name:
        return "arms"
    return "unknown"


def derive_swing_flags(result: SwingAnalysisResult) -> List[SwingFlag]:
    """Build coaching flags for sequencing, deceleration and data quality."""
    flags = []

    if not result.sequence_correct:
        flags.append(SwingFlag(
            flag_type="SEQUENCE_ISSUE",
            segment="kinetic_chain",
            severity="warning",
            message=f"Sequence {result.sequence} - expected {CANONICAL_SEQUENCE}",
            drill_tags=("#Sequencing", "#Connection"),
        ))

    if not result.pelvis_decel_before_contact:
        flags.append(SwingFlag(
            flag_type="DECEL_FAILURE",
            segment="pelvis",
            severity="critical",
            message="Pelvis still accelerating at contact",
            drill_tags=("#EnergyLeak", "#TransferRatio"),
        ))

    if not result.torso_decel_before_contact:
        flags.append(SwingFlag(
            flag_type="DECEL_FAILURE",
            segment="torso",
            severity="warning",
            message="Torso still accelerating at contact",
            drill_tags=("#EnergyLeak", "#Tempo"),
        ))

    for flag in result.data_quality_flags:
        flags.append(SwingFlag(
            flag_type="DATA_QUALITY",
            segment=_flag_segment(flag),
            severity="info",
            message=f"Data quality issue: {flag}",
        ))

    return flags
