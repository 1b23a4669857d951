"""Rule-based motor-profile classification.

Classification is an ordered decision table evaluated top to bottom:

1. data-quality flags present  -> DATA_QUALITY_ISSUE
2. sequencing incorrect        -> SEQUENCE_ISSUE
3. otherwise archetype scoring on the absolute pelvis-torso timing gap

Archetype bands (absolute gap, ms):

    SPINNER       gap < 30          (tight gap, early release)
    WHIPPER       25 <= gap <= 55
    SLINGSHOTTER  45 <= gap <= 80
    TITAN         no scoring rule; wins only when every score is zero

Each band grants a core score of 80 plus supporting-flag bonuses, and
a smaller score in a wider neighbouring band. The highest score wins,
with confidence equal to its share of the total score. Everything is
deterministic so the outcome can be explained to the athlete.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .config import AnalysisConfig
from .schema import ARCHETYPES, MotorProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationInput:
    """Features consumed by the classifier."""

    timing_gap_ms: float
    whip_timing_pct: float
    transfer_ratio: float
    pelvis_decel: bool
    all_segments_decel: bool
    sequence_correct: bool
    data_quality_flags: Tuple[str, ...] = ()

    @property
    def abs_gap_ms(self) -> float:
        return abs(self.timing_gap_ms)


@dataclass(frozen=True)
class ClassificationRule:
    """Override rule: when *predicate* holds, emit *profile*.

    ``confidence_field`` names the ``AnalysisConfig`` attribute holding
    the fixed confidence of the rule.
    """

    name: str
    predicate: Callable[[ClassificationInput], bool]
    profile: MotorProfile
    confidence_field: str


@dataclass(frozen=True)
class Classification:
    profile: MotorProfile
    confidence: float
    scores: Dict[MotorProfile, int]
    rule: str


CLASSIFICATION_RULES = (
    ClassificationRule(
        name="data_quality",
        predicate=lambda f: len(f.data_quality_flags) > 0,
        profile=MotorProfile.DATA_QUALITY_ISSUE,
        confidence_field="data_quality_confidence",
    ),
    ClassificationRule(
        name="sequence",
        predicate=lambda f: not f.sequence_correct,
        profile=MotorProfile.SEQUENCE_ISSUE,
        confidence_field="sequence_issue_confidence",
    ),
)


# ── Archetype scorers ────────────────────────────────────────────────


def _score_spinner(f: ClassificationInput) -> int:
    gap = f.abs_gap_ms
    if gap < 30:
        score = 80
        if f.pelvis_decel:
            score += 10
        if f.whip_timing_pct < 60:
            score += 10
        return score
    if gap < 45:
        return 40
    return 0


def _score_whipper(f: ClassificationInput) -> int:
    gap = f.abs_gap_ms
    if 25 <= gap <= 55:
        score = 80
        if f.all_segments_decel:
            score += 10
        if 1.4 <= f.transfer_ratio <= 1.9:
            score += 10
        return score
    if 15 <= gap <= 65:
        return 50
    return 0


def _score_slingshotter(f: ClassificationInput) -> int:
    gap = f.abs_gap_ms
    if 45 <= gap <= 80:
        score = 80
        if f.whip_timing_pct > 70:
            score += 10
        return score
    if gap > 35:
        return 40
    return 0


def _score_titan(f: ClassificationInput) -> int:
    # No observed rule populates TITAN; it is reached only as the
    # all-zero default.
    return 0


ARCHETYPE_SCORERS: Dict[MotorProfile, Callable[[ClassificationInput], int]] = {
    MotorProfile.SPINNER: _score_spinner,
    MotorProfile.WHIPPER: _score_whipper,
    MotorProfile.SLINGSHOTTER: _score_slingshotter,
    MotorProfile.TITAN: _score_titan,
}

DEFAULT_ARCHETYPE = MotorProfile.TITAN


def zero_scores() -> Dict[MotorProfile, int]:
    return {p: 0 for p in ARCHETYPES}


def score_archetypes(features: ClassificationInput) -> Dict[MotorProfile, int]:
    """Non-negative score per archetype, in tie-break order."""
    return {p: int(ARCHETYPE_SCORERS[p](features)) for p in ARCHETYPES}


def _select_archetype(
    scores: Dict[MotorProfile, int],
    features: ClassificationInput,
    config: AnalysisConfig,
) -> Tuple[MotorProfile, float]:
    total = sum(scores.values())
    if total <= 0:
        profile = DEFAULT_ARCHETYPE
        confidence = config.default_confidence
    else:
        best = max(scores.values())
        # dict order is the tie-break order
        profile = next(p for p, s in scores.items() if s == best)
        confidence = best / total
    if features.all_segments_decel:
        confidence = min(config.max_confidence, confidence + config.decel_confidence_bonus)
    return profile, min(1.0, max(0.0, confidence))


def classify(
    features: ClassificationInput,
    config: Optional[AnalysisConfig] = None,
) -> Classification:
    """Classify one movement.

    Parameters
    ----------
    features : ClassificationInput
        Timing, transfer and flag features of the movement.
    config : AnalysisConfig, optional
        Confidence constants; defaults when ``None``.

    Returns
    -------
    Classification
        Profile, confidence in [0, 1], per-archetype scores (all zero
        for override categories) and the name of the deciding rule.
    """
    if config is None:
        config = AnalysisConfig()

    for rule in CLASSIFICATION_RULES:
        if rule.predicate(features):
            return Classification(
                profile=rule.profile,
                confidence=float(getattr(config, rule.confidence_field)),
                scores=zero_scores(),
                rule=rule.name,
            )

    scores = score_archetypes(features)
    profile, confidence = _select_archetype(scores, features, config)
    logger.debug(f"Archetype scores {scores} -> {profile.value} ({confidence:.2f})")
    return Classification(profile=profile, confidence=confidence, scores=scores, rule="archetype")
