# dmcore/scoring.py
#
# Angle-difference scoring and per-region aggregation for one frame.
#
# Flow for a (reference, live) pair of complete LandmarkSets:
#   compare_angles  -> gated AngleComparison list, catalog order
#   aggregate_regions -> mean score per region that has data
#   overall_score   -> mean of ALL angle scores (not of region means) * 100
#
# compare_poses returns None whenever no comparison is possible; callers must
# treat that as "nothing to show", never as a score of zero.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from dmcore.angles import ANGLE_DEFINITIONS, is_measurable, low_confidence_joints
from dmcore.landmarks import LandmarkSet, Region
from dmcore.thresholds import (
    FULL_MATCH_DEG,
    HALF_MATCH_DEG,
    ZERO_MATCH_DEG,
    MIN_CONFIDENCE,
)

logger = logging.getLogger(__name__)


def score_angle_diff(diff: float) -> float:
    """
    Match score in [0, 1] for an absolute angular difference in degrees.

      diff < 15          -> 1.0
      15 <= diff < 30    -> 1.0 .. 0.5 (linear)
      30 <= diff < 60    -> 0.5 .. 0.0 (linear)
      diff >= 60 (or inf, nan) -> 0.0
    """
    d = float(diff)
    if d < FULL_MATCH_DEG:
        return 1.0
    if d < HALF_MATCH_DEG:
        return 1.0 - ((d - FULL_MATCH_DEG) / (HALF_MATCH_DEG - FULL_MATCH_DEG)) * 0.5
    if d < ZERO_MATCH_DEG:
        return 0.5 - ((d - HALF_MATCH_DEG) / (ZERO_MATCH_DEG - HALF_MATCH_DEG)) * 0.5
    return 0.0


@dataclass(frozen=True)
class AngleComparison:
    name: str
    ref_angle: float   # degrees
    user_angle: float  # degrees
    diff: float        # |ref - user|, degrees
    score: float       # [0, 1]
    region: Region

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "ref_angle": self.ref_angle,
            "user_angle": self.user_angle,
            "diff": self.diff,
            "score": self.score,
            "region": self.region.value,
        }


@dataclass
class ComparisonResult:
    angles: List[AngleComparison]
    region_scores: Dict[Region, float] = field(default_factory=dict)
    overall_score: float = 0.0  # [0, 100]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "angles": [a.to_dict() for a in self.angles],
            "region_scores": {r.value: float(s) for r, s in self.region_scores.items()},
            "overall_score": float(self.overall_score),
        }


def compare_angles(
    reference: LandmarkSet,
    live: LandmarkSet,
    min_confidence: float = MIN_CONFIDENCE,
) -> List[AngleComparison]:
    """Measure and score every catalog angle that passes confidence gating."""
    out: List[AngleComparison] = []
    for d in ANGLE_DEFINITIONS:
        if not is_measurable(d, reference, live, min_confidence):
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "gating %s: low confidence at %s",
                    d.name, ", ".join(low_confidence_joints(d, reference, live, min_confidence)),
                )
            continue
        ref_angle = d.measure(reference)
        user_angle = d.measure(live)
        diff = abs(ref_angle - user_angle)
        out.append(AngleComparison(
            name=d.name,
            ref_angle=ref_angle,
            user_angle=user_angle,
            diff=diff,
            score=score_angle_diff(diff),
            region=d.region,
        ))
    return out


def aggregate_regions(angles: Sequence[AngleComparison]) -> Dict[Region, float]:
    """Mean score per region; regions without any angle are left out."""
    buckets: Dict[Region, List[float]] = {}
    for a in angles:
        buckets.setdefault(a.region, []).append(a.score)
    return {r: sum(buckets[r]) / len(buckets[r]) for r in Region if r in buckets}


def overall_score(angles: Sequence[AngleComparison]) -> float:
    """Mean of individual angle scores on a 0-100 scale (0.0 for no angles)."""
    if not angles:
        return 0.0
    return sum(a.score for a in angles) / len(angles) * 100.0


def compare_poses(
    reference: Optional[LandmarkSet],
    live: Optional[LandmarkSet],
    min_confidence: float = MIN_CONFIDENCE,
) -> Optional[ComparisonResult]:
    """
    Compare two frames. Returns None when either frame is missing or not a
    complete 33-point set, or when every angle was gated out.
    """
    if reference is None or live is None:
        return None
    if not (reference.is_complete and live.is_complete):
        logger.debug(
            "rejecting frame: landmark counts ref=%d live=%d", len(reference), len(live)
        )
        return None

    angles = compare_angles(reference, live, min_confidence)
    if not angles:
        logger.debug("rejecting frame: all angles below confidence %.2f", min_confidence)
        return None

    return ComparisonResult(
        angles=angles,
        region_scores=aggregate_regions(angles),
        overall_score=overall_score(angles),
    )


__all__ = [
    "score_angle_diff",
    "AngleComparison",
    "ComparisonResult",
    "compare_angles",
    "aggregate_regions",
    "overall_score",
    "compare_poses",
]
