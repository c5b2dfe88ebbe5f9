# dmcore/smoothing.py
#
# Stateful frame-to-frame smoothers.
#
# LandmarkSmoother: per-coordinate exponential blend of a raw LandmarkSet
#   toward the previous smoothed set. One instance per tracked body.
# ScoreSmoother: exponential moving average over region scores and the
#   overall score. One instance per comparison session.
#
# Both blend as prev + alpha * (new - prev), which equals
# alpha * new + (1 - alpha) * prev and is exact once new == prev.
# Neither shares state; call reset() whenever tracking or a session restarts.

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Tuple

from dmcore.landmarks import LandmarkSet, Region
from dmcore.thresholds import LANDMARK_ALPHA, SCORE_ALPHA, check_alpha

logger = logging.getLogger(__name__)


def _blend(prev: float, new: float, alpha: float) -> float:
    return prev + alpha * (new - prev)


class LandmarkSmoother:
    """
    Suppresses detector jitter on landmark positions.

    alpha in (0, 1]: higher follows the detector more closely, lower is
    smoother but lags. Confidence values are never smoothed; they pass
    through from the raw frame.
    """

    def __init__(self, alpha: float = LANDMARK_ALPHA):
        self.alpha = check_alpha(alpha)
        self._previous: Optional[LandmarkSet] = None

    @property
    def primed(self) -> bool:
        return self._previous is not None

    def smooth(self, raw: LandmarkSet) -> LandmarkSet:
        prev = self._previous
        if prev is None or len(prev) != len(raw):
            if prev is not None:
                logger.debug("landmark count changed %d -> %d; restarting", len(prev), len(raw))
            self._previous = raw
            return raw

        xyz = prev.xyz + self.alpha * (raw.xyz - prev.xyz)
        smoothed = LandmarkSet(xyz, raw.confidence)
        self._previous = smoothed
        return smoothed

    def reset(self) -> None:
        self._previous = None


class ScoreSmoother:
    """
    Suppresses flicker in the final score signal.

    The first update after construction or reset() is returned verbatim.
    Afterwards every incoming region blends against its previous value; a
    region seen for the first time starts from its own value, and a region
    missing from the input keeps its last smoothed value (it does not decay).
    """

    def __init__(self, alpha: float = SCORE_ALPHA):
        self.alpha = check_alpha(alpha)
        self._regions: Dict[Region, float] = {}
        self._overall: float = 0.0
        self._primed = False

    @property
    def primed(self) -> bool:
        return self._primed

    def update(
        self,
        region_scores: Mapping[Region, float],
        overall_score: float,
    ) -> Tuple[Dict[Region, float], float]:
        if not self._primed:
            self._regions = {r: float(s) for r, s in region_scores.items()}
            self._overall = float(overall_score)
            self._primed = True
        else:
            for r, s in region_scores.items():
                s = float(s)
                prev = self._regions.get(r, s)
                self._regions[r] = _blend(prev, s, self.alpha)
            self._overall = _blend(self._overall, float(overall_score), self.alpha)

        return dict(self._regions), self._overall

    def reset(self) -> None:
        self._regions = {}
        self._overall = 0.0
        self._primed = False


__all__ = ["LandmarkSmoother", "ScoreSmoother"]
