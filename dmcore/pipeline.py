# dmcore/pipeline.py
#
# Per-frame comparison of a reference body against a live body.
#
#   raw ref  --LandmarkSmoother(ref)--\
#                                      >-- compare_poses --ScoreSmoother--> result
#   raw live --LandmarkSmoother(live)-/
#
# One pipeline == one comparison session. It owns its three smoothers; run
# several sessions side by side by creating several pipelines.

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from dmcore.config import PipelineConfig
from dmcore.landmarks import LandmarkSet, as_landmark_set
from dmcore.scoring import ComparisonResult, compare_poses
from dmcore.smoothing import LandmarkSmoother, ScoreSmoother

logger = logging.getLogger(__name__)


class ComparisonPipeline:
    """
    Synchronous, single-threaded frame processor.

    pipe = ComparisonPipeline()
    for ref_frame, live_frame in frames:
        result = pipe.process(ref_frame, live_frame)
        if result is None:
            ...  # nothing to show this frame
    pipe.reset()  # before reusing for another session
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = (config or PipelineConfig()).validate()
        self.reference_smoother = LandmarkSmoother(self.config.landmark_alpha)
        self.live_smoother = LandmarkSmoother(self.config.landmark_alpha)
        self.score_smoother = ScoreSmoother(self.config.score_alpha)
        self.frames_seen = 0
        self.frames_compared = 0

    def _prepare(self, value: Any, smoother: LandmarkSmoother) -> Optional[LandmarkSet]:
        lm = as_landmark_set(value)
        if lm is None or not self.config.smooth_landmarks:
            return lm
        return smoother.smooth(lm)

    def process(self, reference: Any, live: Any) -> Optional[ComparisonResult]:
        """
        Compare one frame pair. Either side may be None (no pose detected).

        Returns the comparison with smoothed region/overall scores, or None
        when no comparison was possible; the score smoother is not advanced
        on None frames.
        """
        self.frames_seen += 1
        ref = self._prepare(reference, self.reference_smoother)
        usr = self._prepare(live, self.live_smoother)

        raw = compare_poses(ref, usr, self.config.min_confidence)
        if raw is None:
            return None

        regions, overall = self.score_smoother.update(raw.region_scores, raw.overall_score)
        self.frames_compared += 1
        return replace(raw, region_scores=regions, overall_score=overall)

    def reset(self) -> None:
        """Clear all smoothing state; required before a new session."""
        self.reference_smoother.reset()
        self.live_smoother.reset()
        self.score_smoother.reset()
        self.frames_seen = 0
        self.frames_compared = 0
        logger.debug("pipeline reset")


__all__ = ["ComparisonPipeline"]
