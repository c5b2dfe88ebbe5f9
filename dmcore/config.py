"""
Pipeline configuration.

Defaults come from dmcore.thresholds; `PipelineConfig.from_env()` lets a host
application override them through environment variables:

  DM_LANDMARK_ALPHA    positional smoothing factor, (0, 1]
  DM_SCORE_ALPHA       score smoothing factor, (0, 1]
  DM_MIN_CONFIDENCE    landmark confidence gate, [0, 1]
  DM_SMOOTH_LANDMARKS  "true"/"false", pre-smooth landmark positions
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dmcore.thresholds import (
    LANDMARK_ALPHA,
    SCORE_ALPHA,
    MIN_CONFIDENCE,
    check_alpha,
    check_confidence,
)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_bool(raw: str, name: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for one ComparisonPipeline."""

    landmark_alpha: float = LANDMARK_ALPHA
    score_alpha: float = SCORE_ALPHA
    min_confidence: float = MIN_CONFIDENCE
    smooth_landmarks: bool = True

    def validate(self) -> "PipelineConfig":
        """Raise ValueError on out-of-range values; return self for chaining."""
        check_alpha(self.landmark_alpha, "landmark_alpha")
        check_alpha(self.score_alpha, "score_alpha")
        check_confidence(self.min_confidence, "min_confidence")
        return self

    @classmethod
    def from_env(
        cls,
        prefix: str = "DM_",
        environ: Optional[Mapping[str, str]] = None,
    ) -> "PipelineConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        cfg = cls(
            landmark_alpha=float(env.get(f"{prefix}LANDMARK_ALPHA", defaults.landmark_alpha)),
            score_alpha=float(env.get(f"{prefix}SCORE_ALPHA", defaults.score_alpha)),
            min_confidence=float(env.get(f"{prefix}MIN_CONFIDENCE", defaults.min_confidence)),
            smooth_landmarks=_env_bool(
                env.get(f"{prefix}SMOOTH_LANDMARKS", "true"), f"{prefix}SMOOTH_LANDMARKS"
            ),
        )
        return cfg.validate()


__all__ = ["PipelineConfig"]
