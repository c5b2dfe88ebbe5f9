# dmcore/thresholds.py
# Centralized constants for confidence gating, angle scoring and smoothing.

from __future__ import annotations

from typing import Dict

# =========================
# Confidence gating
# =========================
# A landmark is usable only when its detector confidence reaches this value
# in BOTH the reference and the live frame.

MIN_CONFIDENCE: float = 0.5

# =========================
# Angle-difference curve (degrees)
# =========================
# |diff| <  FULL_MATCH_DEG            -> 1.0
# |diff| in [FULL, HALF)              -> 1.0 .. 0.5 linear
# |diff| in [HALF, ZERO)              -> 0.5 .. 0.0 linear
# |diff| >= ZERO_MATCH_DEG            -> 0.0

FULL_MATCH_DEG: float = 15.0
HALF_MATCH_DEG: float = 30.0
ZERO_MATCH_DEG: float = 60.0

# =========================
# Smoothing factors
# =========================
# Higher alpha = more responsive, lower = smoother.

LANDMARK_ALPHA: float = 0.35
SCORE_ALPHA: float = 0.12  # ~8 frames at 30 fps

# =========================
# Display tiers (fraction of a full match)
# =========================

TIER_GOOD: float = 0.8
TIER_OK: float = 0.5

TIER_COLORS: Dict[str, str] = {
    "good": "#00ff88",
    "ok": "#ffaa00",
    "poor": "#ff2d44",
}

# =========================
# Helpers
# =========================

def score_tier(score: float, scale: float = 1.0) -> str:
    """
    Map a score to its display tier: "good", "ok" or "poor".

    Region scores live in [0, 1] (scale=1); the overall score lives in
    [0, 100] (scale=100).
    """
    frac = float(score) / float(scale)
    if frac >= TIER_GOOD:
        return "good"
    if frac >= TIER_OK:
        return "ok"
    return "poor"


def check_alpha(alpha: float, name: str = "alpha") -> float:
    """Return alpha as float, raising ValueError unless it lies in (0, 1]."""
    a = float(alpha)
    if not (0.0 < a <= 1.0):
        raise ValueError(f"{name} must be in (0, 1], got {alpha!r}")
    return a


def check_confidence(value: float, name: str = "min_confidence") -> float:
    """Return value as float, raising ValueError unless it lies in [0, 1]."""
    v = float(value)
    if not (0.0 <= v <= 1.0):
        raise ValueError(f"{name} must be in [0, 1], got {value!r}")
    return v


__all__ = [
    "MIN_CONFIDENCE",
    "FULL_MATCH_DEG",
    "HALF_MATCH_DEG",
    "ZERO_MATCH_DEG",
    "LANDMARK_ALPHA",
    "SCORE_ALPHA",
    "TIER_GOOD",
    "TIER_OK",
    "TIER_COLORS",
    "score_tier",
    "check_alpha",
    "check_confidence",
]
