# dmcore/angles.py
#
# Anatomical angle catalog and per-frame angle measurement.
#
#   - joint angles: angle at B between rays B->A and B->C, in 3-D (z = 0 when
#     the detector gives none)
#   - torso lean: |angle| between image vertical and hip_mid -> shoulder_mid
#
# Degenerate geometry (coincident points) yields 0 degrees, never NaN.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from dmcore.joints import (
    LEFT_SHOULDER, RIGHT_SHOULDER,
    LEFT_ELBOW, RIGHT_ELBOW,
    LEFT_WRIST, RIGHT_WRIST,
    LEFT_HIP, RIGHT_HIP,
    LEFT_KNEE, RIGHT_KNEE,
    LEFT_ANKLE, RIGHT_ANKLE,
    TORSO_IDS,
    JOINT_NAME_BY_INDEX,
)
from dmcore.landmarks import LandmarkSet, Region
from dmcore.thresholds import MIN_CONFIDENCE

JOINT = "joint"
TORSO_LEAN = "torso_lean"


def joint_angle_deg(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> float:
    """Angle ABC in degrees, in [0, 180]. Zero-length rays give 0.0."""
    v1 = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    v2 = np.asarray(c, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    n1 = float(np.linalg.norm(v1))
    n2 = float(np.linalg.norm(v2))
    if n1 == 0.0 or n2 == 0.0:
        return 0.0
    cosang = float(np.clip(np.dot(v1 / n1, v2 / n2), -1.0, 1.0))
    return float(np.degrees(np.arccos(cosang)))


def torso_lean_deg(landmarks: LandmarkSet) -> float:
    """
    Lean of the torso away from vertical, in degrees (0 = upright).

    Uses the x/y image plane (y grows downward), and the absolute value so a
    lean to the left and an equal lean to the right compare as equal.
    """
    P = landmarks.xyz
    sh_mid = 0.5 * (P[LEFT_SHOULDER, :2] + P[RIGHT_SHOULDER, :2])
    hip_mid = 0.5 * (P[LEFT_HIP, :2] + P[RIGHT_HIP, :2])
    dx, dy = sh_mid - hip_mid
    if dx == 0.0 and dy == 0.0:
        return 0.0
    return abs(math.degrees(math.atan2(float(dx), float(-dy))))


@dataclass(frozen=True)
class AngleDefinition:
    """
    One catalog entry.

    kind == "joint":      joints = (A, B, C), angle measured at B
    kind == "torso_lean": joints = (L_SHO, R_SHO, L_HIP, R_HIP)

    `joints` is also the set of landmarks that must pass confidence gating.
    """
    name: str
    joints: Tuple[int, ...]
    region: Region
    kind: str = JOINT

    def measure(self, landmarks: LandmarkSet) -> float:
        if self.kind == TORSO_LEAN:
            return torso_lean_deg(landmarks)
        a, b, c = self.joints
        P = landmarks.xyz
        return joint_angle_deg(P[a], P[b], P[c])


ANGLE_DEFINITIONS: Tuple[AngleDefinition, ...] = (
    # elbows: shoulder -> elbow -> wrist
    AngleDefinition("left_elbow", (LEFT_SHOULDER, LEFT_ELBOW, LEFT_WRIST), Region.LEFT_ARM),
    AngleDefinition("right_elbow", (RIGHT_SHOULDER, RIGHT_ELBOW, RIGHT_WRIST), Region.RIGHT_ARM),
    # shoulders: elbow -> shoulder -> hip
    AngleDefinition("left_shoulder", (LEFT_ELBOW, LEFT_SHOULDER, LEFT_HIP), Region.LEFT_ARM),
    AngleDefinition("right_shoulder", (RIGHT_ELBOW, RIGHT_SHOULDER, RIGHT_HIP), Region.RIGHT_ARM),
    # knees: hip -> knee -> ankle
    AngleDefinition("left_knee", (LEFT_HIP, LEFT_KNEE, LEFT_ANKLE), Region.LEFT_LEG),
    AngleDefinition("right_knee", (RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE), Region.RIGHT_LEG),
    # hips: shoulder -> hip -> knee
    AngleDefinition("left_hip", (LEFT_SHOULDER, LEFT_HIP, LEFT_KNEE), Region.LEFT_LEG),
    AngleDefinition("right_hip", (RIGHT_SHOULDER, RIGHT_HIP, RIGHT_KNEE), Region.RIGHT_LEG),
    # whole-body posture
    AngleDefinition(
        "torso_lean",
        TORSO_IDS,
        Region.TORSO,
        kind=TORSO_LEAN,
    ),
)

ANGLE_NAMES: Tuple[str, ...] = tuple(d.name for d in ANGLE_DEFINITIONS)


def is_measurable(
    definition: AngleDefinition,
    reference: LandmarkSet,
    live: LandmarkSet,
    min_confidence: float = MIN_CONFIDENCE,
) -> bool:
    """True when every landmark of `definition` is confident in both frames."""
    idx = list(definition.joints)
    return bool(
        np.all(reference.confidence[idx] >= min_confidence)
        and np.all(live.confidence[idx] >= min_confidence)
    )


def low_confidence_joints(
    definition: AngleDefinition,
    reference: LandmarkSet,
    live: LandmarkSet,
    min_confidence: float = MIN_CONFIDENCE,
) -> Tuple[str, ...]:
    """Names of the landmarks of `definition` that fail gating in either frame."""
    return tuple(
        JOINT_NAME_BY_INDEX[j]
        for j in definition.joints
        if not (reference.confidence[j] >= min_confidence and live.confidence[j] >= min_confidence)
    )


__all__ = [
    "JOINT",
    "TORSO_LEAN",
    "AngleDefinition",
    "ANGLE_DEFINITIONS",
    "ANGLE_NAMES",
    "joint_angle_deg",
    "torso_lean_deg",
    "is_measurable",
    "low_confidence_joints",
]
