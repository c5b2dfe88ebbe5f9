# dmcore/landmarks.py
#
# Per-frame landmark data model shared by extraction, scoring and smoothing.
#
# A LandmarkSet is the single-frame analogue of a pose track: xyz is one
# (N, 3) slice of P and confidence one (N,) slice of V. Both arrays are
# read-only so a frame can be handed to several consumers safely.

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Optional

import numpy as np

from dmcore.joints import (
    NUM_LANDMARKS,
    LEFT_ARM_IDS,
    RIGHT_ARM_IDS,
    LEFT_LEG_IDS,
    RIGHT_LEG_IDS,
)

logger = logging.getLogger(__name__)


class Region(str, Enum):
    """Anatomical scoring regions; values are the identifiers emitted to renderers."""

    LEFT_ARM = "leftArm"
    RIGHT_ARM = "rightArm"
    LEFT_LEG = "leftLeg"
    RIGHT_LEG = "rightLeg"
    TORSO = "torso"

    def __str__(self) -> str:
        return self.value


_REGION_BY_LANDMARK = {
    i: region
    for region, ids in (
        (Region.LEFT_ARM, LEFT_ARM_IDS),
        (Region.RIGHT_ARM, RIGHT_ARM_IDS),
        (Region.LEFT_LEG, LEFT_LEG_IDS),
        (Region.RIGHT_LEG, RIGHT_LEG_IDS),
    )
    for i in ids
}


def region_of_landmark(index: int) -> Optional[Region]:
    """
    Region used to color a single landmark. Face landmarks have none.
    Shoulders and hips belong to their limb, matching skeleton coloring.
    """
    return _REGION_BY_LANDMARK.get(int(index))


@dataclass(frozen=True)
class LandmarkPoint:
    x: float
    y: float
    z: float = 0.0
    confidence: float = 0.0


def _field(rec: Any, name: str) -> Any:
    if isinstance(rec, dict):
        return rec.get(name)
    return getattr(rec, name, None)


class LandmarkSet:
    """
    Immutable frame of N landmarks.

      xyz:        (N, 3) float64, x/y normalized to the frame, z depth-relative
      confidence: (N,)   float64 in [0, 1]

    Only complete sets (N == 33) can be compared; smaller or larger sets are
    still representable so smoothers can see detector size changes.
    """

    __slots__ = ("xyz", "confidence")

    def __init__(self, xyz, confidence=None):
        P = np.array(xyz, dtype=np.float64)
        if P.size == 0:
            P = P.reshape(0, 3)
        if P.ndim != 2 or P.shape[1] not in (2, 3):
            raise ValueError(f"xyz must be (N,2) or (N,3), got {P.shape}")
        if P.shape[1] == 2:
            P = np.hstack([P, np.zeros((P.shape[0], 1))])

        if confidence is None:
            V = np.zeros(P.shape[0], dtype=np.float64)
        else:
            V = np.array(confidence, dtype=np.float64).reshape(-1)
            if V.shape[0] != P.shape[0]:
                raise ValueError(
                    f"confidence length {V.shape[0]} does not match {P.shape[0]} points"
                )

        P.setflags(write=False)
        V.setflags(write=False)
        self.xyz = P
        self.confidence = V

    # ----- constructors -----

    @classmethod
    def from_points(cls, points: Iterable[LandmarkPoint]) -> "LandmarkSet":
        pts = list(points)
        xyz = [(p.x, p.y, p.z) for p in pts]
        conf = [p.confidence for p in pts]
        return cls(np.asarray(xyz, dtype=np.float64).reshape(-1, 3), conf)

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> "LandmarkSet":
        """
        Build from detector output: objects or dicts exposing x, y and
        optionally z and confidence (or visibility). Missing z -> 0.0,
        missing confidence -> 0.0.
        """
        xyz = []
        conf = []
        for rec in records:
            x, y = _field(rec, "x"), _field(rec, "y")
            if x is None or y is None:
                raise ValueError("landmark record is missing x or y")
            z = _field(rec, "z")
            c = _field(rec, "confidence")
            if c is None:
                c = _field(rec, "visibility")
            xyz.append((float(x), float(y), 0.0 if z is None else float(z)))
            conf.append(0.0 if c is None else float(c))
        return cls(np.asarray(xyz, dtype=np.float64).reshape(-1, 3), conf)

    # ----- sequence protocol -----

    def __len__(self) -> int:
        return int(self.xyz.shape[0])

    def __getitem__(self, i: int) -> LandmarkPoint:
        x, y, z = self.xyz[i]
        return LandmarkPoint(float(x), float(y), float(z), float(self.confidence[i]))

    def __iter__(self) -> Iterator[LandmarkPoint]:
        for i in range(len(self)):
            yield self[i]

    def __repr__(self) -> str:
        return f"LandmarkSet(n={len(self)})"

    @property
    def is_complete(self) -> bool:
        return len(self) == NUM_LANDMARKS


def as_landmark_set(value: Any) -> Optional[LandmarkSet]:
    """
    Coerce a frame's landmark input into a LandmarkSet.

    Accepts None (no pose detected), a LandmarkSet, an (N,3)/(N,4) array
    (4th column = confidence) or a sequence of landmark records. Input that
    cannot be read, or that holds a non-finite coordinate, is treated like
    absence and returns None.
    """
    if value is None:
        return None
    if isinstance(value, LandmarkSet):
        lm = value
    else:
        try:
            if isinstance(value, np.ndarray) and value.ndim == 2 and value.shape[1] == 4:
                lm = LandmarkSet(value[:, :3], value[:, 3])
            elif isinstance(value, np.ndarray):
                lm = LandmarkSet(value)
            else:
                lm = LandmarkSet.from_records(value)
        except (TypeError, ValueError) as e:
            logger.debug("unreadable landmark input (%s); treating as absent", e)
            return None
    if not np.isfinite(lm.xyz).all():
        logger.debug("non-finite landmark coordinates; treating as absent")
        return None
    return lm


__all__ = [
    "Region",
    "LandmarkPoint",
    "LandmarkSet",
    "as_landmark_set",
    "region_of_landmark",
]
