# dmcore/posetrack_io.py
# Loader for recorded pose tracks (.posetrack.npz) used for offline replay.
#
# Supported layouts:
#     * P (T,J,3), V (T,J), meta_json (JSON string)
#     * legacy kps_xyz (T,J,3), visibility (T,J), fps scalar/array
#
# load_posetrack always returns:
#     P:    (T, J, 3) float32, NaN where the detector found no pose
#     V:    (T, J)   float32 confidence in [0,1]
#     fps:  float (30.0 if missing)
#     meta: dict with at least "fps"
#
# frame_landmark_sets turns those arrays into one Optional[LandmarkSet] per
# frame, normalizing pixel coordinates when the image size is known.

from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterator, Optional, Tuple

import numpy as np

from dmcore.landmarks import LandmarkSet

DEFAULT_FPS = 30.0


def _parse_meta(raw: Any) -> Dict[str, Any]:
    """meta_json may arrive as dict, 0-d array, bytes or str; anything else -> {}."""
    if raw is None:
        return {}
    if isinstance(raw, np.ndarray) and raw.ndim == 0:
        raw = raw.item()
    if isinstance(raw, dict):
        return dict(raw)
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str) and raw.strip():
        try:
            out = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return out if isinstance(out, dict) else {}
    return {}


def _fps_from(meta: Dict[str, Any], npz) -> float:
    candidates = []
    if "fps" in meta:
        candidates.append(meta["fps"])
    if "fps" in npz.files:
        candidates.append(np.asarray(npz["fps"]).ravel()[0])
    for c in candidates:
        try:
            v = float(c)
        except (TypeError, ValueError):
            continue
        if np.isfinite(v) and v > 1e-3:
            return v
    return DEFAULT_FPS


def load_posetrack(path: str) -> Tuple[np.ndarray, np.ndarray, float, Dict[str, Any]]:
    """Load a pose-track NPZ and return (P, V, fps, meta)."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"PoseTrack NPZ not found: {path}")

    with np.load(path, allow_pickle=True) as d:
        files = set(d.files)
        meta = _parse_meta(d["meta_json"]) if "meta_json" in files else {}

        if "P" in files:
            P = d["P"].astype(np.float32)
            V = d["V"].astype(np.float32) if "V" in files else None
        elif "kps_xyz" in files:
            P = d["kps_xyz"].astype(np.float32)
            V = d["visibility"].astype(np.float32) if "visibility" in files else None
        else:
            raise KeyError(
                f"Unrecognized pose layout in '{path}'. "
                f"Expected P or kps_xyz, found {sorted(files)}"
            )

        if P.ndim != 3 or P.shape[2] not in (2, 3):
            raise ValueError(f"Invalid P shape in '{path}': {P.shape}")
        if P.shape[2] == 2:
            P = np.dstack([P, np.zeros(P.shape[:2], dtype=np.float32)])
        T, J, _ = P.shape

        if V is None:
            V = np.ones((T, J), dtype=np.float32)
        if V.ndim == 3 and V.shape[2] == 1:
            V = V[:, :, 0]
        if V.shape != (T, J):
            raise ValueError(f"Visibility shape {V.shape} does not match P {P.shape} in '{path}'")
        V = np.clip(np.nan_to_num(V, nan=0.0, posinf=0.0, neginf=0.0), 0.0, 1.0)

        fps = _fps_from(meta, d)
        meta.setdefault("fps", fps)
        meta.setdefault("source_path", os.path.abspath(path))

    return P, V.astype(np.float32), float(fps), meta


def image_size_from_meta(meta: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """(width, height) from image_w/image_h or image_size=[H, W, ...]; None if absent."""
    try:
        if "image_w" in meta and "image_h" in meta:
            return float(meta["image_w"]), float(meta["image_h"])
        if "image_size" in meta:
            h, w = list(meta["image_size"])[:2]
            return float(w), float(h)
    except (TypeError, ValueError):
        return None
    return None


def frame_landmark_sets(
    P: np.ndarray,
    V: np.ndarray,
    image_size: Optional[Tuple[float, float]] = None,
) -> Iterator[Optional[LandmarkSet]]:
    """
    Yield one LandmarkSet per frame, or None for frames with any non-finite
    coordinate (no pose detected).

    image_size=(width, height) converts pixel coordinates to frame-normalized
    ones: x / width, y / height, z / width.
    """
    scale = None
    if image_size is not None:
        w, h = image_size
        if w <= 0 or h <= 0:
            raise ValueError(f"image_size must be positive, got {image_size}")
        scale = np.array([w, h, w], dtype=np.float64)

    for t in range(P.shape[0]):
        xyz = np.asarray(P[t], dtype=np.float64)
        if not np.isfinite(xyz).all():
            yield None
            continue
        if scale is not None:
            xyz = xyz / scale
        yield LandmarkSet(xyz, V[t])


__all__ = [
    "DEFAULT_FPS",
    "load_posetrack",
    "image_size_from_meta",
    "frame_landmark_sets",
]
