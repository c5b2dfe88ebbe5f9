#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Replay two recorded pose tracks (reference vs live) through a
ComparisonPipeline, frame by frame, and summarize the scores.

Returns / writes:
  {
    "frames":  [{"frame": i, "t": seconds, "overall": float|None,
                 "regions": {"leftArm": float, ...}}, ...],
    "summary": {"frames_total", "frames_compared", "overall_mean",
                "region_means", "fps"}
  }

Frames where no comparison was possible carry overall=None and no regions.

CLI:
  python -m dmcore.pose_compare --ref cache/ref.posetrack.npz \
      --live cache/take1.posetrack.npz --out viz/take1_scores.json
"""

from __future__ import annotations

import argparse
import json
import logging
import os
from typing import Any, Dict, List, Optional

import numpy as np

from dmcore.config import PipelineConfig
from dmcore.landmarks import Region
from dmcore.logging_config import get_logger
from dmcore.pipeline import ComparisonPipeline
from dmcore.posetrack_io import (
    load_posetrack,
    image_size_from_meta,
    frame_landmark_sets,
)

log = logging.getLogger("dmcore.pose_compare")


def _summarize(frames: List[Dict[str, Any]], fps: float) -> Dict[str, Any]:
    overall = [f["overall"] for f in frames if f["overall"] is not None]
    region_means: Dict[str, float] = {}
    for r in Region:
        vals = [f["regions"][r.value] for f in frames if r.value in f["regions"]]
        if vals:
            region_means[r.value] = float(np.mean(vals))
    return {
        "frames_total": len(frames),
        "frames_compared": len(overall),
        "overall_mean": float(np.mean(overall)) if overall else None,
        "region_means": region_means,
        "fps": float(fps),
    }


def compare_posetracks_npz(
    reference_npz: str,
    live_npz: str,
    config: Optional[PipelineConfig] = None,
    include_frames: bool = True,
) -> Dict[str, Any]:
    """
    Compare a reference pose track against a live one.

    Tracks of unequal length are compared over the shorter one. The live
    track's fps sets the timeline.
    """
    ref_P, ref_V, ref_fps, ref_meta = load_posetrack(reference_npz)
    live_P, live_V, live_fps, live_meta = load_posetrack(live_npz)

    if ref_P.shape[0] != live_P.shape[0]:
        log.warning(
            "track lengths differ (ref=%d, live=%d); comparing first %d frames",
            ref_P.shape[0], live_P.shape[0], min(ref_P.shape[0], live_P.shape[0]),
        )
    if abs(ref_fps - live_fps) > 1e-3:
        log.warning("fps differ (ref=%.2f, live=%.2f); using live fps", ref_fps, live_fps)

    ref_frames = frame_landmark_sets(ref_P, ref_V, image_size_from_meta(ref_meta))
    live_frames = frame_landmark_sets(live_P, live_V, image_size_from_meta(live_meta))

    pipe = ComparisonPipeline(config)
    frames: List[Dict[str, Any]] = []
    for i, (ref, live) in enumerate(zip(ref_frames, live_frames)):
        result = pipe.process(ref, live)
        frames.append({
            "frame": i,
            "t": i / live_fps,
            "overall": None if result is None else float(result.overall_score),
            "regions": {} if result is None else {
                r.value: float(s) for r, s in result.region_scores.items()
            },
        })

    log.info(
        "compared %d/%d frames (%s vs %s)",
        pipe.frames_compared, pipe.frames_seen,
        os.path.basename(reference_npz), os.path.basename(live_npz),
    )

    out: Dict[str, Any] = {"summary": _summarize(frames, live_fps)}
    if include_frames:
        out["frames"] = frames
    return out


def main() -> int:
    ap = argparse.ArgumentParser(description="Score a live pose track against a reference track.")
    ap.add_argument("--ref", required=True, help="Reference .posetrack.npz")
    ap.add_argument("--live", required=True, help="Live .posetrack.npz")
    ap.add_argument("--out", type=str, default=None, help="Write full JSON here (default: print)")
    ap.add_argument("--summary", action="store_true", help="Print summary only")
    ap.add_argument("--no-smooth", action="store_true", help="Disable landmark position smoothing")
    ap.add_argument("--landmark-alpha", type=float, default=None)
    ap.add_argument("--score-alpha", type=float, default=None)
    ap.add_argument("--min-confidence", type=float, default=None)
    args = ap.parse_args()
    get_logger("dmcore")

    base = PipelineConfig.from_env()
    config = PipelineConfig(
        landmark_alpha=base.landmark_alpha if args.landmark_alpha is None else args.landmark_alpha,
        score_alpha=base.score_alpha if args.score_alpha is None else args.score_alpha,
        min_confidence=base.min_confidence if args.min_confidence is None else args.min_confidence,
        smooth_landmarks=base.smooth_landmarks and not args.no_smooth,
    )

    result = compare_posetracks_npz(
        args.ref, args.live, config=config, include_frames=not args.summary or bool(args.out)
    )

    if args.out:
        os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
        with open(args.out, "w") as f:
            json.dump(result, f, indent=2)
        log.info("wrote %s", args.out)

    if args.summary or args.out:
        print(json.dumps(result["summary"], indent=2))
    else:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
