#!/usr/bin/env python3
"""
plot_scores.py
Plot smoothed score timelines from a dmcore.pose_compare JSON.

- Top: overall score (0-100) with good/ok tier bands
- Bottom: one line per region (0-1); frames without a comparison are gaps

Usage:
  python -m dmcore.pose_compare --ref cache/ref.posetrack.npz \
      --live cache/take1.posetrack.npz --out viz/take1_scores.json
  python scripts/plot_scores.py viz/take1_scores.json --out viz/take1_scores.png
"""

import argparse
import json
import os
import sys

import numpy as np
import matplotlib.pyplot as plt

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from dmcore.landmarks import Region
from dmcore.thresholds import TIER_GOOD, TIER_OK, TIER_COLORS, score_tier


def series_from_frames(frames):
    """Return (t, overall, {region: values}) with NaN where nothing was compared."""
    t = np.array([f["t"] for f in frames], dtype=float)
    overall = np.array(
        [np.nan if f["overall"] is None else f["overall"] for f in frames], dtype=float
    )
    regions = {}
    for r in Region:
        vals = np.array([f["regions"].get(r.value, np.nan) for f in frames], dtype=float)
        if np.isfinite(vals).any():
            regions[r.value] = vals
    return t, overall, regions


def _tier_bands(ax, top):
    ax.axhspan(TIER_GOOD * top, top, color=TIER_COLORS["good"], alpha=0.12, lw=0)
    ax.axhspan(TIER_OK * top, TIER_GOOD * top, color=TIER_COLORS["ok"], alpha=0.12, lw=0)
    ax.axhspan(0, TIER_OK * top, color=TIER_COLORS["poor"], alpha=0.12, lw=0)


def main():
    ap = argparse.ArgumentParser(description="Plot score timelines from pose_compare JSON")
    ap.add_argument("json", help="Output of python -m dmcore.pose_compare --out")
    ap.add_argument("--out", default=None, help="PNG path (default: show window)")
    args = ap.parse_args()

    with open(args.json) as f:
        rep = json.load(f)
    frames = rep.get("frames")
    if not frames:
        ap.error("JSON has no per-frame data; re-run pose_compare with --out")

    t, overall, regions = series_from_frames(frames)

    fig, (ax0, ax1) = plt.subplots(2, 1, figsize=(10, 6), sharex=True)

    _tier_bands(ax0, 100.0)
    ax0.plot(t, overall, "k-", lw=1.5)
    ax0.set_ylim(0, 100)
    ax0.set_ylabel("Overall")
    mean = rep.get("summary", {}).get("overall_mean")
    title = "Overall score"
    if mean is not None:
        title += f" (mean {mean:.1f}, {score_tier(mean, 100.0)})"
    ax0.set_title(title)

    _tier_bands(ax1, 1.0)
    for name, vals in regions.items():
        ax1.plot(t, vals, lw=1, label=name)
    ax1.set_ylim(0, 1)
    ax1.set_ylabel("Region")
    ax1.set_xlabel("Time (s)")
    ax1.legend(loc="lower right", ncol=len(regions) or 1, fontsize=8)

    plt.tight_layout()
    if args.out:
        os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
        plt.savefig(args.out, dpi=180)
        print("Wrote:", args.out)
    else:
        plt.show()


if __name__ == "__main__":
    main()
