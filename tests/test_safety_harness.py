# tests/test_safety_harness.py
#
# Safety harness: package-level guarantees that do not belong to a single
# module. No external dependencies beyond numpy (matplotlib tests skip).
#
# Run: python -m pytest tests/test_safety_harness.py -v

import importlib.util
import logging
import os
import subprocess
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


# ===================================================================
# 1. Package import
# ===================================================================

def test_dmcore_import_without_matplotlib():
    """dmcore must import without pulling in plotting libraries."""
    code = "import sys, dmcore; assert 'matplotlib' not in sys.modules"
    proc = subprocess.run([sys.executable, "-c", code], cwd=ROOT, capture_output=True, text=True)
    assert proc.returncode == 0, proc.stderr


def test_public_api():
    import dmcore
    for name in (
        "ComparisonPipeline", "PipelineConfig", "LandmarkSet", "LandmarkPoint",
        "Region", "LandmarkSmoother", "ScoreSmoother", "compare_poses",
        "score_angle_diff", "score_tier", "as_landmark_set",
    ):
        assert hasattr(dmcore, name), name


# ===================================================================
# 2. Logging
# ===================================================================

def test_get_logger_attaches_one_handler():
    from dmcore.logging_config import get_logger
    a = get_logger("dmcore.test_harness", level="DEBUG")
    b = get_logger("dmcore.test_harness")
    assert a is b
    assert len(a.handlers) == 1


def test_rejected_frames_are_logged_at_debug(pose, caplog):
    from dmcore.landmarks import LandmarkSet
    from dmcore.scoring import compare_poses
    short = LandmarkSet(pose.xyz[:5], pose.confidence[:5])
    with caplog.at_level(logging.DEBUG, logger="dmcore.scoring"):
        assert compare_poses(pose, short) is None
    assert any("rejecting frame" in r.getMessage() for r in caplog.records)


# ===================================================================
# 3. Plot helper (optional viz extra)
# ===================================================================

def test_plot_series_from_frames():
    mpl = pytest.importorskip("matplotlib")
    mpl.use("Agg")
    spec = importlib.util.spec_from_file_location(
        "plot_scores", os.path.join(ROOT, "scripts", "plot_scores.py")
    )
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)

    frames = [
        {"frame": 0, "t": 0.0, "overall": 90.0, "regions": {"leftArm": 0.9}},
        {"frame": 1, "t": 0.1, "overall": None, "regions": {}},
    ]
    t, overall, regions = mod.series_from_frames(frames)
    assert list(t) == [0.0, 0.1]
    assert overall[0] == 90.0 and overall[1] != overall[1]  # NaN gap
    assert list(regions) == ["leftArm"]


def test_gated_angles_name_their_landmarks_at_debug(make_pose, caplog):
    from dmcore.scoring import compare_poses
    with caplog.at_level(logging.DEBUG, logger="dmcore.scoring"):
        result = compare_poses(make_pose(), make_pose(low={15: 0.1}))
    assert result is not None
    assert any(
        "left_elbow" in r.getMessage() and "left_wrist" in r.getMessage()
        for r in caplog.records
    )
