# tests/test_landmarks.py
#
# Tests for dmcore/landmarks.py, dmcore/thresholds.py and dmcore/config.py:
# data model defaults, input coercion, tiers and configuration.

from types import SimpleNamespace

import numpy as np
import pytest

from dmcore.config import PipelineConfig
from dmcore.landmarks import (
    LandmarkPoint,
    LandmarkSet,
    Region,
    as_landmark_set,
    region_of_landmark,
)
from dmcore.thresholds import LANDMARK_ALPHA, MIN_CONFIDENCE, SCORE_ALPHA, score_tier


# ===================================================================
# Data model
# ===================================================================

def test_from_records_defaults_missing_z_and_confidence():
    lm = LandmarkSet.from_records([{"x": 0.1, "y": 0.2}, {"x": 0.3, "y": 0.4, "z": None}])
    assert len(lm) == 2
    assert lm[0] == LandmarkPoint(0.1, 0.2, 0.0, 0.0)
    assert lm[1].z == 0.0


def test_from_records_accepts_objects_and_visibility_alias():
    recs = [
        SimpleNamespace(x=0.5, y=0.5, z=-0.1, visibility=0.9),
        SimpleNamespace(x=0.4, y=0.6, confidence=0.7),
    ]
    lm = LandmarkSet.from_records(recs)
    assert lm[0] == LandmarkPoint(0.5, 0.5, -0.1, 0.9)
    assert lm[1].confidence == 0.7


def test_from_records_requires_x_and_y():
    with pytest.raises(ValueError):
        LandmarkSet.from_records([{"x": 0.1}])


def test_from_points_roundtrip(pose):
    again = LandmarkSet.from_points(list(pose))
    np.testing.assert_array_equal(again.xyz, pose.xyz)
    np.testing.assert_array_equal(again.confidence, pose.confidence)


def test_two_column_input_gets_zero_depth():
    lm = LandmarkSet(np.ones((33, 2)))
    assert lm.xyz.shape == (33, 3)
    assert (lm.xyz[:, 2] == 0.0).all()
    assert (lm.confidence == 0.0).all()
    assert lm.is_complete


def test_arrays_are_read_only(pose):
    with pytest.raises(ValueError):
        pose.xyz[0, 0] = 2.0
    with pytest.raises(ValueError):
        pose.confidence[0] = 0.0


def test_constructor_rejects_bad_shapes():
    with pytest.raises(ValueError):
        LandmarkSet(np.zeros((33, 5)))
    with pytest.raises(ValueError):
        LandmarkSet(np.zeros((33, 3)), np.zeros(32))


def test_empty_set_is_incomplete():
    assert not LandmarkSet([]).is_complete
    assert len(LandmarkSet([])) == 0


# ===================================================================
# Coercion
# ===================================================================

def test_as_landmark_set_passthrough_and_none(pose):
    assert as_landmark_set(pose) is pose
    assert as_landmark_set(None) is None


def test_as_landmark_set_four_column_array(pose):
    arr = np.hstack([pose.xyz, pose.confidence[:, None]])
    lm = as_landmark_set(arr)
    np.testing.assert_array_equal(lm.xyz, pose.xyz)
    np.testing.assert_array_equal(lm.confidence, pose.confidence)


def test_as_landmark_set_unreadable_is_none():
    assert as_landmark_set(3.5) is None
    assert as_landmark_set([{"y": 1.0}]) is None
    assert as_landmark_set(np.zeros((4, 7))) is None


def test_region_of_landmark():
    assert region_of_landmark(0) is None
    assert region_of_landmark(13) == Region.LEFT_ARM
    assert region_of_landmark(16) == Region.RIGHT_ARM
    assert region_of_landmark(23) == Region.LEFT_LEG
    assert region_of_landmark(32) == Region.RIGHT_LEG


def test_region_values_are_wire_identifiers():
    assert [r.value for r in Region] == ["leftArm", "rightArm", "leftLeg", "rightLeg", "torso"]
    assert str(Region.TORSO) == "torso"
    assert Region("leftLeg") is Region.LEFT_LEG


# ===================================================================
# Tiers
# ===================================================================

@pytest.mark.parametrize("score, scale, tier", [
    (0.95, 1.0, "good"),
    (0.8, 1.0, "good"),
    (0.79, 1.0, "ok"),
    (0.5, 1.0, "ok"),
    (0.49, 1.0, "poor"),
    (85.0, 100.0, "good"),
    (50.0, 100.0, "ok"),
    (10.0, 100.0, "poor"),
])
def test_score_tier(score, scale, tier):
    assert score_tier(score, scale) == tier


# ===================================================================
# Configuration
# ===================================================================

def test_config_defaults():
    cfg = PipelineConfig()
    assert cfg.landmark_alpha == LANDMARK_ALPHA == 0.35
    assert cfg.score_alpha == SCORE_ALPHA == 0.12
    assert cfg.min_confidence == MIN_CONFIDENCE == 0.5
    assert cfg.smooth_landmarks is True
    assert cfg.validate() is cfg


def test_config_from_env():
    env = {
        "DM_LANDMARK_ALPHA": "0.5",
        "DM_SCORE_ALPHA": "0.2",
        "DM_MIN_CONFIDENCE": "0.6",
        "DM_SMOOTH_LANDMARKS": "false",
    }
    cfg = PipelineConfig.from_env(environ=env)
    assert cfg == PipelineConfig(0.5, 0.2, 0.6, False)


def test_config_from_env_empty_uses_defaults():
    assert PipelineConfig.from_env(environ={}) == PipelineConfig()


@pytest.mark.parametrize("env", [
    {"DM_SCORE_ALPHA": "0"},
    {"DM_LANDMARK_ALPHA": "1.2"},
    {"DM_MIN_CONFIDENCE": "-0.1"},
    {"DM_SMOOTH_LANDMARKS": "maybe"},
    {"DM_SCORE_ALPHA": "abc"},
])
def test_config_from_env_rejects_bad_values(env):
    with pytest.raises(ValueError):
        PipelineConfig.from_env(environ=env)


def test_as_landmark_set_rejects_non_finite_coordinates(pose):
    xyz = np.array(pose.xyz)
    xyz[3, 2] = np.nan
    assert as_landmark_set(LandmarkSet(xyz, pose.confidence)) is None
    assert as_landmark_set(xyz) is None
    recs = [{"x": p.x, "y": p.y, "z": p.z} for p in pose]
    recs[0]["x"] = float("inf")
    assert as_landmark_set(recs) is None
