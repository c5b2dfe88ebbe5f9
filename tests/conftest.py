import sys, os; sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# --- Synthetic 33-point poses shared by the test modules ---
import numpy as np
import pytest

from dmcore.landmarks import LandmarkSet


def upright_xyz() -> np.ndarray:
    """
    Standing figure facing the camera, frame-normalized coordinates
    (y grows downward). Hands and feet sit next to wrists/ankles so no
    catalog ray is degenerate.
    """
    P = np.zeros((33, 3), dtype=np.float64)
    P[0:11] = [0.50, 0.15, 0.0]                      # face
    P[11], P[12] = [0.60, 0.30, 0.0], [0.40, 0.30, 0.0]  # shoulders
    P[13], P[14] = [0.65, 0.45, 0.0], [0.35, 0.45, 0.0]  # elbows
    P[15], P[16] = [0.70, 0.60, 0.0], [0.30, 0.60, 0.0]  # wrists
    for i in (17, 19, 21):
        P[i] = P[15] + [0.01, 0.02, 0.0]
    for i in (18, 20, 22):
        P[i] = P[16] + [-0.01, 0.02, 0.0]
    P[23], P[24] = [0.55, 0.60, 0.0], [0.45, 0.60, 0.0]  # hips
    P[25], P[26] = [0.56, 0.78, 0.02], [0.44, 0.78, 0.02]  # knees
    P[27], P[28] = [0.57, 0.95, 0.0], [0.43, 0.95, 0.0]  # ankles
    P[29], P[30] = [0.57, 0.97, -0.01], [0.43, 0.97, -0.01]  # heels
    P[31], P[32] = [0.59, 0.98, 0.03], [0.41, 0.98, 0.03]  # toes
    return P


@pytest.fixture
def make_pose():
    """
    Factory: make_pose(conf=1.0, overrides={idx: (x, y, z)}, low={idx: c})
    -> LandmarkSet built on the upright figure.
    """
    def _make(conf=1.0, overrides=None, low=None):
        P = upright_xyz()
        for i, xyz in (overrides or {}).items():
            P[i] = xyz
        V = np.full(33, float(conf))
        for i, c in (low or {}).items():
            V[i] = c
        return LandmarkSet(P, V)
    return _make


@pytest.fixture
def pose(make_pose):
    return make_pose()
