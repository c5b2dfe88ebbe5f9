# dmcore/__init__.py
from .landmarks import Region, LandmarkPoint, LandmarkSet, as_landmark_set
from .angles import ANGLE_DEFINITIONS, AngleDefinition
from .scoring import AngleComparison, ComparisonResult, compare_poses, score_angle_diff
from .smoothing import LandmarkSmoother, ScoreSmoother
from .config import PipelineConfig
from .pipeline import ComparisonPipeline
from .thresholds import score_tier

__version__ = "0.1.0"
