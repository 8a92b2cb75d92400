"""Path and trajectory models plus the planner-backed trajectory generator."""

from .config import TrajectoryConfig
from .generator import GenerationResult, GenerationStatus, TrajectoryGenerator
from .parameterizer import TrajectoryGenerationError, parameterize
from .path import Path
from .planner import (
    FieldMap,
    Footprint,
    Obstacle,
    Planner,
    PlanningError,
    PlanningFailure,
    StraightLinePlanner,
)
from .trajectory import Trajectory, TrajectoryState

__all__ = [
    "FieldMap",
    "Footprint",
    "GenerationResult",
    "GenerationStatus",
    "Obstacle",
    "Path",
    "Planner",
    "PlanningError",
    "PlanningFailure",
    "StraightLinePlanner",
    "Trajectory",
    "TrajectoryConfig",
    "TrajectoryGenerationError",
    "TrajectoryGenerator",
    "TrajectoryState",
    "parameterize",
]
