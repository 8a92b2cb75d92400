"""Closed-loop trajectory tracking for holonomic drivetrains."""

from .config import DrivetrainConstants, PIDGains, ProfiledPIDGains, TrackerConfig
from .episode import EpisodeResult, EpisodeRunner
from .holonomic_controller import HolonomicDriveController
from .pid import (
    Constraints,
    PIDController,
    ProfiledPIDController,
    ProfileState,
    TrapezoidProfile,
)
from .tracker import TrackerDebug, TrackerState, TrackerStateError, TrajectoryTracker

__all__ = [
    "Constraints",
    "DrivetrainConstants",
    "EpisodeResult",
    "EpisodeRunner",
    "HolonomicDriveController",
    "PIDController",
    "PIDGains",
    "ProfileState",
    "ProfiledPIDController",
    "ProfiledPIDGains",
    "TrackerConfig",
    "TrackerDebug",
    "TrackerState",
    "TrackerStateError",
    "TrajectoryTracker",
    "TrapezoidProfile",
]
