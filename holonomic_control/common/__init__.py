"""Geometry primitives and the pose/actuation interfaces shared by the stack."""

from .geometry import (
    ChassisSpeeds,
    DriveFrame,
    DriveRequestType,
    Pose2d,
    Vertex,
    lerp_angle,
    wrap_angle,
)
from .interfaces import ActuationSink, PoseSource
from .timer import Timer

__all__ = [
    "ActuationSink",
    "ChassisSpeeds",
    "DriveFrame",
    "DriveRequestType",
    "Pose2d",
    "PoseSource",
    "Timer",
    "Vertex",
    "lerp_angle",
    "wrap_angle",
]
