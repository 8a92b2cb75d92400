from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum

import numpy as np


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians to (-pi, pi]."""
    wrapped = math.remainder(float(angle), 2.0 * math.pi)
    if wrapped == -math.pi:
        return math.pi
    return wrapped


def lerp_angle(a: float, b: float, alpha: float) -> float:
    diff = math.remainder(b - a, 2.0 * math.pi)
    return wrap_angle(a + alpha * diff)


@dataclass(frozen=True)
class Pose2d:
    """Planar pose on the field. Heading is in radians, counter-clockwise positive."""

    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "heading", wrap_angle(self.heading))

    @classmethod
    def from_degrees(cls, x: float, y: float, heading_deg: float) -> Pose2d:
        return cls(x, y, math.radians(heading_deg))

    @property
    def heading_deg(self) -> float:
        return math.degrees(self.heading)

    @property
    def translation(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    def distance_to(self, other: Pose2d) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def relative_to(self, other: Pose2d) -> Pose2d:
        """Express this pose in the frame of ``other``."""
        dx = self.x - other.x
        dy = self.y - other.y
        cos_h = math.cos(other.heading)
        sin_h = math.sin(other.heading)
        return Pose2d(
            dx * cos_h + dy * sin_h,
            -dx * sin_h + dy * cos_h,
            self.heading - other.heading,
        )

    def interpolate(self, other: Pose2d, alpha: float) -> Pose2d:
        alpha = max(0.0, min(1.0, float(alpha)))
        return Pose2d(
            self.x + alpha * (other.x - self.x),
            self.y + alpha * (other.y - self.y),
            lerp_angle(self.heading, other.heading, alpha),
        )

    def is_close(
        self,
        other: Pose2d,
        translation_tolerance: float = 1e-6,
        heading_tolerance: float = 1e-6,
    ) -> bool:
        if self.distance_to(other) > translation_tolerance:
            return False
        return abs(wrap_angle(other.heading - self.heading)) <= heading_tolerance


@dataclass(frozen=True)
class Vertex:
    """Planar point exchanged with the planner."""

    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @classmethod
    def from_pose(cls, pose: Pose2d) -> Vertex:
        return cls(pose.x, pose.y)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    def distance_to(self, other: Vertex) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


class DriveFrame(Enum):
    FIELD = "field"
    ROBOT = "robot"


class DriveRequestType(Enum):
    OPEN_LOOP_VOLTAGE = "open_loop_voltage"
    CLOSED_LOOP_VELOCITY = "closed_loop_velocity"


@dataclass(frozen=True)
class ChassisSpeeds:
    """Chassis velocity command: vx, vy in m/s and omega in rad/s."""

    vx: float = 0.0
    vy: float = 0.0
    omega: float = 0.0

    @classmethod
    def zero(cls) -> ChassisSpeeds:
        return cls(0.0, 0.0, 0.0)

    def is_zero(self) -> bool:
        return self.vx == 0.0 and self.vy == 0.0 and self.omega == 0.0

    def with_inverted_rotation(self) -> ChassisSpeeds:
        return replace(self, omega=-self.omega)

    def to_robot_relative(self, heading: float) -> ChassisSpeeds:
        """Rotate field-frame speeds into the frame of a robot facing ``heading``."""
        cos_h = math.cos(heading)
        sin_h = math.sin(heading)
        return ChassisSpeeds(
            self.vx * cos_h + self.vy * sin_h,
            -self.vx * sin_h + self.vy * cos_h,
            self.omega,
        )

    def to_field_relative(self, heading: float) -> ChassisSpeeds:
        cos_h = math.cos(heading)
        sin_h = math.sin(heading)
        return ChassisSpeeds(
            self.vx * cos_h - self.vy * sin_h,
            self.vx * sin_h + self.vy * cos_h,
            self.omega,
        )
