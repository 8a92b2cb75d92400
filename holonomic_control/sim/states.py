from __future__ import annotations

from dataclasses import dataclass, field

from holonomic_control.common import ChassisSpeeds, Pose2d


@dataclass(frozen=True)
class ChassisState:
    """Simulated chassis pose and its field-frame velocity."""

    pose: Pose2d = field(default_factory=Pose2d)
    velocity: ChassisSpeeds = field(default_factory=ChassisSpeeds.zero)
