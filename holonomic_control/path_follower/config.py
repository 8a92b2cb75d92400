from __future__ import annotations

import math
from dataclasses import dataclass, field

from holonomic_control.common import DriveFrame, DriveRequestType


@dataclass(frozen=True)
class PIDGains:
    kp: float
    ki: float = 0.0
    kd: float = 0.0

    def __post_init__(self) -> None:
        if self.kp < 0.0 or self.ki < 0.0 or self.kd < 0.0:
            raise ValueError("PID gains must be non-negative.")


@dataclass(frozen=True)
class ProfiledPIDGains(PIDGains):
    max_velocity_rad_s: float = math.pi
    max_acceleration_rad_s2: float = 2.0 * math.pi

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.max_velocity_rad_s <= 0.0 or self.max_acceleration_rad_s2 <= 0.0:
            raise ValueError("Angular profile constraints must be strictly positive.")


@dataclass(frozen=True)
class TrackerConfig:
    """Feedback gains and output conventions for the trajectory tracker.

    The lateral gains drive both the X and Y position loops. ``invert_rotation``
    negates the commanded angular rate for platforms whose rotation sense is
    opposite to the controller's counter-clockwise-positive convention.
    """

    lateral: PIDGains = field(default_factory=lambda: PIDGains(kp=2.0, kd=0.0))
    angular: ProfiledPIDGains = field(
        default_factory=lambda: ProfiledPIDGains(
            kp=4.0,
            kd=0.0,
            max_velocity_rad_s=math.pi,
            max_acceleration_rad_s2=2.0 * math.pi,
        )
    )
    period_s: float = 0.02
    invert_rotation: bool = True
    frame: DriveFrame = DriveFrame.FIELD
    request_type: DriveRequestType = DriveRequestType.OPEN_LOOP_VOLTAGE
    translation_tolerance_m: float = 0.05
    heading_tolerance_rad: float = math.radians(2.0)

    def __post_init__(self) -> None:
        if self.period_s <= 0.0:
            raise ValueError("period_s must be positive.")
        if self.translation_tolerance_m < 0.0 or self.heading_tolerance_rad < 0.0:
            raise ValueError("Tolerances must be non-negative.")

    @classmethod
    def for_drivetrain(cls, constants: DrivetrainConstants, **overrides) -> TrackerConfig:
        """Default gains with the heading profile capped by the base's angular rate."""
        angular = ProfiledPIDGains(
            kp=4.0,
            max_velocity_rad_s=constants.max_angular_rate_rad_s,
            max_acceleration_rad_s2=2.0 * constants.max_angular_rate_rad_s,
        )
        return cls(angular=overrides.pop("angular", angular), **overrides)


@dataclass(frozen=True)
class DrivetrainConstants:
    """Physical constants of the swerve base; planner and controller limits derive from it."""

    length_m: float = 0.8
    width_m: float = 0.8
    max_speed_m_s: float = 4.5
    max_acceleration_m_s2: float = 3.0
    max_angular_rate_rad_s: float = math.pi

    def __post_init__(self) -> None:
        if self.length_m <= 0.0 or self.width_m <= 0.0:
            raise ValueError("Drivetrain dimensions must be positive.")
        if (
            self.max_speed_m_s <= 0.0
            or self.max_acceleration_m_s2 <= 0.0
            or self.max_angular_rate_rad_s <= 0.0
        ):
            raise ValueError("Drivetrain limits must be strictly positive.")
