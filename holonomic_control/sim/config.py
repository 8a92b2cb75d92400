from dataclasses import dataclass, field
import math

from holonomic_control.common import Pose2d


@dataclass(frozen=True)
class SimulatorConfig:
    """Configuration parameters for the holonomic chassis simulator."""

    dt: float = 0.02
    max_speed_m_s: float = 4.5
    max_accel_m_s2: float = 8.0
    max_angular_rate_rad_s: float = 2.0 * math.pi
    max_angular_accel_rad_s2: float = 4.0 * math.pi
    open_loop_time_constant: float = 0.08
    closed_loop_time_constant: float = 0.04
    invert_rotation: bool = True
    initial_pose: Pose2d = field(default_factory=Pose2d)

    def __post_init__(self) -> None:
        if self.dt <= 0.0:
            raise ValueError("dt must be positive.")
        if self.max_speed_m_s <= 0.0 or self.max_angular_rate_rad_s <= 0.0:
            raise ValueError("Speed limits must be strictly positive.")
        if self.max_accel_m_s2 <= 0.0 or self.max_angular_accel_rad_s2 <= 0.0:
            raise ValueError("Acceleration limits must be strictly positive.")
        if self.open_loop_time_constant < 0.0 or self.closed_loop_time_constant < 0.0:
            raise ValueError("Response time constants must be non-negative.")
