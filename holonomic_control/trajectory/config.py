from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class TrajectoryConfig:
    """Kinematic limits used to time-parameterize a planner path.

    Distances are in meters, velocities in m/s and accelerations in m/s².
    """

    max_velocity_m_s: float = 3.0
    max_acceleration_m_s2: float = 3.0
    start_velocity_m_s: float = 0.0
    end_velocity_m_s: float = 0.0
    max_centripetal_acceleration_m_s2: float | None = None
    sample_spacing_m: float = 0.1

    def __post_init__(self) -> None:
        if self.max_velocity_m_s <= 0.0:
            raise ValueError("max_velocity_m_s must be positive.")
        if self.max_acceleration_m_s2 <= 0.0:
            raise ValueError("max_acceleration_m_s2 must be positive.")
        if self.start_velocity_m_s < 0.0 or self.end_velocity_m_s < 0.0:
            raise ValueError("Start and end velocities must be non-negative.")
        if self.start_velocity_m_s > self.max_velocity_m_s:
            raise ValueError("start_velocity_m_s exceeds max_velocity_m_s.")
        if self.end_velocity_m_s > self.max_velocity_m_s:
            raise ValueError("end_velocity_m_s exceeds max_velocity_m_s.")
        if (
            self.max_centripetal_acceleration_m_s2 is not None
            and self.max_centripetal_acceleration_m_s2 <= 0.0
        ):
            raise ValueError("max_centripetal_acceleration_m_s2 must be positive when set.")
        if self.sample_spacing_m <= 0.0:
            raise ValueError("sample_spacing_m must be positive.")

    def with_start_velocity(self, velocity_m_s: float) -> TrajectoryConfig:
        return replace(self, start_velocity_m_s=velocity_m_s)

    def with_end_velocity(self, velocity_m_s: float) -> TrajectoryConfig:
        return replace(self, end_velocity_m_s=velocity_m_s)
