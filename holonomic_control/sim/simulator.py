from dataclasses import dataclass

import numpy as np

from holonomic_control.common import (
    ChassisSpeeds,
    DriveFrame,
    DriveRequestType,
    Pose2d,
)

from .config import SimulatorConfig
from .states import ChassisState


@dataclass
class SimulationStep:
    time_s: float
    state: ChassisState
    commanded: ChassisSpeeds


class HolonomicSimulator:
    """First-order velocity response of a swerve base, integrated on the field frame.

    Acts as both the pose source and the actuation sink for the tracker.
    """

    def __init__(self, config: SimulatorConfig | None = None) -> None:
        self._config = config or SimulatorConfig()
        self.dt = float(self._config.dt)
        self.state = ChassisState(pose=self._config.initial_pose)
        self.time_s = 0.0
        self._command = ChassisSpeeds.zero()
        self._time_constant = self._config.open_loop_time_constant
        self.last_request: tuple[ChassisSpeeds, DriveFrame, DriveRequestType] | None = None
        self.command_count = 0

    @property
    def config(self) -> SimulatorConfig:
        return self._config

    def clock(self) -> float:
        return self.time_s

    def get_current_pose(self) -> Pose2d:
        return self.state.pose

    def apply_chassis_speeds(
        self,
        speeds: ChassisSpeeds,
        frame: DriveFrame,
        request_type: DriveRequestType,
    ) -> None:
        self.last_request = (speeds, frame, request_type)
        self.command_count += 1

        if frame is DriveFrame.ROBOT:
            speeds = speeds.to_field_relative(self.state.pose.heading)
        # The physical rotation sense of this platform may be opposite to the command's.
        omega = -speeds.omega if self._config.invert_rotation else speeds.omega
        self._command = ChassisSpeeds(speeds.vx, speeds.vy, omega)
        self._time_constant = (
            self._config.closed_loop_time_constant
            if request_type is DriveRequestType.CLOSED_LOOP_VELOCITY
            else self._config.open_loop_time_constant
        )

    def reset(self, pose: Pose2d | None = None, time_s: float = 0.0) -> None:
        self.state = ChassisState(pose=pose if pose is not None else self._config.initial_pose)
        self.time_s = float(time_s)
        self._command = ChassisSpeeds.zero()
        self.last_request = None
        self.command_count = 0

    def step(self, dt: float | None = None) -> SimulationStep:
        dt = float(dt if dt is not None else self.dt)
        if dt <= 0.0:
            raise ValueError("dt must be positive")

        velocity = self.state.velocity
        desired_xy = _limit_vector_norm(
            np.array([self._command.vx, self._command.vy], dtype=float),
            self._config.max_speed_m_s,
        )
        desired_omega = float(
            np.clip(
                self._command.omega,
                -self._config.max_angular_rate_rad_s,
                self._config.max_angular_rate_rad_s,
            )
        )

        # First-order response toward the command, then slew-limit the change.
        alpha = 1.0 if self._time_constant <= 0.0 else dt / (self._time_constant + dt)
        current_xy = np.array([velocity.vx, velocity.vy], dtype=float)
        delta_xy = _limit_vector_norm(
            alpha * (desired_xy - current_xy), self._config.max_accel_m_s2 * dt
        )
        max_delta_omega = self._config.max_angular_accel_rad_s2 * dt
        delta_omega = float(
            np.clip(alpha * (desired_omega - velocity.omega), -max_delta_omega, max_delta_omega)
        )

        new_xy = current_xy + delta_xy
        new_omega = velocity.omega + delta_omega

        pose = self.state.pose
        new_pose = Pose2d(
            pose.x + float(new_xy[0]) * dt,
            pose.y + float(new_xy[1]) * dt,
            pose.heading + new_omega * dt,
        )
        self.state = ChassisState(
            pose=new_pose,
            velocity=ChassisSpeeds(float(new_xy[0]), float(new_xy[1]), new_omega),
        )
        self.time_s += dt
        return SimulationStep(time_s=self.time_s, state=self.state, commanded=self._command)

    def advance(self, duration_s: float) -> list[SimulationStep]:
        """Step the plant for ``duration_s`` in increments of at most ``dt``."""
        steps: list[SimulationStep] = []
        remaining = float(duration_s)
        while remaining > 1e-12:
            dt = min(self.dt, remaining)
            steps.append(self.step(dt))
            remaining -= dt
        return steps


def _limit_vector_norm(vec: np.ndarray, max_norm: float) -> np.ndarray:
    if max_norm <= 0.0:
        return vec
    norm = float(np.linalg.norm(vec))
    if norm <= max_norm or norm == 0.0:
        return vec
    return vec * (max_norm / norm)
