from __future__ import annotations

import math

from holonomic_control.common import ChassisSpeeds, Pose2d, wrap_angle
from holonomic_control.trajectory import TrajectoryState

from .config import TrackerConfig
from .pid import Constraints, PIDController, ProfiledPIDController


class HolonomicDriveController:
    """Trajectory feedback for a holonomic base.

    Translation is path velocity feed-forward plus independent X/Y position
    loops; heading is driven toward a separately supplied rotation by a
    profiled loop. Output speeds are field-relative.
    """

    def __init__(
        self,
        x_controller: PIDController,
        y_controller: PIDController,
        theta_controller: ProfiledPIDController,
    ):
        self.x_controller = x_controller
        self.y_controller = y_controller
        self.theta_controller = theta_controller
        self.theta_controller.enable_continuous_input(-math.pi, math.pi)
        self.enabled = True
        self.pose_error = Pose2d()
        self.rotation_error = 0.0
        self._tolerance = Pose2d()
        self._first_run = True

    @classmethod
    def from_config(cls, config: TrackerConfig) -> HolonomicDriveController:
        lateral = config.lateral
        angular = config.angular
        controller = cls(
            PIDController(lateral.kp, lateral.ki, lateral.kd, config.period_s),
            PIDController(lateral.kp, lateral.ki, lateral.kd, config.period_s),
            ProfiledPIDController(
                angular.kp,
                angular.ki,
                angular.kd,
                Constraints(angular.max_velocity_rad_s, angular.max_acceleration_rad_s2),
                config.period_s,
                output_limit=angular.max_velocity_rad_s,
            ),
        )
        controller.set_tolerance(
            Pose2d(
                config.translation_tolerance_m,
                config.translation_tolerance_m,
                config.heading_tolerance_rad,
            )
        )
        return controller

    def set_enabled(self, enabled: bool) -> None:
        """When disabled only the feed-forward terms are output."""
        self.enabled = enabled

    def set_tolerance(self, tolerance: Pose2d) -> None:
        self._tolerance = tolerance

    def at_reference(self) -> bool:
        return (
            abs(self.pose_error.x) < self._tolerance.x
            and abs(self.pose_error.y) < self._tolerance.y
            and abs(self.rotation_error) < abs(self._tolerance.heading)
        )

    def reset(self) -> None:
        self.x_controller.reset()
        self.y_controller.reset()
        self._first_run = True

    def calculate(
        self,
        current_pose: Pose2d,
        desired_state: TrajectoryState,
        desired_rotation: float,
        dt: float | None = None,
    ) -> ChassisSpeeds:
        if self._first_run:
            self.theta_controller.reset(current_pose.heading)
            self._first_run = False

        trajectory_pose = desired_state.pose
        x_ff = desired_state.velocity * math.cos(trajectory_pose.heading)
        y_ff = desired_state.velocity * math.sin(trajectory_pose.heading)
        theta_ff = self.theta_controller.calculate(current_pose.heading, desired_rotation, dt)

        self.pose_error = trajectory_pose.relative_to(current_pose)
        self.rotation_error = wrap_angle(desired_rotation - current_pose.heading)

        if not self.enabled:
            return ChassisSpeeds(x_ff, y_ff, theta_ff)

        x_feedback = self.x_controller.calculate(current_pose.x, trajectory_pose.x, dt)
        y_feedback = self.y_controller.calculate(current_pose.y, trajectory_pose.y, dt)
        return ChassisSpeeds(x_ff + x_feedback, y_ff + y_feedback, theta_ff)
