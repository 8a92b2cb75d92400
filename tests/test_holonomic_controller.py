"""Tests for the holonomic drive controller feed-forward and feedback terms."""

from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from holonomic_control.common import Pose2d
from holonomic_control.path_follower import (
    DrivetrainConstants,
    HolonomicDriveController,
    PIDGains,
    TrackerConfig,
)
from holonomic_control.trajectory import TrajectoryState


def make_controller(**kwargs) -> HolonomicDriveController:
    return HolonomicDriveController.from_config(TrackerConfig(**kwargs))


def test_on_path_output_is_pure_feed_forward() -> None:
    controller = make_controller()
    desired = TrajectoryState(1.0, Pose2d(2.5, 0.0, 0.0), 2.5)

    speeds = controller.calculate(Pose2d(2.5, 0.0, 0.0), desired, 0.0)

    assert speeds.vx == pytest.approx(2.5)
    assert speeds.vy == pytest.approx(0.0)
    assert speeds.omega == pytest.approx(0.0)
    assert controller.at_reference()


def test_feed_forward_follows_path_heading_not_robot_heading() -> None:
    controller = make_controller()
    desired = TrajectoryState(1.0, Pose2d(1.0, 1.0, math.pi / 2.0), 2.0)

    speeds = controller.calculate(Pose2d(1.0, 1.0, math.pi / 2.0), desired, math.pi / 2.0)

    assert speeds.vx == pytest.approx(0.0, abs=1e-12)
    assert speeds.vy == pytest.approx(2.0)


def test_position_error_adds_field_frame_feedback() -> None:
    controller = make_controller(lateral=PIDGains(kp=2.0))
    desired = TrajectoryState(1.0, Pose2d(3.0, 1.0, 0.0), 1.0)

    speeds = controller.calculate(Pose2d(2.5, 1.5, math.pi / 2.0), desired, math.pi / 2.0)

    assert speeds.vx == pytest.approx(1.0 + 2.0 * 0.5)
    assert speeds.vy == pytest.approx(2.0 * -0.5)
    assert not controller.at_reference()


def test_rotation_loop_drives_toward_desired_rotation() -> None:
    controller = make_controller()
    desired = TrajectoryState(0.0, Pose2d(0.0, 0.0, 0.0), 0.0)

    speeds = controller.calculate(Pose2d(0.0, 0.0, 0.0), desired, 1.0)
    assert speeds.omega > 0.0
    assert controller.rotation_error == pytest.approx(1.0)

    controller.reset()
    speeds = controller.calculate(Pose2d(0.0, 0.0, 0.0), desired, -1.0)
    assert speeds.omega < 0.0


def test_rotation_output_is_limited_to_max_angular_velocity() -> None:
    controller = make_controller()
    desired = TrajectoryState(0.0, Pose2d(), 0.0)
    pose = Pose2d(0.0, 0.0, 0.0)
    for _ in range(100):
        speeds = controller.calculate(pose, desired, math.pi - 0.1)
        assert abs(speeds.omega) <= TrackerConfig().angular.max_velocity_rad_s + 1e-12


def test_disabled_controller_outputs_feed_forward_only() -> None:
    controller = make_controller()
    controller.set_enabled(False)
    desired = TrajectoryState(1.0, Pose2d(3.0, 0.0, 0.0), 1.5)

    speeds = controller.calculate(Pose2d(0.0, 2.0, 0.0), desired, 0.0)

    assert speeds.vx == pytest.approx(1.5)
    assert speeds.vy == pytest.approx(0.0)


def test_drivetrain_angular_rate_caps_heading_loop() -> None:
    constants = DrivetrainConstants(max_angular_rate_rad_s=1.0)
    config = TrackerConfig.for_drivetrain(constants, invert_rotation=False)
    controller = HolonomicDriveController.from_config(config)
    desired = TrajectoryState(0.0, Pose2d(), 0.0)

    assert config.angular.max_velocity_rad_s == pytest.approx(1.0)
    assert config.angular.max_acceleration_rad_s2 == pytest.approx(2.0)
    assert not config.invert_rotation
    for _ in range(100):
        speeds = controller.calculate(Pose2d(), desired, math.pi - 0.1)
        assert abs(speeds.omega) <= 1.0 + 1e-12
    assert speeds.omega == pytest.approx(1.0)


def test_drivetrain_constants_validation() -> None:
    with pytest.raises(ValueError):
        DrivetrainConstants(length_m=0.0)
    with pytest.raises(ValueError):
        DrivetrainConstants(max_speed_m_s=-1.0)
    with pytest.raises(ValueError):
        DrivetrainConstants(max_angular_rate_rad_s=0.0)
