"""Tests for the trajectory tracker lifecycle and command output."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from holonomic_control.common import ChassisSpeeds, DriveFrame, DriveRequestType, Pose2d
from holonomic_control.path_follower import (
    TrackerConfig,
    TrackerState,
    TrackerStateError,
    TrajectoryTracker,
)
from holonomic_control.trajectory import Trajectory, TrajectoryState


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class FakeDrive:
    def __init__(self, pose: Pose2d) -> None:
        self.pose = pose
        self.requests: list[tuple[ChassisSpeeds, DriveFrame, DriveRequestType]] = []

    def get_current_pose(self) -> Pose2d:
        return self.pose

    def apply_chassis_speeds(self, speeds, frame, request_type) -> None:
        self.requests.append((speeds, frame, request_type))


def straight_trajectory() -> Trajectory:
    return Trajectory(
        (
            TrajectoryState(0.0, Pose2d(0.0, 0.0, 0.0), 2.5),
            TrajectoryState(2.0, Pose2d(5.0, 0.0, 0.0), 2.5),
        )
    )


def make_tracker(
    pose: Pose2d | None = None,
    desired_rotation: float = 0.0,
    config: TrackerConfig | None = None,
) -> tuple[TrajectoryTracker, FakeDrive, FakeClock]:
    clock = FakeClock()
    drive = FakeDrive(pose or Pose2d(2.5, 0.0, 0.0))
    tracker = TrajectoryTracker(
        straight_trajectory(), desired_rotation, drive, drive, config, clock=clock
    )
    return tracker, drive, clock


def test_tick_on_reference_commands_feed_forward() -> None:
    tracker, drive, clock = make_tracker()
    tracker.start()
    clock.now = 1.0

    speeds = tracker.tick()

    assert speeds is not None
    assert speeds.vx == pytest.approx(2.5)
    assert speeds.vy == pytest.approx(0.0)
    assert speeds.omega == pytest.approx(0.0)
    sent, frame, request_type = drive.requests[-1]
    assert sent == speeds
    assert frame is DriveFrame.FIELD
    assert request_type is DriveRequestType.OPEN_LOOP_VOLTAGE
    assert tracker.last_debug is not None
    assert tracker.last_debug.desired_state.pose.x == pytest.approx(2.5)


def test_is_finished_follows_trajectory_duration() -> None:
    tracker, _, clock = make_tracker()
    assert not tracker.is_finished()

    tracker.start()
    clock.now = 1.99
    tracker.tick()
    assert not tracker.is_finished()

    clock.now = 2.0
    assert tracker.is_finished()


def test_normal_stop_sends_exactly_one_zero_command() -> None:
    tracker, drive, clock = make_tracker()
    tracker.start()
    tracker.tick()
    clock.now = 2.5
    tracker.tick()

    tracker.stop(interrupted=False)
    tracker.stop(interrupted=False)

    assert tracker.state is TrackerState.FINISHED
    assert len(drive.requests) == 3
    assert drive.requests[-1][0].is_zero()
    assert tracker.is_finished()


def test_interrupted_stop_sends_nothing() -> None:
    tracker, drive, clock = make_tracker()
    tracker.start()
    clock.now = 0.2
    tracker.tick()

    tracker.stop(interrupted=True)

    assert tracker.state is TrackerState.INTERRUPTED
    assert len(drive.requests) == 1
    assert not drive.requests[-1][0].is_zero()


def test_cancel_is_honoured_at_next_tick() -> None:
    tracker, drive, clock = make_tracker()
    tracker.start()
    tracker.tick()
    tracker.cancel()
    clock.now = 0.1

    assert tracker.tick() is None
    assert tracker.state is TrackerState.INTERRUPTED
    assert len(drive.requests) == 1


def test_lifecycle_errors() -> None:
    tracker, _, _ = make_tracker()
    with pytest.raises(TrackerStateError):
        tracker.tick()
    with pytest.raises(TrackerStateError):
        tracker.stop()

    tracker.start()
    with pytest.raises(TrackerStateError) as excinfo:
        tracker.start()
    assert excinfo.value.state is TrackerState.RUNNING

    tracker.stop()
    with pytest.raises(TrackerStateError):
        tracker.tick()


def test_tracker_can_be_restarted_after_finishing() -> None:
    tracker, drive, clock = make_tracker()
    tracker.start()
    clock.now = 3.0
    tracker.tick()
    tracker.stop()

    tracker.start()
    assert tracker.state is TrackerState.RUNNING
    assert tracker.elapsed_s == pytest.approx(0.0)
    assert not tracker.is_finished()


def test_invert_rotation_negates_angular_rate() -> None:
    inverted, inverted_drive, _ = make_tracker(Pose2d(0.0, 0.0, 0.0), desired_rotation=1.0)
    plain, plain_drive, _ = make_tracker(
        Pose2d(0.0, 0.0, 0.0),
        desired_rotation=1.0,
        config=TrackerConfig(invert_rotation=False),
    )
    inverted.start()
    plain.start()

    inverted_speeds = inverted.tick()
    plain_speeds = plain.tick()

    assert plain_speeds.omega > 0.0
    assert inverted_speeds.omega == pytest.approx(-plain_speeds.omega)
    assert inverted_drive.requests[-1][0].omega == pytest.approx(-plain_speeds.omega)


def test_robot_frame_output_is_rotated_by_current_heading() -> None:
    config = TrackerConfig(
        frame=DriveFrame.ROBOT, request_type=DriveRequestType.CLOSED_LOOP_VELOCITY
    )
    tracker, drive, clock = make_tracker(Pose2d.from_degrees(2.5, 0.0, 90.0), config=config)
    tracker.start()
    clock.now = 1.0

    speeds = tracker.tick()

    assert speeds.vx == pytest.approx(2.5)
    sent, frame, request_type = drive.requests[-1]
    assert frame is DriveFrame.ROBOT
    assert request_type is DriveRequestType.CLOSED_LOOP_VELOCITY
    assert sent.vx == pytest.approx(0.0, abs=1e-9)
    assert sent.vy == pytest.approx(-2.5)
