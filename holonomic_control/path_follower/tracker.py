from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from holonomic_control.common import (
    ActuationSink,
    ChassisSpeeds,
    DriveFrame,
    Pose2d,
    PoseSource,
    Timer,
)
from holonomic_control.trajectory import Trajectory, TrajectoryState

from .config import TrackerConfig
from .holonomic_controller import HolonomicDriveController

logger = logging.getLogger(__name__)


class TrackerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"
    INTERRUPTED = "interrupted"


class TrackerStateError(RuntimeError):
    def __init__(self, state: TrackerState, message: str):
        super().__init__(message)
        self.state = state


@dataclass(frozen=True)
class TrackerDebug:
    time_s: float
    measured_pose: Pose2d
    desired_state: TrajectoryState
    desired_rotation: float
    pose_error: Pose2d
    rotation_error: float
    command: ChassisSpeeds


class TrajectoryTracker:
    """Periodic trajectory-following command for a holonomic drivetrain.

    The external scheduler drives the lifecycle: ``start()`` once, ``tick()``
    every control period, ``is_finished()`` after each tick and finally
    ``stop(interrupted)``. Commands are sent to ``drive`` in the field frame
    unless the config asks for robot-relative output.

    On normal completion a single zero command is sent; an interrupted
    episode sends nothing further so whatever preempted it keeps control.
    """

    def __init__(
        self,
        trajectory: Trajectory,
        desired_rotation: float,
        pose_source: PoseSource,
        drive: ActuationSink,
        config: TrackerConfig | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self._trajectory = trajectory
        self._desired_rotation = float(desired_rotation)
        self._pose_source = pose_source
        self._drive = drive
        self._config = config or TrackerConfig()
        self._controller = HolonomicDriveController.from_config(self._config)
        self._timer = Timer(clock)
        self._state = TrackerState.IDLE
        self._cancel_requested = False
        self._last_tick_time_s: float | None = None
        self._stop_command_sent = False
        self.last_debug: TrackerDebug | None = None

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def trajectory(self) -> Trajectory:
        return self._trajectory

    @property
    def desired_rotation(self) -> float:
        return self._desired_rotation

    @property
    def controller(self) -> HolonomicDriveController:
        return self._controller

    @property
    def elapsed_s(self) -> float:
        return self._timer.get()

    def start(self) -> None:
        if self._state is TrackerState.RUNNING:
            raise TrackerStateError(self._state, "Tracker is already running.")
        self._controller.reset()
        self._cancel_requested = False
        self._last_tick_time_s = None
        self._stop_command_sent = False
        self.last_debug = None
        self._timer.restart()
        self._state = TrackerState.RUNNING
        logger.debug(
            "Tracking started: %.2f s trajectory, desired rotation %.3f rad.",
            self._trajectory.total_duration_s,
            self._desired_rotation,
        )

    def cancel(self) -> None:
        """Request cooperative cancellation; honoured at the next tick."""
        self._cancel_requested = True

    def tick(self) -> ChassisSpeeds | None:
        if self._state is not TrackerState.RUNNING:
            raise TrackerStateError(
                self._state, f"tick() requires a running tracker (state={self._state.value})."
            )
        if self._cancel_requested:
            self.stop(interrupted=True)
            return None

        time_s = self._timer.get()
        dt = None if self._last_tick_time_s is None else time_s - self._last_tick_time_s
        self._last_tick_time_s = time_s

        desired_state = self._trajectory.sample(time_s)
        current_pose = self._pose_source.get_current_pose()
        speeds = self._controller.calculate(
            current_pose, desired_state, self._desired_rotation, dt
        )
        if self._config.invert_rotation:
            speeds = speeds.with_inverted_rotation()

        self._send(speeds, current_pose)
        self.last_debug = TrackerDebug(
            time_s=time_s,
            measured_pose=current_pose,
            desired_state=desired_state,
            desired_rotation=self._desired_rotation,
            pose_error=self._controller.pose_error,
            rotation_error=self._controller.rotation_error,
            command=speeds,
        )
        return speeds

    def is_finished(self) -> bool:
        if self._state in (TrackerState.FINISHED, TrackerState.INTERRUPTED):
            return True
        if self._state is TrackerState.IDLE:
            return False
        return self._timer.has_elapsed(self._trajectory.total_duration_s)

    def stop(self, interrupted: bool = False) -> None:
        if self._state is TrackerState.IDLE:
            raise TrackerStateError(self._state, "Tracker was never started.")
        if self._state is not TrackerState.RUNNING:
            return

        self._timer.stop()
        if interrupted:
            self._state = TrackerState.INTERRUPTED
            logger.info("Tracking interrupted at %.2f s.", self._timer.get())
            return

        self._state = TrackerState.FINISHED
        if not self._stop_command_sent:
            self._send(ChassisSpeeds.zero(), self._pose_source.get_current_pose())
            self._stop_command_sent = True
        logger.info("Tracking finished after %.2f s.", self._timer.get())

    def _send(self, speeds: ChassisSpeeds, current_pose: Pose2d) -> None:
        if self._config.frame is DriveFrame.ROBOT:
            speeds = speeds.to_robot_relative(current_pose.heading)
        self._drive.apply_chassis_speeds(speeds, self._config.frame, self._config.request_type)
