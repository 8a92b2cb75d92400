import csv
from pathlib import Path
from typing import Self

from holonomic_control.path_follower import TrackerDebug

from .states import ChassisState


class TelemetryLogger:
    """CSV logger for one row of tracker and chassis data per control tick."""

    HEADERS = [
        "time_s",
        "ref_x",
        "ref_y",
        "ref_heading",
        "ref_velocity",
        "desired_rotation",
        "veh_x",
        "veh_y",
        "veh_heading",
        "veh_vx",
        "veh_vy",
        "veh_omega",
        "cmd_vx",
        "cmd_vy",
        "cmd_omega",
        "err_x",
        "err_y",
        "err_heading",
    ]

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.path.open("w", newline="")
        self._writer = csv.writer(self._file)
        self._writer.writerow(self.HEADERS)
        self.rows_written = 0

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def log(self, debug: TrackerDebug, state: ChassisState) -> None:
        desired = debug.desired_state
        row = [
            debug.time_s,
            desired.pose.x,
            desired.pose.y,
            desired.pose.heading,
            desired.velocity,
            debug.desired_rotation,
            state.pose.x,
            state.pose.y,
            state.pose.heading,
            state.velocity.vx,
            state.velocity.vy,
            state.velocity.omega,
            debug.command.vx,
            debug.command.vy,
            debug.command.omega,
            debug.pose_error.x,
            debug.pose_error.y,
            debug.rotation_error,
        ]
        self._writer.writerow(row)
        self._file.flush()
        self.rows_written += 1
