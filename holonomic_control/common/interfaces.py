from __future__ import annotations

from typing import Protocol

from .geometry import ChassisSpeeds, DriveFrame, DriveRequestType, Pose2d


class PoseSource(Protocol):
    def get_current_pose(self) -> Pose2d: ...


class ActuationSink(Protocol):
    def apply_chassis_speeds(
        self,
        speeds: ChassisSpeeds,
        frame: DriveFrame,
        request_type: DriveRequestType,
    ) -> None: ...
