"""Simulator demos: plan to a pose and track it with the holonomic controller."""

from .common import (
    DRIVETRAIN,
    ExampleRun,
    analyze_history,
    default_field_map,
    default_footprint,
    default_trajectory_config,
    run_drive_to_pose_example,
)

__all__ = [
    "DRIVETRAIN",
    "ExampleRun",
    "analyze_history",
    "default_field_map",
    "default_footprint",
    "default_trajectory_config",
    "run_drive_to_pose_example",
]
