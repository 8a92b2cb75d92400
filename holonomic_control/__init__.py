"""Trajectory generation and closed-loop tracking for holonomic drivetrains."""

__version__ = "0.1.0"
