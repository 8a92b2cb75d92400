"""Time-parameterization of planner paths.

A path is resampled along its arc length, each sample gets a velocity cap
(max velocity, optionally a centripetal limit from the local curvature), and
two passes bound the acceleration:

* forward: ``v[i] <= sqrt(v[i-1]**2 + 2 * a_max * ds)`` starting from the
  configured start velocity,
* backward: ``v[i] <= sqrt(v[i+1]**2 + 2 * a_max * ds)`` ending at the
  configured end velocity.

Integrating the constant-acceleration segments gives the sample times, which
yields the usual trapezoidal (or triangular, on short paths) profile.
"""

from __future__ import annotations

import math

import numpy as np

from holonomic_control.common import Pose2d, wrap_angle

from .config import TrajectoryConfig
from .path import Path
from .trajectory import Trajectory, TrajectoryState

_EPS = 1e-9


class TrajectoryGenerationError(ValueError):
    """Raised when a path cannot be parameterized under the given constraints."""


def parameterize(path: Path, config: TrajectoryConfig) -> Trajectory:
    dense = path.densify(config.sample_spacing_m)
    points = np.array([vertex.as_array() for vertex in dense], dtype=float)

    if len(points) == 1:
        pose = Pose2d(points[0, 0], points[0, 1], 0.0)
        return Trajectory((TrajectoryState(time_s=0.0, pose=pose, velocity=0.0),))

    deltas = np.diff(points, axis=0)
    ds = np.hypot(deltas[:, 0], deltas[:, 1])
    segment_headings = np.arctan2(deltas[:, 1], deltas[:, 0])
    headings = np.append(segment_headings, segment_headings[-1])
    curvature = _curvature(segment_headings, ds)

    velocity_caps = np.full(len(points), config.max_velocity_m_s, dtype=float)
    if config.max_centripetal_acceleration_m_s2 is not None:
        bent = np.abs(curvature) > _EPS
        velocity_caps[bent] = np.minimum(
            velocity_caps[bent],
            np.sqrt(config.max_centripetal_acceleration_m_s2 / np.abs(curvature[bent])),
        )

    velocities = _limit_velocities(
        velocity_caps,
        ds,
        config.max_acceleration_m_s2,
        config.start_velocity_m_s,
        config.end_velocity_m_s,
    )

    states: list[TrajectoryState] = []
    time_s = 0.0
    for i in range(len(points) - 1):
        v0 = float(velocities[i])
        v1 = float(velocities[i + 1])
        accel = (v1 * v1 - v0 * v0) / (2.0 * float(ds[i]))
        if abs(accel) > _EPS:
            dt = (v1 - v0) / accel
        elif v0 > _EPS:
            dt = float(ds[i]) / v0
        else:
            raise TrajectoryGenerationError(
                f"Velocity is zero on segment {i} of length {ds[i]:.3f} m; "
                "constraints are unsatisfiable."
            )
        states.append(
            TrajectoryState(
                time_s=time_s,
                pose=Pose2d(points[i, 0], points[i, 1], headings[i]),
                velocity=v0,
                acceleration=accel,
                curvature=float(curvature[i]),
            )
        )
        time_s += dt

    states.append(
        TrajectoryState(
            time_s=time_s,
            pose=Pose2d(points[-1, 0], points[-1, 1], headings[-1]),
            velocity=float(velocities[-1]),
            acceleration=0.0,
            curvature=float(curvature[-1]),
        )
    )
    return Trajectory(tuple(states))


def _curvature(segment_headings: np.ndarray, ds: np.ndarray) -> np.ndarray:
    curvature = np.zeros(len(segment_headings) + 1, dtype=float)
    for i in range(1, len(segment_headings)):
        turn = wrap_angle(segment_headings[i] - segment_headings[i - 1])
        curvature[i] = turn / (0.5 * (ds[i - 1] + ds[i]))
    return curvature


def _limit_velocities(
    caps: np.ndarray,
    ds: np.ndarray,
    max_accel: float,
    start_velocity: float,
    end_velocity: float,
) -> np.ndarray:
    velocities = caps.copy()

    velocities[0] = min(velocities[0], start_velocity)
    for i in range(1, len(velocities)):
        reachable = math.sqrt(velocities[i - 1] ** 2 + 2.0 * max_accel * ds[i - 1])
        velocities[i] = min(velocities[i], reachable)

    velocities[-1] = min(velocities[-1], end_velocity)
    for i in range(len(velocities) - 2, -1, -1):
        reachable = math.sqrt(velocities[i + 1] ** 2 + 2.0 * max_accel * ds[i])
        velocities[i] = min(velocities[i], reachable)

    return velocities
