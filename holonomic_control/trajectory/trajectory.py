from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from holonomic_control.common import Pose2d


@dataclass(frozen=True)
class TrajectoryState:
    time_s: float
    pose: Pose2d
    velocity: float
    acceleration: float = 0.0
    curvature: float = 0.0

    def __post_init__(self) -> None:
        if self.time_s < 0.0:
            raise ValueError(f"TrajectoryState.time_s must be non-negative; got {self.time_s}")
        object.__setattr__(self, "time_s", float(self.time_s))
        object.__setattr__(self, "velocity", float(self.velocity))
        object.__setattr__(self, "acceleration", float(self.acceleration))
        object.__setattr__(self, "curvature", float(self.curvature))


@dataclass(frozen=True)
class Trajectory:
    """Time-indexed pose/velocity samples starting at t=0."""

    states: Tuple[TrajectoryState, ...]

    def __post_init__(self) -> None:
        states = tuple(self.states)
        if not states:
            raise ValueError("Trajectory must contain at least one state.")
        if abs(states[0].time_s) > 1e-9:
            raise ValueError("Trajectory must start at t=0.")
        if any(later.time_s < earlier.time_s for earlier, later in zip(states, states[1:])):
            raise ValueError("Trajectory state times must be non-decreasing.")
        object.__setattr__(self, "states", states)
        object.__setattr__(self, "_times", [state.time_s for state in states])

    def __len__(self) -> int:
        return len(self.states)

    def __iter__(self) -> Iterator[TrajectoryState]:
        return iter(self.states)

    @property
    def total_duration_s(self) -> float:
        return self.states[-1].time_s

    @property
    def initial_pose(self) -> Pose2d:
        return self.states[0].pose

    @property
    def final_pose(self) -> Pose2d:
        return self.states[-1].pose

    def sample(self, time_s: float) -> TrajectoryState:
        """Return the desired state at ``time_s``, clamped to the trajectory ends."""
        if time_s <= self.states[0].time_s:
            return self.states[0]
        if time_s >= self.total_duration_s:
            return self.states[-1]

        lower, upper = _get_lower_upper_state_bounds(self.states, self._times, time_s)
        return _interpolate_state(lower, upper, time_s)


def _get_lower_upper_state_bounds(
    states: Sequence[TrajectoryState], times: Sequence[float], lookup_time_s: float
) -> tuple[TrajectoryState, TrajectoryState]:
    upper_idx = bisect.bisect_left(times, lookup_time_s)
    if upper_idx >= len(states):
        upper_idx = len(states) - 1
    if upper_idx == 0:
        upper_idx = 1
    return states[upper_idx - 1], states[upper_idx]


def _interpolate_state(
    lower: TrajectoryState, upper: TrajectoryState, time_s: float
) -> TrajectoryState:
    segment_dt = upper.time_s - lower.time_s
    if segment_dt <= 0.0:
        return upper

    dt = time_s - lower.time_s
    velocity = lower.velocity + lower.acceleration * dt
    travelled = lower.velocity * dt + 0.5 * lower.acceleration * dt * dt
    segment_length = lower.pose.distance_to(upper.pose)
    if segment_length > 1e-9 and _kinematics_match(lower, segment_dt, segment_length):
        alpha = travelled / segment_length
    else:
        # Rotation-only or hand-built segment; progress with time instead of distance.
        alpha = dt / segment_dt
    alpha = max(0.0, min(1.0, alpha))

    return TrajectoryState(
        time_s=time_s,
        pose=lower.pose.interpolate(upper.pose, alpha),
        velocity=velocity,
        acceleration=lower.acceleration,
        curvature=lower.curvature + alpha * (upper.curvature - lower.curvature),
    )


def _kinematics_match(
    lower: TrajectoryState, segment_dt: float, segment_length: float
) -> bool:
    predicted = lower.velocity * segment_dt + 0.5 * lower.acceleration * segment_dt**2
    return abs(predicted - segment_length) <= 1e-6 + 0.05 * segment_length
