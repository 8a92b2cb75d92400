"""Tests for time-parameterization of planner paths."""

from __future__ import annotations

import math
import sys
from pathlib import Path as FsPath

import numpy as np
import pytest

PROJECT_ROOT = FsPath(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from holonomic_control.common import Vertex
from holonomic_control.trajectory import Path, TrajectoryConfig, parameterize


def straight_path(length_m: float) -> Path:
    return Path((Vertex(0.0, 0.0), Vertex(length_m, 0.0)))


def test_long_path_gives_trapezoidal_profile() -> None:
    config = TrajectoryConfig(max_velocity_m_s=3.0, max_acceleration_m_s2=3.0)
    trajectory = parameterize(straight_path(10.0), config)

    # 1 s to accelerate, 1 s to brake, 7 m at cruise.
    assert trajectory.total_duration_s == pytest.approx(1.0 + 1.0 + 7.0 / 3.0, abs=1e-3)
    velocities = np.array([state.velocity for state in trajectory])
    accelerations = np.array([state.acceleration for state in trajectory])
    assert velocities[0] == pytest.approx(0.0)
    assert velocities[-1] == pytest.approx(0.0)
    assert velocities.max() == pytest.approx(3.0)
    assert np.all(velocities <= 3.0 + 1e-9)
    assert np.all(np.abs(accelerations) <= 3.0 + 1e-6)
    assert trajectory.initial_pose.x == pytest.approx(0.0)
    assert trajectory.final_pose.x == pytest.approx(10.0)
    assert all(state.pose.heading == pytest.approx(0.0) for state in trajectory)


def test_short_path_gives_triangular_profile() -> None:
    config = TrajectoryConfig(max_velocity_m_s=3.0, max_acceleration_m_s2=3.0)
    trajectory = parameterize(straight_path(1.0), config)

    peak = max(state.velocity for state in trajectory)
    assert peak == pytest.approx(math.sqrt(2.0 * 3.0 * 0.5), rel=1e-6)
    assert trajectory.total_duration_s == pytest.approx(2.0 * math.sqrt(1.0 / 3.0), abs=1e-3)


def test_start_and_end_velocity_are_honoured() -> None:
    config = TrajectoryConfig(max_velocity_m_s=2.0, max_acceleration_m_s2=2.0)
    config = config.with_start_velocity(1.0).with_end_velocity(0.5)
    trajectory = parameterize(straight_path(4.0), config)
    assert trajectory.states[0].velocity == pytest.approx(1.0)
    assert trajectory.states[-1].velocity == pytest.approx(0.5)


def test_sampled_positions_follow_the_path() -> None:
    config = TrajectoryConfig(max_velocity_m_s=2.0, max_acceleration_m_s2=1.5)
    path = Path((Vertex(1.0, 1.0), Vertex(4.0, 5.0)))
    trajectory = parameterize(path, config)
    heading = math.atan2(4.0, 3.0)

    previous = -1.0
    for t in np.linspace(0.0, trajectory.total_duration_s, 40):
        state = trajectory.sample(float(t))
        travelled = math.hypot(state.pose.x - 1.0, state.pose.y - 1.0)
        assert travelled >= previous - 1e-9
        previous = travelled
        # Stays on the straight line.
        cross = (state.pose.x - 1.0) * math.sin(heading) - (state.pose.y - 1.0) * math.cos(heading)
        assert cross == pytest.approx(0.0, abs=1e-9)
    assert previous == pytest.approx(5.0)


def test_single_vertex_path_gives_one_state() -> None:
    trajectory = parameterize(Path((Vertex(2.0, 3.0),)), TrajectoryConfig())
    assert len(trajectory) == 1
    assert trajectory.total_duration_s == 0.0
    assert trajectory.sample(1.0).pose.x == pytest.approx(2.0)


def test_centripetal_limit_slows_corners() -> None:
    path = Path((Vertex(0.0, 0.0), Vertex(2.0, 0.0), Vertex(2.0, 2.0)))
    unconstrained = parameterize(path, TrajectoryConfig(max_velocity_m_s=3.0))
    constrained = parameterize(
        path,
        TrajectoryConfig(max_velocity_m_s=3.0, max_centripetal_acceleration_m_s2=1.0),
    )

    def corner_velocity(trajectory) -> float:
        return min(
            (state for state in trajectory),
            key=lambda state: math.hypot(state.pose.x - 2.0, state.pose.y),
        ).velocity

    assert corner_velocity(constrained) < corner_velocity(unconstrained)
    assert corner_velocity(constrained) <= 0.3
    assert constrained.total_duration_s > unconstrained.total_duration_s


def test_path_as_trajectory_delegates_to_parameterize() -> None:
    config = TrajectoryConfig()
    path = straight_path(2.0)
    assert path.as_trajectory(config) == parameterize(path, config)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_velocity_m_s": 0.0},
        {"max_acceleration_m_s2": -1.0},
        {"start_velocity_m_s": 5.0},
        {"end_velocity_m_s": -0.1},
        {"max_centripetal_acceleration_m_s2": 0.0},
        {"sample_spacing_m": 0.0},
    ],
)
def test_trajectory_config_validation(kwargs) -> None:
    with pytest.raises(ValueError):
        TrajectoryConfig(**kwargs)
