"""Tests for the holonomic chassis simulator."""

from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from holonomic_control.common import ChassisSpeeds, DriveFrame, DriveRequestType, Pose2d
from holonomic_control.sim import HolonomicSimulator, SimulatorConfig


def test_field_command_converges_to_commanded_velocity() -> None:
    sim = HolonomicSimulator(SimulatorConfig(dt=0.01))
    sim.apply_chassis_speeds(
        ChassisSpeeds(1.0, -0.5, 0.0), DriveFrame.FIELD, DriveRequestType.OPEN_LOOP_VOLTAGE
    )
    steps = sim.advance(2.0)

    assert len(steps) == 200
    assert sim.time_s == pytest.approx(2.0)
    assert sim.state.velocity.vx == pytest.approx(1.0, abs=1e-3)
    assert sim.state.velocity.vy == pytest.approx(-0.5, abs=1e-3)
    assert sim.get_current_pose().x > 1.5
    assert sim.get_current_pose().y < -0.75


def test_robot_frame_command_is_rotated_into_field() -> None:
    sim = HolonomicSimulator(SimulatorConfig(initial_pose=Pose2d.from_degrees(0.0, 0.0, 90.0)))
    sim.apply_chassis_speeds(
        ChassisSpeeds(1.0, 0.0, 0.0), DriveFrame.ROBOT, DriveRequestType.CLOSED_LOOP_VELOCITY
    )
    sim.advance(1.0)

    assert sim.state.velocity.vx == pytest.approx(0.0, abs=1e-6)
    assert sim.state.velocity.vy == pytest.approx(1.0, abs=1e-3)


@pytest.mark.parametrize(("invert", "sign"), [(True, -1.0), (False, 1.0)])
def test_rotation_sense(invert: bool, sign: float) -> None:
    sim = HolonomicSimulator(SimulatorConfig(invert_rotation=invert))
    sim.apply_chassis_speeds(
        ChassisSpeeds(0.0, 0.0, 0.5), DriveFrame.FIELD, DriveRequestType.OPEN_LOOP_VOLTAGE
    )
    sim.advance(1.0)

    assert math.copysign(1.0, sim.state.pose.heading) == sign
    assert sim.state.velocity.omega == pytest.approx(sign * 0.5, abs=1e-2)


def test_speed_and_acceleration_limits() -> None:
    config = SimulatorConfig(dt=0.02, max_speed_m_s=2.0, max_accel_m_s2=4.0)
    sim = HolonomicSimulator(config)
    sim.apply_chassis_speeds(
        ChassisSpeeds(10.0, 0.0, 0.0), DriveFrame.FIELD, DriveRequestType.CLOSED_LOOP_VELOCITY
    )

    previous = 0.0
    for step in sim.advance(2.0):
        speed = math.hypot(step.state.velocity.vx, step.state.velocity.vy)
        assert speed <= 2.0 + 1e-9
        assert speed - previous <= 4.0 * 0.02 + 1e-9
        previous = speed
    assert previous == pytest.approx(2.0, abs=1e-3)


def test_closed_loop_responds_faster_than_open_loop() -> None:
    def speed_after(request_type: DriveRequestType) -> float:
        sim = HolonomicSimulator()
        sim.apply_chassis_speeds(ChassisSpeeds(1.0, 0.0, 0.0), DriveFrame.FIELD, request_type)
        sim.advance(0.06)
        return sim.state.velocity.vx

    assert speed_after(DriveRequestType.CLOSED_LOOP_VELOCITY) > speed_after(
        DriveRequestType.OPEN_LOOP_VOLTAGE
    )


def test_reset_and_request_bookkeeping() -> None:
    sim = HolonomicSimulator()
    command = ChassisSpeeds(1.0, 0.0, 0.0)
    sim.apply_chassis_speeds(command, DriveFrame.FIELD, DriveRequestType.OPEN_LOOP_VOLTAGE)
    sim.step()

    assert sim.command_count == 1
    assert sim.last_request == (command, DriveFrame.FIELD, DriveRequestType.OPEN_LOOP_VOLTAGE)
    assert sim.clock() == pytest.approx(sim.dt)

    sim.reset(Pose2d(3.0, 4.0, 1.0))
    assert sim.get_current_pose() == Pose2d(3.0, 4.0, 1.0)
    assert sim.state.velocity.is_zero()
    assert sim.time_s == 0.0
    assert sim.last_request is None
    assert sim.command_count == 0

    with pytest.raises(ValueError):
        sim.step(0.0)


def test_simulator_config_validation() -> None:
    with pytest.raises(ValueError):
        SimulatorConfig(dt=0.0)
    with pytest.raises(ValueError):
        SimulatorConfig(max_speed_m_s=-1.0)
    with pytest.raises(ValueError):
        SimulatorConfig(open_loop_time_constant=-0.1)
