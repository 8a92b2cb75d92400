from __future__ import annotations

import math
from dataclasses import dataclass


def _input_modulus(value: float, minimum: float, maximum: float) -> float:
    span = maximum - minimum
    return value - span * math.floor((value - minimum) / span)


class PIDController:
    """Scalar PID loop on ``setpoint - measurement``."""

    def __init__(
        self,
        kp: float,
        ki: float = 0.0,
        kd: float = 0.0,
        period_s: float = 0.02,
        integrator_limit: float | None = None,
    ):
        if period_s <= 0.0:
            raise ValueError("period_s must be positive.")
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.period_s = period_s
        self.integrator_limit = integrator_limit
        self.integrator = 0.0
        self.prev_error: float | None = None
        self.setpoint = 0.0
        self.error = 0.0
        self._continuous_range: tuple[float, float] | None = None
        self._tolerance = 0.05

    def enable_continuous_input(self, minimum: float, maximum: float) -> None:
        if maximum <= minimum:
            raise ValueError("Continuous input range must be non-empty.")
        self._continuous_range = (minimum, maximum)

    @property
    def continuous_range(self) -> tuple[float, float] | None:
        return self._continuous_range

    def set_tolerance(self, tolerance: float) -> None:
        self._tolerance = tolerance

    def at_setpoint(self) -> bool:
        return self.prev_error is not None and abs(self.error) <= self._tolerance

    def reset(self) -> None:
        self.integrator = 0.0
        self.prev_error = None
        self.error = 0.0

    def calculate(self, measurement: float, setpoint: float, dt: float | None = None) -> float:
        self.setpoint = setpoint
        error = setpoint - measurement
        if self._continuous_range is not None:
            low, high = self._continuous_range
            bound = 0.5 * (high - low)
            error = _input_modulus(error, -bound, bound)
        return self.step(error, dt)

    def step(self, error: float, dt: float | None = None) -> float:
        dt = self.period_s if dt is None or dt <= 0.0 else dt
        self.error = error

        if self.ki != 0.0:
            self.integrator += error * dt
            if self.integrator_limit is not None:
                self.integrator = max(
                    -self.integrator_limit, min(self.integrator_limit, self.integrator)
                )

        derivative = 0.0 if self.prev_error is None else (error - self.prev_error) / dt
        self.prev_error = error
        return self.kp * error + self.ki * self.integrator + self.kd * derivative


@dataclass(frozen=True)
class Constraints:
    max_velocity: float
    max_acceleration: float

    def __post_init__(self) -> None:
        if self.max_velocity <= 0.0 or self.max_acceleration <= 0.0:
            raise ValueError("Profile constraints must be strictly positive.")


@dataclass(frozen=True)
class ProfileState:
    position: float = 0.0
    velocity: float = 0.0


class TrapezoidProfile:
    """Velocity-limited, acceleration-limited motion profile toward a goal state."""

    def __init__(self, constraints: Constraints):
        self.constraints = constraints

    def calculate(self, t: float, current: ProfileState, goal: ProfileState) -> ProfileState:
        """Return the profiled state ``t`` seconds after ``current`` on the way to ``goal``."""
        max_v = self.constraints.max_velocity
        max_a = self.constraints.max_acceleration

        direction = -1.0 if current.position > goal.position else 1.0
        start = ProfileState(current.position * direction, current.velocity * direction)
        end = ProfileState(goal.position * direction, goal.velocity * direction)
        if start.velocity > max_v:
            start = ProfileState(start.position, max_v)

        cutoff_begin = start.velocity / max_a
        cutoff_dist_begin = cutoff_begin * cutoff_begin * max_a / 2.0
        cutoff_end = end.velocity / max_a
        cutoff_dist_end = cutoff_end * cutoff_end * max_a / 2.0

        # Distance of a full trapezoid that would start and end at rest.
        full_trapezoid_dist = cutoff_dist_begin + (end.position - start.position) + cutoff_dist_end
        acceleration_time = max_v / max_a
        full_speed_dist = full_trapezoid_dist - acceleration_time * acceleration_time * max_a

        if full_speed_dist < 0.0:
            acceleration_time = math.sqrt(max(0.0, full_trapezoid_dist) / max_a)
            full_speed_dist = 0.0

        end_accel = acceleration_time - cutoff_begin
        end_full_speed = end_accel + full_speed_dist / max_v
        end_decel = end_full_speed + acceleration_time - cutoff_end

        if t < end_accel:
            velocity = start.velocity + t * max_a
            position = start.position + (start.velocity + t * max_a / 2.0) * t
        elif t < end_full_speed:
            velocity = max_v
            position = (
                start.position
                + (start.velocity + end_accel * max_a / 2.0) * end_accel
                + max_v * (t - end_accel)
            )
        elif t <= end_decel:
            time_left = end_decel - t
            velocity = end.velocity + time_left * max_a
            position = end.position - (end.velocity + time_left * max_a / 2.0) * time_left
        else:
            velocity = end.velocity
            position = end.position

        return ProfileState(position * direction, velocity * direction)


class ProfiledPIDController:
    """PID loop whose setpoint follows a trapezoid profile toward the goal."""

    def __init__(
        self,
        kp: float,
        ki: float,
        kd: float,
        constraints: Constraints,
        period_s: float = 0.02,
        output_limit: float | None = None,
    ):
        self._controller = PIDController(kp, ki, kd, period_s)
        self.output_limit = output_limit
        self._profile = TrapezoidProfile(constraints)
        self.setpoint = ProfileState()
        self.goal = ProfileState()

    @property
    def controller(self) -> PIDController:
        return self._controller

    def enable_continuous_input(self, minimum: float, maximum: float) -> None:
        self._controller.enable_continuous_input(minimum, maximum)

    def set_tolerance(self, tolerance: float) -> None:
        self._controller.set_tolerance(tolerance)

    def at_setpoint(self) -> bool:
        return self._controller.at_setpoint()

    def reset(self, measurement: float, velocity: float = 0.0) -> None:
        self._controller.reset()
        self.setpoint = ProfileState(measurement, velocity)

    def calculate(self, measurement: float, goal: float, dt: float | None = None) -> float:
        dt = self._controller.period_s if dt is None or dt <= 0.0 else dt
        goal_state = ProfileState(goal, 0.0)
        setpoint = self.setpoint

        continuous_range = self._controller.continuous_range
        if continuous_range is not None:
            # Unwrap goal and setpoint next to the measurement so the profile takes the short way.
            bound = 0.5 * (continuous_range[1] - continuous_range[0])
            goal_state = ProfileState(
                measurement + _input_modulus(goal - measurement, -bound, bound), 0.0
            )
            setpoint = ProfileState(
                measurement + _input_modulus(setpoint.position - measurement, -bound, bound),
                setpoint.velocity,
            )

        self.goal = goal_state
        self.setpoint = self._profile.calculate(dt, setpoint, goal_state)
        output = self._controller.calculate(measurement, self.setpoint.position, dt)
        if self.output_limit is not None:
            output = max(-self.output_limit, min(self.output_limit, output))
        return output
