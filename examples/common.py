from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from holonomic_control.common import Pose2d
from holonomic_control.path_follower import (
    DrivetrainConstants,
    EpisodeResult,
    EpisodeRunner,
    TrackerConfig,
    TrackerDebug,
    TrajectoryTracker,
)
from holonomic_control.sim import HolonomicSimulator, SimulatorConfig, TelemetryLogger
from holonomic_control.trajectory import (
    FieldMap,
    Footprint,
    GenerationResult,
    Obstacle,
    StraightLinePlanner,
    TrajectoryConfig,
    TrajectoryGenerator,
)

DRIVETRAIN = DrivetrainConstants()


def default_field_map() -> FieldMap:
    """A 16.54 m x 8.21 m field with one central block."""
    return FieldMap(
        width_m=16.54,
        height_m=8.21,
        obstacles=(Obstacle.rectangle(9.0, 3.0, 11.0, 5.0),),
    )


def default_trajectory_config() -> TrajectoryConfig:
    return TrajectoryConfig(
        max_velocity_m_s=min(3.0, DRIVETRAIN.max_speed_m_s),
        max_acceleration_m_s2=DRIVETRAIN.max_acceleration_m_s2,
    )


def default_footprint() -> Footprint:
    return Footprint(DRIVETRAIN.length_m, DRIVETRAIN.width_m)


@dataclass
class ExampleRun:
    generation: GenerationResult
    episode: EpisodeResult | None
    final_pose: Pose2d


def analyze_history(history: list[TrackerDebug]) -> None:
    if not history:
        print("No tracking history recorded.")
        return

    position_errors = np.array(
        [
            debug.measured_pose.distance_to(debug.desired_state.pose)
            for debug in history
        ]
    )
    rotation_errors = np.abs(np.array([debug.rotation_error for debug in history]))

    rms_error = math.sqrt(float(np.mean(np.square(position_errors))))
    final = history[-1]

    print(f"Tracked {len(history)} ticks over {final.time_s:.2f} s.")
    print(
        f"Final pose: x={final.measured_pose.x:.3f} m, y={final.measured_pose.y:.3f} m, "
        f"heading={final.measured_pose.heading_deg:.1f} deg"
    )
    print(f"RMS position error: {rms_error:.3f} m")
    print(f"Max position error: {float(position_errors.max()):.3f} m")
    print(f"Final rotation error: {math.degrees(float(rotation_errors[-1])):.2f} deg")


def run_drive_to_pose_example(
    target_pose: Pose2d,
    log_path: Path,
    *,
    simulator: HolonomicSimulator | None = None,
    generator: TrajectoryGenerator | None = None,
    tracker_config: TrackerConfig | None = None,
    settle_time_s: float = 1.0,
    interrupt_at_s: float | None = None,
    skip_stale: bool = False,
) -> ExampleRun:
    """Plan to ``target_pose`` and track it on the simulator, logging every tick.

    The target heading is held as the desired rotation for the whole episode.
    After a normal finish the simulator runs for ``settle_time_s`` more so the
    trailing zero command takes effect.
    With ``skip_stale`` set, nothing is tracked unless a fresh trajectory was
    generated by this call.
    """
    simulator = simulator or HolonomicSimulator(
        SimulatorConfig(max_speed_m_s=DRIVETRAIN.max_speed_m_s)
    )
    if generator is None:
        generator = TrajectoryGenerator(
            StraightLinePlanner(),
            simulator,
            default_trajectory_config(),
            default_footprint(),
            default_field_map(),
        )
    tracker_config = tracker_config or TrackerConfig.for_drivetrain(
        DRIVETRAIN, period_s=simulator.dt
    )

    generation = generator.generate_to(target_pose)
    if generation.trajectory is None:
        print(f"No trajectory available: {generation.failure}")
        return ExampleRun(generation, None, simulator.get_current_pose())
    if skip_stale and not generation.replanned:
        print(f"Skipping leg; generator returned {generation.status.value} trajectory.")
        return ExampleRun(generation, None, simulator.get_current_pose())

    tracker = TrajectoryTracker(
        generation.trajectory,
        target_pose.heading,
        simulator,
        simulator,
        tracker_config,
        clock=simulator.clock,
    )
    runner = EpisodeRunner(tracker, simulator.advance, period_s=tracker_config.period_s)

    with TelemetryLogger(log_path) as logger:

        def log_tick(debug: TrackerDebug) -> None:
            logger.log(debug, simulator.state)

        episode = runner.run(interrupt_at_s=interrupt_at_s, on_tick=log_tick)

    if not episode.interrupted and settle_time_s > 0.0:
        # Let the trailing zero command bring the chassis to rest.
        simulator.advance(settle_time_s)

    analyze_history(episode.history)
    print(f"Telemetry log written to: {log_path}")
    return ExampleRun(generation, episode, simulator.get_current_pose())

