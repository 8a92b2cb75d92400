"""Visit a sequence of target poses, replanning between episodes.

The third target sits inside the field obstacle, so planning fails and the
generator keeps the previous trajectory; the repeated final target is served
from the cache without calling the planner. Neither leg is driven again.
"""

import logging
from pathlib import Path

if __package__ in (None, ""):
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[1]))

from examples import (
    default_field_map,
    default_footprint,
    default_trajectory_config,
    run_drive_to_pose_example,
)
from holonomic_control.common import Pose2d
from holonomic_control.sim import HolonomicSimulator, SimulatorConfig
from holonomic_control.trajectory import StraightLinePlanner, TrajectoryGenerator

LOG_DIR = Path(__file__).resolve().parents[1] / "logs"

TOUR = (
    Pose2d.from_degrees(5.0, 5.0, 90.0),
    Pose2d.from_degrees(7.5, 2.0, 0.0),
    Pose2d.from_degrees(10.0, 4.0, 0.0),
    Pose2d.from_degrees(3.0, 6.0, 180.0),
    Pose2d.from_degrees(3.0, 6.0, 180.0),
)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    simulator = HolonomicSimulator(SimulatorConfig(initial_pose=Pose2d(2.0, 2.0, 0.0)))
    generator = TrajectoryGenerator(
        StraightLinePlanner(),
        simulator,
        default_trajectory_config(),
        default_footprint(),
        default_field_map(),
    )

    for index, target in enumerate(TOUR):
        print(f"--- leg {index}: target {target}")
        run = run_drive_to_pose_example(
            target,
            LOG_DIR / f"sim_waypoint_tour_{index}.csv",
            simulator=simulator,
            generator=generator,
            skip_stale=True,
        )
        print(f"Generation status: {run.generation.status.value}")

    print(f"Planner invoked {generator.planner_calls} times for {len(TOUR)} legs.")


if __name__ == "__main__":
    main()
