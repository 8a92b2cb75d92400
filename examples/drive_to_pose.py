import argparse
import logging
import math
from pathlib import Path

if __package__ in (None, ""):
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[1]))

from examples import DRIVETRAIN, run_drive_to_pose_example
from holonomic_control.common import Pose2d
from holonomic_control.path_follower import TrackerConfig
from holonomic_control.sim import HolonomicSimulator, SimulatorConfig

LOG_DIR = Path(__file__).resolve().parents[1] / "logs"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Plan to a target pose and track it on the holonomic simulator."
    )
    parser.add_argument("--start-x", type=float, default=2.0, help="Start X (m).")
    parser.add_argument("--start-y", type=float, default=2.0, help="Start Y (m).")
    parser.add_argument("--start-heading-deg", type=float, default=0.0)
    parser.add_argument("--x", type=float, default=5.0, help="Target X (m).")
    parser.add_argument("--y", type=float, default=5.0, help="Target Y (m).")
    parser.add_argument("--heading-deg", type=float, default=90.0, help="Target heading (deg).")
    parser.add_argument(
        "--interrupt-at",
        type=float,
        default=None,
        help="Cancel the episode after this many seconds.",
    )
    parser.add_argument(
        "--no-invert-rotation",
        action="store_true",
        help="Platform rotates counter-clockwise for a positive rate command.",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=LOG_DIR,
        help="Directory to store telemetry logs.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    invert = not args.no_invert_rotation
    simulator = HolonomicSimulator(
        SimulatorConfig(
            max_speed_m_s=DRIVETRAIN.max_speed_m_s,
            invert_rotation=invert,
            initial_pose=Pose2d(args.start_x, args.start_y, math.radians(args.start_heading_deg)),
        )
    )
    run_drive_to_pose_example(
        Pose2d.from_degrees(args.x, args.y, args.heading_deg),
        args.log_dir / "sim_drive_to_pose.csv",
        simulator=simulator,
        tracker_config=TrackerConfig.for_drivetrain(
            DRIVETRAIN, period_s=simulator.dt, invert_rotation=invert
        ),
        interrupt_at_s=args.interrupt_at,
    )


if __name__ == "__main__":
    main()
