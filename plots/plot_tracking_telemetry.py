from __future__ import annotations

import argparse
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

REQUIRED_COLUMNS = ("time_s", "veh_x", "ref_x", "cmd_vx", "veh_heading")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Plot telemetry captured from a trajectory-tracking episode."
    )
    parser.add_argument("logfile", type=Path, help="Path to a tracking CSV log")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Optional path to save the figure instead of displaying it.",
    )
    return parser


def plot_tracking_telemetry(df: pd.DataFrame, output: Path | None) -> None:
    time = df["time_s"].to_numpy()

    fig = plt.figure(figsize=(12, 12))
    grid = fig.add_gridspec(4, 2)
    ax_xy = fig.add_subplot(grid[0:2, 0])
    ax_pos = fig.add_subplot(grid[0, 1])
    ax_vel = fig.add_subplot(grid[1, 1], sharex=ax_pos)
    ax_heading = fig.add_subplot(grid[2, :])
    ax_err = fig.add_subplot(grid[3, :], sharex=ax_heading)

    ax_xy.plot(df["ref_x"], df["ref_y"], linestyle="--", label="Reference")
    ax_xy.plot(df["veh_x"], df["veh_y"], label="Vehicle")
    ax_xy.set_xlabel("X (m)")
    ax_xy.set_ylabel("Y (m)")
    ax_xy.set_aspect("equal", adjustable="datalim")
    ax_xy.legend(loc="best", fontsize="small")
    ax_xy.grid(True, linestyle=":")

    for comp in ("x", "y"):
        ax_pos.plot(time, df[f"veh_{comp}"], label=f"{comp.upper()} actual")
        ax_pos.plot(time, df[f"ref_{comp}"], linestyle="--", label=f"{comp.upper()} reference")
    ax_pos.set_ylabel("Position (m)")
    ax_pos.legend(loc="upper right", fontsize="small")
    ax_pos.grid(True, linestyle=":")

    for comp in ("x", "y"):
        ax_vel.plot(time, df[f"veh_v{comp}"], label=f"V{comp} actual")
        ax_vel.plot(time, df[f"cmd_v{comp}"], linestyle="--", label=f"V{comp} command")
    ax_vel.set_ylabel("Velocity (m/s)")
    ax_vel.set_xlabel("Time (s)")
    ax_vel.legend(loc="upper right", fontsize="small")
    ax_vel.grid(True, linestyle=":")

    heading = np.rad2deg(np.unwrap(df["veh_heading"].to_numpy()))
    ax_heading.plot(time, heading, label="Heading (deg)")
    if "desired_rotation" in df.columns:
        desired = np.rad2deg(np.unwrap(df["desired_rotation"].to_numpy()))
        ax_heading.plot(time, desired, linestyle="--", label="Desired rotation (deg)")
    ax_heading.plot(time, np.rad2deg(df["cmd_omega"].to_numpy()), linestyle=":", label="Omega cmd (deg/s)")
    ax_heading.set_ylabel("Heading (deg)")
    ax_heading.legend(loc="upper right", fontsize="small")
    ax_heading.grid(True, linestyle=":")

    position_error = np.hypot(df["err_x"].to_numpy(), df["err_y"].to_numpy())
    ax_err.plot(time, position_error, label="Position error (m)")
    ax_err.plot(time, np.rad2deg(df["err_heading"].to_numpy()), label="Rotation error (deg)")
    ax_err.set_ylabel("Error")
    ax_err.set_xlabel("Time (s)")
    ax_err.legend(loc="upper right", fontsize="small")
    ax_err.grid(True, linestyle=":")

    fig.tight_layout()

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output, dpi=200)
    else:
        plt.show()


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if not args.logfile.exists():
        raise SystemExit(f"Telemetry log not found: {args.logfile}")

    df = pd.read_csv(args.logfile)
    missing = [col for col in REQUIRED_COLUMNS if col not in df]
    if missing:
        raise SystemExit(f"Log is missing expected columns: {missing}")

    plot_tracking_telemetry(df, args.output)


if __name__ == "__main__":
    main()
