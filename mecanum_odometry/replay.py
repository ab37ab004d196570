#!/usr/bin/env python3
"""
Offline odometry replay.

This module replays recorded (or synthetic) encoder tick streams through the
odometry pipeline, or velocity streams straight through the pose integrator,
and saves every estimated velocity and pose to CSV files for later plotting.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import (
    DEFAULT_INTEGRATION_MODE,
    REJECT_OUT_OF_ORDER,
    SIM_DURATION,
    SIM_RATE_HZ,
    TERM_BLUE,
    TERM_RESET,
    WheelParams,
    load_params,
)
from .data_collector import DataCollector
from .pipeline import OdometryPipeline
from .samples import WHEEL_NAMES, Pose, TimedTickSample, TimedVelocitySample, stamp_to_seconds
from .trajectory import tick_stream


class CustomFormatter(logging.Formatter):
    """Custom logging formatter that removes timestamps from INFO messages.

    INFO messages are shown bare for clean console output, while WARNING,
    ERROR and DEBUG messages keep timestamp and level.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        return f"{self.formatTime(record, self.datefmt)} - {record.levelname} - {record.getMessage()}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show all levels with timestamps. If False, show INFO
                 without timestamps and WARNING/ERROR with timestamps.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        if not any(isinstance(h.formatter, CustomFormatter) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
            logger.addHandler(handler)


# ============================================================================
# Input Loading
# ============================================================================


def _read_rows(filepath: Path) -> List[Dict[str, str]]:
    if not filepath.exists():
        raise FileNotFoundError(f"Input file not found: {filepath}")
    with open(filepath, newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError(f"Input file is empty: {filepath}")
        reader.fieldnames = [name.strip() for name in reader.fieldnames]
        return list(reader)


def _row_timestamp(row: Dict[str, str]) -> float:
    if row.get("timestamp"):
        return float(row["timestamp"])
    return stamp_to_seconds(int(row["stamp_sec"]), int(row["stamp_nsec"]))


def _parse_tick(value: str) -> int:
    count = float(value)
    if not count.is_integer():
        raise ValueError(f"Tick count must be an integer, got {value}")
    return int(count)


def load_tick_samples(filepath: Path) -> List[TimedTickSample]:
    """Load encoder tick samples from CSV.

    Expected columns: ``timestamp`` (or ``stamp_sec`` and ``stamp_nsec``)
    followed by ``fl, fr, rl, rr`` tick counts.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a column is missing or a row cannot be parsed.
    """
    rows = _read_rows(filepath)
    samples = []
    for line_no, row in enumerate(rows, start=2):
        try:
            ticks = tuple(_parse_tick(row[name]) for name in WHEEL_NAMES)
            samples.append(TimedTickSample(_row_timestamp(row), ticks))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"{filepath.name}:{line_no}: invalid tick row ({e})") from e
    return samples


def load_velocity_samples(filepath: Path) -> List[TimedVelocitySample]:
    """Load body velocity samples from CSV with columns ``timestamp, vx, vy, omega``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a column is missing or a row cannot be parsed.
    """
    rows = _read_rows(filepath)
    samples = []
    for line_no, row in enumerate(rows, start=2):
        try:
            samples.append(
                TimedVelocitySample(
                    _row_timestamp(row), float(row["vx"]), float(row["vy"]), float(row["omega"])
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"{filepath.name}:{line_no}: invalid velocity row ({e})") from e
    return samples


# ============================================================================
# Replay Driver
# ============================================================================


class ReplayRunner:
    """Feeds sample streams through an odometry pipeline and records the outputs.

    Calls into the pipeline are made one sample at a time, in input order.

    Attributes:
        pipeline: The odometry pipeline being driven.
        data_collector: CSV logger for velocities, poses and resets.
    """

    def __init__(
        self,
        pipeline: OdometryPipeline,
        output_dir: str = ".",
        run_dir: Optional[str] = None,
    ) -> None:
        self.pipeline = pipeline
        self.data_collector = DataCollector(output_dir=output_dir, run_dir=run_dir)

    def reset(self, new_pose: Pose) -> Pose:
        """Rebase the pose and record the old/new pair."""
        old_pose = self.pipeline.reset(new_pose)
        self.data_collector.log_reset(old_pose, new_pose)
        return old_pose

    def run_ticks(self, samples: Iterable[TimedTickSample]) -> Dict[str, Any]:
        """Replay encoder samples through both estimators.

        Returns:
            Summary with sample/output counts and the final pose.
        """
        n_samples = n_velocities = n_poses = 0
        for sample in samples:
            n_samples += 1
            velocity, pose = self.pipeline.process_ticks(sample)
            if velocity is not None:
                n_velocities += 1
                self.data_collector.log_velocity(velocity)
            if pose is not None:
                n_poses += 1
                self.data_collector.log_pose(velocity.timestamp, pose, self.pipeline.mode.name)
        return self._summary(n_samples, n_velocities, n_poses)

    def run_velocities(self, samples: Iterable[TimedVelocitySample]) -> Dict[str, Any]:
        """Replay velocity samples straight into the pose integrator."""
        n_samples = n_poses = 0
        for sample in samples:
            n_samples += 1
            pose = self.pipeline.process_velocity(sample)
            if pose is not None:
                n_poses += 1
                self.data_collector.log_pose(sample.timestamp, pose, self.pipeline.mode.name)
        return self._summary(n_samples, 0, n_poses)

    def _summary(self, n_samples: int, n_velocities: int, n_poses: int) -> Dict[str, Any]:
        return {
            "samples": n_samples,
            "velocities": n_velocities,
            "poses": n_poses,
            "final_pose": self.pipeline.pose,
        }

    def __enter__(self) -> "ReplayRunner":
        self.data_collector.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.data_collector.cleanup()


# ============================================================================
# Command Line Interface
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m mecanum_odometry",
        description="Replay wheel encoder or velocity streams through the odometry estimators",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replay a recorded tick log with Runge-Kutta integration
  python -m mecanum_odometry ticks.csv --method rk2

  # Drive a synthetic circle for 20 s and start from a known pose
  python -m mecanum_odometry --simulate 0.5 0 0.25 --duration 20 --initial-pose 1 2 0

  # Integrate an existing velocity log
  python -m mecanum_odometry --velocity-input cmd_vel.csv
        """,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument("ticks", nargs="?", default=None, help="CSV of encoder ticks (timestamp, fl, fr, rl, rr)")
    source.add_argument("--velocity-input", metavar="CSV", help="CSV of body velocities (timestamp, vx, vy, omega)")
    source.add_argument(
        "--simulate",
        nargs=3,
        type=float,
        metavar=("VX", "VY", "OMEGA"),
        help="Generate a synthetic tick stream for a constant body twist",
    )

    parser.add_argument("--duration", type=float, default=SIM_DURATION, help=f"Synthetic stream length in s (default: {SIM_DURATION})")
    parser.add_argument("--rate", type=float, default=SIM_RATE_HZ, help=f"Synthetic sample rate in Hz (default: {SIM_RATE_HZ})")
    parser.add_argument(
        "--method",
        choices=["euler", "rk2"],
        default=DEFAULT_INTEGRATION_MODE,
        help=f"Pose integration scheme (default: {DEFAULT_INTEGRATION_MODE})",
    )
    parser.add_argument(
        "--initial-pose",
        nargs=3,
        type=float,
        metavar=("X", "Y", "THETA"),
        help="Reset the pose before replaying",
    )
    parser.add_argument("--params", metavar="JSON", help="JSON file with wheel calibration parameters")
    parser.add_argument(
        "--reject-out-of-order",
        action="store_true",
        default=REJECT_OUT_OF_ORDER,
        help="Log and ignore samples older than the last accepted one",
    )
    parser.add_argument("--output-dir", default=".", help="Base directory for results (default: .)")
    parser.add_argument("--run-dir", default=None, help="Explicit run directory (default: results/run_<timestamp>)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the replay CLI.

    Returns:
        Exit code (0 for success, 1 on input or configuration errors).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.ticks is None and args.velocity_input is None and args.simulate is None:
        parser.error("one of ticks, --velocity-input or --simulate is required")

    setup_logging(args.verbose)

    try:
        params = load_params(args.params) if args.params else WheelParams()
        pipeline = OdometryPipeline(
            params, mode=args.method, reject_out_of_order=args.reject_out_of_order
        )

        with ReplayRunner(pipeline, output_dir=args.output_dir, run_dir=args.run_dir) as runner:
            if args.initial_pose is not None:
                runner.reset(Pose(*args.initial_pose))

            if args.velocity_input is not None:
                summary = runner.run_velocities(load_velocity_samples(Path(args.velocity_input)))
            elif args.simulate is not None:
                vx, vy, omega = args.simulate
                samples = tick_stream(vx, vy, omega, duration=args.duration, rate=args.rate, params=params)
                summary = runner.run_ticks(samples)
            else:
                summary = runner.run_ticks(load_tick_samples(Path(args.ticks)))
    except (FileNotFoundError, ValueError) as e:
        logging.error(f"Error: {e}")
        return 1

    final_pose = summary["final_pose"]
    logging.info(
        f"{TERM_BLUE}→ {summary['samples']} samples, {summary['velocities']} velocities, "
        f"{summary['poses']} poses{TERM_RESET}"
    )
    logging.info(
        f"{TERM_BLUE}\033[1m→ Final pose: x={final_pose.x:.3f}m y={final_pose.y:.3f}m "
        f"theta={final_pose.theta:.3f}rad{TERM_RESET}"
    )
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logging.info("\nExiting...")
        sys.exit(0)
