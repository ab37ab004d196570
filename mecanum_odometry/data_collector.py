"""Data collection and CSV logging for odometry runs.

This module provides CSV data logging for:
- Velocity samples (body-frame twist estimated from the wheel encoders)
- Pose estimates (integrated position and heading)
- Pose reset events (old and new pose of every rebase)
"""

import csv
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO

from .config import RESULTS_DIR, TERM_BLUE, TERM_RESET
from .samples import Pose, TimedVelocitySample

VELOCITY_HEADERS = ["timestamp", "vx", "vy", "omega"]
POSE_HEADERS = ["timestamp", "x", "y", "theta", "mode"]
RESET_HEADERS = ["x_old", "y_old", "theta_old", "x_new", "y_new", "theta_new"]


class DataCollector:
    """Manages CSV file creation and logging for odometry data.

    This class handles all data logging responsibilities:
    - Creates timestamped output directories
    - Initializes CSV files with headers
    - Writes velocity, pose and reset rows
    - Ensures proper cleanup on shutdown

    Attributes:
        run_dir: Directory path for this run's output files.
        velocity_output_path: Path of the velocity samples CSV.
        pose_output_path: Path of the pose estimates CSV.
        reset_output_path: Path of the reset events CSV.
    """

    def __init__(self, output_dir: str = ".", run_dir: Optional[str] = None) -> None:
        """Initialize the data collector.

        Args:
            output_dir: Base directory for output files (default: current directory).
            run_dir: Optional specific run directory. If None, creates timestamped
                directory. Can also be set via RUN_DIR environment variable.

        Raises:
            ValueError: If output_dir is not a valid directory.
        """
        output_path = Path(output_dir)
        if output_path.exists() and not output_path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {output_dir}")

        self.velocity_csv_file: Optional[TextIO] = None
        self.velocity_csv_writer: Any = None
        self.pose_csv_file: Optional[TextIO] = None
        self.pose_csv_writer: Any = None
        self.reset_csv_file: Optional[TextIO] = None
        self.reset_csv_writer: Any = None

        if run_dir:
            self.run_dir: Path = Path(run_dir)
        elif env_run_dir := os.environ.get("RUN_DIR"):
            self.run_dir = Path(env_run_dir)
        else:
            # results/run_YYYYMMDD_HHMMSS/
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / RESULTS_DIR / f"run_{timestamp}"

        self.run_dir.mkdir(parents=True, exist_ok=True)

        self.velocity_output_path: Path = self.run_dir / "velocity_data.csv"
        self.pose_output_path: Path = self.run_dir / "pose_data.csv"
        self.reset_output_path: Path = self.run_dir / "reset_events.csv"

        self.velocity_rows = 0
        self.pose_rows = 0

    def setup(self) -> None:
        """Initialize CSV files with headers.

        Must be called before writing data.
        """
        self.velocity_csv_file = open(self.velocity_output_path, "w", newline="")
        self.velocity_csv_writer = csv.writer(self.velocity_csv_file)
        self.velocity_csv_writer.writerow(VELOCITY_HEADERS)
        self.velocity_csv_file.flush()

        self.pose_csv_file = open(self.pose_output_path, "w", newline="")
        self.pose_csv_writer = csv.writer(self.pose_csv_file)
        self.pose_csv_writer.writerow(POSE_HEADERS)
        self.pose_csv_file.flush()

        self.reset_csv_file = open(self.reset_output_path, "w", newline="")
        self.reset_csv_writer = csv.writer(self.reset_csv_file)
        self.reset_csv_writer.writerow(RESET_HEADERS)
        self.reset_csv_file.flush()

        logging.info(f"{TERM_BLUE}✓ Initialized data collection to {self.run_dir}/{TERM_RESET}")

    def log_velocity(self, sample: TimedVelocitySample) -> None:
        """Log an estimated body velocity to CSV."""
        self.velocity_csv_writer.writerow([sample.timestamp, sample.vx, sample.vy, sample.omega])
        self.velocity_rows += 1
        if self.velocity_csv_file:
            self.velocity_csv_file.flush()

    def log_pose(self, timestamp: float, pose: Pose, mode: str) -> None:
        """Log a pose estimate to CSV.

        Args:
            timestamp: Time of the velocity sample that produced the pose (s).
            pose: Integrated pose.
            mode: Name of the integration scheme that produced it.
        """
        self.pose_csv_writer.writerow([timestamp, pose.x, pose.y, pose.theta, mode])
        self.pose_rows += 1
        if self.pose_csv_file:
            self.pose_csv_file.flush()

    def log_reset(self, old_pose: Pose, new_pose: Pose) -> None:
        """Log a pose rebase (old and new pose) to CSV."""
        self.reset_csv_writer.writerow([*old_pose.as_tuple(), *new_pose.as_tuple()])
        if self.reset_csv_file:
            self.reset_csv_file.flush()

    def cleanup(self) -> None:
        """Close all CSV files and log final output location."""
        if self.velocity_csv_file:
            self.velocity_csv_file.close()
        if self.pose_csv_file:
            self.pose_csv_file.close()
        if self.reset_csv_file:
            self.reset_csv_file.close()

        logging.info(
            f"{TERM_BLUE}✓ Saved {self.velocity_rows} velocity and {self.pose_rows} pose "
            f"samples to {self.run_dir}/{TERM_RESET}"
        )

    def __enter__(self) -> "DataCollector":
        """Context manager entry point.

        Returns:
            Self reference for use in with statement.
        """
        self.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit point - ensures cleanup is called."""
        self.cleanup()
