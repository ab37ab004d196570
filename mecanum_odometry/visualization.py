"""
Visualization utilities for odometry runs.

This module provides functions to load and visualize the pose trajectory and
the estimated body velocities recorded by the DataCollector.
"""

from pathlib import Path
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from .data_collector import POSE_HEADERS, RESET_HEADERS, VELOCITY_HEADERS
from .plot_styles import (
    ACCENT_YELLOW,
    BACKGROUND_DARK_BLUE,
    REFERENCE_BLUE,
    TIME_CMAP,
    TRAJECTORY_ORANGE,
    add_legend,
    load_csv_data,
    style_axis,
)


def _parse_numeric_csv(filepath: Path, expected: List[str], numeric: List[str]) -> Dict[str, np.ndarray]:
    headers, rows = load_csv_data(filepath)
    if headers != expected:
        raise ValueError(f"Unexpected CSV headers in {filepath.name}: {headers}")

    columns: Dict[str, List[float]] = {name: [] for name in numeric}
    indices = [headers.index(name) for name in numeric]

    for row in rows:
        if len(row) != len(expected):
            continue
        try:
            values = [float(row[i]) if row[i] else np.nan for i in indices]
        except ValueError:
            # Skip rows with invalid data
            continue
        for name, value in zip(numeric, values):
            columns[name].append(value)

    return {name: np.array(values) for name, values in columns.items()}


def parse_pose_data(filepath: Path) -> Dict[str, np.ndarray]:
    """Parse pose CSV data into numpy arrays.

    Args:
        filepath: Path to pose_data.csv.

    Returns:
        Dictionary with keys: 'timestamp', 'x', 'y', 'theta'.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If CSV format is invalid.
    """
    return _parse_numeric_csv(filepath, POSE_HEADERS, ["timestamp", "x", "y", "theta"])


def parse_velocity_data(filepath: Path) -> Dict[str, np.ndarray]:
    """Parse velocity CSV data into numpy arrays.

    Args:
        filepath: Path to velocity_data.csv.

    Returns:
        Dictionary with keys: 'timestamp', 'vx', 'vy', 'omega'.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If CSV format is invalid.
    """
    return _parse_numeric_csv(filepath, VELOCITY_HEADERS, VELOCITY_HEADERS)


def parse_reset_events(filepath: Path) -> Dict[str, np.ndarray]:
    """Parse reset events CSV data into numpy arrays (one entry per reset)."""
    return _parse_numeric_csv(filepath, RESET_HEADERS, RESET_HEADERS)


def plot_pose_trajectory(
    pose_data: Dict[str, np.ndarray],
    title: str = "Odometry Trajectory",
    save_path: Optional[Path] = None,
    reset_events: Optional[Dict[str, np.ndarray]] = None,
) -> Figure:
    """Plot the integrated trajectory (x vs y), colored by time.

    Args:
        pose_data: Dictionary containing 'timestamp', 'x' and 'y' arrays.
        title: Plot title.
        save_path: Optional path to save the figure.
        reset_events: Optional reset events; new poses are marked on the plot.

    Returns:
        Matplotlib figure object.
    """
    fig, ax = plt.subplots(figsize=(10, 8), facecolor=BACKGROUND_DARK_BLUE)

    x = pose_data["x"]
    y = pose_data["y"]
    timestamps = pose_data["timestamp"]

    valid_mask = ~(np.isnan(x) | np.isnan(y))
    x = x[valid_mask]
    y = y[valid_mask]
    timestamps = timestamps[valid_mask]

    if len(timestamps) > 0:
        ax.plot(x, y, "-", color=TRAJECTORY_ORANGE, linewidth=1.5, alpha=0.6, label="Trajectory", zorder=1)

        scatter = ax.scatter(
            x,
            y,
            c=timestamps - timestamps[0],
            cmap=TIME_CMAP,
            s=12,
            alpha=0.8,
            edgecolors="none",
            zorder=3,
        )
        fig.colorbar(scatter, ax=ax, label="Time (s)")

        ax.plot(x[0], y[0], "o", color=REFERENCE_BLUE, markersize=8, label="Start", zorder=5,
                markeredgecolor="black", markeredgewidth=1.0)
        ax.plot(x[-1], y[-1], "o", color=TRAJECTORY_ORANGE, markersize=8, label="End", zorder=5,
                markeredgecolor="black", markeredgewidth=1.0)

    if reset_events is not None and len(reset_events["x_new"]) > 0:
        ax.plot(reset_events["x_new"], reset_events["y_new"], "x", color=ACCENT_YELLOW,
                markersize=10, label="Reset", zorder=6)

    style_axis(ax, title=title, xlabel="X Position (m)", ylabel="Y Position (m)")
    ax.set_aspect("equal", adjustable="datalim")
    add_legend(ax)

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_velocity_data(
    velocity_data: Dict[str, np.ndarray],
    title: str = "Estimated Body Velocity",
    save_path: Optional[Path] = None,
) -> Figure:
    """Plot estimated linear and angular velocity over time.

    Args:
        velocity_data: Dictionary containing 'timestamp', 'vx', 'vy', 'omega' arrays.
        title: Plot title prefix.
        save_path: Optional path to save the figure.

    Returns:
        Matplotlib figure object.
    """
    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8), facecolor=BACKGROUND_DARK_BLUE, sharex=True)

    timestamps = velocity_data["timestamp"]
    valid_mask = ~np.isnan(timestamps)
    timestamps = timestamps[valid_mask]
    vx = velocity_data["vx"][valid_mask]
    vy = velocity_data["vy"][valid_mask]
    omega = velocity_data["omega"][valid_mask]

    # Normalize timestamps to start from 0
    if len(timestamps) > 0:
        timestamps = timestamps - timestamps[0]

    ax1.plot(timestamps, vx, label="vx", alpha=0.8, color=TRAJECTORY_ORANGE)
    ax1.plot(timestamps, vy, label="vy", alpha=0.8, color=REFERENCE_BLUE)
    style_axis(ax1, title=f"{title} - Linear", ylabel="Velocity (m/s)")
    add_legend(ax1)

    ax2.plot(timestamps, omega, label="omega", alpha=0.8, color=ACCENT_YELLOW)
    style_axis(ax2, title=f"{title} - Angular", xlabel="Time (s)", ylabel="Angular Velocity (rad/s)")
    add_legend(ax2)

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_run_summary(run_dir: Path, save_plots: bool = False, show_plots: bool = True) -> List[Figure]:
    """Generate summary plots for a complete run.

    Args:
        run_dir: Directory containing pose_data.csv and velocity_data.csv.
        save_plots: If True, save plots to run directory.
        show_plots: If True, display plots interactively.

    Returns:
        The generated figures.

    Raises:
        FileNotFoundError: If required CSV files are not found.
    """
    pose_data = parse_pose_data(run_dir / "pose_data.csv")

    reset_path = run_dir / "reset_events.csv"
    reset_events = parse_reset_events(reset_path) if reset_path.exists() else None

    figures = [
        plot_pose_trajectory(
            pose_data,
            title=f"Odometry Trajectory - {run_dir.name}",
            save_path=run_dir / "trajectory.png" if save_plots else None,
            reset_events=reset_events,
        )
    ]

    # Velocity input replays have no estimator output to plot
    velocity_path = run_dir / "velocity_data.csv"
    if velocity_path.exists():
        velocity_data = parse_velocity_data(velocity_path)
        if len(velocity_data["timestamp"]) > 0:
            figures.append(
                plot_velocity_data(
                    velocity_data,
                    title=f"Body Velocity - {run_dir.name}",
                    save_path=run_dir / "velocity.png" if save_plots else None,
                )
            )

    if show_plots:
        plt.show()

    return figures
