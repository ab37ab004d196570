#!/usr/bin/env python3
"""
Standalone script to visualize odometry runs.

This script loads the pose and velocity CSV files from a run directory and
plots the integrated trajectory and the estimated body velocities.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import RESULTS_DIR, TERM_BLUE, TERM_RESET
from .visualization import plot_run_summary


def find_latest_run(results_dir: Path) -> Path:
    """Find the most recent run directory.

    Args:
        results_dir: Path to the results directory.

    Returns:
        Path to the most recent run directory.

    Raises:
        FileNotFoundError: If no run directories are found.
    """
    if not results_dir.exists():
        raise FileNotFoundError(f"Results directory not found: {results_dir}")

    run_dirs = sorted(
        [d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_")]
    )

    if not run_dirs:
        raise FileNotFoundError(f"No run directories found in {results_dir}")

    return run_dirs[-1]


def list_available_runs(results_dir: Path) -> None:
    """List all available run directories."""
    if not results_dir.exists():
        logging.error(f"Results directory not found: {results_dir}")
        return

    run_dirs = sorted(
        [d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_")]
    )

    if not run_dirs:
        logging.info(f"No run directories found in {results_dir}")
        return

    logging.info("Available runs:")
    for i, run_dir in enumerate(run_dirs, 1):
        logging.info(f"  {i}. {run_dir.name}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the plotting script."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        prog="python -m mecanum_odometry.plot_results",
        description="Visualize odometry runs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plot the most recent run
  python -m mecanum_odometry.plot_results

  # Plot a specific run by name and save figures without showing them
  python -m mecanum_odometry.plot_results --run run_20261017_101500 --save --no-show

  # List all available runs
  python -m mecanum_odometry.plot_results --list
        """,
    )
    parser.add_argument(
        "--run",
        type=str,
        default=None,
        help="Name of the run directory to plot. If not specified, plots the most recent run.",
    )
    parser.add_argument(
        "--results-dir",
        type=str,
        default=RESULTS_DIR,
        help=f"Path to the results directory (default: {RESULTS_DIR})",
    )
    parser.add_argument(
        "--save", action="store_true", help="Save plots as PNG files in the run directory"
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not display plots interactively (useful with --save)",
    )
    parser.add_argument("--list", action="store_true", help="List all available runs and exit")

    args = parser.parse_args(argv)

    results_dir = Path(args.results_dir)

    if args.list:
        list_available_runs(results_dir)
        return 0

    if args.run:
        run_dir = results_dir / args.run
        if not run_dir.exists():
            logging.error(f"Error: Run directory not found: {run_dir}")
            list_available_runs(results_dir)
            return 1
    else:
        try:
            run_dir = find_latest_run(results_dir)
            logging.info(f"{TERM_BLUE}Plotting most recent run: {run_dir}{TERM_RESET}")
        except FileNotFoundError as e:
            logging.error(f"Error: {e}")
            return 1

    try:
        plot_run_summary(run_dir=run_dir, save_plots=args.save, show_plots=not args.no_show)
    except FileNotFoundError as e:
        logging.error(f"Error: {e}")
        logging.info(f"Make sure {run_dir} contains pose_data.csv")
        return 1
    except ValueError as e:
        logging.error(f"Error reading run data: {e}")
        return 1

    if args.save:
        logging.info(f"{TERM_BLUE}✓ Saved plots to {run_dir}/{TERM_RESET}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
