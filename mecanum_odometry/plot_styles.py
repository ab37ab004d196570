"""Shared plotting utilities and styles for odometry visualizations.

This module provides:
- Color scheme and colormap
- CSV data loading functions
- Common plot styling functions

All visualization modules should import from this module to ensure consistency.
"""

import csv
from pathlib import Path
from typing import List, Tuple

from matplotlib.axes import Axes
from matplotlib.colors import LinearSegmentedColormap

from .config import (
    ACCENT_YELLOW,
    BACKGROUND_DARK_BLUE,
    GRID_TAUPE,
    LABEL_CREAM,
    REFERENCE_BLUE,
    TRAJECTORY_ORANGE,
)

__all__ = [
    "TRAJECTORY_ORANGE",
    "REFERENCE_BLUE",
    "LABEL_CREAM",
    "GRID_TAUPE",
    "ACCENT_YELLOW",
    "BACKGROUND_DARK_BLUE",
    "TIME_CMAP",
    "load_csv_data",
    "style_axis",
    "add_legend",
]

# ============================================================================
# Colormap
# ============================================================================

TIME_CMAP = LinearSegmentedColormap.from_list("odometry_time", [TRAJECTORY_ORANGE, REFERENCE_BLUE])
"""Colormap for time-colored scatter plots (orange -> blue)."""


# ============================================================================
# CSV Data Loading
# ============================================================================


def load_csv_data(filepath: Path) -> Tuple[List[str], List[List[str]]]:
    """Load CSV file and return headers and data rows.

    Args:
        filepath: Path to the CSV file.

    Returns:
        Tuple containing (headers, data_rows).

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If the CSV file is empty.
    """
    if not filepath.exists():
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    with open(filepath, newline="") as f:
        reader = csv.reader(f)
        try:
            headers = [h.strip() for h in next(reader)]
        except StopIteration:
            raise ValueError(f"CSV file is empty: {filepath}") from None
        data_rows = [row for row in reader if row]

    return headers, data_rows


# ============================================================================
# Plot Styling Functions
# ============================================================================


def style_axis(
    ax: Axes,
    title: str = "",
    xlabel: str = "",
    ylabel: str = "",
    grid: bool = True,
    dark_mode: bool = True,
) -> None:
    """Apply consistent styling to a matplotlib axis.

    Args:
        ax: Matplotlib axis to style.
        title: Plot title (optional).
        xlabel: X-axis label (optional).
        ylabel: Y-axis label (optional).
        grid: Whether to show grid lines (default: True).
        dark_mode: Whether to use dark mode styling (default: True).
    """
    text_color = LABEL_CREAM if dark_mode else None

    if title:
        ax.set_title(title, fontweight="bold", color=text_color)
    if xlabel:
        ax.set_xlabel(xlabel, color=text_color)
    if ylabel:
        ax.set_ylabel(ylabel, color=text_color)

    if grid:
        ax.grid(True, alpha=0.3, linestyle="--", linewidth=0.5)

    if dark_mode:
        ax.set_facecolor(BACKGROUND_DARK_BLUE)
        ax.tick_params(colors=LABEL_CREAM, which="both")
        for spine in ax.spines.values():
            spine.set_edgecolor(GRID_TAUPE)


def add_legend(ax: Axes, loc: str = "best", dark_mode: bool = True, **kwargs) -> None:
    """Add a legend with the shared styling.

    Args:
        ax: Matplotlib axis to add legend to.
        loc: Legend location (default: "best").
        dark_mode: Whether to use dark mode styling (default: True).
        **kwargs: Additional keyword arguments passed to ax.legend().
    """
    legend_kwargs = {
        "loc": loc,
        "framealpha": 0.9,
        "edgecolor": GRID_TAUPE,
    }

    if dark_mode:
        legend_kwargs["facecolor"] = BACKGROUND_DARK_BLUE
        legend_kwargs["labelcolor"] = LABEL_CREAM

    # User kwargs take precedence
    legend_kwargs.update(kwargs)

    ax.legend(**legend_kwargs)
