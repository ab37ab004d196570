"""Configuration parameters for the mecanum odometry system.

This module centralizes all configuration parameters including:
- Physical robot and encoder calibration parameters
- Pose integration defaults
- Replay / synthetic drive defaults
- Visualization settings

All parameters are documented with their purpose and origin. The wheel
calibration constants are bundled into a ``WheelParams`` record, which can be
loaded from a JSON file using either snake_case names or the parameter-server
names used on the robot (``gearRatio``, ``wheelRadius``, ``halfLenght``, ...).
"""

import json
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Union

# ============================================================================
# Physical Robot Parameters
# ============================================================================

GEAR_RATIO = 5
"""Reduction factor between encoder shaft revolutions and wheel revolutions.
Fixed by the drive train (5:1 planetary gearbox)."""

WHEEL_RADIUS = 0.07
"""Wheel radius (meters). Measured on the mecanum rollers' envelope."""

HALF_LENGTH = 0.2
"""Half of the wheelbase, front axle to robot center (meters)."""

HALF_WIDTH = 0.169
"""Half of the track width, left wheel to robot center (meters).

Accepted for interface compatibility only: the four-wheel velocity model
does not use it.
"""

TICK_RESOLUTION = 42
"""Encoder ticks per shaft revolution.

Note: the wheel speed formula multiplies an angle difference that has
already been divided by GEAR_RATIO by 2π / TICK_RESOLUTION. The configured
value therefore carries an implicit unit calibration rather than being a pure
ticks-to-radians conversion. Keep the literal value unless the calibration
is re-measured.
"""

DECIMATION_INTERVAL = 5
"""Process every Nth encoder sample (range: >= 1).

Tuning rationale:
- Encoder ticks are coarse at low speed, so consecutive samples differ by 0-1 ticks
- Differentiating every 5th sample averages the quantization noise
- Larger values smooth more but delay the velocity estimate
"""


# ============================================================================
# Pose Integration Parameters
# ============================================================================

DEFAULT_INTEGRATION_MODE = "euler"
"""Integration scheme selected at startup ("euler" or "rk2")."""

REJECT_OUT_OF_ORDER = False
"""Drop samples whose timestamp is older than the last accepted one.

Disabled by default: out-of-order delivery is a caller contract violation and
the baseline behaviour integrates it literally (negative dt). Enable to log
and ignore such samples instead.
"""


# ============================================================================
# Replay / Synthetic Drive Configuration
# ============================================================================

RESULTS_DIR = "results"
"""Base directory (relative to the output dir) for per-run CSV output."""

SIM_RATE_HZ = 50.0
"""Encoder sample rate for synthetic tick streams (Hz)."""

SIM_DURATION = 10.0
"""Default duration of synthetic tick streams (seconds)."""


# ============================================================================
# Visualization Colors
# ============================================================================

TRAJECTORY_ORANGE = "#f74823"
"""Primary color - estimated trajectory, vx."""

REFERENCE_BLUE = "#2374f7"
"""Secondary color - start markers, vy."""

LABEL_CREAM = "#fffdee"
"""Light color for text and labels on dark backgrounds."""

GRID_TAUPE = "#686a5f"
"""Neutral color for guides, grids, and secondary elements."""

ACCENT_YELLOW = "#ffa726"
"""Accent color for omega and reset markers."""

BACKGROUND_DARK_BLUE = "#0d1b2a"
"""Dark background color for plots."""

# Terminal color codes (ANSI escape sequences)
TERM_ORANGE = "\033[38;2;247;72;35m"
"""Terminal color code for orange (RGB: 247, 72, 35)."""

TERM_BLUE = "\033[38;2;35;116;247m"
"""Terminal color code for blue (RGB: 35, 116, 247)."""

TERM_RESET = "\033[0m"
"""Terminal color reset code."""


# ============================================================================
# Wheel Calibration Record
# ============================================================================

# Parameter-server names -> WheelParams field names
_PARAM_ALIASES = {
    "gearRatio": "gear_ratio",
    "wheelRadius": "wheel_radius",
    "halfLenght": "half_length",
    "halfLength": "half_length",
    "halfWidth": "half_width",
    "tickRes": "tick_resolution",
    "tickResolution": "tick_resolution",
    "msgInterval": "decimation_interval",
}


@dataclass(frozen=True)
class WheelParams:
    """Wheel geometry and encoder calibration, fixed at construction."""

    gear_ratio: float = GEAR_RATIO
    wheel_radius: float = WHEEL_RADIUS
    half_length: float = HALF_LENGTH
    half_width: float = HALF_WIDTH
    tick_resolution: float = TICK_RESOLUTION
    decimation_interval: int = DECIMATION_INTERVAL

    def __post_init__(self):
        if self.gear_ratio == 0:
            raise ValueError("gear_ratio must be non-zero")
        if self.tick_resolution == 0:
            raise ValueError("tick_resolution must be non-zero")
        if int(self.decimation_interval) != self.decimation_interval or self.decimation_interval < 1:
            raise ValueError(
                f"decimation_interval must be a positive integer, got {self.decimation_interval}"
            )
        if math.isclose(self.wheel_radius + self.half_length, 0.0, abs_tol=1e-12):
            raise ValueError("wheel_radius + half_length must be non-zero")
        object.__setattr__(self, "decimation_interval", int(self.decimation_interval))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "WheelParams":
        """Build parameters from a flat name -> value mapping.

        Missing names fall back to the module defaults.

        Raises:
            ValueError: On unknown names, non-numeric values or invalid values.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in mapping.items():
            name = _PARAM_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown wheel parameter: {key}")
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Wheel parameter {key} must be numeric, got {value!r}")
            values[name] = value
        return cls(**values)

    def replace(self, **changes: Any) -> "WheelParams":
        """Return a copy with some fields replaced."""
        return self.from_mapping({**asdict(self), **changes})

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for logging."""
        return asdict(self)


def load_params(path: Union[str, Path]) -> WheelParams:
    """Load wheel parameters from a JSON object file.

    Args:
        path: Path to a JSON file such as ``{"gearRatio": 5, "tickRes": 42}``.

    Returns:
        WheelParams with the file's values over the defaults.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a JSON object or holds invalid values.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Parameter file not found: {path}")

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Parameter file must contain a JSON object: {path}")

    return WheelParams.from_mapping(data)
