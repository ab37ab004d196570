"""Value types exchanged between the estimators.

- ``TimedTickSample``: raw encoder counts of the four wheels at an instant
- ``TimedVelocitySample``: body-frame twist at an instant
- ``Pose``: planar pose in the fixed world frame

All three are immutable. Wheel order is always [front-left, front-right,
rear-left, rear-right].
"""

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

WHEEL_NAMES = ("fl", "fr", "rl", "rr")


def stamp_to_seconds(sec: int, nsec: int) -> float:
    """Convert a split (seconds, nanoseconds) stamp to float seconds."""
    return sec + nsec * 1e-9


@dataclass(frozen=True)
class Pose:
    """Robot pose in the world frame.

    Attributes:
        x, y: Position (meters).
        theta: Heading (radians). Never normalized, so it accumulates turns.
    """

    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.theta)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "theta": self.theta}


@dataclass(frozen=True)
class TimedVelocitySample:
    """Body-frame linear (m/s) and angular (rad/s) velocity at ``timestamp`` (s)."""

    timestamp: float
    vx: float
    vy: float
    omega: float


@dataclass(frozen=True)
class TimedTickSample:
    """Raw encoder counts since power-on at ``timestamp`` (s).

    Raises:
        ValueError: If ``ticks`` does not hold exactly four readings.
    """

    timestamp: float
    ticks: Tuple[int, int, int, int]

    def __post_init__(self):
        ticks: Sequence[int] = tuple(self.ticks)
        if len(ticks) != len(WHEEL_NAMES):
            raise ValueError(
                f"Expected {len(WHEEL_NAMES)} wheel readings (fl, fr, rl, rr), got {len(ticks)}"
            )
        object.__setattr__(self, "ticks", ticks)
