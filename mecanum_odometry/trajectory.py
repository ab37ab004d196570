"""Synthetic encoder streams for a robot driving at a constant body twist.

Used to exercise the estimators without hardware logs: the wheel angles of a
constant twist are integrated and converted back to ticks with the same
calibration the estimator applies, so replaying the stream recovers the twist
up to tick quantization.
"""

import math
from typing import List, Optional

import numpy as np
import numpy.typing as npt

from .config import SIM_DURATION, SIM_RATE_HZ, WheelParams
from .kinematics import inverse_kinematics
from .samples import TimedTickSample


def wheel_ticks(
    wheel_speeds: npt.ArrayLike, t: float, params: WheelParams
) -> npt.NDArray[np.int64]:
    """Compute cumulative encoder ticks after driving ``t`` seconds.

    Inverse of the estimator's calibration: the estimator reads
    w = Δ(ticks / gear_ratio) / dt * 2π / tick_resolution.

    Args:
        wheel_speeds: [w_fl, w_fr, w_rl, w_rr] in rad/s
        t: Elapsed time (s)
        params: Wheel calibration

    Returns:
        Integer tick counts [fl, fr, rl, rr]
    """
    counts_per_rad = params.tick_resolution * params.gear_ratio / (2.0 * math.pi)
    return np.rint(np.asarray(wheel_speeds, dtype=float) * t * counts_per_rad).astype(np.int64)


def tick_stream(
    vx: float,
    vy: float,
    omega: float,
    duration: float = SIM_DURATION,
    rate: float = SIM_RATE_HZ,
    params: Optional[WheelParams] = None,
    start_time: float = 0.0,
) -> List[TimedTickSample]:
    """Generate tick samples for a constant body twist.

    Args:
        vx: Forward velocity (m/s)
        vy: Lateral velocity (m/s)
        omega: Angular velocity (rad/s)
        duration: Length of the stream (s)
        rate: Sample rate (Hz)
        params: Wheel calibration (default: config defaults)
        start_time: Timestamp of the first sample (s)

    Returns:
        Samples at t = start_time + k / rate for k = 0 .. duration * rate

    Raises:
        ValueError: If duration is negative or rate is not positive.
    """
    if rate <= 0:
        raise ValueError(f"rate must be positive, got {rate}")
    if duration < 0:
        raise ValueError(f"duration must be non-negative, got {duration}")
    if params is None:
        params = WheelParams()

    speeds = inverse_kinematics(vx, vy, omega, params.wheel_radius, params.half_length)
    n_samples = int(round(duration * rate)) + 1

    samples = []
    for k in range(n_samples):
        t = k / rate
        ticks = wheel_ticks(speeds, t, params)
        samples.append(TimedTickSample(start_time + t, tuple(int(c) for c in ticks)))
    return samples
