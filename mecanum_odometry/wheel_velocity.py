"""Body velocity estimation from four wheel encoders.

This module converts raw, monotonic encoder tick counts into body-frame
velocity samples:
- Decimation: only every Nth sample is processed to average tick quantization
- First processed sample only seeds the reference angles and time
- Wheel angular velocities are finite differences of the shaft angles
- The four wheel speeds are combined through the four-wheel kinematic model
"""

import logging
import math
from typing import Any, Optional

import numpy as np
import numpy.typing as npt

from .config import WheelParams
from .kinematics import kinematic_matrix
from .samples import TimedTickSample, TimedVelocitySample

logger = logging.getLogger(__name__)


class WheelVelocityEstimator:
    """Differential-drive velocity estimator for a four-wheel robot.

    For each processed sample, with angles a = ticks / gear_ratio:
        w = (a - a_prev) / dt * 2π / tick_resolution
        [vx, vy, omega] = J @ [w_fl, w_fr, w_rl, w_rr]

    where J is the kinematic matrix of ``kinematics.kinematic_matrix``.

    Attributes:
        params: Wheel geometry and encoder calibration (read-only).
        reject_out_of_order: Log and ignore processed samples with negative dt.
    """

    def __init__(
        self,
        params: Optional[WheelParams] = None,
        reject_out_of_order: bool = False,
        **overrides: Any,
    ):
        """Initialize the estimator.

        Args:
            params: Calibration record. If None, uses the defaults from
                mecanum_odometry.config.
            reject_out_of_order: If True, a processed sample older than the
                reference is logged and ignored.
            **overrides: Individual WheelParams fields to replace
                (e.g. ``tick_resolution=1024``).

        Raises:
            ValueError: If the resulting parameters are invalid.
        """
        if params is None:
            params = WheelParams()
        if overrides:
            params = params.replace(**overrides)
        self._params = params
        self.reject_out_of_order = reject_out_of_order

        self._J = kinematic_matrix(params.wheel_radius, params.half_length)
        self._scale = 2.0 * math.pi / params.tick_resolution

        self._sample_count = 0
        self._last_timestamp: Optional[float] = None
        self._last_angles: Optional[npt.NDArray[np.float64]] = None
        self._last_wheel_speeds = np.zeros(4)

    @property
    def params(self) -> WheelParams:
        return self._params

    @property
    def sample_count(self) -> int:
        return self._sample_count

    @property
    def is_seeded(self) -> bool:
        return self._last_angles is not None

    @property
    def last_timestamp(self) -> Optional[float]:
        return self._last_timestamp

    @property
    def last_angles(self) -> Optional[npt.NDArray[np.float64]]:
        return None if self._last_angles is None else self._last_angles.copy()

    @property
    def last_wheel_speeds(self) -> npt.NDArray[np.float64]:
        return self._last_wheel_speeds.copy()

    def update(self, sample: TimedTickSample) -> Optional[TimedVelocitySample]:
        """Consume one tick sample.

        Args:
            sample: Encoder counts [fl, fr, rl, rr] with timestamp (seconds).

        Returns:
            A velocity sample stamped with ``sample.timestamp``, or None when
            the sample was decimated away, only seeded the reference, or had
            a zero (or rejected negative) time step.
        """
        ordinal = self._sample_count
        self._sample_count += 1

        if ordinal % self._params.decimation_interval != 0:
            return None

        angles = np.asarray(sample.ticks, dtype=float) / self._params.gear_ratio

        if self._last_angles is None:
            self._last_angles = angles
            self._last_timestamp = sample.timestamp
            logger.debug(f"Wheel estimator seeded at t={sample.timestamp:.6f} (sample {ordinal})")
            return None

        dt = sample.timestamp - self._last_timestamp
        if dt == 0:
            logger.debug(f"Zero time step at sample {ordinal}, no velocity computed")
            return None
        if dt < 0 and self.reject_out_of_order:
            logger.warning(
                f"Out-of-order tick sample ignored: t={sample.timestamp:.6f} "
                f"< last t={self._last_timestamp:.6f}"
            )
            return None

        wheel_speeds = (angles - self._last_angles) / dt * self._scale
        vx, vy, omega = (float(v) for v in self._J @ wheel_speeds)

        self._last_angles = angles
        self._last_timestamp = sample.timestamp
        self._last_wheel_speeds = wheel_speeds

        logger.debug(
            f"sample {ordinal}: dt={dt:.6f} "
            f"w=[{', '.join(f'{w:.4f}' for w in wheel_speeds)}] "
            f"vx={vx:.4f} vy={vy:.4f} omega={omega:.4f}"
        )
        return TimedVelocitySample(sample.timestamp, vx, vy, omega)

    def reset(self) -> None:
        """Reset estimator to its initial (unseeded) state."""
        self._sample_count = 0
        self._last_timestamp = None
        self._last_angles = None
        self._last_wheel_speeds = np.zeros(4)
