"""Dead-reckoning pose integration from body-frame velocity samples.

This module provides the pose integrator that turns a stream of timestamped
body twists into a planar pose estimate:
- First sample only seeds the time reference (no interval to integrate yet)
- Each later sample is integrated over the elapsed time since the previous one
- Integration scheme (Euler or 2nd order Runge-Kutta) is switchable at runtime
- Pose can be rebased to an arbitrary value without losing the time reference
"""

import enum
import logging
import math
from typing import Any, Dict, Optional, Union

from .samples import Pose, TimedVelocitySample

logger = logging.getLogger(__name__)


class IntegrationMode(enum.Enum):
    """Numerical integration scheme used by ``PoseIntegrator``."""

    EULER = 0
    RUNGE_KUTTA_2 = 1

    @classmethod
    def parse(cls, value: Union["IntegrationMode", str, int]) -> "IntegrationMode":
        """Resolve a mode from an enum member, a name or the reconfigure integer.

        Accepted names: "euler", "rk2", "runge_kutta_2", "runge-kutta" (any case).
        Accepted integers: 0 (Euler), 1 (Runge-Kutta).

        Raises:
            ValueError: If the value does not name a mode.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            if key == "euler":
                return cls.EULER
            if key in ("rk2", "runge_kutta_2", "runge_kutta", "rk"):
                return cls.RUNGE_KUTTA_2
        raise ValueError(f"Unknown integration mode: {value!r}")


class PoseIntegrator:
    """Planar pose estimator integrating body velocity over time.

    State:
        - pose: (x, y, theta) in the world frame, theta unwrapped
        - last_timestamp: time of the last accepted sample (None until seeded)
        - mode: active integration scheme

    Integration schemes, with dt the elapsed time since the last sample:

        EULER (rotate, then translate with the updated heading):
            theta' = theta + omega*dt
            x' = x + dt*(vx*cos(theta') + vy*sin(theta'))
            y' = y + dt*(vx*sin(theta') + vy*sin(theta'))

        RUNGE_KUTTA_2 (translate along the midpoint heading):
            theta' = theta + omega*dt
            v = sqrt(vx^2 + vy^2)
            x' = x + v*dt*cos(theta + omega*dt/2)
            y' = y + v*dt*sin(theta + omega*dt/2)

    The Euler lateral term uses sin(theta') for both x and y. This matches
    the odometry model the robot was calibrated against and is kept as is.
    Runge-Kutta uses the speed magnitude, so the sign of vy is lost.

    Calls must be serialized by the caller; no locking is done here.
    """

    def __init__(
        self,
        mode: Union[IntegrationMode, str, int] = IntegrationMode.EULER,
        initial_pose: Optional[Pose] = None,
        reject_out_of_order: bool = False,
    ):
        """Initialize the integrator at the origin (or ``initial_pose``).

        Args:
            mode: Initial integration scheme.
            initial_pose: Starting pose (default: origin).
            reject_out_of_order: If True, samples older than the last accepted
                one are logged and ignored instead of integrated with a
                negative dt.

        Raises:
            ValueError: If ``mode`` does not name an integration scheme.
        """
        self._mode = IntegrationMode.parse(mode)
        self._pose = initial_pose if initial_pose is not None else Pose()
        self._last_timestamp: Optional[float] = None
        self.reject_out_of_order = reject_out_of_order

        # Diagnostics
        self.samples_integrated = 0
        self.samples_rejected = 0

    @property
    def pose(self) -> Pose:
        return self._pose

    @property
    def mode(self) -> IntegrationMode:
        return self._mode

    @property
    def last_timestamp(self) -> Optional[float]:
        return self._last_timestamp

    @property
    def is_seeded(self) -> bool:
        return self._last_timestamp is not None

    def integrate(self, sample: TimedVelocitySample) -> Optional[Pose]:
        """Integrate one velocity sample into the pose estimate.

        Args:
            sample: Body-frame velocity with its timestamp (seconds).

        Returns:
            The updated pose, or None if the sample only seeded the time
            reference (or was rejected as out of order).
        """
        if self._last_timestamp is None:
            # First sample: no interval to integrate over yet
            self._last_timestamp = sample.timestamp
            logger.debug(f"Pose integrator seeded at t={sample.timestamp:.6f}")
            return None

        dt = sample.timestamp - self._last_timestamp
        if dt < 0 and self.reject_out_of_order:
            self.samples_rejected += 1
            logger.warning(
                f"Out-of-order velocity sample ignored: t={sample.timestamp:.6f} "
                f"< last t={self._last_timestamp:.6f}"
            )
            return None

        if self._mode is IntegrationMode.EULER:
            x, y, theta = self._euler_step(sample, dt)
        else:
            x, y, theta = self._runge_kutta_step(sample, dt)

        self._pose = Pose(x, y, theta)
        self._last_timestamp = sample.timestamp
        self.samples_integrated += 1

        logger.debug(
            f"dt={dt:.6f} x={x:.6f} y={y:.6f} theta={theta:.6f} ({self._mode.name})"
        )
        return self._pose

    def _euler_step(self, sample: TimedVelocitySample, dt: float):
        x, y, theta = self._pose.as_tuple()
        theta_new = theta + sample.omega * dt
        x_new = x + dt * (sample.vx * math.cos(theta_new) + sample.vy * math.sin(theta_new))
        y_new = y + dt * (sample.vx * math.sin(theta_new) + sample.vy * math.sin(theta_new))
        return x_new, y_new, theta_new

    def _runge_kutta_step(self, sample: TimedVelocitySample, dt: float):
        x, y, theta = self._pose.as_tuple()
        theta_new = theta + sample.omega * dt
        v = math.sqrt(sample.vx**2 + sample.vy**2)
        theta_mid = theta + sample.omega * dt / 2.0
        x_new = x + v * dt * math.cos(theta_mid)
        y_new = y + v * dt * math.sin(theta_mid)
        return x_new, y_new, theta_new

    def set_mode(self, mode: Union[IntegrationMode, str, int]) -> None:
        """Switch the integration scheme for the next ``integrate`` call.

        Pose and time reference are left untouched, so no new seed sample
        is needed.

        Raises:
            ValueError: If ``mode`` does not name an integration scheme.
        """
        self._mode = IntegrationMode.parse(mode)
        logger.info(f"Integration method set to {self._mode.name}")

    def reset(self, new_pose: Pose) -> Pose:
        """Rebase the pose estimate.

        The time reference is kept: the next sample is integrated over the
        time elapsed since the last observed sample.

        Args:
            new_pose: Pose to continue from.

        Returns:
            The pose held before the reset.
        """
        old_pose = self._pose
        self._pose = new_pose
        logger.info(
            f"Pose reset: ({old_pose.x:.3f}, {old_pose.y:.3f}, {old_pose.theta:.3f}) -> "
            f"({new_pose.x:.3f}, {new_pose.y:.3f}, {new_pose.theta:.3f})"
        )
        return old_pose

    def get_state(self) -> Dict[str, Any]:
        """Get current state estimate.

        Returns:
            Dictionary containing:
                - x, y: Position (m)
                - theta: Heading (rad), unwrapped
                - timestamp: Last accepted sample time (s), None until seeded
                - mode: Name of the active integration scheme
        """
        return {
            "x": self._pose.x,
            "y": self._pose.y,
            "theta": self._pose.theta,
            "timestamp": self._last_timestamp,
            "mode": self._mode.name,
        }
