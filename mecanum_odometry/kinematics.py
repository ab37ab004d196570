"""Four-wheel drive kinematic model.

This module relates the angular velocities of the four wheels to the robot's
body-frame twist (vx, vy, omega). Wheel order is [fl, fr, rl, rr].

The forward model is:
    vx    = ( w_fl + w_fr + w_rl + w_rr) * r / 4
    vy    = (-w_fl + w_fr + w_rl - w_rr) * r / 4
    omega = (-w_fl + w_fr - w_rl + w_rr) * r / (4 * (r + L))

where r is the wheel radius and L is the half length of the robot.
"""

from typing import Sequence, Tuple

import numpy as np
import numpy.typing as npt


def kinematic_matrix(wheel_radius: float, half_length: float) -> npt.NDArray[np.float64]:
    """Build the 3x4 matrix mapping wheel speeds to body twist.

    Args:
        wheel_radius: Wheel radius (m)
        half_length: Half of the wheelbase (m)

    Returns:
        Matrix J such that [vx, vy, omega] = J @ [w_fl, w_fr, w_rl, w_rr]
    """
    linear = wheel_radius / 4.0
    angular = wheel_radius / (4.0 * (wheel_radius + half_length))
    return np.array(
        [
            [linear, linear, linear, linear],
            [-linear, linear, linear, -linear],
            [-angular, angular, -angular, angular],
        ]
    )


def forward_kinematics(
    wheel_speeds: Sequence[float], wheel_radius: float, half_length: float
) -> Tuple[float, float, float]:
    """Compute body twist from the four wheel angular velocities.

    Args:
        wheel_speeds: [w_fl, w_fr, w_rl, w_rr] in rad/s
        wheel_radius: Wheel radius (m)
        half_length: Half of the wheelbase (m)

    Returns:
        tuple[float, float, float]: (vx, vy, omega) in m/s, m/s, rad/s

    Example:
        >>> vx, vy, omega = forward_kinematics([1.0, 1.0, 1.0, 1.0], 0.07, 0.2)
        >>> # Pure forward roll: vx = r * w, no lateral or angular motion
    """
    twist = kinematic_matrix(wheel_radius, half_length) @ np.asarray(wheel_speeds, dtype=float)
    return float(twist[0]), float(twist[1]), float(twist[2])


def inverse_kinematics(
    vx: float, vy: float, omega: float, wheel_radius: float, half_length: float
) -> npt.NDArray[np.float64]:
    """Compute wheel angular velocities that produce a body twist.

    The model has four wheels for three degrees of freedom, so the
    minimum-norm solution (Moore-Penrose pseudo-inverse) is returned.

    Args:
        vx: Desired forward velocity (m/s)
        vy: Desired lateral velocity (m/s)
        omega: Desired angular velocity (rad/s)
        wheel_radius: Wheel radius (m)
        half_length: Half of the wheelbase (m)

    Returns:
        Array [w_fl, w_fr, w_rl, w_rr] in rad/s
    """
    J = kinematic_matrix(wheel_radius, half_length)
    return np.linalg.pinv(J) @ np.array([vx, vy, omega], dtype=float)
