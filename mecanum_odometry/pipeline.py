"""Tick-to-pose odometry pipeline.

Composes the two estimators in the order the robot runs them:
    tick samples -> WheelVelocityEstimator -> velocity samples
                 -> PoseIntegrator -> poses

The estimators share no state; the pipeline only forwards outputs.
"""

from typing import Optional, Tuple, Union

from .config import WheelParams
from .odometry import IntegrationMode, PoseIntegrator
from .samples import Pose, TimedTickSample, TimedVelocitySample
from .wheel_velocity import WheelVelocityEstimator


class OdometryPipeline:
    """Wheel-encoder odometry: velocity estimation followed by pose integration.

    Attributes:
        estimator: Tick-to-velocity stage.
        integrator: Velocity-to-pose stage.
    """

    def __init__(
        self,
        params: Optional[WheelParams] = None,
        mode: Union[IntegrationMode, str, int] = IntegrationMode.EULER,
        initial_pose: Optional[Pose] = None,
        reject_out_of_order: bool = False,
    ):
        self.estimator = WheelVelocityEstimator(params, reject_out_of_order=reject_out_of_order)
        self.integrator = PoseIntegrator(
            mode=mode, initial_pose=initial_pose, reject_out_of_order=reject_out_of_order
        )

    @property
    def pose(self) -> Pose:
        return self.integrator.pose

    @property
    def mode(self) -> IntegrationMode:
        return self.integrator.mode

    def process_ticks(
        self, sample: TimedTickSample
    ) -> Tuple[Optional[TimedVelocitySample], Optional[Pose]]:
        """Feed one tick sample through both stages.

        Returns:
            (velocity, pose): either may be None when the stage produced no
            output for this sample.
        """
        velocity = self.estimator.update(sample)
        if velocity is None:
            return None, None
        return velocity, self.integrator.integrate(velocity)

    def process_velocity(self, sample: TimedVelocitySample) -> Optional[Pose]:
        """Integrate a velocity sample from another source, bypassing the encoders."""
        return self.integrator.integrate(sample)

    def set_mode(self, mode: Union[IntegrationMode, str, int]) -> None:
        self.integrator.set_mode(mode)

    def reset(self, new_pose: Pose) -> Pose:
        return self.integrator.reset(new_pose)
