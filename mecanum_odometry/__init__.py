"""Mecanum Odometry - Wheel-Encoder Dead Reckoning for Four-Wheel Robots

Estimates a mobile robot's planar pose (x, y, heading) from four wheel-encoder
tick streams, in two independent stages.

## Architecture Overview

### Stage 1: Velocity Estimation (wheel_velocity.py)
Converts raw, noisy encoder ticks into a body-frame twist.
- Decimation: every 5th sample is differentiated to average tick quantization
- Four-wheel kinematic model (kinematics.py)
- Output: Timestamped velocity (vx, vy, omega)

### Stage 2: Pose Integration (odometry.py)
Dead-reckons the pose from timestamped body velocities.
- Euler (rotate-then-translate) or 2nd order Runge-Kutta, switchable at runtime
- Pose reset (rebasing) keeps the time reference
- Output: Pose (x, y, theta), theta unwrapped

The stages share no state: any velocity source can feed the integrator.

## Modules

### Core
- `config.py` - Centralized configuration and the WheelParams calibration record
- `samples.py` - Pose, velocity and tick sample value types
- `kinematics.py` - Four-wheel forward / inverse kinematics
- `wheel_velocity.py` - Tick-to-velocity estimator
- `odometry.py` - Velocity-to-pose integrator
- `pipeline.py` - Both stages composed

### Replay & Data
- `trajectory.py` - Synthetic tick streams for a constant twist
- `replay.py` - CSV loading, replay driver and CLI
- `data_collector.py` - CSV logging of velocities, poses and resets

### Visualization
- `plot_styles.py` - Shared plotting utilities and color scheme
- `visualization.py` - Trajectory and velocity plots
- `plot_results.py` - CLI for visualization tools

## Quick Start

```python
from mecanum_odometry import OdometryPipeline, tick_stream

pipeline = OdometryPipeline(mode="rk2")
for sample in tick_stream(vx=0.5, vy=0.0, omega=0.2, duration=10.0):
    velocity, pose = pipeline.process_ticks(sample)
print(pipeline.pose)
```

Or use the command-line interface:
```bash
python -m mecanum_odometry --simulate 0.5 0 0.2 --method rk2
python -m mecanum_odometry.plot_results --save
```
"""

__version__ = "0.1.0"

from .config import WheelParams, load_params
from .odometry import IntegrationMode, PoseIntegrator
from .pipeline import OdometryPipeline
from .samples import Pose, TimedTickSample, TimedVelocitySample
from .trajectory import tick_stream
from .wheel_velocity import WheelVelocityEstimator

__all__ = [
    "IntegrationMode",
    "OdometryPipeline",
    "Pose",
    "PoseIntegrator",
    "TimedTickSample",
    "TimedVelocitySample",
    "WheelParams",
    "WheelVelocityEstimator",
    "load_params",
    "tick_stream",
]
