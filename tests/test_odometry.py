import math

import pytest

from mecanum_odometry.odometry import IntegrationMode, PoseIntegrator
from mecanum_odometry.samples import Pose, TimedVelocitySample


def vel(t, vx=0.0, vy=0.0, omega=0.0):
    return TimedVelocitySample(t, vx, vy, omega)


def seeded(mode=IntegrationMode.EULER, t=0.0):
    integrator = PoseIntegrator(mode=mode)
    assert integrator.integrate(vel(t)) is None
    return integrator


def test_first_sample_only_seeds_time_reference():
    integrator = PoseIntegrator()
    assert not integrator.is_seeded

    assert integrator.integrate(vel(3.5, vx=10.0, omega=1.0)) is None

    assert integrator.is_seeded
    assert integrator.last_timestamp == 3.5
    assert integrator.pose == Pose(0.0, 0.0, 0.0)


def test_zero_dt_leaves_pose_unchanged():
    integrator = seeded()
    before = integrator.integrate(vel(1.0, vx=1.0, omega=0.3))

    after = integrator.integrate(vel(1.0, vx=7.0, vy=-2.0, omega=4.0))

    assert after == before


def test_euler_straight_line():
    integrator = seeded()
    pose = integrator.integrate(vel(1.0, vx=1.0))
    assert pose.as_tuple() == pytest.approx((1.0, 0.0, 0.0))


def test_euler_translates_along_updated_heading():
    integrator = seeded()
    pose = integrator.integrate(vel(1.0, vx=1.0, omega=math.pi / 2))
    assert pose.theta == pytest.approx(math.pi / 2)
    assert pose.x == pytest.approx(0.0, abs=1e-12)
    assert pose.y == pytest.approx(1.0)


def test_euler_lateral_term_uses_sine_for_both_axes():
    integrator = seeded()
    integrator.reset(Pose(0.0, 0.0, math.pi / 2))

    pose = integrator.integrate(vel(1.0, vy=1.0))

    # vy * sin(theta') enters x and y alike
    assert pose.x == pytest.approx(1.0)
    assert pose.y == pytest.approx(1.0)


def test_runge_kutta_pure_rotation():
    integrator = seeded(IntegrationMode.RUNGE_KUTTA_2)
    pose = integrator.integrate(vel(1.0, omega=math.pi / 2))
    assert pose.as_tuple() == pytest.approx((0.0, 0.0, math.pi / 2))


def test_runge_kutta_uses_midpoint_heading():
    integrator = seeded(IntegrationMode.RUNGE_KUTTA_2)
    pose = integrator.integrate(vel(1.0, vx=1.0, omega=math.pi / 2))
    assert pose.x == pytest.approx(math.cos(math.pi / 4))
    assert pose.y == pytest.approx(math.sin(math.pi / 4))
    assert pose.theta == pytest.approx(math.pi / 2)


def test_runge_kutta_uses_speed_magnitude():
    integrator = seeded(IntegrationMode.RUNGE_KUTTA_2)
    pose = integrator.integrate(vel(2.0, vx=0.0, vy=-1.5))
    assert pose.as_tuple() == pytest.approx((3.0, 0.0, 0.0))


def test_mode_switch_applies_to_next_sample_without_reseeding():
    integrator = seeded(IntegrationMode.EULER)
    integrator.set_mode(IntegrationMode.RUNGE_KUTTA_2)

    pose = integrator.integrate(vel(1.0, vx=1.0, omega=math.pi / 2))

    assert pose is not None
    assert pose.x == pytest.approx(math.cos(math.pi / 4))
    assert pose.y == pytest.approx(math.sin(math.pi / 4))


def test_mode_switch_keeps_pose_and_time_reference():
    integrator = seeded()
    integrator.integrate(vel(1.0, vx=1.0))
    integrator.set_mode("rk2")
    assert integrator.pose.as_tuple() == pytest.approx((1.0, 0.0, 0.0))
    assert integrator.last_timestamp == 1.0


@pytest.mark.parametrize(
    "value, expected",
    [
        ("euler", IntegrationMode.EULER),
        ("RK2", IntegrationMode.RUNGE_KUTTA_2),
        ("runge-kutta", IntegrationMode.RUNGE_KUTTA_2),
        (0, IntegrationMode.EULER),
        (1, IntegrationMode.RUNGE_KUTTA_2),
        (IntegrationMode.RUNGE_KUTTA_2, IntegrationMode.RUNGE_KUTTA_2),
    ],
)
def test_set_mode_accepts_names_and_reconfigure_values(value, expected):
    integrator = PoseIntegrator()
    integrator.set_mode(value)
    assert integrator.mode is expected


@pytest.mark.parametrize("value", ["rk4", 2, True, None])
def test_set_mode_rejects_unknown_modes(value):
    integrator = PoseIntegrator()
    with pytest.raises(ValueError):
        integrator.set_mode(value)
    assert integrator.mode is IntegrationMode.EULER


def test_reset_round_trip():
    integrator = seeded()
    start = integrator.integrate(vel(1.0, vx=2.0, omega=0.5))

    assert integrator.reset(Pose(5.0, 5.0, 1.0)) == start
    assert integrator.reset(Pose(0.0, 0.0, 0.0)) == Pose(5.0, 5.0, 1.0)
    assert integrator.pose == Pose(0.0, 0.0, 0.0)


def test_reset_keeps_time_reference():
    integrator = seeded()
    integrator.integrate(vel(1.0, vx=1.0))
    integrator.reset(Pose())

    pose = integrator.integrate(vel(3.0, vx=1.0))

    # Integrated over the 2 s since the last sample, no new seed needed
    assert pose.as_tuple() == pytest.approx((2.0, 0.0, 0.0))


def test_reset_before_first_sample_does_not_seed():
    integrator = PoseIntegrator()
    integrator.reset(Pose(1.0, 2.0, 3.0))
    assert integrator.integrate(vel(0.5, vx=1.0)) is None
    assert integrator.pose == Pose(1.0, 2.0, 3.0)


def test_heading_is_not_normalized():
    integrator = seeded()
    for t in (1.0, 2.0, 3.0):
        integrator.integrate(vel(t, omega=math.pi))
    assert integrator.pose.theta == pytest.approx(3 * math.pi)


def test_out_of_order_sample_is_integrated_literally_by_default():
    integrator = seeded(t=2.0)
    pose = integrator.integrate(vel(1.0, vx=1.0))
    assert pose.x == pytest.approx(-1.0)
    assert integrator.last_timestamp == 1.0


def test_out_of_order_sample_is_rejected_when_enabled(caplog):
    integrator = PoseIntegrator(reject_out_of_order=True)
    integrator.integrate(vel(2.0))

    with caplog.at_level("WARNING"):
        assert integrator.integrate(vel(1.0, vx=1.0)) is None

    assert integrator.pose == Pose()
    assert integrator.last_timestamp == 2.0
    assert integrator.samples_rejected == 1
    assert "Out-of-order" in caplog.text


def test_initial_pose_and_state_dict():
    integrator = PoseIntegrator(mode="rk2", initial_pose=Pose(1.0, -1.0, 0.25))
    assert integrator.get_state() == {
        "x": 1.0,
        "y": -1.0,
        "theta": 0.25,
        "timestamp": None,
        "mode": "RUNGE_KUTTA_2",
    }
