import math

import numpy as np
import pytest

from mecanum_odometry.config import WheelParams
from mecanum_odometry.samples import TimedTickSample
from mecanum_odometry.wheel_velocity import WheelVelocityEstimator


def ticks(t, fl, fr, rl, rr):
    return TimedTickSample(t, (fl, fr, rl, rr))


def feed_until_processed(estimator, sample, filler_t=None):
    """Feed ignored filler samples so that ``sample`` lands on a processed ordinal."""
    n = estimator.params.decimation_interval
    while estimator.sample_count % n != 0:
        assert estimator.update(ticks(filler_t or sample.timestamp, 999, -999, 999, -999)) is None
    return estimator.update(sample)


def test_first_processed_sample_only_seeds(params):
    estimator = WheelVelocityEstimator(params)

    assert estimator.update(ticks(1.0, 10, 20, 30, 40)) is None

    assert estimator.is_seeded
    assert estimator.last_timestamp == 1.0
    np.testing.assert_allclose(estimator.last_angles, np.array([10, 20, 30, 40]) / params.gear_ratio)


def test_only_every_nth_sample_is_processed():
    estimator = WheelVelocityEstimator(decimation_interval=5)

    outputs = [estimator.update(ticks(0.01 * k, 10 * k, 10 * k, 10 * k, 10 * k)) for k in range(16)]

    processed = [k for k, out in enumerate(outputs) if out is not None]
    assert processed == [5, 10, 15]
    assert estimator.sample_count == 16


def test_skipped_samples_do_not_alter_state(params):
    estimator = WheelVelocityEstimator(params)
    estimator.update(ticks(0.0, 0, 0, 0, 0))

    for k in range(1, params.decimation_interval):
        assert estimator.update(ticks(0.01 * k, 5000, 5000, 5000, 5000)) is None

    assert estimator.last_timestamp == 0.0
    np.testing.assert_array_equal(estimator.last_angles, np.zeros(4))


def test_wheel_and_body_velocity_formula(params):
    estimator = WheelVelocityEstimator(params)
    estimator.update(ticks(0.0, 0, 0, 0, 0))

    out = feed_until_processed(estimator, ticks(0.5, 10, 20, 30, 40), filler_t=0.1)

    r, L = params.wheel_radius, params.half_length
    w_fl, w_fr, w_rl, w_rr = (
        (c / params.gear_ratio - 0.0) / 0.5 * 2 * math.pi / params.tick_resolution
        for c in (10, 20, 30, 40)
    )
    assert out.timestamp == 0.5
    assert out.vx == pytest.approx((w_fl + w_fr + w_rr + w_rl) * r / 4)
    assert out.vy == pytest.approx((-w_fl + w_fr + w_rl - w_rr) * r / 4)
    assert out.omega == pytest.approx((-w_fl + w_fr - w_rl + w_rr) * r / (4 * (r + L)))
    np.testing.assert_allclose(estimator.last_wheel_speeds, [w_fl, w_fr, w_rl, w_rr])


def test_reference_advances_after_each_processed_sample():
    estimator = WheelVelocityEstimator(decimation_interval=1, gear_ratio=1, tick_resolution=2 * math.pi)
    estimator.update(ticks(0.0, 0, 0, 0, 0))
    estimator.update(ticks(1.0, 100, 100, 100, 100))

    out = estimator.update(ticks(2.0, 101, 101, 101, 101))

    # Only the last 1-tick step counts: w = 1 rad/s, vx = r * w
    assert out.vx == pytest.approx(estimator.params.wheel_radius)
    assert estimator.last_timestamp == 2.0


@pytest.mark.parametrize("wheel_radius", [0.03, 0.07, 0.5])
def test_equal_wheel_speeds_give_pure_forward_motion(wheel_radius):
    estimator = WheelVelocityEstimator(decimation_interval=1, wheel_radius=wheel_radius)
    estimator.update(ticks(0.0, 0, 0, 0, 0))

    out = estimator.update(ticks(0.2, 300, 300, 300, 300))

    assert out.vx > 0
    assert out.vy == pytest.approx(0.0, abs=1e-12)
    assert out.omega == pytest.approx(0.0, abs=1e-12)


def test_counter_rotating_sides_give_pure_rotation():
    estimator = WheelVelocityEstimator(decimation_interval=1)
    estimator.update(ticks(0.0, 0, 0, 0, 0))

    out = estimator.update(ticks(1.0, -50, 50, -50, 50))

    assert out.vx == pytest.approx(0.0, abs=1e-12)
    assert out.vy == pytest.approx(0.0, abs=1e-12)
    assert out.omega > 0


def test_half_width_has_no_effect():
    narrow = WheelVelocityEstimator(decimation_interval=1, half_width=0.1)
    wide = WheelVelocityEstimator(decimation_interval=1, half_width=0.9)
    stream = [ticks(0.0, 0, 0, 0, 0), ticks(0.1, 12, 40, -3, 17)]

    for sample in stream:
        a, b = narrow.update(sample), wide.update(sample)

    assert a == b


def test_zero_dt_is_a_no_op():
    estimator = WheelVelocityEstimator(decimation_interval=1)
    estimator.update(ticks(1.0, 0, 0, 0, 0))

    assert estimator.update(ticks(1.0, 10, 10, 10, 10)) is None

    assert estimator.last_timestamp == 1.0
    np.testing.assert_array_equal(estimator.last_angles, np.zeros(4))


def test_negative_dt_inverts_sign_by_default():
    estimator = WheelVelocityEstimator(decimation_interval=1)
    estimator.update(ticks(1.0, 0, 0, 0, 0))

    out = estimator.update(ticks(0.5, 10, 10, 10, 10))

    assert out.vx < 0


def test_negative_dt_is_rejected_when_enabled(caplog):
    estimator = WheelVelocityEstimator(decimation_interval=1, reject_out_of_order=True)
    estimator.update(ticks(1.0, 0, 0, 0, 0))

    with caplog.at_level("WARNING"):
        assert estimator.update(ticks(0.5, 10, 10, 10, 10)) is None

    assert estimator.last_timestamp == 1.0
    assert "Out-of-order" in caplog.text


def test_reset_returns_to_unseeded_state():
    estimator = WheelVelocityEstimator(decimation_interval=1)
    estimator.update(ticks(0.0, 0, 0, 0, 0))
    estimator.update(ticks(0.1, 5, 5, 5, 5))

    estimator.reset()

    assert not estimator.is_seeded
    assert estimator.sample_count == 0
    assert estimator.update(ticks(0.2, 10, 10, 10, 10)) is None


def test_overrides_replace_individual_parameters():
    estimator = WheelVelocityEstimator(WheelParams(gear_ratio=3), tick_resolution=1024)
    assert estimator.params.gear_ratio == 3
    assert estimator.params.tick_resolution == 1024
    assert estimator.params.wheel_radius == WheelParams().wheel_radius


def test_invalid_parameters_raise():
    with pytest.raises(ValueError):
        WheelVelocityEstimator(decimation_interval=0)
