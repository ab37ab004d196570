import json

import pytest

from mecanum_odometry import config
from mecanum_odometry.config import WheelParams, load_params


def test_defaults_match_module_constants():
    params = WheelParams()
    assert params.to_dict() == {
        "gear_ratio": config.GEAR_RATIO,
        "wheel_radius": config.WHEEL_RADIUS,
        "half_length": config.HALF_LENGTH,
        "half_width": config.HALF_WIDTH,
        "tick_resolution": config.TICK_RESOLUTION,
        "decimation_interval": config.DECIMATION_INTERVAL,
    }


def test_from_mapping_accepts_parameter_server_names():
    params = WheelParams.from_mapping(
        {"gearRatio": 7, "wheelRadius": 0.05, "halfLenght": 0.3, "halfWidth": 0.2, "tickRes": 64}
    )
    assert params == WheelParams(
        gear_ratio=7, wheel_radius=0.05, half_length=0.3, half_width=0.2, tick_resolution=64
    )


def test_from_mapping_rejects_unknown_names():
    with pytest.raises(ValueError, match="Unknown wheel parameter"):
        WheelParams.from_mapping({"wheel_diameter": 0.14})


@pytest.mark.parametrize("value", ["0.07", None, True])
def test_from_mapping_rejects_non_numeric_values(value):
    with pytest.raises(ValueError):
        WheelParams.from_mapping({"wheel_radius": value})


@pytest.mark.parametrize(
    "changes",
    [
        {"gear_ratio": 0},
        {"tick_resolution": 0},
        {"decimation_interval": 0},
        {"decimation_interval": 2.5},
        {"wheel_radius": 0.2, "half_length": -0.2},
    ],
)
def test_invalid_values_raise(changes):
    with pytest.raises(ValueError):
        WheelParams(**changes)


def test_replace_keeps_other_fields():
    params = WheelParams().replace(decimation_interval=10.0)
    assert params.decimation_interval == 10
    assert isinstance(params.decimation_interval, int)
    assert params.gear_ratio == config.GEAR_RATIO


def test_load_params(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({"gear_ratio": 4, "msgInterval": 2}))

    params = load_params(path)

    assert params.gear_ratio == 4
    assert params.decimation_interval == 2
    assert params.wheel_radius == config.WHEEL_RADIUS


def test_load_params_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_params(tmp_path / "missing.json")

    bad_json = tmp_path / "bad.json"
    bad_json.write_text("{not json")
    with pytest.raises(ValueError, match="Invalid JSON"):
        load_params(bad_json)

    not_object = tmp_path / "list.json"
    not_object.write_text("[1, 2]")
    with pytest.raises(ValueError, match="JSON object"):
        load_params(not_object)
