import matplotlib

matplotlib.use("Agg")

import pytest

from mecanum_odometry.config import WheelParams


@pytest.fixture
def params():
    return WheelParams()


@pytest.fixture(autouse=True)
def _no_run_dir_env(monkeypatch):
    monkeypatch.delenv("RUN_DIR", raising=False)
