import pytest

from tvdenoise.utils.log.log import Log


@pytest.fixture(autouse=True)
def quiet_log():
    enable_output = Log.enable_output
    Log.enable_output = False
    yield
    Log.enable_output = enable_output
    Log.depth = 0
