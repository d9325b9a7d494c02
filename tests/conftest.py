import pytest

from propvault.config import _process_adapter
from propvault.config._reader import set_environment


@pytest.fixture(autouse=True)
def _isolate_environment():
    """Reset the module-level environment and process properties around each test."""
    set_environment(None)
    yield
    set_environment(None)
    for key in _process_adapter.property_names():
        _process_adapter.clear_property(key)
