import pytest

from formulate.plugins import default_registry


@pytest.fixture(autouse=True)
def clean_default_registry():
    default_registry.clear()
    yield
    default_registry.clear()
