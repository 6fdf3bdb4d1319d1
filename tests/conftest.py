import os

# Settings require a TMDB key; tests never reach the real API
os.environ.setdefault("TMDB_API_KEY", "test-key")

import pytest

from showreel.core.config import get_settings
from showreel.media import registry


@pytest.fixture(autouse=True)
def clean_registry():
    """Reset the global media registry between tests."""
    registry.clear()
    yield
    registry.clear()


@pytest.fixture
def settings():
    return get_settings()
