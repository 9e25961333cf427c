"""Shared fixtures for bedarrange tests."""

import pytest

from bedarrange.config import configure


@pytest.fixture(autouse=True)
def reset_settings():
    """Reload application settings from the environment for every test."""
    configure(None)
    yield
    configure(None)
