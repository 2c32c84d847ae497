"""Pytest configuration and fixtures for ICY E-Thermostaat tests."""

from typing import Any
from unittest.mock import Mock

import pytest
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME

from custom_components.icy_ethermostaat.const import CONF_SERIAL

TEST_USERNAME = "user@example.com"
TEST_PASSWORD = "password123"
TEST_SERIAL = "ABC123456"
TEST_TOKEN = "session-token-1"


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """Fixture providing a controllable monotonic clock."""
    return FakeClock()


@pytest.fixture
def sample_login_response() -> dict[str, Any]:
    """Fixture providing a successful login API response."""
    return {
        "status": {"code": 200},
        "token": TEST_TOKEN,
        "serialthermostat1": TEST_SERIAL,
    }


@pytest.fixture
def sample_data_response() -> dict[str, Any]:
    """Fixture providing a sample thermostat data API response.

    Returns:
        A dictionary with target (temperature1) and measured
        (temperature2) temperatures.

    """
    return {
        "status": {"code": 200},
        "uid": TEST_SERIAL,
        "temperature1": 20.5,
        "temperature2": "19.3",
    }


@pytest.fixture
def config_entry_data() -> dict[str, Any]:
    """Create config entry data for testing."""
    return {
        CONF_USERNAME: TEST_USERNAME,
        CONF_PASSWORD: TEST_PASSWORD,
        CONF_SERIAL: TEST_SERIAL,
    }


@pytest.fixture
def mock_config_entry(config_entry_data: dict[str, Any]) -> Mock:
    """Create a mock config entry for testing."""
    entry = Mock()
    entry.data = config_entry_data
    entry.entry_id = "test_entry_id"
    return entry
