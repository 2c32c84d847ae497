"""Tests for the ICY E-Thermostaat Config Flow."""

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.data_entry_flow import FlowResultType

from custom_components.icy_ethermostaat import api
from custom_components.icy_ethermostaat.config_flow import EThermostaatConfigFlow
from custom_components.icy_ethermostaat.const import (
    CONF_SERIAL,
    ERROR_NOT_AUTHORIZED,
    ERROR_UNKNOWN,
)
from custom_components.icy_ethermostaat.models import LoginResult

TEST_SERIAL = "ABC123456"
LOGIN_PATH = "custom_components.icy_ethermostaat.config_flow.api.async_login"
CLIENT_PATH = "custom_components.icy_ethermostaat.config_flow.get_async_client"

USER_INPUT = {
    CONF_USERNAME: "user@example.com",
    CONF_PASSWORD: "password123",
}


@pytest.fixture
def flow() -> EThermostaatConfigFlow:
    """Create an EThermostaatConfigFlow instance for testing."""
    flow_instance = EThermostaatConfigFlow()
    flow_instance.hass = Mock()
    flow_instance.async_set_unique_id = AsyncMock()
    flow_instance._abort_if_unique_id_configured = Mock()
    flow_instance.async_create_entry = Mock(
        return_value={"type": FlowResultType.CREATE_ENTRY},
    )
    flow_instance.async_show_form = Mock(return_value={"type": FlowResultType.FORM})
    return flow_instance


class TestEThermostaatConfigFlowAsyncStepUser:
    """Tests for async_step_user method."""

    @pytest.mark.asyncio
    async def test_shows_form_when_no_input(
        self,
        flow: EThermostaatConfigFlow,
    ) -> None:
        """Test that async_step_user shows form when no input provided."""
        result = await flow.async_step_user()
        flow.async_show_form.assert_called_once()
        call_args = flow.async_show_form.call_args
        assert call_args[1]["step_id"] == "user"
        assert call_args[1]["errors"] == {}
        assert result["type"] == FlowResultType.FORM

    @pytest.mark.asyncio
    async def test_creates_entry_on_successful_login(
        self,
        flow: EThermostaatConfigFlow,
    ) -> None:
        """Test that a successful login creates one entry per serial."""
        with (
            patch(CLIENT_PATH, return_value=Mock()),
            patch(
                LOGIN_PATH,
                AsyncMock(return_value=LoginResult(token="t", serial=TEST_SERIAL)),
            ) as login,
        ):
            result = await flow.async_step_user(dict(USER_INPUT))

        login.assert_awaited_once()
        assert login.await_args.args[1:] == ("user@example.com", "password123")
        flow.async_set_unique_id.assert_called_once_with(TEST_SERIAL)
        flow._abort_if_unique_id_configured.assert_called_once()
        call_args = flow.async_create_entry.call_args
        assert call_args[1]["title"] == f"E-Thermostaat ({TEST_SERIAL})"
        assert call_args[1]["data"] == {
            CONF_USERNAME: "user@example.com",
            CONF_PASSWORD: "password123",
            CONF_SERIAL: TEST_SERIAL,
        }
        assert result["type"] == FlowResultType.CREATE_ENTRY

    @pytest.mark.asyncio
    async def test_shows_not_authorized_on_auth_error(
        self,
        flow: EThermostaatConfigFlow,
    ) -> None:
        """Test that rejected credentials surface as not_authorized."""
        with (
            patch(CLIENT_PATH, return_value=Mock()),
            patch(
                LOGIN_PATH,
                AsyncMock(side_effect=api.EThermostaatApiAuthError("status 401")),
            ),
        ):
            result = await flow.async_step_user(dict(USER_INPUT))

        call_args = flow.async_show_form.call_args
        assert call_args[1]["errors"]["base"] == ERROR_NOT_AUTHORIZED
        flow.async_create_entry.assert_not_called()
        assert result["type"] == FlowResultType.FORM

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            api.EThermostaatApiClientError("webservice offline"),
            httpx.ConnectError("Connection failed"),
            httpx.TimeoutException("Request timeout"),
            ValueError("Unexpected error"),
        ],
    )
    async def test_shows_unknown_on_other_errors(
        self,
        flow: EThermostaatConfigFlow,
        error: Exception,
    ) -> None:
        """Test that every other failure surfaces as an undifferentiated error."""
        with (
            patch(CLIENT_PATH, return_value=Mock()),
            patch(LOGIN_PATH, AsyncMock(side_effect=error)),
        ):
            result = await flow.async_step_user(dict(USER_INPUT))

        call_args = flow.async_show_form.call_args
        assert call_args[1]["errors"]["base"] == ERROR_UNKNOWN
        assert result["type"] == FlowResultType.FORM

    @pytest.mark.asyncio
    async def test_shows_unknown_when_serial_missing(
        self,
        flow: EThermostaatConfigFlow,
    ) -> None:
        """Test that a login without a thermostat serial cannot pair."""
        with (
            patch(CLIENT_PATH, return_value=Mock()),
            patch(LOGIN_PATH, AsyncMock(return_value=LoginResult(token="t", serial=None))),
        ):
            await flow.async_step_user(dict(USER_INPUT))

        call_args = flow.async_show_form.call_args
        assert call_args[1]["errors"]["base"] == ERROR_UNKNOWN
        flow.async_set_unique_id.assert_not_called()
