"""
Configuration flow for ICY E-Thermostaat integration.

This module handles pairing a thermostat through Home Assistant's
config flow system: the credentials are checked with a login, and the
serial returned by the portal identifies the new entry.
"""

import logging
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.helpers.httpx_client import get_async_client

from . import api
from .const import (
    CONF_SERIAL,
    DEFAULT_NAME,
    DOMAIN,
    ERROR_NOT_AUTHORIZED,
    ERROR_UNKNOWN,
)

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_USERNAME): str,
        vol.Required(CONF_PASSWORD): str,
    }
)


class EThermostaatConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle configuration flow for ICY E-Thermostaat integration."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Handle the initial step of the config flow.

        Args:
            user_input: User input data containing username and password.

        Returns:
            ConfigFlowResult indicating the next step or errors.

        """
        errors: dict[str, str] = {}

        if user_input is not None:
            username = user_input[CONF_USERNAME]
            password = user_input[CONF_PASSWORD]
            _LOGGER.info("ICY E-Thermostaat pairing has started")

            try:
                session = get_async_client(self.hass)
                login = await api.async_login(session, username, password)

            except api.EThermostaatApiAuthError as err:
                _LOGGER.warning(
                    "ICY E-Thermostaat username/password are wrong (%s): %s",
                    ERROR_NOT_AUTHORIZED,
                    err,
                )
                errors["base"] = ERROR_NOT_AUTHORIZED
            except Exception:
                _LOGGER.exception(
                    "ICY E-Thermostaat username/password could not be checked (%s)",
                    ERROR_UNKNOWN,
                )
                errors["base"] = ERROR_UNKNOWN

            else:
                if not login.serial:
                    _LOGGER.error("Login succeeded but no thermostat serial returned")
                    errors["base"] = ERROR_UNKNOWN
                else:
                    _LOGGER.info("ICY E-Thermostaat username/password are correct")
                    await self.async_set_unique_id(login.serial)
                    self._abort_if_unique_id_configured()

                    return self.async_create_entry(
                        title=f"{DEFAULT_NAME} ({login.serial})",
                        data={
                            CONF_USERNAME: username,
                            CONF_PASSWORD: password,
                            CONF_SERIAL: login.serial,
                        },
                    )

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )
