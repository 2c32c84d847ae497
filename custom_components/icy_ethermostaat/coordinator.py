"""Coordinator for ICY E-Thermostaat integration."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

import httpx
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import api
from .cache import EThermostaatDataCache
from .const import CONF_SERIAL, DEFAULT_POLL_INTERVAL, DOMAIN, POLL_CACHE_MARGIN
from .models import Credentials, ThermostatSnapshot

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

_LOGGER = logging.getLogger(__name__)


class EThermostaatCoordinator(DataUpdateCoordinator[ThermostatSnapshot]):
    """Coordinator that polls one thermostat through its data cache."""

    def __init__(
        self,
        hass: HomeAssistant,
        session: httpx.AsyncClient,
        config_entry: ConfigEntry,
    ) -> None:
        """Initialize the coordinator and the cache it owns."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=f"{DOMAIN}_{config_entry.data[CONF_SERIAL]}",
            update_interval=timedelta(seconds=DEFAULT_POLL_INTERVAL),
        )
        self.config_entry = config_entry
        self.cache = EThermostaatDataCache(
            session,
            config_entry.data[CONF_SERIAL],
            self._credentials,
        )

    def _credentials(self) -> Credentials:
        """Read credentials from the config entry."""
        return Credentials(
            username=self.config_entry.data[CONF_USERNAME],
            password=self.config_entry.data[CONF_PASSWORD],
        )

    async def _async_update_data(self) -> ThermostatSnapshot:
        # Scheduled polls can fire just under one interval after the last fetch
        age = self.cache.age
        force = age is None or age >= DEFAULT_POLL_INTERVAL - POLL_CACHE_MARGIN
        try:
            return await self.cache.async_get(force=force)
        except api.EThermostaatApiAuthError as err:
            raise UpdateFailed(f"Not authorized while polling thermostat: {err}") from err
        except api.EThermostaatApiClientError as err:
            raise UpdateFailed(f"API error while polling thermostat: {err}") from err
        except httpx.RequestError as err:
            raise UpdateFailed(f"Connection error while polling thermostat: {err}") from err

    async def async_set_target(self, value: float) -> ThermostatSnapshot:
        """Set the target temperature and publish the refreshed snapshot.

        Raises:
            EThermostaatApiClientError: If login or the write fails.
            httpx.RequestError: On transport failures.

        """
        snapshot = await self.cache.async_set_target(value)
        self.async_set_updated_data(snapshot)
        return snapshot
