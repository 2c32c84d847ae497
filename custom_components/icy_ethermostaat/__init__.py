from __future__ import annotations

import logging

import httpx
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from . import api
from .api import create_session_client
from .const import CONF_SERIAL, DEFAULT_NAME, DOMAIN
from .coordinator import EThermostaatCoordinator
from .models import EThermostaatDevice

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.CLIMATE]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info(
        "Setting up ICY E-Thermostaat integration for entry %s", entry.entry_id
    )

    if CONF_SERIAL not in entry.data:
        _LOGGER.error("Missing serial in configuration for entry %s", entry.entry_id)
        return False

    session = create_session_client(hass)
    coordinator = EThermostaatCoordinator(hass, session, entry)
    device = EThermostaatDevice(id=entry.data[CONF_SERIAL], name=DEFAULT_NAME)

    try:
        snapshot = await coordinator.cache.async_get()
    except api.EThermostaatApiAuthError as err:
        _LOGGER.warning(
            "Authentication failed for entry %s: %s", entry.entry_id, str(err)
        )
        await session.aclose()
        return False
    except api.EThermostaatApiClientError as err:
        _LOGGER.error("API client error for entry %s: %s", entry.entry_id, str(err))
        await session.aclose()
        raise ConfigEntryNotReady(str(err)) from err
    except httpx.RequestError as err:
        _LOGGER.error("Connection error for entry %s: %s", entry.entry_id, str(err))
        await session.aclose()
        raise ConfigEntryNotReady(str(err)) from err

    coordinator.async_set_updated_data(snapshot)

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "session": session,
        "coordinator": coordinator,
        "device": device,
    }
    _LOGGER.debug("Stored data for entry %s (thermostat %s)", entry.entry_id, device.id)

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _LOGGER.info(
        "Successfully setup ICY E-Thermostaat integration for entry %s",
        entry.entry_id,
    )
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info(
        "Unloading ICY E-Thermostaat integration for entry %s", entry.entry_id
    )

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        if DOMAIN in hass.data and entry.entry_id in hass.data[DOMAIN]:
            entry_data = hass.data[DOMAIN].pop(entry.entry_id)
            await entry_data["session"].aclose()
            _LOGGER.debug("Cleaned up data for entry %s", entry.entry_id)
        _LOGGER.info(
            "Successfully unloaded ICY E-Thermostaat integration for entry %s",
            entry.entry_id,
        )
    else:
        _LOGGER.warning("Failed to unload some platforms for entry %s", entry.entry_id)

    return unload_ok
