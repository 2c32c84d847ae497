"""Climate entity for ICY E-Thermostaat.

This module exposes the thermostat as a Home Assistant climate entity:
the target temperature maps to ``temperature1`` and the measured
temperature to ``temperature2``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from homeassistant.components.climate import (
    ClimateEntity,
    ClimateEntityFeature,
    HVACMode,
)
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.device_registry import DeviceInfo

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import EThermostaatCoordinator

from .api import EThermostaatApiAuthError, EThermostaatApiClientError
from .const import DEFAULT_NAME, DOMAIN, MANUFACTURER, MAX_TEMP, MIN_TEMP, TEMP_STEP
from .models import EThermostaatDevice

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the climate entity for a paired thermostat."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        [EThermostaatClimateEntity(entry_data["coordinator"], entry_data["device"])]
    )


class EThermostaatClimateEntity(ClimateEntity):
    """Climate entity for an ICY E-Thermostaat."""

    _attr_temperature_unit = UnitOfTemperature.CELSIUS
    _attr_target_temperature_step = TEMP_STEP
    _attr_min_temp = MIN_TEMP
    _attr_max_temp = MAX_TEMP
    _attr_hvac_modes = [HVACMode.HEAT]
    _attr_hvac_mode = HVACMode.HEAT
    _attr_supported_features = ClimateEntityFeature.TARGET_TEMPERATURE
    _attr_has_entity_name = True
    _attr_name = None
    _attr_should_poll = False

    def __init__(
        self,
        coordinator: EThermostaatCoordinator,
        device: EThermostaatDevice,
    ) -> None:
        """Initialize the climate entity.

        Args:
            coordinator: Coordinator owning the thermostat data cache.
            device: Paired thermostat.

        """
        self._coordinator = coordinator
        self._device = device
        self._attr_unique_id = device.id
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, device.id)},
            manufacturer=MANUFACTURER,
            model=DEFAULT_NAME,
            name=device.name,
        )
        self._attr_target_temperature = None
        self._attr_current_temperature = None
        self._coordinator_listener_unsub = None

    @property
    def available(self) -> bool:
        """Return False while the portal cannot be reached."""
        return self._coordinator.last_update_success

    async def async_added_to_hass(self) -> None:
        """Subscribe to coordinator updates and apply current data."""
        await super().async_added_to_hass()

        self._coordinator_listener_unsub = self._coordinator.async_add_listener(
            self._handle_coordinator_update
        )
        self._update_from_coordinator()

    async def async_will_remove_from_hass(self) -> None:
        """Handle entity being removed from Home Assistant."""
        await super().async_will_remove_from_hass()

        if self._coordinator_listener_unsub is not None:
            self._coordinator_listener_unsub()
            self._coordinator_listener_unsub = None

    def _handle_coordinator_update(self) -> None:
        """Handle updated data from the coordinator."""
        self._update_from_coordinator()
        self.async_write_ha_state()

    def _update_from_coordinator(self) -> None:
        snapshot = self._coordinator.data
        if snapshot is None:
            _LOGGER.debug("%s: No coordinator data", self._device.name)
            return

        if snapshot.target_temperature is not None:
            self._attr_target_temperature = snapshot.target_temperature
        if snapshot.current_temperature is not None:
            self._attr_current_temperature = snapshot.current_temperature

    async def async_set_temperature(self, **kwargs: Any) -> None:  # noqa: ANN401
        """Set the target temperature.

        Args:
            **kwargs: Keyword arguments containing temperature data.

        """
        temperature = kwargs.get(ATTR_TEMPERATURE)
        if temperature is None:
            return

        try:
            await self._coordinator.async_set_target(temperature)
        except EThermostaatApiAuthError as err:
            _LOGGER.exception(
                "Not authorized to set temperature on %s", self._device.name
            )
            error_msg = f"Not authorized: {err}"
            raise HomeAssistantError(error_msg) from err
        except EThermostaatApiClientError as err:
            _LOGGER.exception("API error while setting temperature on %s", self._device.name)
            error_msg = f"Failed to set temperature: {err}"
            raise HomeAssistantError(error_msg) from err
        except httpx.RequestError as err:
            _LOGGER.exception(
                "Connection error while setting temperature on %s", self._device.name
            )
            error_msg = f"Connection error: {err}"
            raise HomeAssistantError(error_msg) from err

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        """Accept heat, the only mode the thermostat exposes."""
        if hvac_mode != HVACMode.HEAT:
            error_msg = f"Unsupported HVAC mode: {hvac_mode}"
            raise HomeAssistantError(error_msg)
