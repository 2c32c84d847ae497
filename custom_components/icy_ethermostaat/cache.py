"""Credential-scoped data cache for one ICY E-Thermostaat.

Each remote operation logs in again to obtain a session token; the
thermostat snapshot is served from memory for ``CACHE_MAX_AGE`` seconds
unless a refresh is forced.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING

import httpx

from . import api
from .const import CACHE_MAX_AGE
from .models import ThermostatSnapshot

if TYPE_CHECKING:
    from collections.abc import Callable

    from .models import Credentials

_LOGGER = logging.getLogger(__name__)


class EThermostaatDataCache:
    """Time-boxed snapshot cache owned by a single paired thermostat."""

    def __init__(
        self,
        session: httpx.AsyncClient,
        device_id: str,
        credentials: Callable[[], Credentials],
        *,
        max_age: float = CACHE_MAX_AGE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            session: HTTP client session for API calls.
            device_id: Thermostat serial, sent as ``uid`` on writes.
            credentials: Returns the current credentials; called before
                every remote operation so updated settings take effect.
            max_age: Seconds a snapshot stays fresh.
            clock: Monotonic time source in seconds.

        """
        self._session = session
        self._device_id = device_id
        self._credentials = credentials
        self._max_age = max_age
        self._clock = clock
        self._snapshot: ThermostatSnapshot | None = None
        self._updated_at: float | None = None

    @property
    def device_id(self) -> str:
        """Return the serial of the thermostat this cache belongs to."""
        return self._device_id

    @property
    def snapshot(self) -> ThermostatSnapshot | None:
        """Return the last fetched snapshot, fresh or not."""
        return self._snapshot

    @property
    def age(self) -> float | None:
        """Return seconds since the last fetch, or None if never fetched."""
        if self._updated_at is None:
            return None
        return max(self._clock() - self._updated_at, 0.0)

    @property
    def is_fresh(self) -> bool:
        """Return True if the snapshot can be served without a fetch."""
        age = self.age
        return self._snapshot is not None and age is not None and age < self._max_age

    async def _async_token(self) -> str:
        credentials = self._credentials()
        login = await api.async_login(
            self._session, credentials.username, credentials.password
        )
        return login.token

    async def async_get(self, *, force: bool = False) -> ThermostatSnapshot:
        """Return the thermostat snapshot.

        Args:
            force: Skip the cache and fetch from the portal.

        Returns:
            The cached snapshot while fresh, otherwise a newly fetched one.

        Raises:
            EThermostaatApiClientError: If login or fetch fails.
            httpx.RequestError: On transport failures.

        """
        if not force and self.is_fresh:
            _LOGGER.debug(
                "Serving cached data for %s (%.0fs old)", self._device_id, self.age
            )
            return self._snapshot

        _LOGGER.debug(
            "Fetching fresh data for %s (force=%s)", self._device_id, force
        )
        token = await self._async_token()
        data = await api.async_get_data(self._session, token)
        snapshot = api.extract_snapshot(data)

        self._snapshot = snapshot
        self._updated_at = self._clock()
        return snapshot

    async def async_set_target(self, value: float) -> ThermostatSnapshot:
        """Set the target temperature and return a force-refreshed snapshot.

        The value is clamped to the supported range and rounded to the
        nearest half degree before it is sent. Errors from the write
        propagate. If only the refresh after an accepted write fails, the
        previous snapshot is returned with the new target and the cache
        stays stale, so the next read fetches again.
        """
        temperature = api.normalize_target_temperature(value)
        _LOGGER.debug(
            "Setting target temperature for %s to %.1f (requested %s)",
            self._device_id,
            temperature,
            value,
        )
        token = await self._async_token()
        await api.async_set_target_temperature(
            self._session, token, self._device_id, temperature
        )
        self._updated_at = None

        try:
            return await self.async_get(force=True)
        except (api.EThermostaatApiClientError, httpx.RequestError) as err:
            _LOGGER.warning(
                "Target temperature %.1f accepted by %s, but refresh failed: %s",
                temperature,
                self._device_id,
                err,
            )

        if self._snapshot is None:
            return ThermostatSnapshot(
                target_temperature=temperature,
                current_temperature=None,
                serial=self._device_id,
            )
        return replace(self._snapshot, target_temperature=temperature)
