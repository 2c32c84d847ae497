"""API client for the ICY E-Thermostaat portal.

This module provides functions to interact with the ICY portal,
including login, reading thermostat data and setting the target
temperature.
"""

import logging
import math
from typing import Any

import httpx
from homeassistant.core import HomeAssistant
from homeassistant.helpers.httpx_client import create_async_httpx_client

from .const import BASE_URL, MAX_TEMP, MIN_TEMP, REQUEST_TIMEOUT, STATUS_OK
from .models import LoginResult, ThermostatSnapshot

_LOGGER = logging.getLogger(__name__)

# HTTP status codes
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401

SESSION_TOKEN_HEADER = "Session-token"


class EThermostaatApiClientError(Exception):
    """Base exception for ICY portal client errors."""


class EThermostaatApiAuthError(EThermostaatApiClientError):
    """Exception raised when the portal rejects the credentials or token."""


def create_headers(token: str | None = None) -> dict[str, str]:
    """Create HTTP headers for ICY portal requests.

    Args:
        token: Optional session token to include in headers.

    Returns:
        Dictionary containing HTTP headers for API requests.

    """
    headers = {"accept": "application/json"}
    if token:
        headers[SESSION_TOKEN_HEADER] = token
    return headers


def is_http_error(status: int) -> bool:
    """Check if HTTP status code indicates an error."""
    return status >= HTTP_BAD_REQUEST


def is_auth_error(status: int) -> bool:
    """Check if HTTP status code indicates authentication error."""
    return status == HTTP_UNAUTHORIZED


def extract_status_code(data: dict[str, Any]) -> int | None:
    """Extract ``status.code`` from a portal response body.

    Args:
        data: API response data dictionary.

    Returns:
        The status code as int, or None if the body carries no status.

    """
    status = data.get("status")
    if not isinstance(status, dict):
        return None
    code = status.get("code")
    if code is None:
        return None
    try:
        return int(code)
    except (TypeError, ValueError):
        return None


def validate_response(
    response: httpx.Response, *, require_status: bool = False
) -> dict[str, Any]:
    """Validate HTTP response and return parsed JSON data.

    Args:
        response: HTTP response object to validate.
        require_status: Treat a body without ``status.code`` as an error.

    Returns:
        Parsed JSON data from response.

    Raises:
        EThermostaatApiAuthError: If the portal rejected the request.
        EThermostaatApiClientError: If the request failed otherwise.

    """
    _validate_http_status(response)
    try:
        data = response.json()
    except ValueError as err:
        error_msg = f"Invalid JSON in response: {err}"
        raise EThermostaatApiClientError(error_msg) from err
    if not isinstance(data, dict):
        error_msg = "Unexpected response body"
        raise EThermostaatApiClientError(error_msg)
    _validate_api_status(data, require_status=require_status)
    return data


def _validate_http_status(response: httpx.Response) -> None:
    if not is_http_error(response.status_code):
        return

    if is_auth_error(response.status_code):
        auth_error = "Authentication error"
        raise EThermostaatApiAuthError(auth_error)

    client_error = f"Request failed: {response.status_code}"
    raise EThermostaatApiClientError(client_error)


def _validate_api_status(data: dict[str, Any], *, require_status: bool) -> None:
    code = extract_status_code(data)

    if code is None:
        if require_status:
            offline_error = "ICY E-Thermostaat webservice offline"
            raise EThermostaatApiClientError(offline_error)
        return

    if code != STATUS_OK:
        auth_error = f"Not authorized (status {code})"
        raise EThermostaatApiAuthError(auth_error)


def _coerce_temperature(value: Any) -> float | None:  # noqa: ANN401
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        _LOGGER.warning("Ignoring unparsable temperature value: %r", value)
        return None


def extract_snapshot(data: dict[str, Any]) -> ThermostatSnapshot:
    """Build a ThermostatSnapshot from a ``/data`` response.

    Args:
        data: API response data dictionary.

    Returns:
        Snapshot with target (temperature1) and measured (temperature2)
        temperatures.

    """
    serial = data.get("uid")
    return ThermostatSnapshot(
        target_temperature=_coerce_temperature(data.get("temperature1")),
        current_temperature=_coerce_temperature(data.get("temperature2")),
        serial=str(serial) if serial is not None else None,
        raw=data,
    )


def clamp_temperature(value: float) -> float:
    """Clamp a temperature to the range the thermostat accepts."""
    return min(max(float(value), MIN_TEMP), MAX_TEMP)


def round_half(value: float) -> float:
    """Round to the nearest 0.5, with halves rounding up (22.25 -> 22.5)."""
    return math.floor(value * 2 + 0.5) / 2


def normalize_target_temperature(value: float) -> float:
    """Clamp to [MIN_TEMP, MAX_TEMP], then snap to the nearest 0.5."""
    return round_half(clamp_temperature(value))


def create_session_client(hass: HomeAssistant) -> httpx.AsyncClient:
    """Create HTTP client for the ICY portal.

    Every operation makes a single best-effort request, so no retry
    transport is mounted.

    Args:
        hass: Home Assistant instance.

    Returns:
        Configured httpx AsyncClient.

    """
    return create_async_httpx_client(hass, timeout=REQUEST_TIMEOUT)


async def async_login(
    session: httpx.AsyncClient,
    username: str,
    password: str,
) -> LoginResult:
    """Log in to the ICY portal and obtain a session token.

    Args:
        session: HTTP client session.
        username: Portal username.
        password: Portal password.

    Returns:
        LoginResult with the session token and the thermostat serial.

    Raises:
        EThermostaatApiAuthError: If the portal rejects the credentials.
        EThermostaatApiClientError: If the webservice is offline or fails.

    """
    url = f"{BASE_URL}/login"
    payload = {"username": username, "password": password}

    _LOGGER.debug("Retrieving new session token from ICY portal")
    response = await session.post(url, headers=create_headers(), data=payload)
    data = validate_response(response, require_status=True)

    token = data.get("token")
    if not token:
        error_msg = "Login response did not contain a token"
        raise EThermostaatApiClientError(error_msg)

    serial = data.get("serialthermostat1")
    _LOGGER.debug("Successfully logged in to ICY portal")
    return LoginResult(
        token=token,
        serial=str(serial) if serial is not None else None,
    )


async def async_get_data(session: httpx.AsyncClient, token: str) -> dict[str, Any]:
    """Fetch the current thermostat data.

    Args:
        session: HTTP client session.
        token: Session token from async_login.

    Returns:
        Raw thermostat data dictionary.

    Raises:
        EThermostaatApiAuthError: If the token is rejected.
        EThermostaatApiClientError: If API request fails.

    """
    url = f"{BASE_URL}/data"

    _LOGGER.debug("Fetching thermostat data from ICY portal")
    response = await session.get(url, headers=create_headers(token))
    return validate_response(response)


async def async_set_target_temperature(
    session: httpx.AsyncClient,
    token: str,
    uid: str,
    temperature: float,
) -> dict[str, Any]:
    """Submit a new target temperature.

    Args:
        session: HTTP client session.
        token: Session token from async_login.
        uid: Thermostat serial.
        temperature: Target temperature, already clamped and rounded.

    Returns:
        Parsed response body.

    Raises:
        EThermostaatApiAuthError: If the token is rejected.
        EThermostaatApiClientError: If API request fails.

    """
    url = f"{BASE_URL}/data"
    payload = {"uid": uid, "temperature1": f"{temperature:g}"}

    _LOGGER.debug("Sending target temperature %.1f to thermostat %s", temperature, uid)
    response = await session.post(url, headers=create_headers(token), data=payload)
    if not response.content:
        # The portal may acknowledge a write with an empty body
        _validate_http_status(response)
        return {}
    return validate_response(response)
