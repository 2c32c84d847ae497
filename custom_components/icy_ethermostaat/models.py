"""Data models for ICY E-Thermostaat integration."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Credentials:
    """Username and password used to log in to the ICY portal."""

    username: str
    password: str


@dataclass(frozen=True)
class LoginResult:
    """Represents a successful login: session token and thermostat serial."""

    token: str
    serial: str | None


@dataclass(frozen=True)
class EThermostaatDevice:
    """Represents one paired thermostat.

    Attributes:
        id: Thermostat serial, also used as the portal ``uid``.
        name: Human-readable device name.

    """

    id: str
    name: str


@dataclass(slots=True)
class ThermostatSnapshot:
    """Represents a thermostat reading returned by the ICY portal."""

    target_temperature: float | None  # temperature1
    current_temperature: float | None  # temperature2
    serial: str | None
    raw: dict[str, Any] = field(default_factory=dict)
