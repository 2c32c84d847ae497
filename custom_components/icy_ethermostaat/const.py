"""Constants for ICY E-Thermostaat integration.

This module contains all the constants used throughout the integration,
including API endpoints, configuration keys, and temperature limits.
"""

DOMAIN = "icy_ethermostaat"

BASE_URL = "https://portal.icy.nl"

DEFAULT_NAME = "E-Thermostaat"
MANUFACTURER = "ICY"

REQUEST_TIMEOUT = 10.0
CACHE_MAX_AGE = 120  # Seconds a snapshot is served without a new fetch
DEFAULT_POLL_INTERVAL = 120
POLL_CACHE_MARGIN = 5  # Polls fire up to a second early on the loop clock

MIN_TEMP = 5.0
MAX_TEMP = 30.0
TEMP_STEP = 0.5

CONF_SERIAL = "serial"

ERROR_NOT_AUTHORIZED = "not_authorized"
ERROR_UNKNOWN = "unknown"

STATUS_OK = 200
