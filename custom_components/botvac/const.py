"""Constants for the Botvac vacuum integration."""

from homeassistant.const import Platform

from botvac_client.const import (
    DEFAULT_POLL_INTERVAL,
    MAX_POLL_INTERVAL,
    MIN_POLL_INTERVAL,
    NAVIGATION_MODES,
    SETTING_ECO_MODE,
    SETTING_NAVIGATION_MODE,
    SETTING_NO_GO_LINES,
    SETTING_POLL_INTERVAL,
    NavigationMode,
)

DOMAIN = "botvac"

MANUFACTURER = "Neato Robotics"
DEFAULT_MODEL = "Botvac Connected"

PLATFORMS: list[Platform] = [
    Platform.VACUUM,
    Platform.SENSOR,
    Platform.SELECT,
]

CONF_POLL_INTERVAL = SETTING_POLL_INTERVAL
CONF_ECO_MODE = SETTING_ECO_MODE
CONF_NAVIGATION_MODE = SETTING_NAVIGATION_MODE
CONF_NO_GO_LINES = SETTING_NO_GO_LINES

POLL_INTERVAL_DEFAULT = DEFAULT_POLL_INTERVAL
POLL_INTERVAL_MIN = MIN_POLL_INTERVAL
POLL_INTERVAL_MAX = MAX_POLL_INTERVAL

NAVIGATION_MODE_LIST: list[str] = list(NAVIGATION_MODES.keys())

NAVIGATION_MODE_REVERSE: dict[NavigationMode, str] = {
    v: k for k, v in NAVIGATION_MODES.items()
}
