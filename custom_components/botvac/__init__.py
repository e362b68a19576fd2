"""The Botvac robot vacuum integration."""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_EMAIL, CONF_PASSWORD
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from botvac_client import (
    AuthError,
    BotvacAccount,
    BotvacClient,
    BotvacError,
    CleaningSettings,
    PasswordSession,
    StateCache,
)

from .const import PLATFORMS
from .coordinator import BotvacCoordinator

_LOGGER = logging.getLogger(__name__)

type BotvacConfigEntry = ConfigEntry[dict[str, BotvacCoordinator]]


async def async_setup_entry(hass: HomeAssistant, entry: BotvacConfigEntry) -> bool:
    """Discover the account's robots and start polling each of them."""
    session = async_get_clientsession(hass)
    account = BotvacAccount(
        PasswordSession(session, entry.data[CONF_EMAIL], entry.data[CONF_PASSWORD])
    )
    try:
        robots = await account.get_robots()
    except AuthError as err:
        raise ConfigEntryAuthFailed(f"Login rejected: {err}") from err
    except BotvacError as err:
        raise ConfigEntryNotReady(f"Cannot list robots: {err}") from err

    client = BotvacClient(session)
    cache = StateCache(client)
    settings = CleaningSettings.from_options(entry.options)

    coordinators: dict[str, BotvacCoordinator] = {}
    for robot in robots:
        coordinator = BotvacCoordinator(hass, entry, robot, client, cache, settings)
        await coordinator.async_config_entry_first_refresh()
        coordinators[robot.serial] = coordinator

    entry.runtime_data = coordinators
    for coordinator in coordinators.values():
        coordinator.start_polling()

    entry.async_on_unload(entry.add_update_listener(_async_update_listener))
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _LOGGER.debug("Set up %d robot(s) for %s", len(coordinators), entry.title)
    return True


async def _async_update_listener(hass: HomeAssistant, entry: BotvacConfigEntry) -> None:
    """Push changed options to every robot."""
    for coordinator in entry.runtime_data.values():
        coordinator.reload_settings()


async def async_unload_entry(hass: HomeAssistant, entry: BotvacConfigEntry) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        for coordinator in entry.runtime_data.values():
            coordinator.stop_polling()
    return unload_ok
