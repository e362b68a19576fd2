"""DataUpdateCoordinator for a Botvac robot."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed, HomeAssistantError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from botvac_client import (
    AuthError,
    BotvacClient,
    BotvacError,
    CleaningSettings,
    DerivedState,
    PollScheduler,
    RobotController,
    RobotIdentity,
    StateCache,
)

from .const import DOMAIN

_LOGGER = logging.getLogger(__name__)


class BotvacCoordinator(DataUpdateCoordinator[DerivedState]):
    """Push-mode coordinator for one Botvac robot.

    The coordinator has no update interval of its own. A PollScheduler
    drives the polling (with its own backoff) and reports back through the
    host interface below: get_setting, set_capability_value,
    set_available and set_unavailable. Manual refreshes, e.g. right after
    an intent, go through _async_update_data.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        robot: RobotIdentity,
        client: BotvacClient,
        cache: StateCache,
        settings: CleaningSettings,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name=f"{DOMAIN}_{robot.serial}",
            update_interval=None,
        )
        self.robot = robot
        self.controller = RobotController(robot, client, cache, settings=settings)
        self.scheduler = PollScheduler(self.controller, self)
        self.capabilities: dict[str, Any] = {}
        self.unavailable_reason: str | None = None

    # --- Host interface used by the PollScheduler ---

    def get_setting(self, key: str) -> Any:
        return self.config_entry.options.get(key)

    def set_capability_value(self, name: str, value: Any) -> None:
        self.capabilities[name] = value

    def set_available(self) -> None:
        self.unavailable_reason = None
        derived = self.controller.get_derived_state()
        if derived is not None:
            self.async_set_updated_data(derived)

    def set_unavailable(self, reason: str) -> None:
        self.unavailable_reason = reason
        if self.scheduler.health.consecutive_errors:
            failure = self.scheduler.last_failure
            if failure is not None and isinstance(failure.cause, AuthError):
                # Rejected robot secret; reauth reloads the entry, which
                # lists the robots (and their secrets) again.
                _LOGGER.warning("%s: credential rejected, starting reauth", self.robot.name)
                self.config_entry.async_start_reauth(self.hass)
            self.async_set_update_error(UpdateFailed(reason))
            return
        # The robot itself reported an error; keep its state so the
        # vacuum entity can show it.
        derived = self.controller.get_derived_state()
        if derived is not None:
            self.async_set_updated_data(derived)

    # --- Lifecycle ---

    def start_polling(self) -> None:
        """Start the background poll timer."""
        self.scheduler.start()
        _LOGGER.info(
            "%s: polling every %ds", self.robot.name, int(self.scheduler.interval)
        )

    def stop_polling(self) -> None:
        self.scheduler.stop()

    def reload_settings(self) -> None:
        """Apply changed options to the controller and the poll timer."""
        self.scheduler.reload_settings()
        self.async_update_listeners()

    async def _async_update_data(self) -> DerivedState:
        """Refresh on demand (first refresh, after intents)."""
        try:
            return await self.controller.refresh()
        except AuthError as err:
            raise ConfigEntryAuthFailed(f"Credential rejected: {err}") from err
        except BotvacError as err:
            raise UpdateFailed(f"Failed to get state: {err}") from err

    async def async_run_intent(self, intent: Callable[[], Awaitable[None]]) -> None:
        """Run a controller intent and refresh right after it.

        Raises:
            HomeAssistantError: If the robot rejected the intent.
        """
        try:
            await intent()
        except BotvacError as err:
            raise HomeAssistantError(str(err)) from err
        finally:
            await self.async_request_refresh()

    async def async_shutdown(self) -> None:
        """Stop polling."""
        self.stop_polling()
        await super().async_shutdown()
