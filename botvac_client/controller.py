"""Intent-driven control of a single robot."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from .cache import StateCache
from .const import (
    CMD_PAUSE_CLEANING,
    CMD_RESUME_CLEANING,
    CMD_SEND_TO_BASE,
    CMD_START_CLEANING,
    CMD_STOP_CLEANING,
    DOCK_MAX_ATTEMPTS,
    DOCK_RETRY_DELAY,
    SPOT_HEIGHT,
    SPOT_WIDTH,
    CleaningCategory,
    CleaningMode,
    CleaningModifier,
)
from .exceptions import CannotDock, DockTimeout, InvalidTransition, TransportError
from .mapper import map_state
from .models import (
    CleaningSettings,
    CommandResponse,
    DerivedState,
    RawRobotState,
    RobotIdentity,
)

_LOGGER = logging.getLogger(__name__)


class CommandSender(Protocol):
    """Anything that can send robot commands (normally a BotvacClient)."""

    async def send_command(
        self,
        robot: RobotIdentity,
        command: str,
        params: Mapping[str, Any] | None = None,
    ) -> CommandResponse: ...


class RobotController:
    """Turns high-level intents into the one command the robot allows now.

    Every intent reads a fresh snapshot, checks ``availableCommands``,
    issues exactly one command and then invalidates the state cache, so
    the next read reflects the command rather than pre-command data.
    Cleaning is paused rather than stopped where possible: the robot can
    only resume or return to base from a paused run.
    """

    def __init__(
        self,
        robot: RobotIdentity,
        client: CommandSender,
        cache: StateCache,
        *,
        settings: CleaningSettings | None = None,
        dock_attempts: int = DOCK_MAX_ATTEMPTS,
        dock_retry_delay: float = DOCK_RETRY_DELAY,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.robot = robot
        self._client = client
        self._cache = cache
        self._settings = settings or CleaningSettings()
        self._dock_attempts = dock_attempts
        self._dock_retry_delay = dock_retry_delay
        self._sleep = sleep
        self.last_state: RawRobotState | None = None
        self._derived: DerivedState | None = None

    @property
    def settings(self) -> CleaningSettings:
        return self._settings

    def update_settings(self, settings: CleaningSettings) -> None:
        """Use new cleaning preferences for the next run."""
        self._settings = settings

    # --- State ---

    async def refresh(self) -> DerivedState:
        """Read the (possibly cached) state and derive the host status."""
        state = await self._cache.get(self.robot)
        return self._remember(state)

    def get_derived_state(self) -> DerivedState | None:
        """Return the status derived by the last read, if any."""
        return self._derived

    def _remember(self, state: RawRobotState) -> DerivedState:
        self.last_state = state
        self._derived = map_state(state)
        return self._derived

    async def _current_state(self) -> RawRobotState:
        state = await self._cache.get(self.robot, force=True)
        self._remember(state)
        return state

    # --- Command plumbing ---

    def _house_params(self) -> dict[str, int]:
        settings = self._settings
        return {
            "category": int(
                CleaningCategory.PERSISTENT_MAP
                if settings.no_go_lines
                else CleaningCategory.HOUSE
            ),
            "mode": int(CleaningMode.ECO if settings.eco_mode else CleaningMode.TURBO),
            "modifier": int(CleaningModifier.NORMAL),
            "navigationMode": int(settings.navigation_mode),
        }

    def _spot_params(self) -> dict[str, int]:
        settings = self._settings
        return {
            "category": int(CleaningCategory.SPOT),
            "mode": int(CleaningMode.ECO if settings.eco_mode else CleaningMode.TURBO),
            "modifier": int(CleaningModifier.NORMAL),
            "spotWidth": SPOT_WIDTH,
            "spotHeight": SPOT_HEIGHT,
            "navigationMode": int(settings.navigation_mode),
        }

    async def _issue(
        self,
        intent: str,
        command: str,
        params: Mapping[str, Any] | None = None,
    ) -> CommandResponse:
        try:
            response = await self._client.send_command(self.robot, command, params)
        finally:
            self._cache.invalidate(self.robot)
        if not response.success:
            raise InvalidTransition(intent, f"robot answered {response.result!r}")
        _LOGGER.info("%s: %s (%s) accepted", self.robot.name, intent, command)
        return response

    # --- Intents ---

    async def _start(self, intent: str, params: dict[str, int]) -> None:
        commands = (await self._current_state()).available_commands
        if commands.start:
            await self._issue(intent, CMD_START_CLEANING, params)
        elif commands.resume:
            await self._issue(intent, CMD_RESUME_CLEANING)
        else:
            raise InvalidTransition(intent, f"{self.robot.name} cannot start or resume")

    async def start_cleaning_cycle(self) -> None:
        """Start a house clean, or resume a paused one."""
        await self._start("start cleaning", self._house_params())

    async def start_spot_cleaning_cycle(self) -> None:
        """Start a spot clean, or resume a paused one."""
        await self._start("start spot cleaning", self._spot_params())

    async def stop_cleaning_cycle(self) -> None:
        """Pause the current run, or stop it if pausing is not possible."""
        intent = "stop cleaning"
        commands = (await self._current_state()).available_commands
        if commands.pause:
            await self._issue(intent, CMD_PAUSE_CLEANING)
        elif commands.stop:
            await self._issue(intent, CMD_STOP_CLEANING)
        else:
            raise InvalidTransition(intent, f"{self.robot.name} cannot pause or stop")

    async def dock_robot(self) -> None:
        """Send the robot to its base.

        Raises:
            CannotDock: If goToBase is not available right now.
        """
        commands = (await self._current_state()).available_commands
        if not commands.go_to_base:
            raise CannotDock(f"{self.robot.name} cannot return to base")
        await self._issue("dock", CMD_SEND_TO_BASE)

    async def stop_and_dock(self) -> None:
        """Pause the current run, then dock as soon as the robot allows it.

        After a pause the robot takes a while before goToBase becomes
        available, so the dock is retried up to ``dock_attempts`` times.

        Raises:
            DockTimeout: If goToBase never became available.
        """
        try:
            await self.stop_cleaning_cycle()
        except InvalidTransition as err:
            # Already paused or stopped.
            _LOGGER.debug("%s: not pausing before dock: %s", self.robot.name, err)

        for attempt in range(1, self._dock_attempts + 1):
            try:
                await self.dock_robot()
            except (InvalidTransition, TransportError) as err:
                _LOGGER.debug(
                    "%s: dock attempt %d/%d failed: %s",
                    self.robot.name, attempt, self._dock_attempts, err,
                )
            else:
                return
            if attempt < self._dock_attempts:
                await self._sleep(self._dock_retry_delay)

        _LOGGER.warning(
            "%s: could not dock after %d tries", self.robot.name, self._dock_attempts
        )
        raise DockTimeout(self._dock_attempts)

