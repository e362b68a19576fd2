"""Periodic state polling with failure backoff."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from .const import (
    CAPABILITY_BATTERY,
    CAPABILITY_STATUS,
    MAX_POLL_INTERVAL,
    MIN_POLL_INTERVAL,
    SETTING_ECO_MODE,
    SETTING_NAVIGATION_MODE,
    SETTING_NO_GO_LINES,
    SETTING_POLL_INTERVAL,
)
from .controller import RobotController
from .exceptions import BotvacError, PollFailure
from .models import CleaningSettings, DerivedState, PollingHealth

_LOGGER = logging.getLogger(__name__)

HOST_SETTINGS = (
    SETTING_POLL_INTERVAL,
    SETTING_ECO_MODE,
    SETTING_NAVIGATION_MODE,
    SETTING_NO_GO_LINES,
)


class RobotHost(Protocol):
    """The device object of the home-automation host."""

    def get_setting(self, key: str) -> Any: ...

    def set_capability_value(self, name: str, value: Any) -> None: ...

    def set_available(self) -> None: ...

    def set_unavailable(self, reason: str) -> None: ...


class PollScheduler:
    """Refreshes a robot on a timer and reports the result to its host.

    Failures never escape a poll. Each consecutive failure stretches the
    interval to ``base * errors**2`` (capped at ``max_interval``) and marks
    the host unavailable; the first success restores the base interval.
    A timer that fires while a poll is still running is skipped.

    Usage:
        scheduler = PollScheduler(controller, host, interval=60)
        scheduler.start()       # inside a running event loop
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        controller: RobotController,
        host: RobotHost,
        *,
        interval: float | None = None,
        max_interval: float = MAX_POLL_INTERVAL,
    ) -> None:
        self.controller = controller
        self.host = host
        self.max_interval = max_interval
        if interval is None:
            interval = controller.settings.poll_interval
        self.base_interval = self._clamp(interval)
        self.health = PollingHealth(current_interval=self.base_interval)
        self.last_failure: PollFailure | None = None

        self._polling = False
        self._timer: asyncio.TimerHandle | None = None
        self._timer_interval: float | None = None
        self._tick_task: asyncio.Task[None] | None = None

    def _clamp(self, seconds: float) -> float:
        return float(max(MIN_POLL_INTERVAL, min(self.max_interval, seconds)))

    @property
    def interval(self) -> float:
        """Seconds until the next poll, including any backoff."""
        return self.health.current_interval

    @property
    def polling(self) -> bool:
        """True while a poll is in flight."""
        return self._polling

    @property
    def running(self) -> bool:
        return self._timer is not None

    # --- Polling ---

    async def async_poll(self) -> DerivedState | None:
        """Refresh once and push the result to the host.

        Returns the derived state, or None when the poll failed or was
        skipped because another poll is still running.
        """
        if self._polling:
            _LOGGER.debug(
                "%s: previous poll still running, skipping", self.controller.robot.name
            )
            return None

        self._polling = True
        try:
            derived = await self.controller.refresh()
        except BotvacError as err:
            self._record_failure(err)
            return None
        finally:
            self._polling = False

        self._record_success()
        self.host.set_capability_value(CAPABILITY_STATUS, derived.status.value)
        self.host.set_capability_value(CAPABILITY_BATTERY, derived.battery)
        if derived.unavailable:
            self.host.set_unavailable(derived.error)
        else:
            self.host.set_available()
        return derived

    def _record_failure(self, err: BotvacError) -> None:
        failure = PollFailure(err)
        health = self.health
        self.last_failure = failure
        health.consecutive_errors += 1
        health.current_interval = min(
            self.base_interval * health.consecutive_errors**2, self.max_interval
        )
        _LOGGER.warning(
            "%s: poll failed (%d in a row), next poll in %.0fs: %s",
            self.controller.robot.name,
            health.consecutive_errors,
            health.current_interval,
            failure,
        )
        self.host.set_unavailable(str(failure))

    def _record_success(self) -> None:
        health = self.health
        if health.consecutive_errors:
            _LOGGER.info(
                "%s: poll recovered after %d failures",
                self.controller.robot.name, health.consecutive_errors,
            )
        health.consecutive_errors = 0
        health.current_interval = self.base_interval
        self.last_failure = None

    # --- Timer ---

    def start(self) -> None:
        """Arm the poll timer. Must be called from the event loop."""
        self._arm()

    def stop(self) -> None:
        """Cancel the timer and any running tick."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            self._timer_interval = None
        if self._tick_task is not None and not self._tick_task.done():
            self._tick_task.cancel()
        self._tick_task = None

    def set_interval(self, seconds: float) -> None:
        """Change the base interval, replacing the running timer."""
        self.base_interval = self._clamp(seconds)
        if not self.health.consecutive_errors:
            self.health.current_interval = self.base_interval
        _LOGGER.info(
            "%s: poll interval set to %.0fs", self.controller.robot.name, self.base_interval
        )
        if self._timer is not None:
            self._arm()

    def apply_settings(self, settings: CleaningSettings) -> None:
        """Apply new host settings to the controller and the timer."""
        self.controller.update_settings(settings)
        self.set_interval(settings.poll_interval)

    def reload_settings(self) -> None:
        """Read the current settings from the host and apply them.

        Settings the host does not have keep their defaults.
        """
        options: dict[str, Any] = {}
        for key in HOST_SETTINGS:
            value = self.host.get_setting(key)
            if value is not None:
                options[key] = value
        self.apply_settings(CleaningSettings.from_options(options))

    def _arm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer_interval = self.interval
        self._timer = loop.call_later(self._timer_interval, self._on_timer)

    def _on_timer(self) -> None:
        self._arm()
        if self._polling:
            _LOGGER.debug(
                "%s: timer fired during a poll, skipping", self.controller.robot.name
            )
            return
        self._tick_task = asyncio.get_running_loop().create_task(self._tick())

    async def _tick(self) -> None:
        await self.async_poll()
        # Backoff or recovery changed the interval: re-arm with the new one.
        if self._timer is not None and self._timer_interval != self.interval:
            self._arm()
