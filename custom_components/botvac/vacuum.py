"""Vacuum entity for Botvac robot vacuum."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.vacuum import (
    StateVacuumEntity,
    VacuumActivity,
    VacuumEntityFeature,
)
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from botvac_client import VacuumStatus

from . import BotvacConfigEntry
from .coordinator import BotvacCoordinator
from .entity import BotvacEntity

_LOGGER = logging.getLogger(__name__)

STATUS_TO_ACTIVITY: dict[VacuumStatus, VacuumActivity] = {
    VacuumStatus.CLEANING: VacuumActivity.CLEANING,
    VacuumStatus.SPOT_CLEANING: VacuumActivity.CLEANING,
    VacuumStatus.CHARGING: VacuumActivity.DOCKED,
    VacuumStatus.DOCKED: VacuumActivity.DOCKED,
    VacuumStatus.STOPPED: VacuumActivity.IDLE,
}


async def async_setup_entry(
    hass: HomeAssistant,
    entry: BotvacConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up the Botvac vacuum entities."""
    async_add_entities(
        BotvacVacuum(coordinator) for coordinator in entry.runtime_data.values()
    )


class BotvacVacuum(BotvacEntity, StateVacuumEntity):
    """Representation of a Botvac robot vacuum."""

    _attr_name = None
    _attr_supported_features = (
        VacuumEntityFeature.STATE
        | VacuumEntityFeature.START
        | VacuumEntityFeature.STOP
        | VacuumEntityFeature.PAUSE
        | VacuumEntityFeature.RETURN_HOME
        | VacuumEntityFeature.CLEAN_SPOT
    )

    def __init__(self, coordinator: BotvacCoordinator) -> None:
        """Initialize the vacuum entity."""
        super().__init__(coordinator)
        self._attr_unique_id = coordinator.robot.serial

    @property
    def activity(self) -> VacuumActivity:
        """Return the current vacuum activity."""
        state = self.coordinator.data
        if state is None:
            return VacuumActivity.IDLE
        if state.unavailable:
            return VacuumActivity.ERROR
        return STATUS_TO_ACTIVITY.get(state.status, VacuumActivity.IDLE)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the robot's error message, if any."""
        state = self.coordinator.data
        if state is None or state.error is None:
            return {}
        return {"status": state.error}

    async def async_start(self) -> None:
        """Start (or resume) a house cleaning."""
        await self.coordinator.async_run_intent(
            self.coordinator.controller.start_cleaning_cycle
        )

    async def async_clean_spot(self, **kwargs: Any) -> None:
        """Start (or resume) a spot cleaning."""
        await self.coordinator.async_run_intent(
            self.coordinator.controller.start_spot_cleaning_cycle
        )

    async def async_pause(self) -> None:
        """Pause cleaning."""
        await self.coordinator.async_run_intent(
            self.coordinator.controller.stop_cleaning_cycle
        )

    async def async_stop(self, **kwargs: Any) -> None:
        """Stop cleaning."""
        await self.coordinator.async_run_intent(
            self.coordinator.controller.stop_cleaning_cycle
        )

    async def async_return_to_base(self, **kwargs: Any) -> None:
        """Return to the dock, stopping a running cleaning first."""
        controller = self.coordinator.controller
        state = self.coordinator.data
        if state is not None and state.status in (
            VacuumStatus.CLEANING,
            VacuumStatus.SPOT_CLEANING,
        ):
            _LOGGER.debug("%s: stopping before docking", self.coordinator.robot.name)
            await self.coordinator.async_run_intent(controller.stop_and_dock)
        else:
            await self.coordinator.async_run_intent(controller.dock_robot)
