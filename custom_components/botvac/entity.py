"""Base entity for Botvac vacuum integration."""

from __future__ import annotations

from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DEFAULT_MODEL, DOMAIN, MANUFACTURER
from .coordinator import BotvacCoordinator


class BotvacEntity(CoordinatorEntity[BotvacCoordinator]):
    """Base class for Botvac entities."""

    _attr_has_entity_name = True

    def __init__(self, coordinator: BotvacCoordinator) -> None:
        """Initialize the entity."""
        super().__init__(coordinator)
        robot = coordinator.robot
        last_state = coordinator.controller.last_state
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, robot.serial)},
            manufacturer=MANUFACTURER,
            model=robot.model or DEFAULT_MODEL,
            serial_number=robot.serial,
            sw_version=(last_state.firmware or None) if last_state else None,
            name=robot.name,
        )
