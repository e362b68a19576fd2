"""Sensor entities for Botvac vacuum."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.const import PERCENTAGE, EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from botvac_client.const import CAPABILITY_BATTERY

from . import BotvacConfigEntry
from .coordinator import BotvacCoordinator
from .entity import BotvacEntity


@dataclass(frozen=True, kw_only=True)
class BotvacSensorEntityDescription(SensorEntityDescription):
    """Describes a Botvac sensor entity."""

    value_fn: Callable[[BotvacCoordinator], float | str | None]


SENSOR_DESCRIPTIONS: tuple[BotvacSensorEntityDescription, ...] = (
    BotvacSensorEntityDescription(
        key="battery",
        device_class=SensorDeviceClass.BATTERY,
        native_unit_of_measurement=PERCENTAGE,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda coordinator: coordinator.capabilities.get(
            CAPABILITY_BATTERY,
            coordinator.data.battery if coordinator.data else None,
        ),
    ),
    BotvacSensorEntityDescription(
        key="firmware_version",
        translation_key="firmware_version",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda coordinator: (
            coordinator.controller.last_state.firmware or None
            if coordinator.controller.last_state
            else None
        ),
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: BotvacConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up Botvac sensor entities."""
    async_add_entities(
        BotvacSensor(coordinator, description)
        for coordinator in entry.runtime_data.values()
        for description in SENSOR_DESCRIPTIONS
    )


class BotvacSensor(BotvacEntity, SensorEntity):
    """A Botvac sensor entity."""

    entity_description: BotvacSensorEntityDescription

    def __init__(
        self,
        coordinator: BotvacCoordinator,
        description: BotvacSensorEntityDescription,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self.entity_description = description
        self._attr_unique_id = f"{coordinator.robot.serial}_{description.key}"

    @property
    def native_value(self) -> float | str | None:
        """Return the sensor value."""
        return self.entity_description.value_fn(self.coordinator)
