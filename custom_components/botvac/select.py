"""Select entities for Botvac vacuum."""

from __future__ import annotations

from homeassistant.components.select import SelectEntity
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from . import BotvacConfigEntry
from .const import CONF_NAVIGATION_MODE, NAVIGATION_MODE_LIST, NAVIGATION_MODE_REVERSE
from .coordinator import BotvacCoordinator
from .entity import BotvacEntity


async def async_setup_entry(
    hass: HomeAssistant,
    entry: BotvacConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up Botvac select entities."""
    async_add_entities(
        BotvacNavigationModeSelect(coordinator)
        for coordinator in entry.runtime_data.values()
    )


class BotvacNavigationModeSelect(BotvacEntity, SelectEntity):
    """Navigation mode used for the next house cleaning.

    The value is stored in the entry options, so it applies to every robot
    of the account and survives restarts.
    """

    _attr_translation_key = "navigation_mode"
    _attr_entity_category = EntityCategory.CONFIG
    _attr_options = NAVIGATION_MODE_LIST

    def __init__(self, coordinator: BotvacCoordinator) -> None:
        """Initialize the navigation mode select."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{coordinator.robot.serial}_navigation_mode"

    @property
    def current_option(self) -> str | None:
        mode = self.coordinator.controller.settings.navigation_mode
        return NAVIGATION_MODE_REVERSE.get(mode)

    async def async_select_option(self, option: str) -> None:
        """Store the new navigation mode in the entry options."""
        entry = self.coordinator.config_entry
        self.hass.config_entries.async_update_entry(
            entry, options={**entry.options, CONF_NAVIGATION_MODE: option}
        )
