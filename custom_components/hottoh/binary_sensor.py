"""Binary sensor platform for HottoH pellet stove integration."""

from __future__ import annotations

import logging

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import HottohCoordinator, HottohEntityMixin

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up HottoH binary sensor entities."""
    coordinator: HottohCoordinator = hass.data[DOMAIN][entry.entry_id]
    _LOGGER.debug("Setting up binary sensor entities for %s", entry.entry_id)
    async_add_entities([HottohWaterPump(coordinator)])


class HottohWaterPump(HottohEntityMixin, BinarySensorEntity):
    """Water pump running state, read from the DAT 2 generic pump register."""

    _attr_name = "Water Pump"
    _attr_device_class = BinarySensorDeviceClass.RUNNING

    def __init__(self, coordinator: HottohCoordinator) -> None:
        """Initialize the pump sensor."""
        self.coordinator = coordinator
        self._attr_unique_id = f"{coordinator.entry_id}_water_pump"

    @property
    def available(self) -> bool:
        """Return True only when the stove has a pump."""
        return super().available and self.coordinator.capabilities.generic_pump

    @property
    def is_on(self) -> bool | None:
        data2 = self.coordinator.stove_data2
        return data2.water_pump_on if data2 else None
