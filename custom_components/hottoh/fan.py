"""Fan platform for HottoH pellet stove integration."""

from __future__ import annotations

import logging
import math
from typing import Any

from homeassistant.components.fan import FanEntity, FanEntityFeature
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, StoveCommand
from .coordinator import HottohCoordinator, HottohEntityMixin

_LOGGER = logging.getLogger(__name__)

FAN_COMMANDS = {
    1: StoveCommand.FAN_1_SPEED,
    2: StoveCommand.FAN_2_SPEED,
    3: StoveCommand.FAN_3_SPEED,
}
DEFAULT_SPEED_COUNT = 5


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up HottoH fan entities."""
    coordinator: HottohCoordinator = hass.data[DOMAIN][entry.entry_id]
    _LOGGER.debug("Setting up fan entities for %s", entry.entry_id)
    async_add_entities(HottohFan(coordinator, number) for number in FAN_COMMANDS)


class HottohFan(HottohEntityMixin, FanEntity):
    """Fan entity for one of the stove's air fans.

    Speed Scale Conversion:
        - Home Assistant uses 0-100 (percentage)
        - Stove uses 0..max, where max is reported per fan in DAT 0

        HA -> Stove: ceil(percentage * max / 100)
        Stove -> HA: speed * 100 / max

    The stove reports how many fans are installed in the stove type
    register; fans beyond that count are unavailable.
    """

    _attr_supported_features = FanEntityFeature.SET_SPEED

    def __init__(self, coordinator: HottohCoordinator, number: int) -> None:
        """Initialize the fan."""
        self.coordinator = coordinator
        self._number = number
        self._command = FAN_COMMANDS[number]
        self._attr_name = f"Fan {number}"
        self._attr_unique_id = f"{coordinator.entry_id}_fan_{number}"

    def _value(self, suffix: str) -> int | None:
        data = self.coordinator.stove_data
        if data is None:
            return None
        return getattr(data, f"fan_{self._number}_{suffix}")

    @property
    def available(self) -> bool:
        """Return True if this fan is installed and the stove is reachable."""
        return super().available and self.coordinator.capabilities.fan_count >= self._number

    @property
    def speed_count(self) -> int:
        """Return the number of discrete speeds."""
        return self._value("max") or DEFAULT_SPEED_COUNT

    @property
    def is_on(self) -> bool | None:
        """Return True if the fan runs."""
        speed = self._value("target")
        if speed is None:
            return None
        return speed > 0

    @property
    def percentage(self) -> int | None:
        """Return the current speed percentage."""
        speed = self._value("target")
        if speed is None:
            return None
        return round(speed * 100 / self.speed_count)

    async def async_turn_on(
        self,
        percentage: int | None = None,
        preset_mode: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Turn on the fan (full speed unless a percentage is given)."""
        await self.async_set_percentage(100 if percentage is None else percentage)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn off the fan."""
        await self.async_set_percentage(0)

    async def async_set_percentage(self, percentage: int) -> None:
        """Set the fan speed percentage."""
        speed = math.ceil(percentage * self.speed_count / 100)
        _LOGGER.debug("Fan %d set_percentage=%d (speed=%d)", self._number, percentage, speed)
        self.coordinator.enqueue_command([str(int(self._command)), str(speed)])
