"""Switch platform for HottoH pellet stove integration."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.switch import SwitchDeviceClass, SwitchEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, StoveCommand
from .coordinator import HottohCoordinator, HottohEntityMixin

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up HottoH switch entities."""
    coordinator: HottohCoordinator = hass.data[DOMAIN][entry.entry_id]
    _LOGGER.debug("Setting up switch entities for %s", entry.entry_id)
    async_add_entities(
        [
            HottohModeSwitch(coordinator, "eco_mode", "Eco Mode", StoveCommand.ECO_MODE),
            HottohModeSwitch(
                coordinator, "chrono_mode", "Chrono Mode", StoveCommand.CHRONO_MODE
            ),
        ]
    )


class HottohModeSwitch(HottohEntityMixin, SwitchEntity):
    """Switch for an on/off register of the stove (eco or chrono mode).

    Writes are queued and applied on the next poll cycle, so the state
    flips once the stove reports the new value.
    """

    _attr_device_class = SwitchDeviceClass.SWITCH

    def __init__(
        self,
        coordinator: HottohCoordinator,
        key: str,
        name: str,
        command: StoveCommand,
    ) -> None:
        """Initialize the switch."""
        self.coordinator = coordinator
        self._key = key
        self._command = command
        self._attr_name = name
        self._attr_unique_id = f"{coordinator.entry_id}_{key}"

    @property
    def is_on(self) -> bool | None:
        """Return True if the mode is enabled."""
        data = self.coordinator.stove_data
        if data is None:
            return None
        return getattr(data, self._key)

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Enable the mode."""
        _LOGGER.debug("%s turn_on", self._key)
        self.coordinator.enqueue_command([str(int(self._command)), "1"])

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Disable the mode."""
        _LOGGER.debug("%s turn_off", self._key)
        self.coordinator.enqueue_command([str(int(self._command)), "0"])
