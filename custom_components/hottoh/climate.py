"""Climate platform for HottoH pellet stove integration."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.climate import (
    ClimateEntity,
    ClimateEntityFeature,
    HVACAction,
    HVACMode,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, StoveCommand
from .coordinator import HottohCoordinator, HottohEntityMixin

_LOGGER = logging.getLogger(__name__)

# Stove action -> HA action; anything else (alarms, unknown codes) is idle
HVAC_ACTIONS: dict[str, HVACAction] = {
    "off": HVACAction.OFF,
    "check": HVACAction.PREHEATING,
    "clean_all": HVACAction.PREHEATING,
    "loading": HVACAction.PREHEATING,
    "waiting": HVACAction.PREHEATING,
    "ignition": HVACAction.PREHEATING,
    "stabilization": HVACAction.PREHEATING,
    "heating": HVACAction.HEATING,
    "stopping": HVACAction.IDLE,
    "idle": HVACAction.IDLE,
}


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up HottoH climate entity."""
    coordinator: HottohCoordinator = hass.data[DOMAIN][entry.entry_id]
    _LOGGER.debug("Setting up climate entity for %s", entry.entry_id)
    async_add_entities([HottohClimate(coordinator)])


class HottohClimate(HottohEntityMixin, ClimateEntity):
    """Climate entity for the stove: on/off and room 1 target temperature.

    Temperatures are sent in tenths of a degree (21.5 -> "215").
    """

    _attr_name = None
    _attr_hvac_modes = [HVACMode.HEAT, HVACMode.OFF]
    _attr_supported_features = (
        ClimateEntityFeature.TARGET_TEMPERATURE
        | ClimateEntityFeature.TURN_ON
        | ClimateEntityFeature.TURN_OFF
    )
    _attr_temperature_unit = UnitOfTemperature.CELSIUS
    _attr_target_temperature_step = 0.5

    def __init__(self, coordinator: HottohCoordinator) -> None:
        """Initialize the climate entity."""
        self.coordinator = coordinator
        self._attr_unique_id = f"{coordinator.entry_id}_climate"

    @property
    def hvac_mode(self) -> HVACMode | None:
        """Return heat when the stove is switched on."""
        data = self.coordinator.stove_data
        if data is None or data.is_on is None:
            return None
        return HVACMode.HEAT if data.is_on else HVACMode.OFF

    @property
    def hvac_action(self) -> HVACAction | None:
        """Return what the stove is doing right now."""
        data = self.coordinator.stove_data
        if data is None or data.action is None:
            return None
        return HVAC_ACTIONS.get(data.action, HVACAction.IDLE)

    @property
    def current_temperature(self) -> float | None:
        """Return the room 1 reading, if the stove has that sensor."""
        data = self.coordinator.stove_data
        if data is None or not data.capabilities.room_1_temperature:
            return None
        return data.room_1_temperature

    @property
    def target_temperature(self) -> float | None:
        data = self.coordinator.stove_data
        return data.room_1_target if data else None

    @property
    def min_temp(self) -> float:
        data = self.coordinator.stove_data
        if data and data.room_1_target_min is not None:
            return data.room_1_target_min
        return super().min_temp

    @property
    def max_temp(self) -> float:
        data = self.coordinator.stove_data
        if data and data.room_1_target_max is not None:
            return data.room_1_target_max
        return super().max_temp

    async def async_set_temperature(self, **kwargs: Any) -> None:
        """Queue a new room 1 target temperature."""
        temperature = kwargs.get(ATTR_TEMPERATURE)
        if temperature is None:
            return
        _LOGGER.debug("Set room 1 target temperature=%s", temperature)
        self.coordinator.enqueue_command(
            [str(int(StoveCommand.ROOM_1_TEMPERATURE)), str(round(temperature * 10))]
        )

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        """Switch the stove on (HEAT) or off."""
        _LOGGER.debug("Set hvac_mode=%s", hvac_mode)
        value = "1" if hvac_mode == HVACMode.HEAT else "0"
        self.coordinator.enqueue_command([str(int(StoveCommand.ON_OFF)), value])

    async def async_turn_on(self) -> None:
        """Switch the stove on."""
        await self.async_set_hvac_mode(HVACMode.HEAT)

    async def async_turn_off(self) -> None:
        """Switch the stove off."""
        await self.async_set_hvac_mode(HVACMode.OFF)
