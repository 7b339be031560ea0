"""Number platform for HottoH pellet stove integration."""

from __future__ import annotations

import logging

from homeassistant.components.number import NumberDeviceClass, NumberEntity, NumberMode
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import UnitOfTemperature
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
    """Set up HottoH number entities."""
    coordinator: HottohCoordinator = hass.data[DOMAIN][entry.entry_id]
    _LOGGER.debug("Setting up number entities for %s", entry.entry_id)
    async_add_entities(
        [
            HottohPowerLevel(coordinator),
            HottohTargetTemperature(
                coordinator,
                "water",
                "Water Target Temperature",
                StoveCommand.WATER_TEMPERATURE,
                (30.0, 80.0),
            ),
            HottohTargetTemperature(
                coordinator,
                "room_2",
                "Room 2 Target Temperature",
                StoveCommand.ROOM_2_TEMPERATURE,
                (7.0, 30.0),
            ),
        ]
    )


class HottohPowerLevel(HottohEntityMixin, NumberEntity):
    """Requested power level, bounded by the limits the stove reports."""

    _attr_name = "Power Level"
    _attr_mode = NumberMode.SLIDER
    _attr_native_step = 1

    def __init__(self, coordinator: HottohCoordinator) -> None:
        """Initialize the power level number."""
        self.coordinator = coordinator
        self._attr_unique_id = f"{coordinator.entry_id}_power_level_target"

    @property
    def native_value(self) -> float | None:
        data = self.coordinator.stove_data
        return data.power_target if data else None

    @property
    def native_min_value(self) -> float:
        data = self.coordinator.stove_data
        if data and data.power_min is not None:
            return data.power_min
        return 1

    @property
    def native_max_value(self) -> float:
        data = self.coordinator.stove_data
        if data and data.power_max is not None:
            return data.power_max
        return 5

    async def async_set_native_value(self, value: float) -> None:
        """Queue a new power level."""
        _LOGGER.debug("Set power level=%s", value)
        self.coordinator.enqueue_command(
            [str(int(StoveCommand.POWER_LEVEL)), str(int(value))]
        )


class HottohTargetTemperature(HottohEntityMixin, NumberEntity):
    """Target temperature of a secondary circuit (boiler water, room 2).

    Only available when the stove type reports the matching sensor. Values
    are sent in tenths of a degree.
    """

    _attr_device_class = NumberDeviceClass.TEMPERATURE
    _attr_native_unit_of_measurement = UnitOfTemperature.CELSIUS
    _attr_mode = NumberMode.BOX
    _attr_native_step = 0.5

    def __init__(
        self,
        coordinator: HottohCoordinator,
        key: str,
        name: str,
        command: StoveCommand,
        default_range: tuple[float, float],
    ) -> None:
        """Initialize the target temperature number."""
        self.coordinator = coordinator
        self._key = key
        self._command = command
        self._default_min, self._default_max = default_range
        self._attr_name = name
        self._attr_unique_id = f"{coordinator.entry_id}_{key}_target"

    def _value(self, field: str) -> float | None:
        data = self.coordinator.stove_data
        return getattr(data, f"{self._key}_{field}") if data else None

    @property
    def available(self) -> bool:
        """Return True only when the stove has this sensor."""
        return super().available and getattr(
            self.coordinator.capabilities, f"{self._key}_temperature"
        )

    @property
    def native_value(self) -> float | None:
        return self._value("target")

    @property
    def native_min_value(self) -> float:
        value = self._value("target_min")
        return self._default_min if value is None else value

    @property
    def native_max_value(self) -> float:
        value = self._value("target_max")
        return self._default_max if value is None else value

    async def async_set_native_value(self, value: float) -> None:
        """Queue a new target, in tenths of a degree."""
        _LOGGER.debug("Set %s target temperature=%s", self._key, value)
        self.coordinator.enqueue_command([str(int(self._command)), str(round(value * 10))])
