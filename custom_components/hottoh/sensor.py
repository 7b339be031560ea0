"""Sensor platform for HottoH pellet stove integration."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory, UnitOfTemperature
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import HottohCoordinator, HottohEntityMixin
from .registers import StoveCapabilities

_LOGGER = logging.getLogger(__name__)

StateValue = str | int | float | None


@dataclass(frozen=True, kw_only=True)
class HottohSensorEntityDescription(SensorEntityDescription):
    """Sensor reading one decoded field of the coordinator.

    ``value_fn`` receives the coordinator and returns None when the
    snapshot holding the field has not been fetched yet. ``installed_fn``
    tells from the stove type whether the sensor exists on this model.
    """

    value_fn: Callable[[HottohCoordinator], StateValue]
    installed_fn: Callable[[StoveCapabilities], bool] = lambda _: True


def _data(field: str) -> Callable[[HottohCoordinator], StateValue]:
    def value(coordinator: HottohCoordinator) -> StateValue:
        data = coordinator.stove_data
        return getattr(data, field) if data else None

    return value


def _data2(field: str) -> Callable[[HottohCoordinator], StateValue]:
    def value(coordinator: HottohCoordinator) -> StateValue:
        data2 = coordinator.stove_data2
        return getattr(data2, field) if data2 else None

    return value


def _temperature(
    key: str,
    name: str,
    value_fn: Callable[[HottohCoordinator], StateValue],
    installed_fn: Callable[[StoveCapabilities], bool] = lambda _: True,
) -> HottohSensorEntityDescription:
    return HottohSensorEntityDescription(
        key=key,
        name=name,
        device_class=SensorDeviceClass.TEMPERATURE,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        value_fn=value_fn,
        installed_fn=installed_fn,
    )


SENSORS: tuple[HottohSensorEntityDescription, ...] = (
    HottohSensorEntityDescription(
        key="state",
        name="State",
        value_fn=_data("state"),
    ),
    HottohSensorEntityDescription(
        key="action",
        name="Action",
        value_fn=_data("action"),
    ),
    _temperature(
        "room_1_temperature",
        "Room 1 Temperature",
        _data("room_1_temperature"),
        lambda caps: caps.room_1_temperature,
    ),
    _temperature(
        "room_2_temperature",
        "Room 2 Temperature",
        _data("room_2_temperature"),
        lambda caps: caps.room_2_temperature,
    ),
    _temperature(
        "room_3_temperature",
        "Room 3 Temperature",
        _data2("room_3_temperature"),
        lambda caps: caps.room_3_temperature,
    ),
    _temperature(
        "water_temperature",
        "Water Temperature",
        _data("water_temperature"),
        lambda caps: caps.water_temperature,
    ),
    _temperature("smoke_temperature", "Smoke Temperature", _data("smoke_temperature")),
    _temperature(
        "buffer_temperature",
        "Buffer Temperature",
        _data2("buffer_temperature"),
        lambda caps: caps.buffer,
    ),
    _temperature(
        "boiler_temperature",
        "Boiler Temperature",
        _data2("boiler_temperature"),
        lambda caps: caps.boiler_temperature,
    ),
    _temperature(
        "dhw_temperature",
        "Domestic Hot Water Temperature",
        _data2("dhw_temperature"),
        lambda caps: caps.domestic_hot_water,
    ),
    HottohSensorEntityDescription(
        key="power_level",
        name="Power Level",
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=_data("power_level"),
    ),
    HottohSensorEntityDescription(
        key="smoke_fan_speed",
        name="Smoke Fan Speed",
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=_data("smoke_fan_speed"),
    ),
    HottohSensorEntityDescription(
        key="firmware",
        name="Firmware",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda coordinator: (
            coordinator.stove_info.firmware if coordinator.stove_info else None
        ),
    ),
    HottohSensorEntityDescription(
        key="wifi_signal",
        name="WiFi Signal",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda coordinator: (
            coordinator.stove_info.wifi_signal if coordinator.stove_info else None
        ),
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up HottoH sensor entities."""
    coordinator: HottohCoordinator = hass.data[DOMAIN][entry.entry_id]
    _LOGGER.debug("Setting up sensor entities for %s", entry.entry_id)
    async_add_entities(HottohSensor(coordinator, description) for description in SENSORS)


class HottohSensor(HottohEntityMixin, SensorEntity):
    """Sensor entity for one decoded stove field."""

    entity_description: HottohSensorEntityDescription

    def __init__(
        self,
        coordinator: HottohCoordinator,
        description: HottohSensorEntityDescription,
    ) -> None:
        """Initialize the sensor."""
        self.coordinator = coordinator
        self.entity_description = description
        self._attr_unique_id = f"{coordinator.entry_id}_{description.key}"

    @property
    def available(self) -> bool:
        """Return True if the stove is reachable and has this sensor."""
        return super().available and self.entity_description.installed_fn(
            self.coordinator.capabilities
        )

    @property
    def native_value(self) -> StateValue:
        """Return the decoded value."""
        return self.entity_description.value_fn(self.coordinator)
