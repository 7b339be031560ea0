"""Tests for HottoH entities."""

from __future__ import annotations

import pytest
from homeassistant.components.climate import HVACAction, HVACMode

from custom_components.hottoh.binary_sensor import HottohWaterPump
from custom_components.hottoh.climate import HottohClimate
from custom_components.hottoh.const import StoveCommand
from custom_components.hottoh.coordinator import ConnectionState, HottohCoordinator
from custom_components.hottoh.fan import HottohFan
from custom_components.hottoh.number import HottohPowerLevel, HottohTargetTemperature
from custom_components.hottoh.sensor import SENSORS, HottohSensor
from custom_components.hottoh.switch import HottohModeSwitch

from .conftest import DATA2_FIELDS, DATA_FIELDS, INFO_FIELDS, STOVE_TYPE


@pytest.fixture
def polled(coordinator: HottohCoordinator) -> HottohCoordinator:
    """Return a coordinator that has completed one poll cycle."""
    coordinator._state = ConnectionState.CONNECTED
    coordinator._info = tuple(INFO_FIELDS)
    coordinator._data = tuple(DATA_FIELDS)
    coordinator._data2 = tuple(DATA2_FIELDS)
    return coordinator


def _queued(coordinator: HottohCoordinator) -> list[list[str]]:
    return list(coordinator._command_queue)


def _sensor(coordinator: HottohCoordinator, key: str) -> HottohSensor:
    description = next(d for d in SENSORS if d.key == key)
    return HottohSensor(coordinator, description)


def _water_target(coordinator: HottohCoordinator) -> HottohTargetTemperature:
    return HottohTargetTemperature(
        coordinator,
        "water",
        "Water Target Temperature",
        StoveCommand.WATER_TEMPERATURE,
        (30.0, 80.0),
    )


class TestAvailability:
    """Tests for entity availability."""

    def test_unavailable_before_first_poll(self, coordinator: HottohCoordinator) -> None:
        assert HottohClimate(coordinator).available is False

    def test_unavailable_while_disconnected(self, polled: HottohCoordinator) -> None:
        """Test the last snapshot is kept but marked unavailable."""
        polled._state = ConnectionState.DISCONNECTED
        climate = HottohClimate(polled)
        assert climate.available is False
        assert climate.current_temperature == 21.5

    def test_available_when_polled(self, polled: HottohCoordinator) -> None:
        assert HottohClimate(polled).available is True


class TestClimate:
    """Tests for the climate entity."""

    def test_state(self, polled: HottohCoordinator) -> None:
        climate = HottohClimate(polled)
        assert climate.hvac_mode == HVACMode.HEAT
        assert climate.hvac_action == HVACAction.HEATING
        assert climate.current_temperature == 21.5
        assert climate.target_temperature == 22.0
        assert climate.min_temp == 7.0
        assert climate.max_temp == 30.0

    def test_no_data(self, coordinator: HottohCoordinator) -> None:
        climate = HottohClimate(coordinator)
        assert climate.hvac_mode is None
        assert climate.hvac_action is None
        assert climate.target_temperature is None

    def test_alarm_state_is_idle(self, polled: HottohCoordinator) -> None:
        fields = list(DATA_FIELDS)
        fields[5] = "17"
        polled._data = tuple(fields)
        assert HottohClimate(polled).hvac_action == HVACAction.IDLE

    async def test_set_temperature(self, polled: HottohCoordinator) -> None:
        """Test the target is queued in tenths of a degree."""
        await HottohClimate(polled).async_set_temperature(temperature=21.5)
        assert _queued(polled) == [["10", "215"]]

    async def test_set_temperature_without_value(self, polled: HottohCoordinator) -> None:
        await HottohClimate(polled).async_set_temperature()
        assert _queued(polled) == []

    async def test_hvac_mode_switches_stove(self, polled: HottohCoordinator) -> None:
        climate = HottohClimate(polled)
        await climate.async_set_hvac_mode(HVACMode.OFF)
        await climate.async_turn_on()
        assert _queued(polled) == [["6", "0"], ["6", "1"]]


class TestSwitch:
    """Tests for the eco and chrono switches."""

    def test_state(self, polled: HottohCoordinator) -> None:
        eco = HottohModeSwitch(polled, "eco_mode", "Eco Mode", StoveCommand.ECO_MODE)
        chrono = HottohModeSwitch(
            polled, "chrono_mode", "Chrono Mode", StoveCommand.CHRONO_MODE
        )
        assert eco.is_on is False
        assert chrono.is_on is True

    async def test_turn_on_off(self, polled: HottohCoordinator) -> None:
        eco = HottohModeSwitch(polled, "eco_mode", "Eco Mode", StoveCommand.ECO_MODE)
        await eco.async_turn_on()
        await eco.async_turn_off()
        assert _queued(polled) == [["7", "1"], ["7", "0"]]
        assert eco.unique_id == "test_entry_id_eco_mode"


class TestFan:
    """Tests for the air fans."""

    def test_percentage(self, polled: HottohCoordinator) -> None:
        """Test speed 3 of 5 maps to 60 percent."""
        fan = HottohFan(polled, 1)
        assert fan.speed_count == 5
        assert fan.percentage == 60
        assert fan.is_on is True

    async def test_set_percentage_rounds_up(self, polled: HottohCoordinator) -> None:
        await HottohFan(polled, 1).async_set_percentage(50)
        assert _queued(polled) == [["28", "3"]]

    async def test_turn_on_off(self, polled: HottohCoordinator) -> None:
        fan = HottohFan(polled, 1)
        await fan.async_turn_on()
        await fan.async_turn_off()
        assert _queued(polled) == [["28", "5"], ["28", "0"]]

    def test_only_installed_fans_available(self, polled: HottohCoordinator) -> None:
        """Test the stove type reports a single fan."""
        assert HottohFan(polled, 1).available is True
        assert HottohFan(polled, 2).available is False
        assert HottohFan(polled, 3).available is False

    async def test_third_fan_command(self, polled: HottohCoordinator) -> None:
        await HottohFan(polled, 3).async_set_percentage(100)
        # Fan 3 reports max 0, so the default speed count applies
        assert _queued(polled) == [["34", "5"]]


class TestNumber:
    """Tests for the number entities."""

    def test_power_level_limits(self, polled: HottohCoordinator) -> None:
        power = HottohPowerLevel(polled)
        assert power.native_value == 4
        assert power.native_min_value == 1
        assert power.native_max_value == 5

    async def test_set_power_level(self, polled: HottohCoordinator) -> None:
        await HottohPowerLevel(polled).async_set_native_value(4.0)
        assert _queued(polled) == [["23", "4"]]

    def test_water_target(self, polled: HottohCoordinator) -> None:
        water = _water_target(polled)
        assert water.available is True
        assert water.unique_id == "test_entry_id_water_target"
        assert water.native_value == 70.0
        assert water.native_min_value == 30.0
        assert water.native_max_value == 80.0

    async def test_set_water_target(self, polled: HottohCoordinator) -> None:
        await _water_target(polled).async_set_native_value(65.5)
        assert _queued(polled) == [["18", "655"]]

    def test_water_target_without_sensor(self, polled: HottohCoordinator) -> None:
        fields = list(DATA_FIELDS)
        fields[4] = str(1 << 15)
        polled._data = tuple(fields)
        assert _water_target(polled).available is False

    async def test_room_2_target(self, polled: HottohCoordinator) -> None:
        """Test the second room is gated by its own capability bit."""
        room_2 = HottohTargetTemperature(
            polled,
            "room_2",
            "Room 2 Target Temperature",
            StoveCommand.ROOM_2_TEMPERATURE,
            (7.0, 30.0),
        )
        assert room_2.available is False
        await room_2.async_set_native_value(19.0)
        assert _queued(polled) == [["14", "190"]]

    def test_default_range_without_data(self, coordinator: HottohCoordinator) -> None:
        water = _water_target(coordinator)
        assert water.native_value is None
        assert water.native_min_value == 30.0
        assert water.native_max_value == 80.0


class TestSensor:
    """Tests for the sensor entities."""

    def test_values(self, polled: HottohCoordinator) -> None:
        assert _sensor(polled, "state").native_value == "power"
        assert _sensor(polled, "action").native_value == "heating"
        assert _sensor(polled, "smoke_temperature").native_value == 120.3
        assert _sensor(polled, "room_3_temperature").native_value == 19.0
        assert _sensor(polled, "firmware").native_value == "2.1.3"

    def test_missing_snapshot(self, coordinator: HottohCoordinator) -> None:
        assert _sensor(coordinator, "state").native_value is None
        assert _sensor(coordinator, "firmware").native_value is None

    def test_uninstalled_sensor_unavailable(self, polled: HottohCoordinator) -> None:
        """Test sensors gated by the stove type bitfield."""
        assert _sensor(polled, "water_temperature").available is True
        assert _sensor(polled, "room_2_temperature").available is False
        assert _sensor(polled, "buffer_temperature").available is False
        assert _sensor(polled, "smoke_temperature").available is True

    def test_boiler_temperature_gated_by_its_sensor_bit(
        self, polled: HottohCoordinator
    ) -> None:
        """Test the boiler reading follows bit 11, not the boiler bit."""
        fields = list(DATA_FIELDS)
        fields[4] = str(1 << 9)
        polled._data = tuple(fields)
        assert _sensor(polled, "boiler_temperature").available is False

        fields[4] = str(1 << 11)
        polled._data = tuple(fields)
        assert _sensor(polled, "boiler_temperature").available is True

    def test_room_1_gated_by_its_sensor_bit(self, polled: HottohCoordinator) -> None:
        fields = list(DATA_FIELDS)
        fields[4] = str(1 << 14)
        polled._data = tuple(fields)
        assert _sensor(polled, "room_1_temperature").available is False
        assert HottohClimate(polled).current_temperature is None
        assert HottohClimate(polled).available is True


class TestBinarySensor:
    """Tests for the water pump binary sensor."""

    def test_pump_running(self, polled: HottohCoordinator) -> None:
        fields = list(DATA_FIELDS)
        fields[4] = str(STOVE_TYPE | 1)
        polled._data = tuple(fields)
        pump = HottohWaterPump(polled)
        assert pump.available is True
        assert pump.is_on is True

    def test_pump_stopped(self, polled: HottohCoordinator) -> None:
        fields = list(DATA2_FIELDS)
        fields[2] = "0"
        polled._data2 = tuple(fields)
        assert HottohWaterPump(polled).is_on is False

    def test_no_pump_installed(self, polled: HottohCoordinator) -> None:
        assert HottohWaterPump(polled).available is False

    def test_no_data(self, coordinator: HottohCoordinator) -> None:
        assert HottohWaterPump(coordinator).is_on is None
