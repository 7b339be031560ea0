"""Register and bitfield decoding for HottoH status snapshots.

Each snapshot is a positional list of strings. The records below give every
known position a name and a type. Temperatures travel in tenths of a degree.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .const import MANUFACTURERS, STATE_ACTIONS, STATE_NAMES

# info snapshot (INF)
INDEX_FIRMWARE = 1
INDEX_WIFI_SIGNAL = 2

# data snapshot (DAT 0)
INDEX_PAGE = 0
INDEX_MANUFACTURER = 1
INDEX_BITMAP_VISIBLE = 2
INDEX_VALID = 3
INDEX_STOVE_TYPE = 4
INDEX_STOVE_STATE = 5
INDEX_STOVE_ON = 6
INDEX_ECO_MODE = 7
INDEX_CHRONO_MODE = 8
INDEX_ROOM_1 = 9
INDEX_ROOM_1_SET = 10
INDEX_ROOM_1_SET_MAX = 11
INDEX_ROOM_1_SET_MIN = 12
INDEX_ROOM_2 = 13
INDEX_ROOM_2_SET = 14
INDEX_ROOM_2_SET_MAX = 15
INDEX_ROOM_2_SET_MIN = 16
INDEX_WATER = 17
INDEX_WATER_SET = 18
INDEX_WATER_SET_MIN = 19
INDEX_WATER_SET_MAX = 20
INDEX_SMOKE = 21
INDEX_POWER_LEVEL = 22
INDEX_POWER_SET = 23
INDEX_POWER_MIN = 24
INDEX_POWER_MAX = 25
INDEX_FAN_SMOKE = 26
INDEX_FAN_1 = 27
INDEX_FAN_1_SET = 28
INDEX_FAN_1_SET_MAX = 29
INDEX_FAN_2 = 30
INDEX_FAN_2_SET = 31
INDEX_FAN_2_SET_MAX = 32
INDEX_FAN_3 = 33
INDEX_FAN_3_SET = 34
INDEX_FAN_3_SET_MAX = 35

# data2 snapshot (DAT 2)
INDEX_FLOW_SWITCH = 1
INDEX_GENERIC_PUMP = 2
INDEX_AIR_EX_1 = 3
INDEX_AIR_EX_2 = 4
INDEX_AIR_EX_3 = 5
INDEX_BUFFER = 6
INDEX_BUFFER_SET = 7
INDEX_BUFFER_SET_MIN = 8
INDEX_BUFFER_SET_MAX = 9
INDEX_BOILER = 10
INDEX_BOILER_SET = 11
INDEX_BOILER_SET_MIN = 12
INDEX_BOILER_SET_MAX = 13
INDEX_DHW = 14
INDEX_DHW_SET = 15
INDEX_DHW_SET_MIN = 16
INDEX_DHW_SET_MAX = 17
INDEX_ROOM_3 = 18
INDEX_ROOM_3_SET = 19
INDEX_ROOM_3_SET_MAX = 20
INDEX_ROOM_3_SET_MIN = 21

Snapshot = Sequence[str]


def _text(snapshot: Snapshot, index: int) -> str | None:
    """Return the raw field, or None past the end of a short snapshot."""
    if index >= len(snapshot):
        return None
    return snapshot[index]


def _integer(snapshot: Snapshot, index: int) -> int | None:
    value = _text(snapshot, index)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _tenths(snapshot: Snapshot, index: int) -> float | None:
    """Decode a tenths-of-a-degree field: "215" -> 21.5."""
    value = _integer(snapshot, index)
    if value is None:
        return None
    return round(value / 10, 1)


def _flag(snapshot: Snapshot, index: int) -> bool | None:
    value = _text(snapshot, index)
    if value is None:
        return None
    return value == "1"


def state_name(raw: str) -> str:
    """Map a stove state register to its name.

    Unknown or non-numeric codes are returned unchanged.
    """
    try:
        return STATE_NAMES.get(int(raw), raw)
    except ValueError:
        return raw


def state_action(name: str) -> str:
    """Collapse a state name into the coarse action shown to users."""
    return STATE_ACTIONS.get(name, name)


def manufacturer_name(raw: str) -> str:
    """Map the manufacturer register to a brand, or return it unchanged."""
    try:
        return MANUFACTURERS.get(int(raw), raw)
    except ValueError:
        return raw


@dataclass(frozen=True)
class StoveInfo:
    """Decoded INF snapshot."""

    firmware: str | None
    wifi_signal: str | None

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot | None) -> StoveInfo | None:
        if snapshot is None:
            return None
        return cls(
            firmware=_text(snapshot, INDEX_FIRMWARE),
            wifi_signal=_text(snapshot, INDEX_WIFI_SIGNAL),
        )


@dataclass(frozen=True)
class StoveData:
    """Decoded DAT 0 snapshot: state, room 1/2 and water temperatures, fans.

    Any field the stove did not send, or sent in a form that does not parse,
    is None.
    """

    page: str | None
    manufacturer: str | None
    bitmap_visible: str | None
    valid: str | None
    stove_type: int | None
    state: str | None
    is_on: bool | None
    eco_mode: bool | None
    chrono_mode: bool | None
    room_1_temperature: float | None
    room_1_target: float | None
    room_1_target_max: float | None
    room_1_target_min: float | None
    room_2_temperature: float | None
    room_2_target: float | None
    room_2_target_max: float | None
    room_2_target_min: float | None
    water_temperature: float | None
    water_target: float | None
    water_target_min: float | None
    water_target_max: float | None
    smoke_temperature: float | None
    power_level: int | None
    power_target: int | None
    power_min: int | None
    power_max: int | None
    smoke_fan_speed: int | None
    fan_1_speed: int | None
    fan_1_target: int | None
    fan_1_max: int | None
    fan_2_speed: int | None
    fan_2_target: int | None
    fan_2_max: int | None
    fan_3_speed: int | None
    fan_3_target: int | None
    fan_3_max: int | None

    @property
    def action(self) -> str | None:
        """Return the coarse action for the current state."""
        if self.state is None:
            return None
        return state_action(self.state)

    @property
    def capabilities(self) -> StoveCapabilities:
        """Return the hardware features encoded in the stove type."""
        return StoveCapabilities.from_stove_type(self.stove_type or 0)

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot | None) -> StoveData | None:
        if snapshot is None:
            return None
        state = _text(snapshot, INDEX_STOVE_STATE)
        manufacturer = _text(snapshot, INDEX_MANUFACTURER)
        return cls(
            page=_text(snapshot, INDEX_PAGE),
            manufacturer=manufacturer_name(manufacturer) if manufacturer is not None else None,
            bitmap_visible=_text(snapshot, INDEX_BITMAP_VISIBLE),
            valid=_text(snapshot, INDEX_VALID),
            stove_type=_integer(snapshot, INDEX_STOVE_TYPE),
            state=state_name(state) if state is not None else None,
            is_on=_flag(snapshot, INDEX_STOVE_ON),
            eco_mode=_flag(snapshot, INDEX_ECO_MODE),
            chrono_mode=_flag(snapshot, INDEX_CHRONO_MODE),
            room_1_temperature=_tenths(snapshot, INDEX_ROOM_1),
            room_1_target=_tenths(snapshot, INDEX_ROOM_1_SET),
            room_1_target_max=_tenths(snapshot, INDEX_ROOM_1_SET_MAX),
            room_1_target_min=_tenths(snapshot, INDEX_ROOM_1_SET_MIN),
            room_2_temperature=_tenths(snapshot, INDEX_ROOM_2),
            room_2_target=_tenths(snapshot, INDEX_ROOM_2_SET),
            room_2_target_max=_tenths(snapshot, INDEX_ROOM_2_SET_MAX),
            room_2_target_min=_tenths(snapshot, INDEX_ROOM_2_SET_MIN),
            water_temperature=_tenths(snapshot, INDEX_WATER),
            water_target=_tenths(snapshot, INDEX_WATER_SET),
            water_target_min=_tenths(snapshot, INDEX_WATER_SET_MIN),
            water_target_max=_tenths(snapshot, INDEX_WATER_SET_MAX),
            smoke_temperature=_tenths(snapshot, INDEX_SMOKE),
            power_level=_integer(snapshot, INDEX_POWER_LEVEL),
            power_target=_integer(snapshot, INDEX_POWER_SET),
            power_min=_integer(snapshot, INDEX_POWER_MIN),
            power_max=_integer(snapshot, INDEX_POWER_MAX),
            smoke_fan_speed=_integer(snapshot, INDEX_FAN_SMOKE),
            fan_1_speed=_integer(snapshot, INDEX_FAN_1),
            fan_1_target=_integer(snapshot, INDEX_FAN_1_SET),
            fan_1_max=_integer(snapshot, INDEX_FAN_1_SET_MAX),
            fan_2_speed=_integer(snapshot, INDEX_FAN_2),
            fan_2_target=_integer(snapshot, INDEX_FAN_2_SET),
            fan_2_max=_integer(snapshot, INDEX_FAN_2_SET_MAX),
            fan_3_speed=_integer(snapshot, INDEX_FAN_3),
            fan_3_target=_integer(snapshot, INDEX_FAN_3_SET),
            fan_3_max=_integer(snapshot, INDEX_FAN_3_SET_MAX),
        )


@dataclass(frozen=True)
class StoveData2:
    """Decoded DAT 2 snapshot: hydraulics, air exchange, room 3."""

    flow_switch: int | None
    generic_pump: int | None
    air_exchange_1: int | None
    air_exchange_2: int | None
    air_exchange_3: int | None
    buffer_temperature: float | None
    buffer_target: float | None
    buffer_target_min: float | None
    buffer_target_max: float | None
    boiler_temperature: float | None
    boiler_target: float | None
    boiler_target_min: float | None
    boiler_target_max: float | None
    dhw_temperature: float | None
    dhw_target: float | None
    dhw_target_min: float | None
    dhw_target_max: float | None
    room_3_temperature: float | None
    room_3_target: float | None
    room_3_target_max: float | None
    room_3_target_min: float | None

    @property
    def water_pump_on(self) -> bool | None:
        if self.generic_pump is None:
            return None
        return self.generic_pump != 0

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot | None) -> StoveData2 | None:
        if snapshot is None:
            return None
        return cls(
            flow_switch=_integer(snapshot, INDEX_FLOW_SWITCH),
            generic_pump=_integer(snapshot, INDEX_GENERIC_PUMP),
            air_exchange_1=_integer(snapshot, INDEX_AIR_EX_1),
            air_exchange_2=_integer(snapshot, INDEX_AIR_EX_2),
            air_exchange_3=_integer(snapshot, INDEX_AIR_EX_3),
            buffer_temperature=_tenths(snapshot, INDEX_BUFFER),
            buffer_target=_tenths(snapshot, INDEX_BUFFER_SET),
            buffer_target_min=_tenths(snapshot, INDEX_BUFFER_SET_MIN),
            buffer_target_max=_tenths(snapshot, INDEX_BUFFER_SET_MAX),
            boiler_temperature=_tenths(snapshot, INDEX_BOILER),
            boiler_target=_tenths(snapshot, INDEX_BOILER_SET),
            boiler_target_min=_tenths(snapshot, INDEX_BOILER_SET_MIN),
            boiler_target_max=_tenths(snapshot, INDEX_BOILER_SET_MAX),
            dhw_temperature=_tenths(snapshot, INDEX_DHW),
            dhw_target=_tenths(snapshot, INDEX_DHW_SET),
            dhw_target_min=_tenths(snapshot, INDEX_DHW_SET_MIN),
            dhw_target_max=_tenths(snapshot, INDEX_DHW_SET_MAX),
            room_3_temperature=_tenths(snapshot, INDEX_ROOM_3),
            room_3_target=_tenths(snapshot, INDEX_ROOM_3_SET),
            room_3_target_max=_tenths(snapshot, INDEX_ROOM_3_SET_MAX),
            room_3_target_min=_tenths(snapshot, INDEX_ROOM_3_SET_MIN),
        )


# Stove type bit (0 = least significant) for each single-bit feature.
# Bit 12 is read both as the dhw flag and as the low bit of fan_count.
CAPABILITY_BITS: dict[str, int] = {
    "room_1_temperature": 15,
    "water_temperature": 14,
    "dhw": 12,
    "boiler_temperature": 11,
    "domestic_hot_water": 10,
    "boiler": 9,
    "room_2_temperature": 8,
    "room_3_temperature": 7,
    "buffer": 6,
    "flow_switch": 5,
    "pump": 4,
    "air_exchange_1": 3,
    "air_exchange_2": 2,
    "air_exchange_3": 1,
    "generic_pump": 0,
}
FAN_COUNT_SHIFT = 12
FAN_COUNT_MASK = 0b11


@dataclass(frozen=True)
class StoveCapabilities:
    """Optional hardware installed on this stove model."""

    room_1_temperature: bool = False
    water_temperature: bool = False
    dhw: bool = False
    boiler_temperature: bool = False
    domestic_hot_water: bool = False
    boiler: bool = False
    room_2_temperature: bool = False
    room_3_temperature: bool = False
    buffer: bool = False
    flow_switch: bool = False
    pump: bool = False
    air_exchange_1: bool = False
    air_exchange_2: bool = False
    air_exchange_3: bool = False
    generic_pump: bool = False
    fan_count: int = 0

    @classmethod
    def from_stove_type(cls, value: int) -> StoveCapabilities:
        """Expand the 16-bit stove type register."""
        value &= 0xFFFF
        flags = {name: bool(value >> bit & 1) for name, bit in CAPABILITY_BITS.items()}
        return cls(fan_count=value >> FAN_COUNT_SHIFT & FAN_COUNT_MASK, **flags)
