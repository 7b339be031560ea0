"""Constants for HottoH pellet stove integration."""

from __future__ import annotations

from enum import IntEnum

DOMAIN = "hottoh"
DEFAULT_PORT = 5001

# Poll loop timing (seconds)
POLL_INTERVAL = 1.0  # delay between successful cycles
RETRY_DELAY = 5.0  # delay after a connect or exchange failure
RESPONSE_TIMEOUT = 60.0  # wait for one response line
CONNECT_TIMEOUT = 10.0

# Wire format
SOCKET_ID = "00000"
FRAME_START = "#"
FRAME_END = "\n"
FRAME_SEPARATOR = ";"
READ_CHUNK_SIZE = 1024

COMMAND_INFO = "INF"
COMMAND_DATA = "DAT"

# Parameters of the three read exchanges, in poll order
INFO_PARAMETERS = [""]
DATA_PARAMETERS = ["0"]
DATA2_PARAMETERS = ["2"]


class StoveCommand(IntEnum):
    """Register codes accepted by a DAT write ([code, value])."""

    ON_OFF = 6
    ECO_MODE = 7
    CHRONO_MODE = 8
    ROOM_1_TEMPERATURE = 10
    ROOM_2_TEMPERATURE = 14
    WATER_TEMPERATURE = 18
    POWER_LEVEL = 23
    FAN_1_SPEED = 28
    FAN_2_SPEED = 31
    FAN_3_SPEED = 34


class StoveState(IntEnum):
    """Numeric lifecycle states reported in the stove state register."""

    OFF = 0
    STARTING_1 = 1
    STARTING_2 = 2
    STARTING_3 = 3
    STARTING_4 = 4
    STARTING_5 = 5
    STARTING_6 = 6
    STARTING_7 = 7
    POWER = 8
    STOPPING_1 = 9
    STOPPING_2 = 10
    ECO_STOP_1 = 11
    ECO_STOP_2 = 12
    ECO_STOP_3 = 13
    LOW_PELLET = 14
    END_PELLET = 15
    BLACK_OUT = 16
    IGNITION_FAILED = 17
    ANTI_FREEZE = 18
    COVER_OPEN = 19
    NO_PELLET = 20


STATE_NAMES: dict[int, str] = {
    StoveState.OFF: "switched_off",
    StoveState.STARTING_1: "starting_1_check",
    StoveState.STARTING_2: "starting_2_clean_all",
    StoveState.STARTING_3: "starting_3_loading",
    StoveState.STARTING_4: "starting_4_waiting",
    StoveState.STARTING_5: "starting_5_waiting",
    StoveState.STARTING_6: "starting_6_ignition",
    StoveState.STARTING_7: "starting_7_stabilization",
    StoveState.POWER: "power",
    StoveState.STOPPING_1: "stopping_1_wait_standby",
    StoveState.STOPPING_2: "stopping_2_wait_standby",
    StoveState.ECO_STOP_1: "eco_stop_1_standby",
    StoveState.ECO_STOP_2: "eco_stop_2",
    StoveState.ECO_STOP_3: "eco_stop_3",
    StoveState.LOW_PELLET: "low_pellet",
    StoveState.END_PELLET: "end_pellet",
    StoveState.BLACK_OUT: "black_out",
    StoveState.IGNITION_FAILED: "error_ignition_failed",
    StoveState.ANTI_FREEZE: "anti_freeze",
    StoveState.COVER_OPEN: "error_cover_open",
    StoveState.NO_PELLET: "error_no_pellet",
}

# Coarse action shown in the UI, keyed by state name
STATE_ACTIONS: dict[str, str] = {
    "switched_off": "off",
    "black_out": "off",
    "eco_stop_2": "off",
    "eco_stop_3": "off",
    "starting_1_check": "check",
    "starting_2_clean_all": "clean_all",
    "starting_3_loading": "loading",
    "starting_4_waiting": "waiting",
    "starting_5_waiting": "waiting",
    "starting_6_ignition": "ignition",
    "starting_7_stabilization": "stabilization",
    "power": "heating",
    "stopping_1_wait_standby": "stopping",
    "stopping_2_wait_standby": "stopping",
    "eco_stop_1_standby": "idle",
    "standby": "idle",
}

MANUFACTURERS: dict[int, str] = {
    1: "CMG",
    2: "EdilKamin",
}
