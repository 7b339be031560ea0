"""Coordinator for HottoH pellet stove integration."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import deque
from collections.abc import Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceInfo

from .connection import StoveConnection
from .const import (
    COMMAND_DATA,
    COMMAND_INFO,
    DATA2_PARAMETERS,
    DATA_PARAMETERS,
    DOMAIN,
    INFO_PARAMETERS,
    POLL_INTERVAL,
    RESPONSE_TIMEOUT,
    RETRY_DELAY,
)
from .exceptions import HottohError, SocketError
from .protocol import CommandMode, Frame
from .registers import StoveCapabilities, StoveData, StoveData2, StoveInfo

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

_LOGGER = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle of the coordinator."""

    STOPPED = "stopped"
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class HottohEntityMixin:
    """Mixin providing common functionality for HottoH entities."""

    _attr_has_entity_name = True
    _attr_should_poll = False
    coordinator: "HottohCoordinator"  # Set by subclass __init__

    async def async_added_to_hass(self) -> None:
        """Register callback when entity is added."""
        self.coordinator.register_callback(self.async_write_ha_state)

    async def async_will_remove_from_hass(self) -> None:
        """Unregister callback when entity is removed."""
        self.coordinator.unregister_callback(self.async_write_ha_state)

    @property
    def device_info(self) -> DeviceInfo:
        """Return device info to link entity to device."""
        return self.coordinator.device_info

    @property
    def available(self) -> bool:
        """Return True if connected and the main status block is known."""
        return self.coordinator.is_connected and self.coordinator.stove_data is not None


class HottohCoordinator:
    """Coordinator owning the TCP connection to one HottoH stove.

    The stove only answers requests, so this is a plain polling loop rather
    than a push model. Each cycle runs as its own asyncio task:

        1. Connect if needed.
        2. Read INF, DAT 0 and DAT 2 in that order, storing each response
           as a snapshot as soon as its exchange completes.
        3. Send every queued write (DAT, mode W), oldest first, removing
           each entry only once the stove has answered it.
        4. Schedule the next cycle in POLL_INTERVAL seconds.

    Any connection failure closes the socket and schedules the next cycle in
    RETRY_DELAY seconds instead. Retries continue until async_stop().

    Exactly one request is outstanding at any time. Snapshots are replaced
    wholesale and never cleared, so entities keep the last good values
    while the stove is unreachable (but report unavailable).
    """

    def __init__(
        self,
        hass: HomeAssistant,
        host: str,
        port: int,
        entry_id: str,
        response_timeout: float = RESPONSE_TIMEOUT,
    ) -> None:
        """Initialize the coordinator."""
        self._hass = hass
        self._host = host
        self._port = port
        self._entry_id = entry_id
        self._response_timeout = response_timeout

        self._connection: StoveConnection | None = None
        self._state = ConnectionState.STOPPED
        self._running: bool = False
        self._stopped: bool = False
        self._callbacks: set[Callable[[], None]] = set()
        self._command_queue: deque[list[str]] = deque()
        self._cycle_task: asyncio.Task[None] | None = None
        self._scheduled_cycle: asyncio.TimerHandle | None = None
        self._reconnect_attempts: int = 0
        self._last_error: str | None = None

        self._info: tuple[str, ...] | None = None
        self._data: tuple[str, ...] | None = None
        self._data2: tuple[str, ...] | None = None

        _LOGGER.debug("Coordinator initialized for %s:%s", host, port)

    @property
    def device_info(self) -> DeviceInfo:
        """Return device info for entity registry."""
        data = self.stove_data
        info = self.stove_info
        manufacturer = data.manufacturer if data and data.manufacturer else "HottoH"
        return DeviceInfo(
            identifiers={(DOMAIN, self._entry_id)},
            name=f"Stove {manufacturer}",
            manufacturer=manufacturer,
            model="HottoH pellet stove",
            sw_version=info.firmware if info else None,
        )

    @property
    def host(self) -> str:
        """Return the stove address."""
        return self._host

    @property
    def connection_state(self) -> ConnectionState:
        """Return the current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Return True while the socket is connected."""
        return self._state is ConnectionState.CONNECTED

    @property
    def reconnect_attempts(self) -> int:
        """Return number of failed cycles since the last successful one."""
        return self._reconnect_attempts

    @property
    def last_error(self) -> str | None:
        """Return last error message."""
        return self._last_error

    @property
    def command_queue_size(self) -> int:
        """Return current command queue size."""
        return len(self._command_queue)

    @property
    def entry_id(self) -> str:
        """Return the config entry ID."""
        return self._entry_id

    @property
    def info(self) -> tuple[str, ...] | None:
        """Return the last INF snapshot, or None if never fetched."""
        return self._info

    @property
    def data(self) -> tuple[str, ...] | None:
        """Return the last DAT 0 snapshot, or None if never fetched."""
        return self._data

    @property
    def data2(self) -> tuple[str, ...] | None:
        """Return the last DAT 2 snapshot, or None if never fetched."""
        return self._data2

    @property
    def stove_info(self) -> StoveInfo | None:
        """Return the decoded INF snapshot."""
        return StoveInfo.from_snapshot(self._info)

    @property
    def stove_data(self) -> StoveData | None:
        """Return the decoded DAT 0 snapshot."""
        return StoveData.from_snapshot(self._data)

    @property
    def stove_data2(self) -> StoveData2 | None:
        """Return the decoded DAT 2 snapshot."""
        return StoveData2.from_snapshot(self._data2)

    @property
    def capabilities(self) -> StoveCapabilities:
        """Return installed features (all False until DAT 0 is known)."""
        data = self.stove_data
        if data is None:
            return StoveCapabilities()
        return data.capabilities

    def register_callback(self, callback: Callable[[], None]) -> None:
        """Register callback to be called on state updates."""
        self._callbacks.add(callback)

    def unregister_callback(self, callback: Callable[[], None]) -> None:
        """Unregister a callback."""
        self._callbacks.discard(callback)

    def _notify_state_update(self) -> None:
        """Notify all registered callbacks of state change."""
        # Iterate over a copy in case a callback modifies the set
        for callback in list(self._callbacks):
            try:
                callback()
            except Exception:
                _LOGGER.exception("Exception in state update callback")

    def enqueue_command(self, parameters: Sequence[str]) -> None:
        """Queue a DAT write for the next poll cycle.

        Never blocks and never drops: the entry stays queued until the stove
        has acknowledged it.

        Args:
            parameters: Register code and value, e.g. ``["7", "1"]``.
        """
        self._command_queue.append(list(parameters))
        _LOGGER.debug(
            "Queued write %s (%d pending)", parameters, len(self._command_queue)
        )

    async def async_start(self) -> None:
        """Start polling (called from async_setup_entry).

        Does nothing once the coordinator has been stopped; a reloaded entry
        builds a new coordinator.
        """
        if self._running or self._stopped:
            return
        _LOGGER.debug("Starting coordinator for %s:%s", self._host, self._port)
        self._running = True
        self._state = ConnectionState.DISCONNECTED
        self._start_cycle()

    async def async_stop(self) -> None:
        """Stop polling and close the socket (called from async_unload_entry)."""
        self._running = False
        self._stopped = True

        if self._scheduled_cycle:
            self._scheduled_cycle.cancel()
            self._scheduled_cycle = None

        task, self._cycle_task = self._cycle_task, None
        if task and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        await self._async_close_connection()
        self._state = ConnectionState.STOPPED
        _LOGGER.debug("Coordinator stopped cleanly")

    def _start_cycle(self) -> None:
        """Run one poll cycle in the background (timer callback)."""
        self._scheduled_cycle = None
        if not self._running:
            return
        self._cycle_task = asyncio.create_task(self._async_poll_cycle())

    async def _async_poll_cycle(self) -> None:
        """Run one cycle and schedule the next one."""
        try:
            delay = await self._async_run_cycle()
        except asyncio.CancelledError:
            raise
        except Exception as ex:
            _LOGGER.exception("Unexpected error in poll cycle: %s", ex)
            await self._async_handle_failure(ex)
            delay = RETRY_DELAY

        self._notify_state_update()
        if self._running:
            self._scheduled_cycle = self._hass.loop.call_later(delay, self._start_cycle)

    async def _async_run_cycle(self) -> float:
        """Connect, poll and flush writes.

        Returns:
            Seconds to wait before the next cycle.
        """
        try:
            if self._connection is None:
                await self._async_connect()
            await self._async_fetch_snapshots()
            await self._async_drain_queue()
        except HottohError as ex:
            await self._async_handle_failure(ex)
            return RETRY_DELAY

        self._reconnect_attempts = 0
        return POLL_INTERVAL

    async def _async_connect(self) -> None:
        """Replace the connection slot with a freshly opened connection."""
        self._state = ConnectionState.CONNECTING
        connection = StoveConnection(self._host, self._port)
        await connection.async_connect()
        self._connection = connection
        self._state = ConnectionState.CONNECTED
        self._last_error = None
        _LOGGER.info("Connected to HottoH stove at %s:%s", self._host, self._port)

    async def _async_exchange(self, frame: Frame) -> tuple[str, ...]:
        """Send one request and wait for its response."""
        if not self._running or self._connection is None:
            raise SocketError("Session is not connected")
        response = await self._connection.async_exchange(frame, self._response_timeout)
        return tuple(response)

    async def _async_fetch_snapshots(self) -> None:
        """Read the three status blocks, each stored once complete."""
        self._info = await self._async_exchange(
            Frame(COMMAND_INFO, CommandMode.READ, tuple(INFO_PARAMETERS))
        )
        self._data = await self._async_exchange(
            Frame(COMMAND_DATA, CommandMode.READ, tuple(DATA_PARAMETERS))
        )
        self._data2 = await self._async_exchange(
            Frame(COMMAND_DATA, CommandMode.READ, tuple(DATA2_PARAMETERS))
        )

    async def _async_drain_queue(self) -> None:
        """Send queued writes in order; an entry leaves only after its answer."""
        while self._command_queue:
            parameters = self._command_queue[0]
            await self._async_exchange(
                Frame(COMMAND_DATA, CommandMode.WRITE, tuple(parameters))
            )
            self._command_queue.popleft()
            _LOGGER.debug("Write %s acknowledged", parameters)

    async def _async_handle_failure(self, ex: Exception) -> None:
        """Drop the connection and record the failure."""
        await self._async_close_connection()
        if self._running:
            self._state = ConnectionState.DISCONNECTED
        self._last_error = str(ex)
        self._reconnect_attempts += 1
        _LOGGER.warning(
            "Connection to %s:%s failed (attempt %d): %s. Retry in %ds",
            self._host,
            self._port,
            self._reconnect_attempts,
            ex,
            RETRY_DELAY,
        )

    async def _async_close_connection(self) -> None:
        connection, self._connection = self._connection, None
        if connection is not None:
            await connection.async_close()
