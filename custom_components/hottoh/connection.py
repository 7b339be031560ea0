"""TCP connection to a HottoH stove."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from .const import CONNECT_TIMEOUT, READ_CHUNK_SIZE
from .exceptions import ConnectFailure, ExchangeTimeout, SocketError
from .protocol import Frame, ResponseAccumulator

_LOGGER = logging.getLogger(__name__)


class StoveConnection:
    """One TCP session with the stove.

    Offers strictly sequential exchanges: write one frame, then wait for one
    response line. A new instance is created for every reconnect.
    """

    def __init__(
        self,
        host: str,
        port: int,
        connect_timeout: float = CONNECT_TIMEOUT,
    ) -> None:
        """Initialize the connection (does not connect)."""
        self._host = host
        self._port = port
        self._connect_timeout = connect_timeout
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._accumulator = ResponseAccumulator()

    @property
    def is_open(self) -> bool:
        """Return True while the stream is usable."""
        return self._writer is not None and not self._writer.is_closing()

    async def async_connect(self) -> None:
        """Open the TCP stream.

        Raises:
            ConnectFailure: The stove refused, was unreachable or too slow.
        """
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self._host, self._port),
                timeout=self._connect_timeout,
            )
        except (OSError, asyncio.TimeoutError) as ex:
            raise ConnectFailure(
                f"Cannot connect to {self._host}:{self._port}: {ex!r}"
            ) from ex
        self._accumulator.reset()

    async def async_exchange(self, frame: Frame, timeout: float) -> list[str]:
        """Send a frame and return the fields of its response.

        Raises:
            SocketError: Not connected, write failed or remote closed.
            ExchangeTimeout: No complete line within ``timeout`` seconds.
        """
        if not self.is_open:
            raise SocketError("Not connected")

        try:
            self._writer.write(frame.encode())
            await self._writer.drain()
        except (ConnectionError, OSError) as ex:
            raise SocketError(f"Send failed for {frame!r}: {ex!r}") from ex
        _LOGGER.debug("Sent: %r", frame)

        try:
            response = await asyncio.wait_for(self._async_read_response(), timeout)
        except asyncio.TimeoutError as ex:
            raise ExchangeTimeout(
                f"No response to {frame!r} within {timeout:.0f}s"
            ) from ex
        _LOGGER.debug("Received %d fields for %s", len(response), frame.command)
        return response

    async def _async_read_response(self) -> list[str]:
        """Read until the accumulator yields a complete line."""
        while True:
            response = self._accumulator.next_response()
            if response is not None:
                return response
            try:
                chunk = await self._reader.read(READ_CHUNK_SIZE)
            except (ConnectionError, OSError) as ex:
                raise SocketError(f"Read failed: {ex!r}") from ex
            if not chunk:
                raise SocketError("Connection closed by remote")
            self._accumulator.feed(chunk)

    async def async_close(self) -> None:
        """Close the stream, ignoring errors from an already dead socket."""
        writer, self._writer, self._reader = self._writer, None, None
        self._accumulator.reset()
        if writer is None or writer.is_closing():
            return
        writer.close()
        with contextlib.suppress(Exception):
            await writer.wait_closed()
