"""Pytest fixtures for HottoH tests."""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from custom_components.hottoh.coordinator import HottohCoordinator
from custom_components.hottoh.protocol import CommandMode, Frame, parse_frame

INFO_FIELDS = ["INF", "2.1.3", "75"]

# Room 1 sensor, water sensor and one fan (bits 15, 14, 12)
STOVE_TYPE = 0b1101_0000_0000_0000

DATA_FIELDS = [
    "0",  # page
    "1",  # manufacturer (CMG)
    "1",  # bitmap visible
    "1",  # valid
    str(STOVE_TYPE),
    "8",  # state: power
    "1",  # on
    "0",  # eco
    "1",  # chrono
    "215", "220", "300", "70",  # room 1
    "0", "0", "0", "0",  # room 2
    "652", "700", "300", "800",  # water
    "1203",  # smoke
    "3", "4", "1", "5",  # power
    "1500",  # smoke fan
    "3", "3", "5",  # fan 1
    "0", "0", "0",  # fan 2
    "0", "0", "0",  # fan 3
]

DATA2_FIELDS = [
    "2",  # page
    "1",  # flow switch
    "1",  # generic pump
    "0", "0", "0",  # air exchange
    "450", "500", "300", "700",  # buffer
    "0", "0", "0", "0",  # boiler
    "0", "0", "0", "0",  # dhw
    "190", "200", "300", "70",  # room 3
]


class FakeStove:
    """Scripted stove behind a mocked asyncio stream pair.

    Every frame written is parsed and recorded; the matching response line
    is made available to the reader. Requests listed in ``silent`` are
    never answered.
    """

    def __init__(self) -> None:
        self.frames: list[Frame] = []
        self.silent: set[tuple[str, CommandMode, tuple[str, ...]]] = set()
        self.info = list(INFO_FIELDS)
        self.data = list(DATA_FIELDS)
        self.data2 = list(DATA2_FIELDS)
        self._incoming: asyncio.Queue[bytes] = asyncio.Queue()

        self.reader = MagicMock()
        self.reader.read = self._read
        self.writer = MagicMock()
        self.writer.is_closing.return_value = False
        self.writer.write = MagicMock(side_effect=self._write)
        self.writer.drain = AsyncMock()
        self.writer.close = MagicMock()
        self.writer.wait_closed = AsyncMock()

    def push(self, data: bytes) -> None:
        """Make raw bytes available to the next read."""
        self._incoming.put_nowait(data)

    def _response(self, frame: Frame) -> list[str]:
        if frame.command == "INF":
            return self.info
        if frame.mode is CommandMode.WRITE:
            return ["DAT", "OK"]
        if frame.parameters == ("2",):
            return self.data2
        return self.data

    def _write(self, data: bytes) -> None:
        frame = parse_frame(data)
        self.frames.append(frame)
        if (frame.command, frame.mode, frame.parameters) in self.silent:
            return
        self.push((";".join(self._response(frame)) + "\n").encode())

    async def _read(self, size: int) -> bytes:
        return await self._incoming.get()


@pytest.fixture
def mock_hass() -> MagicMock:
    """Return a mock Home Assistant instance."""
    hass = MagicMock()
    hass.loop = MagicMock()
    return hass


@pytest.fixture
def coordinator(mock_hass: MagicMock) -> HottohCoordinator:
    """Return a HottohCoordinator instance for testing."""
    return HottohCoordinator(
        hass=mock_hass,
        host="192.168.1.100",
        port=5001,
        entry_id="test_entry_id",
        response_timeout=0.05,
    )


@pytest.fixture
def stove() -> FakeStove:
    """Return a scripted stove."""
    return FakeStove()


@pytest.fixture
def mock_connection(stove: FakeStove) -> Generator[AsyncMock, None, None]:
    """Mock asyncio.open_connection to reach the scripted stove."""
    with patch("asyncio.open_connection") as mock:
        mock.return_value = (stove.reader, stove.writer)
        yield mock
