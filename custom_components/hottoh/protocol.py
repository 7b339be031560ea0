"""Request frame codec and response accumulator for the HottoH protocol.

Request layout::

    +-----+-----------+------+--------+---------+------+--------------+-------+----+
    | "#" | socket id | C--- | length | command | mode |  parameters  |  CRC  | LF |
    |  1  |  5 digits |  4   | 4 hex  | 3 chars |  1   | "a;b;...;"   | 4 hex |  1 |
    +-----+-----------+------+--------+---------+------+--------------+-------+----+

- Socket id: always ``00000`` for this driver
- Length: number of characters in the joined parameter string, uppercase hex
- Mode: ``R`` (read), ``W`` (write) or ``E`` (execute)
- CRC: CRC-16/CCITT-FALSE over everything from the socket id through the
  parameters, uppercase hex

Responses are a single line of ``;``-separated fields terminated by LF.
Their checksum is not validated.
"""

from __future__ import annotations

import binascii
from dataclasses import dataclass
from enum import Enum

from .const import FRAME_END, FRAME_SEPARATOR, FRAME_START, SOCKET_ID
from .exceptions import FrameError

CRC_INIT = 0xFFFF
FRAME_MARKER = "C---"

# Offsets inside the body (the text between "#" and the CRC)
_MARKER_END = len(SOCKET_ID) + len(FRAME_MARKER)
_LENGTH_END = _MARKER_END + 4
_COMMAND_END = _LENGTH_END + 3
_MODE_END = _COMMAND_END + 1


class CommandMode(str, Enum):
    """Access mode of a request."""

    READ = "R"
    WRITE = "W"
    EXECUTE = "E"


def crc16(data: bytes) -> int:
    """CRC-16/CCITT-FALSE (poly 0x1021, init 0xFFFF, MSB-first).

    ``binascii.crc_hqx`` implements this variant.
    """
    return binascii.crc_hqx(data, CRC_INIT) & 0xFFFF


def join_parameters(parameters: list[str] | tuple[str, ...]) -> str:
    """Join parameters the way the stove expects, with a trailing separator."""
    return FRAME_SEPARATOR.join(parameters) + FRAME_SEPARATOR


def split_parameters(joined: str) -> list[str]:
    """Inverse of :func:`join_parameters`."""
    if joined.endswith(FRAME_SEPARATOR):
        joined = joined[: -len(FRAME_SEPARATOR)]
    return joined.split(FRAME_SEPARATOR)


@dataclass(frozen=True)
class Frame:
    """A single request to the stove."""

    command: str
    mode: CommandMode
    parameters: tuple[str, ...]
    socket_id: str = SOCKET_ID

    @property
    def body(self) -> str:
        """Return the checksummed part of the frame."""
        joined = join_parameters(self.parameters)
        return (
            f"{self.socket_id}{FRAME_MARKER}"
            f"{len(joined):04X}{self.command}{self.mode.value}{joined}"
        )

    def encode(self) -> bytes:
        """Return the frame as it goes on the wire."""
        body = self.body
        checksum = crc16(body.encode("utf-8"))
        return f"{FRAME_START}{body}{checksum:04X}{FRAME_END}".encode("utf-8")

    def __repr__(self) -> str:
        return (
            f"Frame(command={self.command}, mode={self.mode.value}, "
            f"parameters={list(self.parameters)})"
        )


def encode_frame(
    command: str, mode: CommandMode, parameters: list[str] | tuple[str, ...]
) -> bytes:
    """Build the wire bytes of a request.

    Args:
        command: Three-character command code, e.g. ``DAT``.
        mode: Access mode.
        parameters: Parameter strings. They are not escaped, so a value
            containing ``;`` or a newline produces a frame the stove will
            misread.

    Returns:
        The encoded frame, LF-terminated.
    """
    return Frame(command, mode, tuple(parameters)).encode()


def parse_frame(data: bytes) -> Frame:
    """Parse an encoded request back into a :class:`Frame`.

    Raises:
        FrameError: The delimiters, length field or checksum are invalid.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as ex:
        raise FrameError(f"Frame is not valid UTF-8: {data!r}") from ex

    if not text.startswith(FRAME_START) or not text.endswith(FRAME_END):
        raise FrameError(f"Missing frame delimiters: {text!r}")

    text = text[len(FRAME_START) : -len(FRAME_END)]
    body, checksum = text[:-4], text[-4:]
    if len(body) < _MODE_END or body[len(SOCKET_ID) : _MARKER_END] != FRAME_MARKER:
        raise FrameError(f"Truncated or unmarked frame: {text!r}")

    try:
        expected = int(checksum, 16)
        length = int(body[_MARKER_END:_LENGTH_END], 16)
    except ValueError as ex:
        raise FrameError(f"Invalid hex field in frame: {text!r}") from ex

    actual = crc16(body.encode("utf-8"))
    if actual != expected:
        raise FrameError(f"Checksum mismatch: expected {expected:04X}, got {actual:04X}")

    joined = body[_MODE_END:]
    if len(joined) != length:
        raise FrameError(f"Length field {length} does not match parameters {joined!r}")

    try:
        mode = CommandMode(body[_COMMAND_END:_MODE_END])
    except ValueError as ex:
        raise FrameError(f"Unknown mode in frame: {text!r}") from ex

    return Frame(
        command=body[_LENGTH_END:_COMMAND_END],
        mode=mode,
        parameters=tuple(split_parameters(joined)),
        socket_id=body[: len(SOCKET_ID)],
    )


class ResponseAccumulator:
    """Collect socket bytes and hand out one response line at a time."""

    def __init__(self) -> None:
        """Initialize with an empty buffer."""
        self._buffer = b""

    def __len__(self) -> int:
        return len(self._buffer)

    def feed(self, chunk: bytes) -> None:
        """Append a chunk read from the socket."""
        self._buffer += chunk

    def next_response(self) -> list[str] | None:
        """Pop the first complete line, split on ``;``.

        Returns ``None`` until a full line has been buffered. Bytes after the
        first line are kept for the next call.
        """
        line, sep, rest = self._buffer.partition(FRAME_END.encode())
        if not sep:
            return None
        self._buffer = rest
        return line.decode("utf-8", errors="replace").split(FRAME_SEPARATOR)

    def reset(self) -> None:
        """Drop anything buffered (used when the connection is replaced)."""
        self._buffer = b""
