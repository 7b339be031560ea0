"""Exceptions for HottoH pellet stove integration."""

from __future__ import annotations


class HottohError(Exception):
    """Base class for all errors raised by this integration.

    The coordinator handles every subclass locally by dropping the
    connection and scheduling a retry, so none of these reach entities.
    """


class ConnectFailure(HottohError):
    """The TCP connection to the stove could not be established."""


class ExchangeTimeout(HottohError):
    """No response line arrived within the response timeout."""


class SocketError(HottohError):
    """I/O failure (or remote close) in the middle of an exchange."""


class FrameError(HottohError):
    """A request frame could not be parsed."""
