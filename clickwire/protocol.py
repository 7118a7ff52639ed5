"""Packet codes of the native protocol."""

from __future__ import annotations

from enum import IntEnum


class ServerCode(IntEnum):
    """Packets sent by the server."""

    HELLO = 0
    DATA = 1
    EXCEPTION = 2
    PROGRESS = 3
    PONG = 4
    END_OF_STREAM = 5
    PROFILE_INFO = 6
    TOTALS = 7
    EXTREMES = 8


class ClientCode(IntEnum):
    """Packets sent by the client."""

    HELLO = 0
    QUERY = 1
    DATA = 2
    CANCEL = 3
    PING = 4


class CompressionState(IntEnum):
    """Whether blocks are compressed."""

    DISABLE = 0
    ENABLE = 1


class Stage(IntEnum):
    """Stage up to which a query is processed."""

    COMPLETE = 2