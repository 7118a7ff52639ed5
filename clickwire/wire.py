"""Binary wire primitives: varints, length-prefixed strings and fixed-width values."""

from __future__ import annotations

import struct
from functools import lru_cache
from typing import Any, BinaryIO, Protocol

MAX_VARINT_BYTES = 9
MAX_STRING_LENGTH = 0x00FFFFFF
_MAX_VARINT_VALUE = (1 << (7 * MAX_VARINT_BYTES)) - 1


class ProtocolError(Exception):
    """Raised when the byte stream does not follow the wire format."""


class _Readable(Protocol):
    def read(self, size: int, /) -> bytes: ...


class _Writable(Protocol):
    def write(self, data: bytes, /) -> Any: ...


@lru_cache(maxsize=64)
def _struct(fmt: str) -> struct.Struct:
    if fmt[:1] not in ("<", ">", "!", "=", "@"):
        fmt = "<" + fmt
    return struct.Struct(fmt)


def encode_varint(value: int) -> bytes:
    """Encode an unsigned integer as a little-endian base-128 varint."""
    if value < 0 or value > _MAX_VARINT_VALUE:
        raise ValueError(f"varint value out of range: {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


class WireReader:
    """Decodes wire values from any object with a ``read(size)`` method."""

    def __init__(self, stream: _Readable | BinaryIO) -> None:
        self._stream = stream

    def read_bytes(self, size: int) -> bytes:
        """Read exactly ``size`` bytes or raise ProtocolError."""
        if size < 0:
            raise ValueError("size must not be negative")
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                raise ProtocolError(
                    f"unexpected end of stream: wanted {size} bytes, got {size - remaining}"
                )
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def read_varint(self) -> int:
        """Read an unsigned varint of at most nine bytes."""
        value = 0
        for shift in range(0, 7 * MAX_VARINT_BYTES, 7):
            byte = self.read_bytes(1)[0]
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return value
        raise ProtocolError("varint is too long")

    def read_string(self) -> str:
        """Read a varint-length-prefixed string."""
        length = self.read_varint()
        if length > MAX_STRING_LENGTH:
            raise ProtocolError(f"string length {length} exceeds limit")
        return self.read_bytes(length).decode("utf-8", errors="surrogateescape")

    def read_fixed(self, fmt: str) -> Any:
        """Read a fixed-width value described by a ``struct`` format.

        Little-endian is assumed unless the format names a byte order.
        A single-field format yields a scalar, otherwise a tuple.
        """
        packer = _struct(fmt)
        values = packer.unpack(self.read_bytes(packer.size))
        return values[0] if len(values) == 1 else values

    def skip(self, count: int) -> None:
        """Discard ``count`` bytes."""
        self.read_bytes(count)


class WireWriter:
    """Encodes wire values into a buffer that is sent to a stream on flush."""

    def __init__(self, stream: _Writable | BinaryIO) -> None:
        self._stream = stream
        self._buffer = bytearray()

    def write_bytes(self, data: bytes) -> None:
        self._buffer += data

    def write_varint(self, value: int) -> None:
        self._buffer += encode_varint(value)

    def write_string(self, value: str | bytes) -> None:
        if isinstance(value, str):
            value = value.encode("utf-8", errors="surrogateescape")
        self.write_varint(len(value))
        self._buffer += value

    def write_fixed(self, fmt: str, value: Any) -> None:
        """Write a value with a ``struct`` format; tuples fill multi-field formats."""
        values = value if isinstance(value, tuple) else (value,)
        self._buffer += _struct(fmt).pack(*values)

    def flush(self) -> None:
        """Send buffered bytes to the stream and flush it if it can be flushed."""
        if self._buffer:
            self._stream.write(bytes(self._buffer))
            self._buffer.clear()
        flush = getattr(self._stream, "flush", None)
        if callable(flush):
            flush()