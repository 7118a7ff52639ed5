"""Variable-length and fixed-length string columns."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..types import create_fixed_string, create_string
from ..wire import WireReader, WireWriter
from .base import Column, slice_list

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _to_bytes(value: str | bytes) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode(_ENCODING, errors=_ERRORS)


def _to_str(raw: bytes) -> str:
    return raw.decode(_ENCODING, errors=_ERRORS)


class ColumnFixedString(Column):
    """Strings of exactly ``size`` bytes, padded with zero bytes or truncated."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("fixed string size must not be negative")
        super().__init__(create_fixed_string(size))
        self._size = size
        self._data: list[str] = []

    @property
    def fixed_size(self) -> int:
        return self._size

    def append(self, value: str | bytes) -> None:
        raw = _to_bytes(value)[: self._size].ljust(self._size, b"\0")
        self._data.append(_to_str(raw))

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnFixedString) and column._size == self._size:
            self._data.extend(column._data)

    def __getitem__(self, index: int) -> str:
        return self._data[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def load(self, reader: WireReader, rows: int) -> None:
        for _ in range(rows):
            self._data.append(_to_str(reader.read_bytes(self._size)))

    def save(self, writer: WireWriter) -> None:
        for value in self._data:
            writer.write_bytes(_to_bytes(value)[: self._size].ljust(self._size, b"\0"))

    def clear(self) -> None:
        self._data.clear()

    def slice(self, begin: int, length: int) -> ColumnFixedString:
        result = ColumnFixedString(self._size)
        result._data = slice_list(self._data, begin, length)
        return result


class ColumnString(Column):
    """Strings of any length, each sent with a varint length prefix."""

    def __init__(self, data: Iterable[str] | None = None) -> None:
        super().__init__(create_string())
        self._data: list[str] = []
        for value in data or ():
            self.append(value)

    def append(self, value: str | bytes) -> None:
        self._data.append(value if isinstance(value, str) else _to_str(value))

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnString):
            self._data.extend(column._data)

    def __getitem__(self, index: int) -> str:
        return self._data[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def load(self, reader: WireReader, rows: int) -> None:
        for _ in range(rows):
            self._data.append(reader.read_string())

    def save(self, writer: WireWriter) -> None:
        for value in self._data:
            writer.write_string(value)

    def clear(self) -> None:
        self._data.clear()

    def slice(self, begin: int, length: int) -> ColumnString:
        return ColumnString(slice_list(self._data, begin, length))