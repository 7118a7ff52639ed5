"""UUID column stored as pairs of 64-bit unsigned integers."""

from __future__ import annotations

from collections.abc import Iterator

from ..types import create_uuid
from ..wire import WireReader, WireWriter
from .base import Column
from .numeric import ColumnUInt64

UInt128 = tuple[int, int]


class ColumnUUID(Column):
    """Each UUID is a (first, second) pair of 64-bit halves."""

    def __init__(self, data: ColumnUInt64 | None = None) -> None:
        super().__init__(create_uuid())
        if data is None:
            data = ColumnUInt64()
        elif not isinstance(data, ColumnUInt64):
            raise TypeError("UUID data must be a UInt64 column")
        if len(data) % 2:
            raise ValueError("number of entries must be even (two 64-bit numbers for each UUID)")
        self._data = data

    def append(self, value: UInt128) -> None:
        first, second = value
        self._data.append(first)
        self._data.append(second)

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnUUID):
            self._data.append_column(column._data)

    def __getitem__(self, index: int) -> UInt128:
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("UUID index out of range")
        return (self._data[index * 2], self._data[index * 2 + 1])

    def __iter__(self) -> Iterator[UInt128]:
        halves = iter(self._data)
        return zip(halves, halves)

    def __len__(self) -> int:
        return len(self._data) // 2

    def load(self, reader: WireReader, rows: int) -> None:
        self._data.load(reader, rows * 2)

    def save(self, writer: WireWriter) -> None:
        self._data.save(writer)

    def clear(self) -> None:
        self._data.clear()

    def slice(self, begin: int, length: int) -> ColumnUUID:
        return ColumnUUID(self._data.slice(begin * 2, length * 2))