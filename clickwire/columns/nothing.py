"""A placeholder column whose every row is NULL."""

from __future__ import annotations

from typing import Any

from ..types import create_nothing
from ..wire import WireReader, WireWriter
from .base import Column


class ColumnNothing(Column):
    """Holds only a row count; every value is None."""

    def __init__(self, size: int = 0) -> None:
        if size < 0:
            raise ValueError("size must not be negative")
        super().__init__(create_nothing())
        self._size = size

    def append(self, value: Any = None) -> None:
        """Add one row; the value is ignored."""
        self._size += 1

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnNothing):
            self._size += len(column)

    def __getitem__(self, index: int) -> None:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError("column index out of range")
        return None

    def __len__(self) -> int:
        return self._size

    def load(self, reader: WireReader, rows: int) -> None:
        reader.skip(1)
        self._size += rows

    def save(self, writer: WireWriter) -> None:
        raise RuntimeError("method save is not supported for Nothing column")

    def clear(self) -> None:
        self._size = 0

    def slice(self, begin: int, length: int) -> ColumnNothing:
        return ColumnNothing(length)