"""Array(T) column: a flat data column plus cumulative row offsets."""

from __future__ import annotations

from ..types import create_array
from ..wire import WireReader, WireWriter
from .base import Column
from .numeric import ColumnUInt64


class ColumnArray(Column):
    """Each row is a run of values in the data column ending at its offset."""

    def __init__(self, data: Column) -> None:
        super().__init__(create_array(data.type))
        self._data = data
        self._offsets = ColumnUInt64()

    def append_as_column(self, array: Column) -> None:
        """Append the whole of ``array`` as one row."""
        if not self._data.type.is_equal(array.type):
            raise ValueError(
                f"can't append column of type {array.type.name} "
                f"to column type {self._data.type.name}"
            )
        last = self._offsets[len(self._offsets) - 1] if len(self._offsets) else 0
        self._offsets.append(last + len(array))
        self._data.append_column(array)

    def _bounds(self, index: int) -> tuple[int, int]:
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("array row index out of range")
        start = self._offsets[index - 1] if index else 0
        return start, self._offsets[index] - start

    def get_as_column(self, index: int) -> Column:
        """Row ``index`` as a column of the element type."""
        start, size = self._bounds(index)
        return self._data.slice(start, size)

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnArray) and column._data.type.is_equal(self._data.type):
            for row in range(len(column)):
                self.append_as_column(column.get_as_column(row))

    def __len__(self) -> int:
        return len(self._offsets)

    def load(self, reader: WireReader, rows: int) -> None:
        self._offsets.load(reader, rows)
        if rows:
            self._data.load(reader, self._offsets[rows - 1])

    def save(self, writer: WireWriter) -> None:
        self._offsets.save(writer)
        self._data.save(writer)

    def clear(self) -> None:
        self._offsets.clear()
        self._data.clear()

    def slice(self, begin: int, length: int) -> ColumnArray:
        if begin < 0 or length < 0:
            raise ValueError("begin and length must not be negative")
        result = ColumnArray(self._data.slice(0, 0))
        for row in range(begin, min(begin + length, len(self))):
            result.append_as_column(self.get_as_column(row))
        return result