"""Nullable(T) column: a nested column plus a column of null flags."""

from __future__ import annotations

from ..types import create_nullable
from ..wire import WireReader, WireWriter
from .base import Column
from .numeric import ColumnUInt8


class ColumnNullable(Column):
    """Pairs a nested column with UInt8 flags where a non-zero flag marks NULL."""

    def __init__(self, nested: Column, nulls: ColumnUInt8) -> None:
        if not isinstance(nulls, ColumnUInt8):
            raise TypeError("nulls must be a UInt8 column")
        if len(nested) != len(nulls):
            raise ValueError("count of elements in nested and nulls should be the same")
        super().__init__(create_nullable(nested.type))
        self._nested = nested
        self._nulls = nulls

    def append(self, is_null: bool) -> None:
        """Append one null flag; the nested value is appended separately."""
        self._nulls.append(1 if is_null else 0)

    def is_null(self, index: int) -> bool:
        return self._nulls[index] != 0

    @property
    def nested(self) -> Column:
        return self._nested

    @property
    def nulls(self) -> ColumnUInt8:
        return self._nulls

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnNullable) and column._nested.type.is_equal(self._nested.type):
            self._nested.append_column(column._nested)
            self._nulls.append_column(column._nulls)

    def __len__(self) -> int:
        return len(self._nulls)

    def load(self, reader: WireReader, rows: int) -> None:
        self._nulls.load(reader, rows)
        self._nested.load(reader, rows)

    def save(self, writer: WireWriter) -> None:
        self._nulls.save(writer)
        self._nested.save(writer)

    def clear(self) -> None:
        self._nested.clear()
        self._nulls.clear()

    def slice(self, begin: int, length: int) -> ColumnNullable:
        return ColumnNullable(self._nested.slice(begin, length), self._nulls.slice(begin, length))