"""Tuple(T1, T2, ...) column holding one column per element."""

from __future__ import annotations

from collections.abc import Iterable

from ..types import create_tuple
from ..wire import WireReader, WireWriter
from .base import Column


class ColumnTuple(Column):
    """A column made of parallel element columns."""

    def __init__(self, columns: Iterable[Column]) -> None:
        columns = list(columns)
        super().__init__(create_tuple(col.type for col in columns))
        self._columns = columns

    @property
    def tuple_size(self) -> int:
        """Number of element columns."""
        return len(self._columns)

    def __getitem__(self, index: int) -> Column:
        return self._columns[index]

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnTuple) and column.type.is_equal(self.type):
            for mine, theirs in zip(self._columns, column._columns):
                mine.append_column(theirs)

    def __len__(self) -> int:
        return len(self._columns[0]) if self._columns else 0

    def load(self, reader: WireReader, rows: int) -> None:
        for col in self._columns:
            col.load(reader, rows)

    def save(self, writer: WireWriter) -> None:
        for col in self._columns:
            col.save(writer)

    def clear(self) -> None:
        for col in self._columns:
            col.clear()

    def slice(self, begin: int, length: int) -> ColumnTuple:
        return ColumnTuple(col.slice(begin, length) for col in self._columns)