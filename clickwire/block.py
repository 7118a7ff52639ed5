"""A block: named columns sharing one row count."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .columns.base import Column
from .types import Type


@dataclass
class BlockInfo:
    """Extra block information sent alongside the data."""

    is_overflows: int = 0
    bucket_num: int = -1


@dataclass(frozen=True)
class BlockColumn:
    """One named column of a block."""

    name: str
    column: Column

    @property
    def type(self) -> Type:
        return self.column.type


@dataclass
class Block:
    """An ordered set of named columns that all hold the same number of rows."""

    info: BlockInfo = field(default_factory=BlockInfo)
    _columns: list[BlockColumn] = field(default_factory=list, init=False, repr=False)
    _rows: int = field(default=0, init=False, repr=False)

    def __init__(self) -> None:
        self.info = BlockInfo()
        self._columns = []
        self._rows = 0

    def append_column(self, name: str, column: Column) -> None:
        """Append a named column; raises ValueError if its row count differs."""
        if not self._columns:
            self._rows = len(column)
        elif len(column) != self._rows:
            raise ValueError(
                "all columns in block must have same count of rows. "
                f"Name: [{name}], rows: [{self._rows}], columns: [{len(column)}]"
            )
        self._columns.append(BlockColumn(name, column))

    @property
    def column_count(self) -> int:
        return len(self._columns)

    @property
    def row_count(self) -> int:
        return self._rows

    def refresh_row_count(self) -> int:
        """Recount rows from the columns; raises ValueError if they disagree."""
        rows = 0
        for position, item in enumerate(self._columns):
            size = len(item.column)
            if position == 0:
                rows = size
            elif size != rows:
                raise ValueError(
                    "all columns in block must have same count of rows. "
                    f"Name: [{item.name}], rows: [{rows}], columns: [{size}]"
                )
        self._rows = rows
        return rows

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self._columns):
            raise IndexError(
                f"column index is out of range. Index: [{index}], "
                f"columns: [{len(self._columns)}]"
            )
        return index

    def column_name(self, index: int) -> str:
        return self._columns[self._check_index(index)].name

    def __getitem__(self, index: int) -> Column:
        return self._columns[self._check_index(index)].column

    def __iter__(self) -> Iterator[BlockColumn]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)