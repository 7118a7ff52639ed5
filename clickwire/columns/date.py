"""Date and DateTime columns holding Unix timestamps."""

from __future__ import annotations

from collections.abc import Iterator

from ..types import create_date, create_datetime
from ..wire import WireReader, WireWriter
from .base import Column
from .numeric import ColumnUInt16, ColumnUInt32

SECONDS_PER_DAY = 86400


class ColumnDate(Column):
    """Dates stored as days since the epoch; values come back as timestamps at midnight UTC."""

    def __init__(self) -> None:
        super().__init__(create_date())
        self._data = ColumnUInt16()

    def append(self, timestamp: float) -> None:
        """Append the day containing ``timestamp``; raises ValueError outside the Date range."""
        self._data.append(int(timestamp) // SECONDS_PER_DAY)

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnDate):
            self._data.append_column(column._data)

    def __getitem__(self, index: int) -> int:
        return self._data[index] * SECONDS_PER_DAY

    def __iter__(self) -> Iterator[int]:
        return (days * SECONDS_PER_DAY for days in self._data)

    def __len__(self) -> int:
        return len(self._data)

    def load(self, reader: WireReader, rows: int) -> None:
        self._data.load(reader, rows)

    def save(self, writer: WireWriter) -> None:
        self._data.save(writer)

    def clear(self) -> None:
        self._data.clear()

    def slice(self, begin: int, length: int) -> ColumnDate:
        result = ColumnDate()
        result._data.append_column(self._data.slice(begin, length))
        return result


class ColumnDateTime(Column):
    """Timestamps with one-second resolution stored as 32-bit unsigned integers."""

    def __init__(self) -> None:
        super().__init__(create_datetime())
        self._data = ColumnUInt32()

    def append(self, timestamp: float) -> None:
        """Append ``timestamp``; raises ValueError outside the DateTime range."""
        self._data.append(int(timestamp))

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnDateTime):
            self._data.append_column(column._data)

    def __getitem__(self, index: int) -> int:
        return self._data[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def load(self, reader: WireReader, rows: int) -> None:
        self._data.load(reader, rows)

    def save(self, writer: WireWriter) -> None:
        self._data.save(writer)

    def clear(self) -> None:
        self._data.clear()

    def slice(self, begin: int, length: int) -> ColumnDateTime:
        result = ColumnDateTime()
        result._data.append_column(self._data.slice(begin, length))
        return result