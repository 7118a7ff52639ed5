"""Decimal column stored as a scaled integer of 32, 64 or 128 bits."""

from __future__ import annotations

from ..types import DecimalType, create_decimal
from ..wire import WireReader, WireWriter
from .base import Column
from .numeric import ColumnInt32, ColumnInt64, ColumnInt128, ColumnVector

_DIGITS = "0123456789"


def _storage_for(precision: int) -> ColumnVector:
    if precision <= 9:
        return ColumnInt32()
    if precision <= 18:
        return ColumnInt64()
    return ColumnInt128()


def _parse_decimal_text(text: str) -> int:
    """Collect the digits of ``text`` as an unscaled integer.

    A leading minus makes the value negative; a minus anywhere else also
    makes it negative and stops reading. Other characters are skipped.
    """
    value = 0
    negative = False
    for pos, ch in enumerate(text):
        if ch == "-":
            negative = True
            if pos:
                break
        elif ch in _DIGITS:
            value = value * 10 + int(ch)
    return -value if negative else value


class ColumnDecimal(Column):
    """Decimal values held as unscaled integers (``12345.6789`` at scale 4 is ``123456789``)."""

    def __init__(self, precision: int, scale: int) -> None:
        super().__init__(create_decimal(precision, scale))
        self._data: ColumnVector = _storage_for(precision)

    @classmethod
    def _with_data(cls, type: DecimalType, data: ColumnVector) -> ColumnDecimal:
        result = cls(type.precision, type.scale)
        result._data = data
        return result

    def append(self, value: int | str) -> None:
        """Append an unscaled integer or a decimal string; ValueError if it does not fit."""
        if isinstance(value, str):
            value = _parse_decimal_text(value)
        self._data.append(value)

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnDecimal):
            if column.type.is_equal(self.type):
                self._data.append_column(column._data)
        else:
            self._data.append_column(column)

    def __getitem__(self, index: int) -> int:
        return self._data[index]

    def __len__(self) -> int:
        return len(self._data)

    def load(self, reader: WireReader, rows: int) -> None:
        self._data.load(reader, rows)

    def save(self, writer: WireWriter) -> None:
        self._data.save(writer)

    def clear(self) -> None:
        self._data.clear()

    def slice(self, begin: int, length: int) -> ColumnDecimal:
        return self._with_data(self.type, self._data.slice(begin, length))