"""Fixed-width numeric columns."""

from __future__ import annotations

import struct
from collections.abc import Iterable, Iterator
from typing import Any, ClassVar

from ..types import TypeCode, create_simple
from ..wire import WireReader, WireWriter
from .base import Column, slice_list


class ColumnVector(Column):
    """A column of numbers stored little-endian with a fixed width."""

    TYPE_CODE: ClassVar[TypeCode]
    FORMAT: ClassVar[str] = ""
    ITEM_SIZE: ClassVar[int] = 0

    def __init__(self, data: Iterable[Any] | None = None) -> None:
        if not self.FORMAT and not self.ITEM_SIZE:
            raise TypeError(f"{type(self).__name__} has no storage format; use a concrete column")
        super().__init__(create_simple(self.TYPE_CODE))
        self._data: list[Any] = []
        for value in data or ():
            self.append(value)

    @classmethod
    def _item_size(cls) -> int:
        return cls.ITEM_SIZE or struct.calcsize("<" + cls.FORMAT)

    @classmethod
    def _pack(cls, values: list[Any]) -> bytes:
        return struct.pack(f"<{len(values)}{cls.FORMAT}", *values)

    @classmethod
    def _unpack(cls, raw: bytes, rows: int) -> list[Any]:
        return list(struct.unpack(f"<{rows}{cls.FORMAT}", raw))

    def _coerce(self, value: Any) -> Any:
        try:
            self._pack([value])
        except (struct.error, OverflowError, TypeError) as exc:
            raise ValueError(f"{value!r} does not fit a {self.type.name} column") from exc
        return value

    def append(self, value: Any) -> None:
        """Append one value; raises ValueError if it does not fit the type."""
        self._data.append(self._coerce(value))

    def append_column(self, column: Column) -> None:
        if isinstance(column, ColumnVector) and column.TYPE_CODE == self.TYPE_CODE:
            self._data.extend(column._data)

    def __getitem__(self, index: int) -> Any:
        return self._data[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def load(self, reader: WireReader, rows: int) -> None:
        raw = reader.read_bytes(rows * self._item_size())
        self._data = self._unpack(raw, rows)

    def save(self, writer: WireWriter) -> None:
        writer.write_bytes(self._pack(self._data))

    def clear(self) -> None:
        self._data.clear()

    def slice(self, begin: int, length: int) -> ColumnVector:
        return type(self)(slice_list(self._data, begin, length))


class ColumnUInt8(ColumnVector):
    TYPE_CODE = TypeCode.UINT8
    FORMAT = "B"


class ColumnUInt16(ColumnVector):
    TYPE_CODE = TypeCode.UINT16
    FORMAT = "H"


class ColumnUInt32(ColumnVector):
    TYPE_CODE = TypeCode.UINT32
    FORMAT = "I"


class ColumnUInt64(ColumnVector):
    TYPE_CODE = TypeCode.UINT64
    FORMAT = "Q"


class ColumnInt8(ColumnVector):
    TYPE_CODE = TypeCode.INT8
    FORMAT = "b"


class ColumnInt16(ColumnVector):
    TYPE_CODE = TypeCode.INT16
    FORMAT = "h"


class ColumnInt32(ColumnVector):
    TYPE_CODE = TypeCode.INT32
    FORMAT = "i"


class ColumnInt64(ColumnVector):
    TYPE_CODE = TypeCode.INT64
    FORMAT = "q"


class ColumnInt128(ColumnVector):
    """Signed 128-bit integers, sixteen little-endian bytes each."""

    TYPE_CODE = TypeCode.INT128
    ITEM_SIZE = 16

    @classmethod
    def _pack(cls, values: list[Any]) -> bytes:
        return b"".join(int.to_bytes(v, 16, "little", signed=True) for v in values)

    @classmethod
    def _unpack(cls, raw: bytes, rows: int) -> list[Any]:
        return [
            int.from_bytes(raw[offset : offset + 16], "little", signed=True)
            for offset in range(0, rows * 16, 16)
        ]


class ColumnFloat32(ColumnVector):
    TYPE_CODE = TypeCode.FLOAT32
    FORMAT = "f"


class ColumnFloat64(ColumnVector):
    TYPE_CODE = TypeCode.FLOAT64
    FORMAT = "d"