"""Enum8 and Enum16 columns."""

from __future__ import annotations

import struct
from collections.abc import Iterable
from typing import ClassVar

from ..types import EnumType, Type, TypeCode
from ..wire import WireReader, WireWriter
from .base import Column, slice_list


class ColumnEnum(Column):
    """Enum values stored as signed integers; names resolve through the enum type."""

    TYPE_CODE: ClassVar[TypeCode]
    FORMAT: ClassVar[str] = ""

    def __init__(self, type: Type, data: Iterable[int] | None = None) -> None:
        if not self.FORMAT:
            raise TypeError(f"{__class__.__name__} is abstract; use ColumnEnum8 or ColumnEnum16")
        if not isinstance(type, EnumType) or type.code != self.TYPE_CODE:
            raise TypeError(f"{self.__class__.__name__} needs an {self.TYPE_CODE.name} type")
        super().__init__(type)
        self._enum = type
        self._data: list[int] = []
        for value in data or ():
            self.append(value)

    @classmethod
    def _item_size(cls) -> int:
        return struct.calcsize("<" + cls.FORMAT)

    def _coerce(self, value: int | str) -> int:
        if isinstance(value, str):
            return self._enum.enum_value(value)
        try:
            struct.pack("<" + self.FORMAT, value)
        except (struct.error, TypeError) as exc:
            raise ValueError(f"{value!r} does not fit a {self._enum.name} column") from exc
        return value

    def append(self, value: int | str) -> None:
        """Append an enum value, or the value of an enum name (KeyError if unknown)."""
        self._data.append(self._coerce(value))

    def name_at(self, index: int) -> str:
        return self._enum.enum_name(self._data[index])

    def set_at(self, index: int, value: int) -> None:
        self._data[index] = self._coerce(value)

    def set_name_at(self, index: int, name: str) -> None:
        self._data[index] = self._enum.enum_value(name)

    def append_column(self, column: Column) -> None:
        if isinstance(column, type(self)):
            self._data.extend(column._data)

    def __getitem__(self, index: int) -> int:
        return self._data[index]

    def __len__(self) -> int:
        return len(self._data)

    def load(self, reader: WireReader, rows: int) -> None:
        raw = reader.read_bytes(rows * self._item_size())
        self._data = list(struct.unpack(f"<{rows}{self.FORMAT}", raw))

    def save(self, writer: WireWriter) -> None:
        writer.write_bytes(struct.pack(f"<{len(self._data)}{self.FORMAT}", *self._data))

    def clear(self) -> None:
        self._data.clear()

    def slice(self, begin: int, length: int) -> ColumnEnum:
        return type(self)(self._enum, slice_list(self._data, begin, length))


class ColumnEnum8(ColumnEnum):
    TYPE_CODE = TypeCode.ENUM8
    FORMAT = "b"


class ColumnEnum16(ColumnEnum):
    TYPE_CODE = TypeCode.ENUM16
    FORMAT = "h"