"""Abstract column interface shared by all column kinds."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TypeVar

from ..types import Type
from ..wire import WireReader, WireWriter

T = TypeVar("T")


def slice_list(values: Sequence[T], begin: int, length: int) -> list[T]:
    """Return up to ``length`` items starting at ``begin``; empty if ``begin`` is past the end."""
    if begin < 0 or length < 0:
        raise ValueError("begin and length must not be negative")
    if begin >= len(values):
        return []
    return list(values[begin : begin + length])


class Column(ABC):
    """A typed sequence of values that can be read from and written to the wire."""

    def __init__(self, type: Type) -> None:
        self._type = type

    @property
    def type(self) -> Type:
        """Type object describing the column."""
        return self._type

    @abstractmethod
    def append_column(self, column: Column) -> None:
        """Append the content of a compatible column; other columns are ignored."""

    @abstractmethod
    def load(self, reader: WireReader, rows: int) -> None:
        """Read ``rows`` values from the wire."""

    @abstractmethod
    def save(self, writer: WireWriter) -> None:
        """Write all values to the wire."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all values."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of rows."""

    @abstractmethod
    def slice(self, begin: int, length: int) -> Column:
        """A new column holding rows ``begin`` to ``begin + length``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}<{self._type.name}>(rows={len(self)})"