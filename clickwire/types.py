"""Column type descriptions and their canonical textual names."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import IntEnum
from typing import Union


class TypeCode(IntEnum):
    """Identifies the kind of a column type."""

    VOID = 0
    INT8 = 1
    INT16 = 2
    INT32 = 3
    INT64 = 4
    INT128 = 5
    UINT8 = 6
    UINT16 = 7
    UINT32 = 8
    UINT64 = 9
    FLOAT32 = 10
    FLOAT64 = 11
    STRING = 12
    FIXED_STRING = 13
    DATETIME = 14
    DATE = 15
    ARRAY = 16
    NULLABLE = 17
    TUPLE = 18
    ENUM8 = 19
    ENUM16 = 20
    UUID = 21
    DECIMAL32 = 22
    DECIMAL64 = 23
    DECIMAL128 = 24


_SIMPLE_NAMES: dict[TypeCode, str] = {
    TypeCode.VOID: "Void",
    TypeCode.INT8: "Int8",
    TypeCode.INT16: "Int16",
    TypeCode.INT32: "Int32",
    TypeCode.INT64: "Int64",
    TypeCode.INT128: "Int128",
    TypeCode.UINT8: "UInt8",
    TypeCode.UINT16: "UInt16",
    TypeCode.UINT32: "UInt32",
    TypeCode.UINT64: "UInt64",
    TypeCode.UUID: "UUID",
    TypeCode.FLOAT32: "Float32",
    TypeCode.FLOAT64: "Float64",
    TypeCode.STRING: "String",
    TypeCode.DATETIME: "DateTime",
    TypeCode.DATE: "Date",
}

_NUMERIC_CODES = frozenset(
    {
        TypeCode.INT8,
        TypeCode.INT16,
        TypeCode.INT32,
        TypeCode.INT64,
        TypeCode.INT128,
        TypeCode.UINT8,
        TypeCode.UINT16,
        TypeCode.UINT32,
        TypeCode.UINT64,
        TypeCode.FLOAT32,
        TypeCode.FLOAT64,
    }
)


class Type:
    """A column type identified by its code; composite kinds use subclasses."""

    def __init__(self, code: TypeCode | int) -> None:
        code = TypeCode(code)
        if type(self) is Type and code not in _SIMPLE_NAMES:
            raise ValueError(f"type code {code.name} needs parameters")
        self.code = code

    @property
    def name(self) -> str:
        """Canonical textual name of the type."""
        return _SIMPLE_NAMES[self.code]

    def is_equal(self, other: Type) -> bool:
        """Whether both types have the same textual name."""
        return self.name == other.name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Type):
            return NotImplemented
        return self.is_equal(other)

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class ArrayType(Type):
    """Array(T)."""

    def __init__(self, item_type: Type) -> None:
        super().__init__(TypeCode.ARRAY)
        self.item_type = item_type

    @property
    def name(self) -> str:
        return f"Array({self.item_type.name})"


def _decimal_code(precision: int) -> TypeCode:
    if precision <= 9:
        return TypeCode.DECIMAL32
    if precision <= 18:
        return TypeCode.DECIMAL64
    return TypeCode.DECIMAL128


class DecimalType(Type):
    """DecimalN(scale); the storage width follows from the precision."""

    def __init__(self, precision: int, scale: int) -> None:
        super().__init__(_decimal_code(precision))
        self.precision = precision
        self.scale = scale

    @property
    def name(self) -> str:
        width = {
            TypeCode.DECIMAL32: "32",
            TypeCode.DECIMAL64: "64",
            TypeCode.DECIMAL128: "128",
        }[self.code]
        return f"Decimal{width}({self.scale})"


EnumItems = Union[Iterable[tuple[str, int]], Mapping[str, int]]


class EnumType(Type):
    """Enum8 or Enum16 with a mapping between names and values."""

    def __init__(self, code: TypeCode | int, items: EnumItems) -> None:
        code = TypeCode(code)
        if code not in (TypeCode.ENUM8, TypeCode.ENUM16):
            raise ValueError(f"not an enum type code: {code.name}")
        super().__init__(code)
        pairs = items.items() if isinstance(items, Mapping) else items
        self._value_to_name: dict[int, str] = {}
        self._name_to_value: dict[str, int] = {}
        for item_name, value in pairs:
            self._value_to_name[value] = item_name
            self._name_to_value[item_name] = value
        self._value_to_name = dict(sorted(self._value_to_name.items()))

    @property
    def name(self) -> str:
        prefix = "Enum8" if self.code == TypeCode.ENUM8 else "Enum16"
        body = ", ".join(f"'{n}' = {v}" for v, n in self._value_to_name.items())
        return f"{prefix}({body})"

    def enum_name(self, value: int) -> str:
        """Name for ``value``; raises KeyError if the enum lacks it."""
        try:
            return self._value_to_name[value]
        except KeyError:
            raise KeyError(f"enum has no value {value}") from None

    def enum_value(self, name: str) -> int:
        """Value for ``name``; raises KeyError if the enum lacks it."""
        try:
            return self._name_to_value[name]
        except KeyError:
            raise KeyError(f"enum has no name {name!r}") from None

    def has_enum_name(self, name: str) -> bool:
        return name in self._name_to_value

    def has_enum_value(self, value: int) -> bool:
        return value in self._value_to_name

    def items(self) -> list[tuple[int, str]]:
        """(value, name) pairs ordered by value."""
        return list(self._value_to_name.items())


class FixedStringType(Type):
    """FixedString(N)."""

    def __init__(self, size: int) -> None:
        super().__init__(TypeCode.FIXED_STRING)
        self.size = size

    @property
    def name(self) -> str:
        return f"FixedString({self.size})"


class NullableType(Type):
    """Nullable(T)."""

    def __init__(self, nested_type: Type) -> None:
        super().__init__(TypeCode.NULLABLE)
        self.nested_type = nested_type

    @property
    def name(self) -> str:
        return f"Nullable({self.nested_type.name})"


class TupleType(Type):
    """Tuple(T1, T2, ...)."""

    def __init__(self, item_types: Iterable[Type]) -> None:
        super().__init__(TypeCode.TUPLE)
        self.item_types = list(item_types)

    @property
    def name(self) -> str:
        return "Tuple(" + ", ".join(t.name for t in self.item_types) + ")"


def create_array(item_type: Type) -> ArrayType:
    return ArrayType(item_type)


def create_date() -> Type:
    return Type(TypeCode.DATE)


def create_datetime() -> Type:
    return Type(TypeCode.DATETIME)


def create_nullable(nested_type: Type) -> NullableType:
    return NullableType(nested_type)


def create_simple(code: TypeCode | int) -> Type:
    """Create a numeric type (integers of any width, Float32, Float64)."""
    code = TypeCode(code)
    if code not in _NUMERIC_CODES:
        raise ValueError(f"not a numeric type code: {code.name}")
    return Type(code)


def create_string() -> Type:
    return Type(TypeCode.STRING)


def create_fixed_string(size: int) -> FixedStringType:
    return FixedStringType(size)


def create_tuple(item_types: Iterable[Type]) -> TupleType:
    return TupleType(item_types)


def create_enum8(items: EnumItems) -> EnumType:
    return EnumType(TypeCode.ENUM8, items)


def create_enum16(items: EnumItems) -> EnumType:
    return EnumType(TypeCode.ENUM16, items)


def create_uuid() -> Type:
    return Type(TypeCode.UUID)


def create_decimal(precision: int, scale: int) -> DecimalType:
    return DecimalType(precision, scale)


def create_nothing() -> Type:
    return Type(TypeCode.VOID)