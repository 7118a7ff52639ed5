"""Builds empty columns from textual type names."""

from __future__ import annotations

from collections.abc import Callable

from ..type_parser import Meta, TypeAst, parse_type_name
from ..types import TypeCode, create_enum8, create_enum16
from .array import ColumnArray
from .base import Column
from .date import ColumnDate, ColumnDateTime
from .decimal import ColumnDecimal
from .enum import ColumnEnum8, ColumnEnum16
from .nothing import ColumnNothing
from .nullable import ColumnNullable
from .numeric import (
    ColumnFloat32,
    ColumnFloat64,
    ColumnInt8,
    ColumnInt16,
    ColumnInt32,
    ColumnInt64,
    ColumnUInt8,
    ColumnUInt16,
    ColumnUInt32,
    ColumnUInt64,
)
from .string import ColumnFixedString, ColumnString
from .tuple import ColumnTuple
from .uuid import ColumnUUID

_SIMPLE_COLUMNS: dict[TypeCode, Callable[[], Column]] = {
    TypeCode.UINT8: ColumnUInt8,
    TypeCode.UINT16: ColumnUInt16,
    TypeCode.UINT32: ColumnUInt32,
    TypeCode.UINT64: ColumnUInt64,
    TypeCode.INT8: ColumnInt8,
    TypeCode.INT16: ColumnInt16,
    TypeCode.INT32: ColumnInt32,
    TypeCode.INT64: ColumnInt64,
    TypeCode.UUID: ColumnUUID,
    TypeCode.FLOAT32: ColumnFloat32,
    TypeCode.FLOAT64: ColumnFloat64,
    TypeCode.STRING: ColumnString,
    TypeCode.DATETIME: ColumnDateTime,
    TypeCode.DATE: ColumnDate,
    TypeCode.VOID: ColumnNothing,
}


def _unsupported(ast: TypeAst) -> ValueError:
    return ValueError(f"unsupported column type: {ast.name or ast.meta.name}")


def _first_value(ast: TypeAst) -> int:
    if not ast.elements:
        raise ValueError(f"type {ast.name} needs a parameter")
    return ast.elements[0].value


def _terminal_column(ast: TypeAst) -> Column:
    factory = _SIMPLE_COLUMNS.get(ast.code)
    if factory is not None:
        return factory()
    if ast.code == TypeCode.FIXED_STRING:
        return ColumnFixedString(_first_value(ast))
    if ast.code == TypeCode.DECIMAL32:
        return ColumnDecimal(9, _first_value(ast))
    if ast.code == TypeCode.DECIMAL64:
        return ColumnDecimal(18, _first_value(ast))
    if ast.code == TypeCode.DECIMAL128:
        if len(ast.elements) == 2:
            return ColumnDecimal(ast.elements[0].value, ast.elements[1].value)
        if len(ast.elements) == 1:
            return ColumnDecimal(38, ast.elements[0].value)
        raise ValueError(f"bad parameters for type {ast.name}")
    raise _unsupported(ast)


def _column_from_ast(ast: TypeAst) -> Column:
    if ast.meta is Meta.ARRAY:
        if not ast.elements:
            raise ValueError("Array needs an element type")
        return ColumnArray(_column_from_ast(ast.elements[0]))
    if ast.meta is Meta.NULLABLE:
        if not ast.elements:
            raise ValueError("Nullable needs a nested type")
        return ColumnNullable(_column_from_ast(ast.elements[0]), ColumnUInt8())
    if ast.meta is Meta.TERMINAL:
        return _terminal_column(ast)
    if ast.meta is Meta.TUPLE:
        return ColumnTuple(_column_from_ast(elem) for elem in ast.elements)
    if ast.meta is Meta.ENUM:
        items = [(elem.name, elem.value) for elem in ast.elements]
        if ast.code == TypeCode.ENUM8:
            return ColumnEnum8(create_enum8(items))
        if ast.code == TypeCode.ENUM16:
            return ColumnEnum16(create_enum16(items))
    raise _unsupported(ast)


def create_column_by_type(type_name: str) -> Column:
    """Create an empty column for ``type_name``.

    Raises TypeParseError for malformed names and ValueError for types
    that have no column implementation.
    """
    return _column_from_ast(parse_type_name(type_name))