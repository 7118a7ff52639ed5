"""Parser for textual column type names such as ``Array(Nullable(Int32))``."""

from __future__ import annotations

import string
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from functools import lru_cache

from .types import TypeCode


class TypeParseError(ValueError):
    """Raised when a type name cannot be parsed."""


class Meta(Enum):
    """Category of a node in a parsed type."""

    ARRAY = auto()
    NULL = auto()
    NULLABLE = auto()
    NUMBER = auto()
    TERMINAL = auto()
    TUPLE = auto()
    ENUM = auto()


@dataclass
class TypeAst:
    """A node of a parsed type name.

    ``value`` holds numeric parameters (string widths, decimal scales,
    enum values); ``elements`` holds type arguments and enum items.
    """

    meta: Meta = Meta.TERMINAL
    code: TypeCode = TypeCode.VOID
    name: str = ""
    value: int = 0
    elements: list[TypeAst] = field(default_factory=list)


class TokenKind(Enum):
    INVALID = auto()
    NAME = auto()
    NUMBER = auto()
    LPAR = auto()
    RPAR = auto()
    COMMA = auto()
    EOS = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str = ""


_TYPE_CODES: dict[str, TypeCode] = {
    "Int8": TypeCode.INT8,
    "Int16": TypeCode.INT16,
    "Int32": TypeCode.INT32,
    "Int64": TypeCode.INT64,
    "UInt8": TypeCode.UINT8,
    "UInt16": TypeCode.UINT16,
    "UInt32": TypeCode.UINT32,
    "UInt64": TypeCode.UINT64,
    "Float32": TypeCode.FLOAT32,
    "Float64": TypeCode.FLOAT64,
    "String": TypeCode.STRING,
    "FixedString": TypeCode.FIXED_STRING,
    "DateTime": TypeCode.DATETIME,
    "Date": TypeCode.DATE,
    "Array": TypeCode.ARRAY,
    "Nullable": TypeCode.NULLABLE,
    "Tuple": TypeCode.TUPLE,
    "Enum8": TypeCode.ENUM8,
    "Enum16": TypeCode.ENUM16,
    "UUID": TypeCode.UUID,
    "Decimal32": TypeCode.DECIMAL32,
    "Decimal64": TypeCode.DECIMAL64,
    "Decimal128": TypeCode.DECIMAL128,
    "Decimal": TypeCode.DECIMAL128,
}

_META_BY_NAME: dict[str, Meta] = {
    "Array": Meta.ARRAY,
    "Null": Meta.NULL,
    "Nullable": Meta.NULLABLE,
    "Tuple": Meta.TUPLE,
    "Enum8": Meta.ENUM,
    "Enum16": Meta.ENUM,
}

_SKIPPED = frozenset(" \n\t\0='")
_NAME_START = frozenset(string.ascii_letters + "_")
_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_DIGITS = frozenset(string.digits)
_PUNCTUATION = {"(": TokenKind.LPAR, ")": TokenKind.RPAR, ",": TokenKind.COMMA}


class TypeParser:
    """Turns a type name into a TypeAst tree."""

    def __init__(self, text: str) -> None:
        self.text = text

    def tokens(self) -> Iterator[Token]:
        """Yield tokens, ending with an EOS or an INVALID token."""
        text = self.text
        pos, end = 0, len(text)
        while pos < end:
            ch = text[pos]
            if ch in _SKIPPED:
                pos += 1
                continue
            if ch in _PUNCTUATION:
                yield Token(_PUNCTUATION[ch], ch)
                pos += 1
                continue
            start = pos
            if ch in _NAME_START:
                while pos < end and text[pos] in _NAME_CHARS:
                    pos += 1
                yield Token(TokenKind.NAME, text[start:pos])
                continue
            if ch in _DIGITS or ch == "-":
                pos += 1
                while pos < end and text[pos] in _DIGITS:
                    pos += 1
                yield Token(TokenKind.NUMBER, text[start:pos])
                continue
            yield Token(TokenKind.INVALID)
            return
        yield Token(TokenKind.EOS)

    def parse(self) -> TypeAst:
        """Parse the whole text; raises TypeParseError on malformed input."""
        root = TypeAst()
        current = root
        open_nodes: list[TypeAst] = [root]

        for token in self.tokens():
            kind = token.kind
            if kind is TokenKind.NAME:
                current.meta = _META_BY_NAME.get(token.value, Meta.TERMINAL)
                current.name = token.value
                current.code = _TYPE_CODES.get(token.value, TypeCode.VOID)
            elif kind is TokenKind.NUMBER:
                try:
                    current.value = int(token.value)
                except ValueError:
                    raise TypeParseError(
                        f"bad number {token.value!r} in type {self.text!r}"
                    ) from None
                current.meta = Meta.NUMBER
            elif kind is TokenKind.LPAR:
                child = TypeAst()
                current.elements.append(child)
                open_nodes.append(current)
                current = child
            elif kind is TokenKind.RPAR:
                if not open_nodes:
                    raise TypeParseError(f"unbalanced ')' in type {self.text!r}")
                current = open_nodes.pop()
            elif kind is TokenKind.COMMA:
                if not open_nodes:
                    raise TypeParseError(f"unexpected ',' in type {self.text!r}")
                current = open_nodes[-1]
                child = TypeAst()
                current.elements.append(child)
                current = child
            elif kind is TokenKind.EOS:
                return root
            else:
                raise TypeParseError(f"invalid character in type {self.text!r}")
        raise TypeParseError(f"unterminated type {self.text!r}")


@lru_cache(maxsize=None)
def parse_type_name(type_name: str) -> TypeAst:
    """Parse a type name, caching results; the returned tree is shared."""
    return TypeParser(type_name).parse()