"""Server error codes and the exception raised for server-side failures."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum


class ErrorCode(IntEnum):
    """Well-known server error codes."""

    CHECKSUM_DOESNT_MATCH = 40
    CANNOT_PARSE_DATETIME = 41
    UNKNOWN_FUNCTION = 46
    UNKNOWN_IDENTIFIER = 47
    TABLE_ALREADY_EXISTS = 57
    UNKNOWN_TABLE = 60
    SYNTAX_ERROR = 62
    UNKNOWN_DATABASE = 81
    DATABASE_ALREADY_EXISTS = 82
    UNKNOWN_PACKET_FROM_CLIENT = 99
    UNEXPECTED_PACKET_FROM_CLIENT = 101
    RECEIVED_DATA_FOR_WRONG_QUERY_ID = 103
    ENGINE_REQUIRED = 119
    READONLY = 164
    UNKNOWN_USER = 192
    WRONG_PASSWORD = 193
    REQUIRED_PASSWORD = 194
    IP_ADDRESS_NOT_ALLOWED = 195
    LIMIT_EXCEEDED = 290
    UNKNOWN_DATABASE_ENGINE = 336
    UNKNOWN_EXCEPTION = 1002


@dataclass
class ExceptionInfo:
    """An exception reported by the server, possibly wrapping a nested one."""

    code: int = 0
    name: str = ""
    display_text: str = ""
    stack_trace: str = ""
    nested: ExceptionInfo | None = None

    def chain(self) -> Iterator[ExceptionInfo]:
        """Yield this exception followed by each nested one, outermost first."""
        current: ExceptionInfo | None = self
        while current is not None:
            yield current
            current = current.nested


class ServerException(RuntimeError):
    """Raised when the server reports an exception for a request."""

    def __init__(self, exception: ExceptionInfo) -> None:
        super().__init__(exception.display_text)
        self.exception = exception

    @property
    def code(self) -> int:
        return self.exception.code

    def __str__(self) -> str:
        return self.exception.display_text