"""Queries and the events delivered while they run."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from .block import Block
from .errors import ExceptionInfo


@dataclass
class QuerySettings:
    """Settings of an individual query."""

    max_threads: int = 0
    extremes: bool = False
    skip_unavailable_shards: bool = False
    output_format_write_statistics: bool = True
    use_client_time_zone: bool = False


@dataclass
class Profile:
    rows: int = 0
    blocks: int = 0
    bytes: int = 0
    rows_before_limit: int = 0
    applied_limit: bool = False
    calculated_rows_before_limit: bool = False


@dataclass
class Progress:
    rows: int = 0
    bytes: int = 0
    total_rows: int = 0


ExceptionCallback = Callable[[ExceptionInfo], None]
ProgressCallback = Callable[[Progress], None]
SelectCallback = Callable[[Block], None]
SelectCancelableCallback = Callable[[Block], bool]


class QueryEvents(ABC):
    """Receiver of everything the server sends while a query runs."""

    @abstractmethod
    def handle_data(self, block: Block) -> None:
        """A block of data was received."""

    @abstractmethod
    def handle_data_cancelable(self, block: Block) -> bool:
        """A block of data was received; return False to cancel the query."""

    @abstractmethod
    def handle_server_exception(self, exception: ExceptionInfo) -> None:
        """The server reported an exception."""

    @abstractmethod
    def handle_profile(self, profile: Profile) -> None:
        """Profiling information was received."""

    @abstractmethod
    def handle_progress(self, progress: Progress) -> None:
        """Progress information was received."""

    @abstractmethod
    def handle_finish(self) -> None:
        """The query finished."""


class Query(QueryEvents):
    """Query text plus optional callbacks; setters return the query for chaining."""

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._exception_cb: Optional[ExceptionCallback] = None
        self._progress_cb: Optional[ProgressCallback] = None
        self._select_cb: Optional[SelectCallback] = None
        self._select_cancelable_cb: Optional[SelectCancelableCallback] = None

    @property
    def text(self) -> str:
        return self._text

    def on_data(self, callback: SelectCallback) -> Query:
        self._select_cb = callback
        return self

    def on_data_cancelable(self, callback: SelectCancelableCallback) -> Query:
        self._select_cancelable_cb = callback
        return self

    def on_exception(self, callback: ExceptionCallback) -> Query:
        self._exception_cb = callback
        return self

    def on_progress(self, callback: ProgressCallback) -> Query:
        self._progress_cb = callback
        return self

    def handle_data(self, block: Block) -> None:
        if self._select_cb is not None:
            self._select_cb(block)

    def handle_data_cancelable(self, block: Block) -> bool:
        if self._select_cancelable_cb is not None:
            return bool(self._select_cancelable_cb(block))
        return True

    def handle_server_exception(self, exception: ExceptionInfo) -> None:
        if self._exception_cb is not None:
            self._exception_cb(exception)

    def handle_profile(self, profile: Profile) -> None:
        """Profiling information is accepted and ignored."""

    def handle_progress(self, progress: Progress) -> None:
        if self._progress_cb is not None:
            self._progress_cb(progress)

    def handle_finish(self) -> None:
        """Nothing to do when the query finishes."""

    def __repr__(self) -> str:
        return f"Query({self._text!r})"