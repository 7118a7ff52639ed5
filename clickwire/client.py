"""Client for the native TCP protocol: handshake, queries, inserts and pings."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Union

from .block import Block
from .columns.factory import create_column_by_type
from .errors import ExceptionInfo, ServerException
from .net import SocketConnection
from .protocol import ClientCode, CompressionState, ServerCode, Stage
from .query import (
    Profile,
    Progress,
    Query,
    QueryEvents,
    SelectCallback,
    SelectCancelableCallback,
)
from .wire import ProtocolError, WireReader, WireWriter

DBMS_NAME = "ClickHouse"
DBMS_VERSION_MAJOR = 1
DBMS_VERSION_MINOR = 1
REVISION = 54126

MIN_REVISION_WITH_TEMPORARY_TABLES = 50264
MIN_REVISION_WITH_TOTAL_ROWS_IN_PROGRESS = 51554
MIN_REVISION_WITH_BLOCK_INFO = 51903
MIN_REVISION_WITH_CLIENT_INFO = 54032
MIN_REVISION_WITH_SERVER_TIMEZONE = 54058
MIN_REVISION_WITH_QUOTA_KEY_IN_CLIENT_INFO = 54060

CLIENT_NAME = f"{DBMS_NAME} client"
INITIAL_ADDRESS = "[::ffff:127.0.0.1]:0"
QUERY_KIND_INITIAL = 1
INTERFACE_TCP = 1

_NO_PASSWORD = ""


class CompressionMethod(IntEnum):
    """Methods of block compression."""

    NONE = -1
    LZ4 = 1


@dataclass
class ClientOptions:
    """Connection and behaviour settings of a client."""

    host: str = ""
    port: int = 9000
    default_database: str = "default"
    user: str = "default"
    password: str = _NO_PASSWORD
    # Raise ServerException for server errors instead of only reporting them to the query.
    rethrow_exceptions: bool = True
    ping_before_query: bool = False
    send_retries: int = 1
    retry_timeout: float = 5.0
    compression_method: CompressionMethod = CompressionMethod.NONE
    tcp_keepalive: bool = False
    tcp_keepalive_idle: int = 60
    tcp_keepalive_intvl: int = 5
    tcp_keepalive_cnt: int = 3

    def __str__(self) -> str:
        method = "LZ4" if self.compression_method == CompressionMethod.LZ4 else "None"
        return (
            f"Client({self.user}@{self.host}:{self.port}"
            f" ping_before_query:{int(self.ping_before_query)}"
            f" send_retries:{self.send_retries}"
            f" retry_timeout:{self.retry_timeout:g}"
            f" compression_method:{method})"
        )


@dataclass
class ServerInfo:
    """What the server told about itself during the handshake."""

    name: str = ""
    timezone: str = ""
    version_major: int = 0
    version_minor: int = 0
    revision: int = 0


class Client:
    """A connection to one server; connects and handshakes on creation."""

    def __init__(self, options: Optional[ClientOptions] = None) -> None:
        self.options = options if options is not None else ClientOptions()
        if self.options.compression_method != CompressionMethod.NONE:
            raise ValueError(
                f"compression method {self.options.compression_method.name} is not supported"
            )
        self._compression = CompressionState.DISABLE
        self._events: Optional[QueryEvents] = None
        self._conn: Optional[SocketConnection] = None
        self._reader: Optional[WireReader] = None
        self._writer: Optional[WireWriter] = None
        self.server_info = ServerInfo()

        attempt = 0
        while True:
            try:
                self.reset_connection()
                break
            except OSError:
                attempt += 1
                if attempt > self.options.send_retries:
                    raise
                time.sleep(self.options.retry_timeout)

    # -- public API -----------------------------------------------------

    def execute(self, query: Union[Query, str]) -> None:
        """Run a query, delivering its events to the query's callbacks."""
        if isinstance(query, str):
            query = Query(query)
        self._events = query
        try:
            if self.options.ping_before_query:
                self._retry_guard(self.ping)
            self._send_query(query.text)
            while self._receive_packet()[1]:
                pass
        finally:
            self._events = None

    def select(
        self, query: Union[Query, str], callback: Optional[SelectCallback] = None
    ) -> None:
        """Run a select query; ``callback`` gets each received block."""
        if isinstance(query, str):
            query = Query(query)
        if callback is not None:
            query.on_data(callback)
        self.execute(query)

    def select_cancelable(self, query: str, callback: SelectCancelableCallback) -> None:
        """Run a select query that is cancelled when ``callback`` returns False."""
        self.execute(Query(query).on_data_cancelable(callback))

    def insert(self, table_name: str, block: Block) -> None:
        """Insert the rows of ``block`` into ``table_name``."""
        if self.options.ping_before_query:
            self._retry_guard(self.ping)

        fields = ",".join(item.name for item in block)
        self._send_query(f"INSERT INTO {table_name} ( {fields} ) VALUES")

        while True:
            code, ok = self._receive_packet()
            if not ok:
                raise ProtocolError("fail to receive data packet")
            if code == ServerCode.DATA:
                break

        self._send_data(block)
        # An empty block marks the end of the data.
        self._send_data(Block())

        while self._receive_packet()[1]:
            pass

    def ping(self) -> None:
        """Check that the server answers; raises ProtocolError otherwise."""
        writer = self._wire_writer()
        writer.write_varint(ClientCode.PING)
        writer.flush()
        code, ok = self._receive_packet()
        if not ok or code != ServerCode.PONG:
            raise ProtocolError("fail to ping server")

    def reset_connection(self) -> None:
        """Open a new connection with the initial options and handshake again."""
        conn = SocketConnection(self.options.host, self.options.port)
        if self.options.tcp_keepalive:
            conn.set_tcp_keepalive(
                self.options.tcp_keepalive_idle,
                self.options.tcp_keepalive_intvl,
                self.options.tcp_keepalive_cnt,
            )
        if self._conn is not None:
            self._conn.close()
        self._conn = conn
        self._reader = WireReader(conn)
        self._writer = WireWriter(conn)
        if not self._handshake():
            raise ProtocolError(f"fail to connect to {self.options.host}")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._reader = None
            self._writer = None

    def __enter__(self) -> Client:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- internals -------------------------------------------------------

    def _wire_reader(self) -> WireReader:
        if self._reader is None:
            raise ConnectionError("client is closed")
        return self._reader

    def _wire_writer(self) -> WireWriter:
        if self._writer is None:
            raise ConnectionError("client is closed")
        return self._writer

    def _retry_guard(self, func: Callable[[], None]) -> None:
        """Call ``func``, reconnecting and retrying on network errors."""
        for _ in range(self.options.send_retries + 1):
            try:
                func()
                return
            except OSError as exc:
                try:
                    time.sleep(self.options.retry_timeout)
                    self.reset_connection()
                except Exception:
                    raise exc from None

    def _handshake(self) -> bool:
        self._send_hello()
        return self._receive_hello()

    def _send_hello(self) -> None:
        writer = self._wire_writer()
        writer.write_varint(ClientCode.HELLO)
        writer.write_string(CLIENT_NAME)
        writer.write_varint(DBMS_VERSION_MAJOR)
        writer.write_varint(DBMS_VERSION_MINOR)
        writer.write_varint(REVISION)
        writer.write_string(self.options.default_database)
        writer.write_string(self.options.user)
        writer.write_string(self.options.password)
        writer.flush()

    def _receive_hello(self) -> bool:
        reader = self._wire_reader()
        code = reader.read_varint()
        if code == ServerCode.HELLO:
            info = ServerInfo()
            info.name = reader.read_string()
            info.version_major = reader.read_varint()
            info.version_minor = reader.read_varint()
            info.revision = reader.read_varint()
            if info.revision >= MIN_REVISION_WITH_SERVER_TIMEZONE:
                info.timezone = reader.read_string()
            self.server_info = info
            return True
        if code == ServerCode.EXCEPTION:
            self._receive_exception(rethrow=True)
        return False

    def _receive_packet(self) -> tuple[int, bool]:
        """Read one server packet; returns its code and whether more packets follow."""
        reader = self._wire_reader()
        code = reader.read_varint()

        if code == ServerCode.DATA:
            self._receive_data()
            return code, True

        if code == ServerCode.EXCEPTION:
            self._receive_exception()
            return code, False

        if code == ServerCode.PROFILE_INFO:
            profile = Profile()
            profile.rows = reader.read_varint()
            profile.blocks = reader.read_varint()
            profile.bytes = reader.read_varint()
            profile.applied_limit = bool(reader.read_fixed("?"))
            profile.rows_before_limit = reader.read_varint()
            profile.calculated_rows_before_limit = bool(reader.read_fixed("?"))
            if self._events is not None:
                self._events.handle_profile(profile)
            return code, True

        if code == ServerCode.PROGRESS:
            progress = Progress()
            progress.rows = reader.read_varint()
            progress.bytes = reader.read_varint()
            if REVISION >= MIN_REVISION_WITH_TOTAL_ROWS_IN_PROGRESS:
                progress.total_rows = reader.read_varint()
            if self._events is not None:
                self._events.handle_progress(progress)
            return code, True

        if code == ServerCode.PONG:
            return code, True

        if code == ServerCode.END_OF_STREAM:
            if self._events is not None:
                self._events.handle_finish()
            return code, False

        raise ProtocolError(f"unimplemented {code}")

    def _read_block(self, reader: WireReader) -> Block:
        block = Block()
        if REVISION >= MIN_REVISION_WITH_BLOCK_INFO:
            reader.read_varint()
            block.info.is_overflows = reader.read_fixed("B")
            reader.read_varint()
            block.info.bucket_num = reader.read_fixed("i")
            reader.read_varint()

        num_columns = reader.read_varint()
        num_rows = reader.read_varint()
        for _ in range(num_columns):
            name = reader.read_string()
            type_name = reader.read_string()
            try:
                column = create_column_by_type(type_name)
            except ValueError as exc:
                raise ProtocolError(f"unsupported column type: {type_name}") from exc
            if num_rows:
                column.load(reader, num_rows)
            block.append_column(name, column)
        return block

    def _receive_data(self) -> None:
        reader = self._wire_reader()
        if REVISION >= MIN_REVISION_WITH_TEMPORARY_TABLES:
            reader.read_string()  # temporary table name
        block = self._read_block(reader)
        if self._events is not None:
            self._events.handle_data(block)
            if not self._events.handle_data_cancelable(block):
                self._send_cancel()

    def _receive_exception(self, rethrow: bool = False) -> None:
        reader = self._wire_reader()
        chain = []
        while True:
            code = reader.read_fixed("i")
            name = reader.read_string()
            display_text = reader.read_string()
            stack_trace = reader.read_string()
            has_nested = reader.read_fixed("?")
            chain.append((code, name, display_text, stack_trace))
            if not has_nested:
                break

        info: Optional[ExceptionInfo] = None
        for code, name, display_text, stack_trace in reversed(chain):
            info = ExceptionInfo(
                code=code,
                name=name,
                display_text=display_text,
                stack_trace=stack_trace,
                nested=info,
            )

        if self._events is not None:
            self._events.handle_server_exception(info)
        if rethrow or self.options.rethrow_exceptions:
            raise ServerException(info)

    def _send_cancel(self) -> None:
        writer = self._wire_writer()
        writer.write_varint(ClientCode.CANCEL)
        writer.flush()

    def _send_query(self, text: str) -> None:
        writer = self._wire_writer()
        writer.write_varint(ClientCode.QUERY)
        writer.write_string("")  # query id

        revision = self.server_info.revision
        if revision >= MIN_REVISION_WITH_CLIENT_INFO:
            writer.write_fixed("B", QUERY_KIND_INITIAL)
            writer.write_string("")  # initial user
            writer.write_string("")  # initial query id
            writer.write_string(INITIAL_ADDRESS)
            writer.write_fixed("B", INTERFACE_TCP)
            writer.write_string("")  # os user
            writer.write_string("")  # client hostname
            writer.write_string(CLIENT_NAME)
            writer.write_varint(DBMS_VERSION_MAJOR)
            writer.write_varint(DBMS_VERSION_MINOR)
            writer.write_varint(REVISION)
            if revision >= MIN_REVISION_WITH_QUOTA_KEY_IN_CLIENT_INFO:
                writer.write_string("")  # quota key

        writer.write_string("")  # per-query settings
        writer.write_varint(Stage.COMPLETE)
        writer.write_varint(self._compression)
        writer.write_string(text)
        # An empty block marks the end of the data.
        self._send_data(Block())
        writer.flush()

    def _write_block(self, block: Block, writer: WireWriter) -> None:
        if self.server_info.revision >= MIN_REVISION_WITH_BLOCK_INFO:
            writer.write_varint(1)
            writer.write_fixed("B", block.info.is_overflows)
            writer.write_varint(2)
            writer.write_fixed("i", block.info.bucket_num)
            writer.write_varint(0)

        writer.write_varint(block.column_count)
        writer.write_varint(block.row_count)
        for item in block:
            writer.write_string(item.name)
            writer.write_string(item.type.name)
            item.column.save(writer)

    def _send_data(self, block: Block) -> None:
        writer = self._wire_writer()
        writer.write_varint(ClientCode.DATA)
        if self.server_info.revision >= MIN_REVISION_WITH_TEMPORARY_TABLES:
            writer.write_string("")
        self._write_block(block, writer)
        writer.flush()