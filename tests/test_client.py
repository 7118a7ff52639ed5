import io
import socket
import threading

import pytest

from clickwire.block import Block
from clickwire.client import Client, ClientOptions, CompressionMethod
from clickwire.columns.factory import create_column_by_type
from clickwire.columns.numeric import ColumnUInt64
from clickwire.columns.string import ColumnString
from clickwire.errors import ServerException
from clickwire.query import Query
from clickwire.wire import ProtocolError, WireReader, WireWriter

FULL_REVISION = 54126
OLD_REVISION = 50000


def encode(build):
    buf = io.BytesIO()
    writer = WireWriter(buf)
    build(writer)
    writer.flush()
    return buf.getvalue()


def hello_reply(revision):
    def build(w):
        w.write_varint(0)
        w.write_string("ClickHouse")
        w.write_varint(1)
        w.write_varint(1)
        w.write_varint(revision)
        if revision >= 54058:
            w.write_string("UTC")

    return encode(build)


def data_packet(columns):
    def build(w):
        w.write_varint(1)
        w.write_string("")
        w.write_varint(1)
        w.write_fixed("B", 0)
        w.write_varint(2)
        w.write_fixed("i", -1)
        w.write_varint(0)
        w.write_varint(len(columns))
        w.write_varint(len(columns[0][1]) if columns else 0)
        for name, column in columns:
            w.write_string(name)
            w.write_string(column.type.name)
            column.save(w)

    return encode(build)


def progress_packet(rows, size, total):
    def build(w):
        w.write_varint(3)
        w.write_varint(rows)
        w.write_varint(size)
        w.write_varint(total)

    return encode(build)


def exception_packet(*chain):
    def build(w):
        w.write_varint(2)
        for position, (code, name, text) in enumerate(chain):
            w.write_fixed("i", code)
            w.write_string(name)
            w.write_string(text)
            w.write_string("trace")
            w.write_fixed("?", position < len(chain) - 1)

    return encode(build)


def code_packet(code):
    return encode(lambda w: w.write_varint(code))


def read_client_hello(r):
    return {
        "code": r.read_varint(),
        "client": r.read_string(),
        "major": r.read_varint(),
        "minor": r.read_varint(),
        "revision": r.read_varint(),
        "database": r.read_string(),
        "user": r.read_string(),
        "password": r.read_string(),
    }


def read_data(r, revision):
    code = r.read_varint()
    if revision >= 50264:
        r.read_string()
    if revision >= 51903:
        r.read_varint()
        r.read_fixed("B")
        r.read_varint()
        r.read_fixed("i")
        r.read_varint()
    ncols = r.read_varint()
    nrows = r.read_varint()
    columns = []
    for _ in range(ncols):
        name = r.read_string()
        type_name = r.read_string()
        column = create_column_by_type(type_name)
        if nrows:
            column.load(r, nrows)
        columns.append((name, type_name, list(column)))
    return {"code": code, "columns": columns}


def read_query(r, revision):
    result = {"code": r.read_varint(), "id": r.read_string()}
    if revision >= 54032:
        result["kind"] = r.read_fixed("B")
        r.read_string()
        r.read_string()
        result["address"] = r.read_string()
        result["iface"] = r.read_fixed("B")
        r.read_string()
        r.read_string()
        result["client_name"] = r.read_string()
        r.read_varint()
        r.read_varint()
        result["revision"] = r.read_varint()
        if revision >= 54060:
            r.read_string()
    result["settings"] = r.read_string()
    result["stage"] = r.read_varint()
    result["compression"] = r.read_varint()
    result["text"] = r.read_string()
    result["end"] = read_data(r, revision)
    return result


class FakeServer:
    def __init__(self, handler, revision=FULL_REVISION, greet=True):
        self.revision = revision
        self.seen = {}
        self.error = None
        self._listener = socket.create_server(("127.0.0.1", 0))
        self._listener.settimeout(5)
        self.port = self._listener.getsockname()[1]
        self._thread = threading.Thread(target=self._run, args=(handler, greet), daemon=True)
        self._thread.start()

    def _run(self, handler, greet):
        try:
            conn, _ = self._listener.accept()
            conn.settimeout(5)
            with conn, conn.makefile("rb") as rfile:
                reader = WireReader(rfile)
                if greet:
                    self.seen["hello"] = read_client_hello(reader)
                    conn.sendall(hello_reply(self.revision))
                handler(self, reader, conn.sendall)
        except Exception as exc:
            self.error = exc

    def options(self, **kwargs):
        return ClientOptions(host="127.0.0.1", port=self.port, **kwargs)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self._thread.join(5)
        self._listener.close()


def idle(server, reader, send):
    pass


def test_handshake_sends_client_identity():
    with FakeServer(idle) as server:
        with Client(server.options()) as client:
            info = client.server_info
    hello = server.seen["hello"]
    assert hello["client"] == "ClickHouse client"
    assert hello["revision"] == 54126
    assert (hello["database"], hello["user"]) == ("default", "default")
    assert (info.name, info.revision, info.timezone) == ("ClickHouse", FULL_REVISION, "UTC")


def test_ping_gets_pong():
    def handler(server, reader, send):
        server.seen["ping"] = reader.read_varint()
        send(code_packet(4))

    with FakeServer(handler) as server:
        with Client(server.options()) as client:
            client.ping()
    assert server.seen["ping"] == 4
    assert server.error is None


def test_ping_without_pong_fails():
    def handler(server, reader, send):
        reader.read_varint()
        send(code_packet(5))

    with FakeServer(handler) as server:
        with Client(server.options()) as client:
            with pytest.raises(ProtocolError, match="fail to ping server"):
                client.ping()


def test_select_delivers_blocks_and_progress():
    def handler(server, reader, send):
        server.seen["query"] = read_query(reader, server.revision)
        send(progress_packet(3, 24, 3))
        send(data_packet([("id", ColumnUInt64([1, 3, 5])), ("name", ColumnString(["id", "foo", "bar"]))]))
        send(code_packet(5))

    rows = []
    progress = []
    with FakeServer(handler) as server:
        with Client(server.options()) as client:
            query = Query("SELECT id, name FROM t").on_progress(progress.append)
            query.on_data(lambda block: rows.extend(zip(block[0], block[1])))
            client.select(query)
    sent = server.seen["query"]
    assert sent["text"] == "SELECT id, name FROM t"
    assert sent["client_name"] == "ClickHouse client"
    assert sent["address"] == "[::ffff:127.0.0.1]:0"
    assert sent["stage"] == 2
    assert sent["end"]["columns"] == []
    assert rows == [(1, "id"), (3, "foo"), (5, "bar")]
    assert [(p.rows, p.bytes, p.total_rows) for p in progress] == [(3, 24, 3)]


def test_select_callback_with_old_server_revision():
    def handler(server, reader, send):
        server.seen["query"] = read_query(reader, server.revision)
        send(data_packet([("n", ColumnUInt64([7, 9]))]))
        send(code_packet(5))

    seen = []
    with FakeServer(handler, revision=OLD_REVISION) as server:
        with Client(server.options()) as client:
            client.select("SELECT n", lambda block: seen.extend(block[0]))
    assert "client_name" not in server.seen["query"]
    assert server.seen["query"]["text"] == "SELECT n"
    assert seen == [7, 9]


def test_ping_before_query():
    def handler(server, reader, send):
        server.seen["ping"] = reader.read_varint()
        send(code_packet(4))
        server.seen["query"] = read_query(reader, server.revision)
        send(code_packet(5))

    with FakeServer(handler) as server:
        with Client(server.options(ping_before_query=True)) as client:
            client.execute("SELECT 1")
    assert server.seen["ping"] == 4
    assert server.seen["query"]["text"] == "SELECT 1"


def test_select_cancelable_sends_cancel():
    def handler(server, reader, send):
        read_query(reader, server.revision)
        send(data_packet([("x", ColumnUInt64([1, 2]))]))
        server.seen["cancel"] = reader.read_varint()
        send(code_packet(5))

    counts = []

    def on_block(block):
        counts.append(block.row_count)
        return False

    with FakeServer(handler) as server:
        with Client(server.options()) as client:
            client.select_cancelable("SELECT x", on_block)
    assert server.seen["cancel"] == 3
    assert counts == [2]


def test_insert_sends_block():
    def handler(server, reader, send):
        server.seen["query"] = read_query(reader, server.revision)
        send(data_packet([]))
        server.seen["data"] = read_data(reader, server.revision)
        server.seen["end"] = read_data(reader, server.revision)
        send(code_packet(5))

    block = Block()
    block.append_column("id", ColumnUInt64([1, 3]))
    block.append_column("name", ColumnString(["id", "foo"]))

    with FakeServer(handler) as server:
        with Client(server.options()) as client:
            client.insert("test.client", block)
    assert server.seen["query"]["text"] == "INSERT INTO test.client ( id,name ) VALUES"
    assert server.seen["data"]["columns"] == [
        ("id", "UInt64", [1, 3]),
        ("name", "String", ["id", "foo"]),
    ]
    assert server.seen["end"]["columns"] == []


def test_insert_without_data_packet_fails():
    def handler(server, reader, send):
        read_query(reader, server.revision)
        send(code_packet(5))

    block = Block()
    block.append_column("id", ColumnUInt64([1]))
    with FakeServer(handler) as server:
        with Client(server.options()) as client:
            with pytest.raises(ProtocolError, match="fail to receive data packet"):
                client.insert("t", block)


def test_server_exception_is_raised():
    def handler(server, reader, send):
        read_query(reader, server.revision)
        send(exception_packet((57, "DB::Exception", "table exists")))

    with FakeServer(handler) as server:
        with Client(server.options()) as client:
            with pytest.raises(ServerException):
                client.execute("CREATE TABLE t (x UInt8) ENGINE = Memory")


def test_server_exception_reported_to_callback():
    def handler(server, reader, send):
        read_query(reader, server.revision)
        send(exception_packet((62, "DB::Exception", "outer"), (1002, "std::exception", "inner")))

    received = []
    with FakeServer(handler) as server:
        with Client(server.options(rethrow_exceptions=False)) as client:
            client.execute(Query("SELEC").on_exception(received.append))
    assert len(received) == 1
    info = received[0]
    assert (info.code, info.display_text) == (62, "outer")
    assert (info.nested.code, info.nested.display_text) == (1002, "inner")


def test_exception_during_handshake():
    def handler(server, reader, send):
        read_client_hello(reader)
        send(exception_packet((193, "DB::Exception", "wrong credentials")))

    with FakeServer(handler, greet=False) as server:
        with pytest.raises(ServerException):
            Client(server.options())


def test_unknown_packet_is_an_error():
    def handler(server, reader, send):
        read_query(reader, server.revision)
        send(code_packet(7))

    with FakeServer(handler) as server:
        with Client(server.options()) as client:
            with pytest.raises(ProtocolError, match="unimplemented 7"):
                client.execute("SELECT 1")


def test_connection_refused():
    probe = socket.create_server(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    options = ClientOptions(host="127.0.0.1", port=port, send_retries=0, retry_timeout=0)
    with pytest.raises(OSError):
        Client(options)


def test_lz4_compression_rejected():
    options = ClientOptions(host="127.0.0.1", compression_method=CompressionMethod.LZ4)
    with pytest.raises(ValueError):
        Client(options)


def test_options_text():
    options = ClientOptions(host="localhost")
    assert str(options) == (
        "Client(default@localhost:9000 ping_before_query:0 send_retries:1 "
        "retry_timeout:5 compression_method:None)"
    )
    lz4 = ClientOptions(host="localhost", compression_method=CompressionMethod.LZ4)
    assert str(lz4).endswith("compression_method:LZ4)")


def test_options_defaults():
    options = ClientOptions()
    assert options.port == 9000
    assert options.rethrow_exceptions is True
    assert (options.tcp_keepalive_idle, options.tcp_keepalive_intvl, options.tcp_keepalive_cnt) == (60, 5, 3)