# clickwire

A client for the ClickHouse native TCP protocol. Data travels in columnar
blocks made of typed columns, so values are sent and received without any
text-format conversion. The package has no dependencies outside the
standard library.

## Installation

```
pip install clickwire
```

To install the test dependencies as well:

```
pip install "clickwire[test]"
```

## Connecting

```python
from clickwire.client import Client, ClientOptions

options = ClientOptions(host="localhost", port=9000, user="default")

with Client(options) as client:
    client.ping()
    client.execute("CREATE DATABASE IF NOT EXISTS demo")
```

The client connects and performs the handshake when it is created. If the
connection fails with a network error, it tries again up to `send_retries`
times and waits `retry_timeout` seconds between tries. With
`ping_before_query=True`, every query and insert is preceded by a ping, and
the connection is reset and the ping retried on network errors.

If `tcp_keepalive` is set, TCP keep-alive probes are enabled with
`tcp_keepalive_idle`, `tcp_keepalive_intvl` and `tcp_keepalive_cnt`.

By default (`rethrow_exceptions=True`), an error reported by the server is
raised as `clickwire.errors.ServerException`. Its `code` property holds the
server error code, and its `exception` attribute holds an `ExceptionInfo`
whose `chain()` yields the nested exceptions. `clickwire.errors.ErrorCode`
names the well-known codes.

## Inserting data

Build a `Block` from named columns. Every column in a block must have the
same number of rows, or `append_column` raises `ValueError`.

```python
from clickwire.block import Block
from clickwire.columns.numeric import ColumnUInt64
from clickwire.columns.string import ColumnString

block = Block()
block.append_column("id", ColumnUInt64([1, 3, 5]))
block.append_column("name", ColumnString(["id", "foo", "bar"]))

client.insert("demo.items", block)
```

## Selecting data

The callback is called once for each block the server sends:

```python
def on_block(block):
    for row in range(block.row_count):
        print(block[0][row], block[1][row])

client.select("SELECT id, name FROM demo.items", on_block)
```

Iterating over a block yields `BlockColumn` items that have `name`,
`column` and `type`.

With `select_cancelable`, the callback returns `False` to send a cancel
request to the server.

To attach handlers for data, progress and server exceptions, pass a `Query`
to `execute`:

```python
from clickwire.query import Query

query = (
    Query("SELECT number FROM system.numbers LIMIT 10")
    .on_data(on_block)
    .on_progress(lambda progress: print(progress.rows))
)
client.execute(query)
```

## Column types

Column classes live under `clickwire.columns`:

- numeric columns (`clickwire.columns.numeric`): `ColumnUInt8` … `ColumnUInt64`,
  `ColumnInt8` … `ColumnInt128`, `ColumnFloat32`, `ColumnFloat64`
- strings (`clickwire.columns.string`): `ColumnString`, `ColumnFixedString`
- date and time (`clickwire.columns.date`): `ColumnDate`, `ColumnDateTime`,
  holding Unix timestamps
- `ColumnUUID` (values are pairs of 64-bit halves), `ColumnDecimal` (values
  are unscaled integers; strings such as `"12345.6789"` are accepted),
  `ColumnEnum8` and `ColumnEnum16` (values or names)
- composite columns: `ColumnNullable`, `ColumnArray`, `ColumnTuple`, and
  `ColumnNothing`, whose rows are all `None`

`clickwire.columns.factory.create_column_by_type` builds an empty column
from a type name such as `"Array(Nullable(Int32))"`.
`clickwire.type_parser.parse_type_name` parses a type name into a
`TypeAst` tree, and `clickwire.types` holds the type objects with their
canonical names.

## What the package does not do

- Compression is not supported. `CompressionMethod.LZ4` exists as an
  option value, but a `Client` created with it raises `ValueError`; blocks
  are always sent and read uncompressed.
- Per-query settings are not sent: `QuerySettings` describes them, but the
  client always sends an empty settings section.
- Totals and extremes packets from the server are not handled and raise
  `ProtocolError`.
- A `ColumnNothing` cannot be written to the server.
- There is no command-line tool; the package is a library only.