import io

import pytest

from clickwire.columns.array import ColumnArray
from clickwire.columns.numeric import ColumnUInt64
from clickwire.columns.string import ColumnString
from clickwire.types import TypeCode, create_array, create_simple
from clickwire.wire import WireReader, WireWriter


def _save(column):
    out = io.BytesIO()
    writer = WireWriter(out)
    column.save(writer)
    writer.flush()
    return out.getvalue()


def _growing_array():
    arr = ColumnArray(ColumnUInt64())
    ids = ColumnUInt64()
    for value in (1, 3, 7, 9):
        ids.append(value)
        arr.append_as_column(ids)
    return arr


def test_array_append():
    arr1 = ColumnArray(ColumnUInt64())
    arr2 = ColumnArray(ColumnUInt64())
    ids = ColumnUInt64()
    ids.append(1)
    arr1.append_as_column(ids)
    ids.append(3)
    arr2.append_as_column(ids)

    arr1.append_column(arr2)
    assert len(arr1) == 2
    assert list(arr1.get_as_column(0)) == [1]
    assert list(arr1.get_as_column(1)) == [1, 3]


def test_rows_grow():
    arr = _growing_array()
    values = [1, 3, 7, 9]
    assert len(arr) == 4
    for row, size in enumerate([1, 2, 3, 4]):
        col = arr.get_as_column(row)
        assert len(col) == size
        assert list(col) == values[:size]


def test_type():
    arr = ColumnArray(ColumnUInt64())
    assert arr.type == create_array(create_simple(TypeCode.UINT64))


def test_type_mismatch():
    arr = ColumnArray(ColumnUInt64())
    with pytest.raises(ValueError):
        arr.append_as_column(ColumnString(["a"]))


def test_index_out_of_range():
    with pytest.raises(IndexError):
        _growing_array().get_as_column(4)


def test_roundtrip():
    arr = _growing_array()
    loaded = ColumnArray(ColumnUInt64())
    loaded.load(WireReader(io.BytesIO(_save(arr))), len(arr))
    assert len(loaded) == len(arr)
    for row in range(len(arr)):
        assert list(loaded.get_as_column(row)) == list(arr.get_as_column(row))


def test_load_zero_rows_reads_nothing():
    stream = io.BytesIO(b"\x05")
    arr = ColumnArray(ColumnUInt64())
    arr.load(WireReader(stream), 0)
    assert len(arr) == 0
    assert stream.read() == b"\x05"


def test_slice():
    arr = _growing_array()
    sub = arr.slice(1, 2)
    assert len(sub) == 2
    assert list(sub.get_as_column(0)) == list(arr.get_as_column(1))
    assert list(sub.get_as_column(1)) == list(arr.get_as_column(2))
    assert len(arr.slice(10, 2)) == 0


def test_append_column_ignores_other_types_and_clear():
    arr = _growing_array()
    other = ColumnArray(ColumnString())
    other.append_as_column(ColumnString(["x"]))
    arr.append_column(other)
    assert len(arr) == 4
    arr.clear()
    assert len(arr) == 0