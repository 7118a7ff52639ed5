import io

import pytest

from clickwire.columns.numeric import ColumnUInt32, ColumnUInt64
from clickwire.columns.uuid import ColumnUUID
from clickwire.wire import WireReader, WireWriter


def make_uuids():
    return [
        0xBB6A8C699AB2414C, 0x86697B7FD27F0825,
        0x84B9F24BC26B49C6, 0xA03B4AB723341951,
        0x3507213C178649F9, 0x9FAF035D662F60AE,
    ]


def test_uuid_init():
    col = ColumnUUID(ColumnUInt64(make_uuids()))
    assert len(col) == 3
    assert col[0] == (0xBB6A8C699AB2414C, 0x86697B7FD27F0825)
    assert col[2] == (0x3507213C178649F9, 0x9FAF035D662F60AE)


def test_uuid_slice():
    col = ColumnUUID(ColumnUInt64(make_uuids()))
    sub = col.slice(1, 2)
    assert len(sub) == 2
    assert sub[0] == (0x84B9F24BC26B49C6, 0xA03B4AB723341951)
    assert sub[1] == (0x3507213C178649F9, 0x9FAF035D662F60AE)


def test_odd_count_rejected():
    with pytest.raises(ValueError):
        ColumnUUID(ColumnUInt64([1, 2, 3]))


def test_wrong_data_column_rejected():
    with pytest.raises(TypeError):
        ColumnUUID(ColumnUInt32([1, 2]))


def test_round_trip():
    col = ColumnUUID(ColumnUInt64(make_uuids()))
    buf = io.BytesIO()
    writer = WireWriter(buf)
    col.save(writer)
    writer.flush()
    assert len(buf.getvalue()) == len(col) * 16
    loaded = ColumnUUID()
    loaded.load(WireReader(io.BytesIO(buf.getvalue())), len(col))
    assert list(loaded) == list(col)


def test_append_and_append_column():
    col = ColumnUUID()
    col.append((1, 2))
    other = ColumnUUID()
    other.append((3, 4))
    col.append_column(other)
    assert list(col) == [(1, 2), (3, 4)]
    assert col[-1] == (3, 4)


def test_index_out_of_range_and_clear():
    col = ColumnUUID()
    col.append((1, 2))
    with pytest.raises(IndexError):
        col[1]
    col.clear()
    assert len(col) == 0
    assert col.type.name == "UUID"