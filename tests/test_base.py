import pytest

from clickwire.columns.base import Column, slice_list
from clickwire.types import create_string


class _ListColumn(Column):
    def __init__(self, values=()):
        super().__init__(create_string())
        self.values = list(values)

    def append_column(self, column):
        self.values.extend(column.values)

    def load(self, reader, rows):
        self.values.extend(reader.read_string() for _ in range(rows))

    def save(self, writer):
        for v in self.values:
            writer.write_string(v)

    def clear(self):
        self.values.clear()

    def __len__(self):
        return len(self.values)

    def slice(self, begin, length):
        return _ListColumn(slice_list(self.values, begin, length))


def test_slice_list_middle():
    assert slice_list([1, 2, 3, 4, 5], 1, 2) == [2, 3]


def test_slice_list_clamps_length():
    assert slice_list([1, 2, 3], 1, 100) == [2, 3]


def test_slice_list_begin_past_end_is_empty():
    assert slice_list([1, 2, 3], 3, 2) == []


def test_slice_list_rejects_negative():
    with pytest.raises(ValueError):
        slice_list([1, 2], -1, 1)


def test_column_is_abstract():
    with pytest.raises(TypeError):
        Column(create_string())


def test_subclass_exposes_type_and_len():
    col = _ListColumn(["a", "b", "c"])
    assert col.type.is_equal(create_string())
    assert col.type.name == "String"
    assert slice_list(col.values, 1, 5) == ["b", "c"]