"""Tests for tablespine.core.marshal - bind and read paths."""

from dataclasses import dataclass
from typing import Any

import pytest

from tablespine.core.errors import BindEncodingError
from tablespine.core.marshal import bind_all, bind_value, marshal_column, marshal_row
from tablespine.core.pool import SqliteColumn
from tablespine.core.result import Err, Ok
from tablespine.core.values import NULL, Binary, Boolean, Float, Integer, Text


@dataclass
class FakeColumn:
    """NativeColumn whose typed reads are scripted."""

    name: str
    accepts: dict[type, Any]
    is_null: bool = False
    native_type: str = "fake"
    raise_on_read: bool = False

    def try_get(self, kind: type):
        if self.raise_on_read:
            raise AssertionError("typed read attempted on a NULL column")
        if kind in self.accepts:
            return Ok(self.accepts[kind])
        return Err(TypeError(kind.__name__))


class TestBindValue:
    def test_each_kind(self):
        assert bind_value(NULL) is None
        assert bind_value(Integer(7)) == 7
        assert bind_value(Float(0.5)) == 0.5
        assert bind_value(Text("x")) == "x"
        assert bind_value(Binary(b"\x00\x01")) == b"\x00\x01"

    def test_boolean_binds_as_integer(self):
        assert bind_value(Boolean(True)) == 1
        assert bind_value(Boolean(False)) == 0

    def test_non_value_rejected(self):
        with pytest.raises(BindEncodingError):
            bind_value("plain str")

    def test_bind_all_keeps_order(self):
        assert bind_all([Text("a"), Integer(2), NULL]) == ("a", 2, None)


class TestMarshalColumn:
    def test_null_short_circuits_typed_reads(self):
        column = FakeColumn("c", accepts={}, is_null=True, raise_on_read=True)
        assert marshal_column(column) == NULL

    def test_integer_wins_over_later_probes(self):
        column = FakeColumn("c", accepts={int: 5, float: 5.0, str: "5"})
        assert marshal_column(column) == Integer(5)

    def test_float_before_text(self):
        column = FakeColumn("c", accepts={float: 2.5, str: "2.5"})
        assert marshal_column(column) == Float(2.5)

    def test_text(self):
        assert marshal_column(FakeColumn("c", accepts={str: "hi"})) == Text("hi")

    def test_binary(self):
        column = FakeColumn("c", accepts={bytes: bytearray(b"\x01")})
        assert marshal_column(column) == Binary(b"\x01")

    def test_unreadable_becomes_null(self):
        assert marshal_column(FakeColumn("c", accepts={})) == NULL


class TestSqliteColumnProbes:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (3, Integer(3)),
            (3.25, Float(3.25)),
            ("txt", Text("txt")),
            (b"\x01\x02\xff", Binary(b"\x01\x02\xff")),
            (None, NULL),
        ],
    )
    def test_native_values(self, raw, expected):
        assert marshal_column(SqliteColumn("c", raw)) == expected

    def test_row_keeps_store_order(self):
        row = [SqliteColumn("b", 1), SqliteColumn("a", "x")]
        assert list(marshal_row(row)) == ["b", "a"]
