"""Tests for text coercion and result/schema formatting."""

import datetime
import decimal
import uuid

import pytest

from dbterm.database.formatting import (
    CoercionError,
    format_column_line,
    format_table_schema,
    result_cells,
    result_headers,
    to_text,
)
from dbterm.database.schema import ColumnSchema, TableSchema


class TestToText:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, None),
            ("abc", "abc"),
            (True, "true"),
            (False, "false"),
            (42, "42"),
            (1.5, "1.5"),
            (decimal.Decimal("10.25"), "10.25"),
            (datetime.date(2024, 3, 1), "2024-03-01"),
            (datetime.datetime(2024, 3, 1, 12, 30), "2024-03-01T12:30:00"),
            (datetime.timedelta(hours=1), "1:00:00"),
            (b"bytes", "bytes"),
            ({"a": 1}, '{"a": 1}'),
            ([1, 2], "[1, 2]"),
        ],
    )
    def test_supported_values(self, value, expected):
        assert to_text(value) == expected

    def test_uuid(self):
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert to_text(value) == "12345678-1234-5678-1234-567812345678"

    def test_invalid_utf8(self):
        with pytest.raises(CoercionError):
            to_text(b"\xff\xfe")

    def test_unsupported_type(self):
        with pytest.raises(CoercionError, match="unsupported type"):
            to_text(object())


class TestSchemaFormatting:
    def test_column_line_without_default(self):
        column = ColumnSchema("name", "text", is_nullable=True)
        assert format_column_line(column) == "name: text (Nullable: True, Default: None)"

    def test_column_line_with_default(self, users_schema):
        assert format_column_line(users_schema.columns[0]) == (
            "id: integer (Nullable: False, Default: nextval('users_id_seq'::regclass))"
        )

    def test_table_schema_is_titled(self, users_schema):
        lines = format_table_schema(users_schema)
        assert lines[0] == "users"
        assert len(lines) == 3

    def test_empty_table(self):
        assert format_table_schema(TableSchema("empty")) == ["empty"]


class TestResultGrid:
    def test_headers_from_first_row(self):
        rows = [{"id": "1", "name": "a"}, {"id": "2", "name": "b"}]
        assert result_headers(rows) == ["id", "name"]
        assert result_cells(rows) == [["1", "a"], ["2", "b"]]

    def test_missing_key_and_none_render_null(self):
        rows = [{"id": "1", "name": None}, {"id": "2"}]
        assert result_cells(rows) == [["1", "NULL"], ["2", "NULL"]]

    def test_empty_result(self):
        assert result_headers([]) == []
        assert result_cells([]) == []
