"""Text formatting of schemas and query results for the terminal."""

import datetime
import decimal
import json
import uuid
from typing import Any, Optional

from .schema import ColumnSchema, TableSchema

NULL_TEXT = "NULL"

Row = dict[str, Optional[str]]


class CoercionError(ValueError):
    """A driver value has no text representation."""


def to_text(value: Any) -> Optional[str]:
    """Convert a driver value to its text form.

    Raises:
        CoercionError: If the value cannot be represented as text
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, decimal.Decimal, uuid.UUID)):
        return str(value)
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, datetime.timedelta):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CoercionError(f"binary value is not valid UTF-8: {e}") from e
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            raise CoercionError(str(e)) from e
    raise CoercionError(f"unsupported type {type(value).__name__}")


def format_column_line(column: ColumnSchema) -> str:
    """One schema line: ``name: type (Nullable: bool, Default: value)``."""
    default = column.default if column.default is not None else "None"
    return f"{column.name}: {column.data_type} (Nullable: {column.is_nullable}, Default: {default})"


def format_table_schema(schema: TableSchema) -> list[str]:
    """Titled list of column lines for a table."""
    return [schema.table_name] + [format_column_line(column) for column in schema.columns]


def result_headers(results: list[Row]) -> list[str]:
    """Header row of a result grid: the keys of the first row."""
    if not results:
        return []
    return list(results[0].keys())


def result_cells(results: list[Row]) -> list[list[str]]:
    """Cell text for every row, aligned with :func:`result_headers`.

    Rows are assumed to share the first row's keys; a missing key or a NULL
    value renders as ``NULL``.
    """
    headers = result_headers(results)
    cells = []
    for row in results:
        line = []
        for header in headers:
            value = row.get(header)
            line.append(NULL_TEXT if value is None else str(value))
        cells.append(line)
    return cells
