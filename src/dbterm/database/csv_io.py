"""CSV import into and export out of a table."""

import csv
import logging
from pathlib import Path
from typing import Union

from ..errors import ConfigurationError, CsvExportError, CsvImportError, DbError
from .adapters import EngineClient
from .ddl import check_identifier
from .formatting import NULL_TEXT

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def build_insert_statements(table: str, path: PathLike) -> list[str]:
    """Read a CSV file with a header row and build one INSERT per record.

    Raises:
        CsvImportError: If the file cannot be read or a record is malformed
    """
    check_identifier(table)
    statements = []
    try:
        with open(path, newline="", encoding="utf-8") as handle:
            reader = csv.reader(handle)
            header = next(reader, None)
            if not header:
                raise CsvImportError(f"CSV file {path} is empty")
            try:
                columns = ", ".join(check_identifier(name.strip()) for name in header)
            except ConfigurationError as e:
                raise CsvImportError(f"Invalid CSV header in {path}: {e}") from e
            for line_number, record in enumerate(reader, start=2):
                if not record:
                    continue
                if len(record) != len(header):
                    raise CsvImportError(
                        f"{path}:{line_number}: expected {len(header)} values, got {len(record)}"
                    )
                values = ", ".join(quote_literal(value) for value in record)
                statements.append(f"INSERT INTO {table} ({columns}) VALUES ({values})")
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise CsvImportError(f"Failed to read {path}: {e}") from e
    return statements


async def import_csv(client: EngineClient, table: str, path: PathLike) -> int:
    """Insert every record of ``path`` into ``table``, one statement at a time.

    Returns:
        Number of inserted records
    """
    statements = build_insert_statements(table, path)
    for statement in statements:
        await client.execute(statement)
    logger.info(f"Imported {len(statements)} row(s) from {path} into {table}")
    return len(statements)


async def export_csv(client: EngineClient, table: str, path: PathLike) -> int:
    """Write every row of ``table`` to ``path`` with a header row.

    Returns:
        Number of exported rows

    Raises:
        CsvExportError: If the rows cannot be read or the file cannot be written
    """
    check_identifier(table)
    try:
        rows = await client.query(f"SELECT * FROM {table}")
    except DbError as e:
        raise CsvExportError(f"Failed to read {table}: {e}") from e

    try:
        with open(path, "w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            if rows:
                headers = list(rows[0].keys())
                writer.writerow(headers)
                for row in rows:
                    writer.writerow([NULL_TEXT if row.get(h) is None else row[h] for h in headers])
    except OSError as e:
        raise CsvExportError(f"Failed to write {path}: {e}") from e

    logger.info(f"Exported {len(rows)} row(s) from {table} to {path}")
    return len(rows)
