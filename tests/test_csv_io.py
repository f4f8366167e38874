"""Tests for CSV import and export."""

import csv

import pytest

from dbterm.database.adapters import connect_client
from dbterm.database.connection import ConnectionConfig, Engine
from dbterm.database.csv_io import build_insert_statements, export_csv, import_csv, quote_literal
from dbterm.errors import CsvExportError, CsvImportError


@pytest.fixture
async def client(tmp_path):
    config = ConnectionConfig(Engine.SQLITE, f"sqlite:///{tmp_path / 'csv.db'}")
    client = await connect_client(config)
    await client.execute("CREATE TABLE people (name TEXT, city TEXT)")
    yield client
    await client.close()


def write_csv(path, rows):
    with open(path, "w", newline="", encoding="utf-8") as handle:
        csv.writer(handle).writerows(rows)
    return path


class TestBuildInsertStatements:
    def test_quote_literal(self):
        assert quote_literal("O'Brien") == "'O''Brien'"

    def test_one_insert_per_record(self, tmp_path):
        path = write_csv(tmp_path / "people.csv", [["name", "city"], ["Ann", "Oslo"], ["O'Neil", "Cork"]])

        assert build_insert_statements("people", path) == [
            "INSERT INTO people (name, city) VALUES ('Ann', 'Oslo')",
            "INSERT INTO people (name, city) VALUES ('O''Neil', 'Cork')",
        ]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")
        with pytest.raises(CsvImportError, match="empty"):
            build_insert_statements("people", path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CsvImportError, match="Failed to read"):
            build_insert_statements("people", tmp_path / "missing.csv")

    def test_ragged_record(self, tmp_path):
        path = write_csv(tmp_path / "bad.csv", [["name", "city"], ["Ann"]])
        with pytest.raises(CsvImportError, match="expected 2 values, got 1"):
            build_insert_statements("people", path)

    def test_bad_header(self, tmp_path):
        path = write_csv(tmp_path / "bad.csv", [["name", "home city"], ["Ann", "Oslo"]])
        with pytest.raises(CsvImportError, match="Invalid CSV header"):
            build_insert_statements("people", path)


class TestImportExport:
    async def test_import_then_export(self, client, tmp_path):
        source = write_csv(tmp_path / "in.csv", [["name", "city"], ["Ann", "Oslo"], ["Bo", "Rome"]])
        assert await import_csv(client, "people", source) == 2

        await client.execute("INSERT INTO people (name) VALUES ('Cy')")
        target = tmp_path / "out.csv"
        assert await export_csv(client, "people", target) == 3

        with open(target, newline="", encoding="utf-8") as handle:
            rows = list(csv.reader(handle))
        assert rows == [["name", "city"], ["Ann", "Oslo"], ["Bo", "Rome"], ["Cy", "NULL"]]

    async def test_export_missing_table(self, client, tmp_path):
        with pytest.raises(CsvExportError, match="Failed to read"):
            await export_csv(client, "missing", tmp_path / "out.csv")

    async def test_export_unwritable_path(self, client, tmp_path):
        with pytest.raises(CsvExportError, match="Failed to write"):
            await export_csv(client, "people", tmp_path / "no-such-dir" / "out.csv")
