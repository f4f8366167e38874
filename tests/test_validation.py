"""Tests for statement classification."""

import pytest

from dbterm.database.validation import is_query, normalize_statement


@pytest.mark.parametrize(
    "statement",
    [
        "SELECT 1",
        "select * from users",
        "   \n\tSeLeCt id FROM t",
        "-- latest rows\nSELECT * FROM t",
        "/* report */ SELECT 1",
    ],
)
def test_queries(statement):
    assert is_query(statement)


@pytest.mark.parametrize(
    "statement",
    [
        "INSERT INTO t VALUES (1)",
        "UPDATE t SET x = 1",
        "CREATE TABLE t (id int)",
        "WITH x AS (SELECT 1) SELECT * FROM x",
        "SHOW TABLES",
        "SELEC 1",
        "",
    ],
)
def test_statements(statement):
    assert not is_query(statement)


def test_normalize_statement():
    assert normalize_statement("  SELECT 1 \n") == "SELECT 1"
    assert normalize_statement(" \n\t ") is None
    assert normalize_statement("") is None
