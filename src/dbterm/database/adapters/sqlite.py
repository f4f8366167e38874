"""SQLite database client implementation."""

import logging
import sqlite3
from typing import Any

from ...constants import DB_POOL_SIZE, DB_QUERY_TIMEOUT
from ..connection import Engine, parse_dsn
from ..schema import ColumnSchema, TableSchema
from .base import EngineClient

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"

LIST_TABLES_SQL = "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class SQLiteClient(EngineClient):
    """SQLite client on the standard library driver.

    An in-memory database exists per connection, so ``sqlite:///:memory:``
    forces a pool of one.
    """

    engine = Engine.SQLITE
    driver_errors = (sqlite3.Error,)

    def __init__(self, dsn: str, timeout: float = DB_QUERY_TIMEOUT, pool_size: int = DB_POOL_SIZE):
        """Initialize SQLite client.

        Args:
            dsn: sqlite:///path/to/database.db
            timeout: Busy timeout in seconds
            pool_size: Maximum pooled connections
        """
        self.database_path = parse_dsn(dsn)["database"] or MEMORY_DATABASE
        if self.database_path == MEMORY_DATABASE:
            pool_size = 1
        super().__init__(dsn, timeout, pool_size)

    def _open_connection(self) -> Any:
        connection = sqlite3.connect(
            self.database_path,
            timeout=self.timeout,
            isolation_level=None,  # autocommit; transactions are explicit
            check_same_thread=False,  # pooled connections move between worker threads
        )

        # Enable dictionary rows
        connection.row_factory = sqlite3.Row
        connection.execute(f"PRAGMA busy_timeout = {int(self.timeout * 1000)}")

        logger.info(f"Connected to SQLite database: {self.database_path}")
        return connection

    def _cursor(self, connection: Any) -> Any:
        return connection.cursor()

    def _begin(self, connection: Any) -> None:
        connection.execute("BEGIN")

    def _is_timeout(self, error: Exception) -> bool:
        return isinstance(error, sqlite3.OperationalError) and "locked" in str(error).lower()

    def _fetch_databases(self, connection: Any) -> list[str]:
        return [row["name"] for row in self._fetch_rows(connection, "PRAGMA database_list")]

    def _fetch_tables(self, connection: Any) -> list[str]:
        return [row["name"] for row in self._fetch_rows(connection, LIST_TABLES_SQL)]

    def _describe(self, connection: Any, table_name: str) -> TableSchema:
        # PRAGMA table_info returns no rows for an unknown table
        rows = self._fetch_rows(connection, f"PRAGMA table_info({quote_identifier(table_name)})")
        columns = tuple(
            ColumnSchema(
                name=row["name"],
                data_type=row["type"],
                is_nullable=not row["notnull"] and not row["pk"],
                default=row["dflt_value"],
            )
            for row in rows
        )
        return TableSchema(table_name=table_name, columns=columns)
