"""Database access layer for dbterm.

Architecture:
- connection.py: engines, connection configs, DSN handling and connection pooling
- schema.py: table/column/index descriptions returned by introspection
- adapters/: engine-specific clients (PostgreSQL, MySQL, SQLite) behind one contract
- registry.py: owner of the active client
- validation.py: statement classification (query vs. execute)
- formatting.py: text coercion and schema/result formatting
- ddl.py, csv_io.py: statement builders and CSV import/export
"""

from dbterm.database.adapters import EngineClient, Transaction, connect_client, create_client
from dbterm.database.connection import ConnectionConfig, ConnectionPool, Engine, build_dsn, parse_dsn
from dbterm.database.registry import ConnectionRegistry
from dbterm.database.schema import ColumnSchema, IndexSchema, TableSchema
from dbterm.database.validation import is_query

__all__ = [
    "ColumnSchema",
    "ConnectionConfig",
    "ConnectionPool",
    "ConnectionRegistry",
    "Engine",
    "EngineClient",
    "IndexSchema",
    "TableSchema",
    "Transaction",
    "build_dsn",
    "connect_client",
    "create_client",
    "is_query",
    "parse_dsn",
]
