"""DDL statement builders and helpers that apply them through a client.

Each helper is a single round trip; nothing here groups statements into a
transaction.
"""

import re
from typing import Sequence

from ..errors import ConfigurationError
from .adapters import EngineClient
from .schema import ColumnSchema

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")


def check_identifier(name: str) -> str:
    """Reject anything that is not a plain SQL identifier.

    Raises:
        ConfigurationError: If ``name`` would need quoting
    """
    if not _IDENTIFIER.match(name or ""):
        raise ConfigurationError(
            f"Invalid identifier: {name!r}\n"
            f"  Hint: Use letters, digits, '_' or '$', not starting with a digit"
        )
    return name


def column_definition(column: ColumnSchema) -> str:
    parts = [check_identifier(column.name), column.data_type]
    if not column.is_nullable:
        parts.append("NOT NULL")
    if column.default is not None:
        parts.append(f"DEFAULT {column.default}")
    return " ".join(parts)


def create_table_sql(table_name: str, columns: Sequence[ColumnSchema]) -> str:
    if not columns:
        raise ConfigurationError(f"Table {table_name!r} needs at least one column")
    definitions = ", ".join(column_definition(column) for column in columns)
    return f"CREATE TABLE {check_identifier(table_name)} ({definitions})"


def drop_table_sql(table_name: str) -> str:
    return f"DROP TABLE IF EXISTS {check_identifier(table_name)}"


def index_name(table_name: str, column_name: str) -> str:
    return f"idx_{table_name}_{column_name}"


def create_index_sql(table_name: str, column_name: str) -> str:
    check_identifier(table_name)
    check_identifier(column_name)
    return f"CREATE INDEX {index_name(table_name, column_name)} ON {table_name} ({column_name})"


def drop_index_sql(name: str) -> str:
    return f"DROP INDEX IF EXISTS {check_identifier(name)}"


def add_unique_constraint_sql(table_name: str, column_name: str) -> str:
    check_identifier(table_name)
    check_identifier(column_name)
    return (
        f"ALTER TABLE {table_name} ADD CONSTRAINT unique_{table_name}_{column_name} "
        f"UNIQUE ({column_name})"
    )


def add_foreign_key_sql(table_name: str, column_name: str, foreign_table: str, foreign_column: str) -> str:
    for name in (table_name, column_name, foreign_table, foreign_column):
        check_identifier(name)
    return (
        f"ALTER TABLE {table_name} ADD CONSTRAINT fk_{table_name}_{column_name} "
        f"FOREIGN KEY ({column_name}) REFERENCES {foreign_table}({foreign_column})"
    )


async def create_table(client: EngineClient, table_name: str, columns: Sequence[ColumnSchema]) -> None:
    await client.execute(create_table_sql(table_name, columns))


async def drop_table(client: EngineClient, table_name: str) -> None:
    await client.execute(drop_table_sql(table_name))


async def create_index(client: EngineClient, table_name: str, column_name: str) -> None:
    await client.execute(create_index_sql(table_name, column_name))


async def drop_index(client: EngineClient, name: str) -> None:
    await client.execute(drop_index_sql(name))


async def add_unique_constraint(client: EngineClient, table_name: str, column_name: str) -> None:
    await client.execute(add_unique_constraint_sql(table_name, column_name))


async def add_foreign_key(
    client: EngineClient,
    table_name: str,
    column_name: str,
    foreign_table: str,
    foreign_column: str,
) -> None:
    await client.execute(add_foreign_key_sql(table_name, column_name, foreign_table, foreign_column))
