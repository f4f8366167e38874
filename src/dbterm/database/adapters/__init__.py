"""Database clients for the supported engines."""

from ...constants import DB_POOL_SIZE, DB_QUERY_TIMEOUT
from ..connection import ConnectionConfig, Engine
from .base import EngineClient, Transaction
from .mysql import MySQLClient
from .postgresql import PostgreSQLClient
from .sqlite import SQLiteClient

__all__ = [
    "EngineClient",
    "Transaction",
    "MySQLClient",
    "PostgreSQLClient",
    "SQLiteClient",
    "create_client",
    "connect_client",
]

CLIENT_CLASSES: dict[Engine, type[EngineClient]] = {
    Engine.POSTGRES: PostgreSQLClient,
    Engine.MYSQL: MySQLClient,
    Engine.SQLITE: SQLiteClient,
}


def create_client(
    config: ConnectionConfig,
    timeout: float = DB_QUERY_TIMEOUT,
    pool_size: int = DB_POOL_SIZE,
) -> EngineClient:
    """Factory function to create the client matching ``config.engine``.

    Args:
        config: Engine tag and connection URL
        timeout: Timeout in seconds for every driver call
        pool_size: Maximum pooled connections

    Returns:
        Unconnected client instance
    """
    return CLIENT_CLASSES[config.engine](config.url, timeout=timeout, pool_size=pool_size)


async def connect_client(
    config: ConnectionConfig,
    timeout: float = DB_QUERY_TIMEOUT,
    pool_size: int = DB_POOL_SIZE,
) -> EngineClient:
    """Create a client and verify its handshake.

    Raises:
        DbConnectionError: If the connection cannot be established
    """
    client = create_client(config, timeout=timeout, pool_size=pool_size)
    await client.connect()
    return client
