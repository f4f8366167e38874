"""Pytest configuration and fixtures for dbterm tests."""

import pytest
from unittest.mock import AsyncMock

from dbterm.database.connection import ConnectionConfig
from dbterm.database.registry import ConnectionRegistry
from dbterm.database.schema import ColumnSchema, TableSchema
from dbterm.errors import DbConnectionError, QueryError
from dbterm.tui.session import Session

USERS_SCHEMA = TableSchema(
    table_name="users",
    columns=(
        ColumnSchema(name="id", data_type="integer", is_nullable=False, default="nextval('users_id_seq'::regclass)"),
        ColumnSchema(name="name", data_type="character varying", is_nullable=True),
    ),
)


class FakeClient:
    """In-memory stand-in for an ``EngineClient`` with mockable methods."""

    def __init__(self, config: ConnectionConfig):
        self.config = config
        self.closed = False
        self.list_databases = AsyncMock(return_value=["app", "postgres"])
        self.list_tables = AsyncMock(return_value=["orders", "users"])
        self.describe_table = AsyncMock(return_value=USERS_SCHEMA)
        self.query = AsyncMock(return_value=[{"id": "1", "name": "alice"}])
        self.execute = AsyncMock(return_value=None)

    async def close(self) -> None:
        self.closed = True


class FakeConnector:
    """Connector recording every config; fails for configs whose URL contains ``fail_on``."""

    def __init__(self):
        self.configs: list[ConnectionConfig] = []
        self.clients: list[FakeClient] = []
        self.fail_on = None

    async def __call__(self, config, timeout=None, pool_size=None):
        self.configs.append(config)
        if self.fail_on and self.fail_on in config.url:
            raise DbConnectionError("password authentication failed for user \"postgres\"")
        client = FakeClient(config)
        self.clients.append(client)
        return client

    @property
    def latest(self) -> FakeClient:
        return self.clients[-1]


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def registry(connector):
    return ConnectionRegistry(connector=connector, timeout=5.0, pool_size=2)


@pytest.fixture
def session(registry):
    return Session(registry)


@pytest.fixture
def query_error():
    return QueryError('PostgreSQL error: relation "missing" does not exist')


@pytest.fixture
def users_schema():
    return USERS_SCHEMA
