"""Registry owning the active database client."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from ..constants import DB_POOL_SIZE, DB_QUERY_TIMEOUT
from ..errors import NotConnectedError
from .adapters import EngineClient, connect_client
from .connection import ConnectionConfig

logger = logging.getLogger(__name__)

Connector = Callable[..., Awaitable[EngineClient]]


class ConnectionRegistry:
    """Holds the active client(s) behind a single ``asyncio.Lock``.

    Callers reach a client only through :meth:`active`, which keeps the lock
    for the duration of the ``async with`` block, so no client reference
    outlives the critical section and a replacement can never happen in the
    middle of an operation.
    """

    def __init__(
        self,
        connector: Connector = connect_client,
        timeout: float = DB_QUERY_TIMEOUT,
        pool_size: int = DB_POOL_SIZE,
    ):
        self._connector = connector
        self.timeout = timeout
        self.pool_size = pool_size
        self._clients: list[EngineClient] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._clients)

    async def _connect(self, config: ConnectionConfig) -> EngineClient:
        return await self._connector(config, timeout=self.timeout, pool_size=self.pool_size)

    async def add_connection(self, config: ConnectionConfig) -> None:
        """Connect a client for ``config`` and append it.

        Raises:
            DbConnectionError: If the connection cannot be established
        """
        async with self._lock:
            client = await self._connect(config)
            self._clients.append(client)
        logger.info(f"Added {config!r}")

    async def replace_connection(self, config: ConnectionConfig) -> None:
        """Make a client for ``config`` the only held client.

        Connecting, closing the old clients and storing the new one all happen
        inside one critical section. When connecting fails the held clients
        are left as they were.

        Raises:
            DbConnectionError: If the connection cannot be established
        """
        async with self._lock:
            client = await self._connect(config)
            previous, self._clients = self._clients, [client]
            for old in previous:
                await old.close()
        logger.info(f"Replaced {len(previous)} connection(s) with {config!r}")

    @asynccontextmanager
    async def active(self) -> AsyncIterator[EngineClient]:
        """Lock the registry and yield the active client.

        Raises:
            NotConnectedError: If no client is held
        """
        async with self._lock:
            if not self._clients:
                raise NotConnectedError()
            yield self._clients[0]

    async def close_all(self) -> None:
        async with self._lock:
            clients, self._clients = self._clients, []
            for client in clients:
                await client.close()
