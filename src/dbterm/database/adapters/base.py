"""Abstract base class for database clients and the transaction handle."""

import asyncio
import logging
import weakref
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ...constants import DB_POOL_SIZE, DB_QUERY_TIMEOUT
from ...errors import DbConnectionError, DbError, QueryError, QueryTimeoutError, TransactionError
from ..connection import ConnectionPool, Engine
from ..formatting import CoercionError, Row, to_text
from ..logging import QueryTimer, log_connection, log_query_execution, log_transaction, sanitize_dsn
from ..schema import TableSchema

logger = logging.getLogger(__name__)


class EngineClient(ABC):
    """Uniform access to one database through a small connection pool.

    Each engine (PostgreSQL, MySQL, SQLite) implements the driver hooks below;
    the public coroutines are shared. Every driver call runs in a worker
    thread under ``timeout`` so a stalled server cannot block the event loop
    forever. A pooled connection is acquired and released inside the worker
    thread, never by the awaiting coroutine.
    """

    engine: Engine
    driver_errors: tuple[type[Exception], ...] = ()

    def __init__(self, dsn: str, timeout: float = DB_QUERY_TIMEOUT, pool_size: int = DB_POOL_SIZE):
        """Initialize client with connection parameters.

        Args:
            dsn: Database connection string
            timeout: Timeout in seconds for every driver call
            pool_size: Maximum number of pooled connections
        """
        self.dsn = dsn
        self.timeout = timeout
        self.pool = ConnectionPool(dsn, self._open_connection, pool_size)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({sanitize_dsn(self.dsn)!r})"

    # ------------------------------------------------------------------
    # Driver hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _open_connection(self) -> Any:
        """Open a new driver connection in autocommit mode."""

    @abstractmethod
    def _cursor(self, connection: Any) -> Any:
        """Return a cursor whose rows are mappings of column name to value."""

    @abstractmethod
    def _fetch_databases(self, connection: Any) -> list[str]:
        pass

    @abstractmethod
    def _fetch_tables(self, connection: Any) -> list[str]:
        pass

    @abstractmethod
    def _describe(self, connection: Any, table_name: str) -> TableSchema:
        pass

    def _begin(self, connection: Any) -> None:
        """Leave autocommit and open a transaction on ``connection``."""
        connection.begin()

    def _end(self, connection: Any) -> None:
        """Restore autocommit after commit or rollback."""

    def _is_timeout(self, error: Exception) -> bool:
        return False

    def _is_connection_lost(self, connection: Any, error: Exception) -> bool:
        return False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the pool and verify the handshake with one connection.

        Raises:
            DbConnectionError: If the server is unreachable or rejects the login
        """
        timer = QueryTimer()
        try:
            with timer:
                await self._call(self._verify_connection, operation="connect")
        except DbError as e:
            log_connection(self.dsn, success=False, error=str(e), duration=timer.duration)
            self.pool.close_all()
            if isinstance(e, DbConnectionError):
                raise
            raise DbConnectionError(str(e)) from e
        log_connection(self.dsn, success=True, duration=timer.duration)

    async def close(self) -> None:
        """Close all idle pooled connections."""
        await asyncio.to_thread(self.pool.close_all)
        logger.info(f"Closed {self.engine.label} client for {sanitize_dsn(self.dsn)}")

    async def execute(self, sql: str) -> None:
        """Run a statement that returns no rows (INSERT, UPDATE, DDL)."""
        await self._call(self._with_connection, self._run_statement, sql, "execute", operation="execute")

    async def query(self, sql: str) -> list[Row]:
        """Run a statement and return its rows with every value as text.

        A value that has no text representation comes back as ``None``.
        """
        return await self._call(self._with_connection, self._run_query, sql, operation="query")

    async def list_databases(self) -> list[str]:
        return await self._call(self._with_connection, self._fetch_databases, operation="list_databases")

    async def list_tables(self) -> list[str]:
        return await self._call(self._with_connection, self._fetch_tables, operation="list_tables")

    async def describe_table(self, table_name: str) -> TableSchema:
        return await self._call(self._with_connection, self._describe, table_name, operation="describe_table")

    async def begin_transaction(self) -> "Transaction":
        """Start a transaction on a dedicated pooled connection.

        The returned handle owns that connection until ``commit()`` or
        ``rollback()`` is awaited.

        Raises:
            TransactionError: If the transaction cannot be started
        """
        future = asyncio.ensure_future(asyncio.to_thread(self._start_transaction))
        try:
            connection = await asyncio.wait_for(asyncio.shield(future), self.timeout)
        except DbError:
            raise
        except asyncio.TimeoutError:
            future.add_done_callback(self._abandon_future)
            raise QueryTimeoutError(
                f"Starting a transaction exceeded timeout ({self.timeout}s)"
            ) from None
        except asyncio.CancelledError:
            future.add_done_callback(self._abandon_future)
            raise
        log_transaction(self.dsn, "begin", success=True)
        return Transaction(self, connection)

    # ------------------------------------------------------------------
    # Worker-thread helpers
    # ------------------------------------------------------------------

    async def _call(self, func: Callable[..., Any], *args: Any, operation: str) -> Any:
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, *args), self.timeout)
        except DbError:
            raise
        except asyncio.TimeoutError:
            raise QueryTimeoutError(
                f"{operation} exceeded timeout ({self.timeout}s)\n"
                f"  Hint: Check the server is reachable, or raise --timeout"
            ) from None

    def _acquire(self) -> Any:
        try:
            return self.pool.acquire(timeout=self.timeout)
        except self.driver_errors as e:
            raise DbConnectionError(
                f"Failed to connect to {self.engine.label} database\n"
                f"  Error: {str(e).strip()}\n"
                f"  Hint: Check that the server is running and credentials are correct"
            ) from e

    def _verify_connection(self) -> None:
        self.pool.release(self._acquire())

    def _with_connection(self, func: Callable[..., Any], *args: Any) -> Any:
        connection = self._acquire()
        try:
            result = func(connection, *args)
        except self.driver_errors as e:
            lost = self._is_connection_lost(connection, e)
            if lost:
                self.pool.discard(connection)
            else:
                self.pool.release(connection)
            raise self._translate(e, lost) from e
        except DbError:
            self.pool.release(connection)
            raise
        except BaseException:
            self.pool.discard(connection)
            raise
        self.pool.release(connection)
        return result

    def _translate(self, error: Exception, lost: bool) -> DbError:
        message = str(error).strip()
        if self._is_timeout(error):
            return QueryTimeoutError(f"Statement exceeded timeout ({self.timeout}s): {message}")
        if lost:
            return DbConnectionError(f"Lost connection to {self.engine.label}: {message}")
        return QueryError(f"{self.engine.label} error: {message}")

    def _fetch_rows(self, connection: Any, sql: str, params: Optional[tuple] = None) -> list[dict[str, Any]]:
        cursor = self._cursor(connection)
        try:
            if params is None:
                cursor.execute(sql)
            else:
                cursor.execute(sql, params)
            if cursor.description is None:
                return []
            return [dict(row) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def _run_statement(self, connection: Any, sql: str, operation: str) -> None:
        with QueryTimer() as timer:
            try:
                cursor = self._cursor(connection)
                try:
                    cursor.execute(sql)
                    row_count = max(cursor.rowcount, 0)
                finally:
                    cursor.close()
            except self.driver_errors as e:
                log_query_execution(sql, self.dsn, success=False, operation=operation, error=str(e))
                raise
        log_query_execution(
            sql, self.dsn, success=True, operation=operation, row_count=row_count, duration=timer.duration
        )

    def _run_query(self, connection: Any, sql: str) -> list[Row]:
        with QueryTimer() as timer:
            try:
                rows = self._fetch_rows(connection, sql)
            except self.driver_errors as e:
                log_query_execution(sql, self.dsn, success=False, error=str(e))
                raise
        log_query_execution(sql, self.dsn, success=True, row_count=len(rows), duration=timer.duration)
        return [self._coerce_row(row) for row in rows]

    def _coerce_row(self, row: dict[str, Any]) -> Row:
        coerced = {}
        for column, value in row.items():
            try:
                coerced[column] = to_text(value)
            except CoercionError as e:
                logger.debug(f"Column {column!r} read as NULL: {e}")
                coerced[column] = None
        return coerced

    # Transactions -----------------------------------------------------

    def _start_transaction(self) -> Any:
        connection = self._acquire()
        try:
            self._begin(connection)
        except self.driver_errors as e:
            self.pool.discard(connection)
            log_transaction(self.dsn, "begin", success=False, error=str(e))
            raise TransactionError(f"Failed to begin transaction: {str(e).strip()}") from e
        return connection

    def _execute_in_transaction(self, connection: Any, sql: str) -> None:
        try:
            self._run_statement(connection, sql, "transaction")
        except self.driver_errors as e:
            if self._is_timeout(e):
                raise self._translate(e, lost=False) from e
            raise TransactionError(f"{self.engine.label} error in transaction: {str(e).strip()}") from e

    def _finish_transaction(self, connection: Any, commit: bool) -> None:
        action = "commit" if commit else "rollback"
        try:
            if commit:
                connection.commit()
            else:
                connection.rollback()
            self._end(connection)
        except self.driver_errors as e:
            self.pool.discard(connection)
            log_transaction(self.dsn, action, success=False, error=str(e))
            raise TransactionError(f"Failed to {action} transaction: {str(e).strip()}") from e
        self.pool.release(connection)
        log_transaction(self.dsn, action, success=True)

    def _abandon(self, connection: Any) -> None:
        """Roll back a transaction nobody finished and return its connection."""
        log_transaction(self.dsn, "abandoned", success=True)
        try:
            self._finish_transaction(connection, commit=False)
        except TransactionError as e:
            logger.warning(f"Rollback of abandoned transaction failed: {e}")

    def _abandon_future(self, future: "asyncio.Future[Any]") -> None:
        if future.cancelled() or future.exception() is not None:
            return
        self._abandon(future.result())

    def _discard_transaction(self, connection: Any) -> None:
        """Roll back and close a connection whose statement outlived its caller."""
        log_transaction(self.dsn, "abandoned", success=True)
        try:
            connection.rollback()
        except self.driver_errors as e:
            logger.warning(f"Rollback of timed-out transaction failed: {e}")
        self.pool.discard(connection)

    def _discard_when_done(self, connection: Any) -> Callable[["asyncio.Future[Any]"], None]:
        def discard(future: "asyncio.Future[Any]") -> None:
            future.get_loop().run_in_executor(None, self._discard_transaction, connection)

        return discard


class Transaction:
    """Handle on an open transaction.

    ``commit()`` and ``rollback()`` are terminal: each consumes the handle, and
    any later call raises ``TransactionError``. Used as an async context
    manager the transaction is rolled back on exit unless it was committed.
    A handle garbage-collected while still open is rolled back as well.
    """

    def __init__(self, client: EngineClient, connection: Any):
        self._client = client
        self._connection: Optional[Any] = connection
        self._finalizer = weakref.finalize(self, client._abandon, connection)

    @property
    def finished(self) -> bool:
        return self._connection is None

    def _require_open(self, action: str) -> Any:
        if self._connection is None:
            raise TransactionError(f"Cannot {action}: transaction already finished")
        return self._connection

    def _consume(self, action: str) -> Any:
        connection = self._require_open(action)
        self._connection = None
        self._finalizer.detach()
        return connection

    async def execute(self, sql: str) -> None:
        """Run a statement inside the transaction.

        If the statement times out or the caller is cancelled, the handle is
        finished on the spot. The worker thread may still be using the
        connection, so it is rolled back and closed once that thread returns.
        """
        client = self._client
        connection = self._require_open("execute")
        future = asyncio.ensure_future(asyncio.to_thread(client._execute_in_transaction, connection, sql))
        try:
            await asyncio.wait_for(asyncio.shield(future), client.timeout)
        except DbError:
            raise
        except asyncio.TimeoutError:
            self._consume("execute")
            future.add_done_callback(client._discard_when_done(connection))
            raise QueryTimeoutError(
                f"Statement in transaction exceeded timeout ({client.timeout}s); transaction rolled back"
            ) from None
        except asyncio.CancelledError:
            self._consume("execute")
            future.add_done_callback(client._discard_when_done(connection))
            raise

    execute_in_tx = execute

    async def commit(self) -> None:
        connection = self._consume("commit")
        await self._client._call(self._client._finish_transaction, connection, True, operation="commit")

    async def rollback(self) -> None:
        connection = self._consume("rollback")
        await self._client._call(self._client._finish_transaction, connection, False, operation="rollback")

    async def __aenter__(self) -> "Transaction":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if not self.finished:
            await self.rollback()
