"""Key-driven session logic behind the terminal screens.

``Session`` owns a ``SessionState`` and a ``ConnectionRegistry``. Each call to
:meth:`Session.handle_key` runs one key to completion, awaiting any engine call
it triggers. Engine failures never escape; they are stored on the state as
``connection_error_message`` or ``last_error``.
"""

import logging
from typing import Optional

from ..constants import (
    OPERATION_CANCELLED_MESSAGE,
    SQLITE_NOT_IMPLEMENTED_MESSAGE,
    STATEMENT_SUCCESS_MESSAGE,
)
from ..database.connection import ENGINES, ConnectionConfig, build_dsn
from ..database.registry import ConnectionRegistry
from ..database.validation import is_query, normalize_statement
from ..errors import DbError
from .keys import KeyCode, KeyEvent
from .state import Focus, Screen, SessionState, move_down, move_up

logger = logging.getLogger(__name__)


class Session:
    """State machine driving ENGINE_SELECTION through TABLE_VIEW."""

    def __init__(self, registry: ConnectionRegistry, state: Optional[SessionState] = None):
        self.registry = registry
        self.state = state or SessionState()

    @property
    def running(self) -> bool:
        return self.state.running

    def quit(self) -> None:
        self.state.running = False

    async def handle_key(self, key: KeyEvent) -> None:
        """Dispatch one key to the handler of the current screen."""
        handler = {
            Screen.ENGINE_SELECTION: self._on_engine_selection,
            Screen.MESSAGE_POPUP: self._on_message_popup,
            Screen.CONNECTION_INPUT: self._on_connection_input,
            Screen.DATABASE_SELECTION: self._on_database_selection,
            Screen.TABLE_VIEW: self._on_table_view,
        }[self.state.screen]
        await handler(key)

    def mark_cancelled(self) -> None:
        """Record that the in-flight operation was cancelled by the operator."""
        logger.info(f"Operation cancelled on {self.state.screen.value}")
        if self.state.screen is Screen.CONNECTION_INPUT:
            self.state.connection_error_message = OPERATION_CANCELLED_MESSAGE
        else:
            self.state.last_error = OPERATION_CANCELLED_MESSAGE

    # Connections

    def _config_for(self, database: str) -> ConnectionConfig:
        engine = self.state.engine
        form = self.state.connection_input
        dsn = build_dsn(engine, form.username, form.password, form.hostname, database, form.port)
        return ConnectionConfig(engine=engine, url=dsn)

    async def connect_to_default_db(self) -> None:
        """Connect to the engine's administrative database with the form values.

        Raises:
            DbError: If the form is invalid or the connection fails
        """
        config = self._config_for(self.state.engine.default_database)
        await self.registry.replace_connection(config)

    async def connect_to_selected_db(self, database: str) -> None:
        """Replace the active connection with one to ``database``.

        Raises:
            DbError: If the connection fails; the previous connection is kept
        """
        await self.registry.replace_connection(self._config_for(database))
        self.state.current_database = database

    # Fetches

    async def refresh_databases(self) -> None:
        try:
            async with self.registry.active() as client:
                databases = await client.list_databases()
        except DbError as e:
            logger.warning(f"Failed to list databases: {e}")
            self.state.set_databases([])
            self.state.last_error = str(e)
            return
        self.state.set_databases(databases)

    async def refresh_tables(self) -> None:
        try:
            async with self.registry.active() as client:
                tables = await client.list_tables()
        except DbError as e:
            logger.warning(f"Failed to list tables: {e}")
            self.state.set_tables([])
            self.state.last_error = str(e)
            return
        self.state.set_tables(tables)

    async def _enter_database_selection(self) -> None:
        self.state.screen = Screen.DATABASE_SELECTION
        self.state.last_error = None
        await self.refresh_databases()

    async def _enter_table_view(self) -> None:
        state = self.state
        state.screen = Screen.TABLE_VIEW
        state.focus = Focus.TABLES_LIST
        state.table_schemas.clear()
        state.sql_buffer = ""
        state.clear_results()
        await self.refresh_tables()

    # Screens

    async def _on_engine_selection(self, key: KeyEvent) -> None:
        state = self.state
        if key.code is KeyCode.UP:
            state.selected_engine = move_up(state.selected_engine, len(ENGINES))
        elif key.code is KeyCode.DOWN:
            state.selected_engine = move_down(state.selected_engine, len(ENGINES))
        elif key.code is KeyCode.ENTER:
            if state.engine.supports_network_login:
                state.connection_error_message = None
                state.screen = Screen.CONNECTION_INPUT
            else:
                state.popup_message = SQLITE_NOT_IMPLEMENTED_MESSAGE
                state.screen = Screen.MESSAGE_POPUP
        elif key.is_char("q"):
            self.quit()

    async def _on_message_popup(self, key: KeyEvent) -> None:
        self.state.popup_message = None
        self.state.screen = Screen.ENGINE_SELECTION

    async def _on_connection_input(self, key: KeyEvent) -> None:
        state = self.state
        form = state.connection_input
        if key.code is KeyCode.ESC:
            state.screen = Screen.ENGINE_SELECTION
        elif key.code is KeyCode.UP:
            form.focus_previous()
        elif key.code in (KeyCode.DOWN, KeyCode.TAB):
            form.focus_next()
        elif key.code is KeyCode.BACKSPACE:
            form.backspace()
        elif key.code is KeyCode.ENTER:
            if not form.on_last_field:
                form.focus_next()
                return
            try:
                await self.connect_to_default_db()
            except DbError as e:
                logger.warning(f"Connection to {state.engine.label} failed: {e}")
                state.connection_error_message = str(e)
                return
            state.connection_error_message = None
            state.current_database = state.engine.default_database
            await self._enter_database_selection()
        elif key.is_text:
            form.append(key.char)

    async def _on_database_selection(self, key: KeyEvent) -> None:
        state = self.state
        if key.code is KeyCode.UP:
            state.selected_database = move_up(state.selected_database, len(state.databases))
        elif key.code is KeyCode.DOWN:
            state.selected_database = move_down(state.selected_database, len(state.databases))
        elif key.code is KeyCode.ENTER:
            database = state.highlighted_database
            if database is None:
                return
            try:
                await self.connect_to_selected_db(database)
            except DbError as e:
                logger.warning(f"Connection to database {database} failed: {e}")
                state.last_error = str(e)
                return
            await self._enter_table_view()
        elif key.is_char("q"):
            self.quit()

    async def _on_table_view(self, key: KeyEvent) -> None:
        state = self.state
        if key.code is KeyCode.ESC:
            self.quit()
        elif key.code is KeyCode.F1:
            state.sql_buffer = ""
            state.clear_results()
            await self._enter_database_selection()
        elif key.code is KeyCode.TAB:
            state.focus = Focus.SQL_EDITOR if state.focus is Focus.TABLES_LIST else Focus.TABLES_LIST
        elif key.is_execute:
            await self.submit_sql()
        elif state.focus is Focus.TABLES_LIST:
            await self._on_tables_list(key)
        else:
            self._on_sql_editor(key)

    async def _on_tables_list(self, key: KeyEvent) -> None:
        state = self.state
        if key.code is KeyCode.UP:
            state.selected_table = move_up(state.selected_table, len(state.tables))
        elif key.code is KeyCode.DOWN:
            state.selected_table = move_down(state.selected_table, len(state.tables))
        elif key.code is KeyCode.ENTER:
            await self.toggle_table()

    def _on_sql_editor(self, key: KeyEvent) -> None:
        state = self.state
        if key.code is KeyCode.BACKSPACE:
            state.sql_buffer = state.sql_buffer[:-1]
        elif key.code is KeyCode.ENTER:
            state.sql_buffer += "\n"
        elif key.is_text:
            state.sql_buffer += key.char

    # Table view operations

    async def toggle_table(self) -> None:
        """Expand the highlighted table's schema, or collapse it if already expanded."""
        state = self.state
        table = state.highlighted_table
        if table is None:
            return
        if state.expanded_table == state.selected_table:
            state.expanded_table = None
            return
        if table not in state.table_schemas:
            try:
                async with self.registry.active() as client:
                    state.table_schemas[table] = await client.describe_table(table)
            except DbError as e:
                logger.warning(f"Failed to describe {table}: {e}")
                state.last_error = str(e)
                return
        state.last_error = None
        state.expanded_table = state.selected_table

    async def submit_sql(self) -> None:
        """Run the SQL buffer as a query or a statement and clear it.

        A blank buffer makes no engine call and leaves the results as they were.
        """
        state = self.state
        statement = normalize_statement(state.sql_buffer)
        state.sql_buffer = ""
        if statement is None:
            return
        state.clear_results()
        try:
            async with self.registry.active() as client:
                if is_query(statement):
                    state.last_result = await client.query(statement)
                else:
                    await client.execute(statement)
                    state.last_success_message = STATEMENT_SUCCESS_MESSAGE
        except DbError as e:
            logger.info(f"Statement failed: {e}")
            state.last_result = []
            state.last_error = str(e)
