"""Textual application hosting the session."""

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.events import Key
from textual.screen import Screen
from textual.widgets import Static
from textual.worker import Worker, WorkerState

from ..constants import DB_POOL_SIZE, DB_QUERY_TIMEOUT
from ..database.registry import ConnectionRegistry
from .keys import KeyCode, KeyEvent, from_terminal
from .render import render_help, render_screen
from .session import Session

logger = logging.getLogger(__name__)


class SessionScreen(Screen, inherit_bindings=False):
    """Single screen whose content is redrawn from the session state after every key."""

    DEFAULT_CSS = """
    #main {
        height: 1fr;
    }

    #help {
        height: 1;
        padding: 0 1;
        background: rgb(28, 32, 36);
    }
    """

    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session
        self._dispatch_worker: Optional[Worker] = None

    def compose(self) -> ComposeResult:
        yield Static(id="main")
        yield Static(id="help")

    def on_mount(self) -> None:
        self.refresh_view()

    @property
    def dispatching(self) -> bool:
        worker = self._dispatch_worker
        return worker is not None and worker.state in (WorkerState.PENDING, WorkerState.RUNNING)

    def refresh_view(self) -> None:
        self.query_one("#main", Static).update(render_screen(self.session.state))
        self.query_one("#help", Static).update(render_help(self.session.state, busy=self.dispatching))

    def on_key(self, event: Key) -> None:
        event.stop()
        event.prevent_default()
        key = from_terminal(event.key, event.character, event.is_printable)
        if self.dispatching:
            if key.code is KeyCode.ESC:
                logger.debug("Cancelling in-flight operation")
                self._dispatch_worker.cancel()
            return
        self._dispatch_worker = self.run_worker(self._dispatch(key), exclusive=True, group="session")

    async def _dispatch(self, key: KeyEvent) -> None:
        self.refresh_view()
        await self.session.handle_key(key)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.worker is not self._dispatch_worker:
            return
        if event.state is WorkerState.CANCELLED:
            self.session.mark_cancelled()
        if event.state in (WorkerState.SUCCESS, WorkerState.CANCELLED):
            self._dispatch_worker = None
            if not self.session.running:
                self.app.exit()
                return
            self.refresh_view()


class DbTermApp(App, inherit_bindings=False):
    """Terminal client for PostgreSQL and MySQL."""

    TITLE = "dbterm"
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
    ]

    def __init__(
        self,
        registry: Optional[ConnectionRegistry] = None,
        timeout: float = DB_QUERY_TIMEOUT,
        pool_size: int = DB_POOL_SIZE,
    ) -> None:
        super().__init__()
        if registry is None:
            registry = ConnectionRegistry(timeout=timeout, pool_size=pool_size)
        self.registry = registry
        self.session = Session(self.registry)

    def on_mount(self) -> None:
        self.push_screen(SessionScreen(self.session))

    async def on_unmount(self) -> None:
        await self.registry.close_all()
        logger.info("Closed all connections")
