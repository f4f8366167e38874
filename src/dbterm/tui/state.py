"""Session state held by the terminal client."""

import enum
from dataclasses import dataclass, field
from typing import Optional

from ..database.connection import ENGINES, Engine
from ..database.formatting import Row
from ..database.schema import TableSchema


class Screen(enum.Enum):
    ENGINE_SELECTION = "engine_selection"
    CONNECTION_INPUT = "connection_input"
    DATABASE_SELECTION = "database_selection"
    TABLE_VIEW = "table_view"
    MESSAGE_POPUP = "message_popup"


class Focus(enum.Enum):
    TABLES_LIST = "tables_list"
    SQL_EDITOR = "sql_editor"


class InputField(enum.Enum):
    USERNAME = "username"
    PASSWORD = "password"
    HOSTNAME = "hostname"
    PORT = "port"


INPUT_FIELDS: tuple[InputField, ...] = tuple(InputField)


def move_up(index: int, length: int) -> int:
    """Cursor one step up, stopping at the first item."""
    return clamp_index(index - 1, length)


def move_down(index: int, length: int) -> int:
    """Cursor one step down, stopping at the last item."""
    return clamp_index(index + 1, length)


def clamp_index(index: int, length: int) -> int:
    """Keep ``index`` inside ``[0, length - 1]``; 0 for an empty sequence."""
    if length <= 0:
        return 0
    return max(0, min(index, length - 1))


@dataclass
class ConnectionInput:
    username: str = ""
    password: str = ""
    hostname: str = ""
    port: str = ""
    active_field: InputField = InputField.USERNAME

    def value(self, field_: InputField) -> str:
        return getattr(self, field_.value)

    def set_value(self, field_: InputField, value: str) -> None:
        setattr(self, field_.value, value)

    @property
    def active_index(self) -> int:
        return INPUT_FIELDS.index(self.active_field)

    def focus_next(self) -> None:
        self.active_field = INPUT_FIELDS[(self.active_index + 1) % len(INPUT_FIELDS)]

    def focus_previous(self) -> None:
        self.active_field = INPUT_FIELDS[(self.active_index - 1) % len(INPUT_FIELDS)]

    @property
    def on_last_field(self) -> bool:
        return self.active_field is INPUT_FIELDS[-1]

    def append(self, char: str) -> None:
        self.set_value(self.active_field, self.value(self.active_field) + char)

    def backspace(self) -> None:
        self.set_value(self.active_field, self.value(self.active_field)[:-1])


@dataclass
class SessionState:
    """Everything the screens display. Mutated only by ``Session``."""

    screen: Screen = Screen.ENGINE_SELECTION
    focus: Focus = Focus.TABLES_LIST
    selected_engine: int = 0
    connection_input: ConnectionInput = field(default_factory=ConnectionInput)
    connection_error_message: Optional[str] = None
    popup_message: Optional[str] = None
    databases: list[str] = field(default_factory=list)
    selected_database: int = 0
    current_database: Optional[str] = None
    tables: list[str] = field(default_factory=list)
    selected_table: int = 0
    expanded_table: Optional[int] = None
    table_schemas: dict[str, TableSchema] = field(default_factory=dict)
    sql_buffer: str = ""
    last_result: list[Row] = field(default_factory=list)
    last_error: Optional[str] = None
    last_success_message: Optional[str] = None
    running: bool = True

    @property
    def engine(self) -> Engine:
        return ENGINES[self.selected_engine]

    @property
    def highlighted_database(self) -> Optional[str]:
        if not self.databases:
            return None
        return self.databases[self.selected_database]

    @property
    def highlighted_table(self) -> Optional[str]:
        if not self.tables:
            return None
        return self.tables[self.selected_table]

    def set_databases(self, databases: list[str]) -> None:
        self.databases = list(databases)
        self.selected_database = clamp_index(0, len(self.databases))

    def set_tables(self, tables: list[str]) -> None:
        self.tables = list(tables)
        self.selected_table = clamp_index(0, len(self.tables))
        self.expanded_table = None

    def clear_results(self) -> None:
        self.last_result = []
        self.last_error = None
        self.last_success_message = None
