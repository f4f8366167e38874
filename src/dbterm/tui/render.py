"""Rich renderables for each session screen."""

from typing import Optional

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..constants import NO_RESULTS_MESSAGE
from ..database.connection import ENGINES
from ..database.formatting import format_table_schema, result_cells, result_headers
from .state import INPUT_FIELDS, Focus, InputField, Screen, SessionState

HIGHLIGHT_STYLE = "bold black on rgb(120,180,255)"
ERROR_STYLE = "bold rgb(255,120,120)"
SUCCESS_STYLE = "bold rgb(120,220,120)"
FOCUSED_BORDER = "rgb(120,180,255)"
BLURRED_BORDER = "rgb(90,90,90)"

HELP_TEXT = {
    Screen.ENGINE_SELECTION: "Up/Down: move  Enter: select  q: quit",
    Screen.MESSAGE_POPUP: "Any key: back",
    Screen.CONNECTION_INPUT: "Up/Down: field  Enter: next field / connect  Esc: back",
    Screen.DATABASE_SELECTION: "Up/Down: move  Enter: open database  q: quit",
    Screen.TABLE_VIEW: "Tab: switch pane  Enter: expand table  F5/Ctrl+E: run SQL  F1: databases  Esc: quit",
}


def selection_list(items: list[str], selected: int) -> Text:
    """One line per item with the cursor line highlighted."""
    text = Text()
    for index, item in enumerate(items):
        if index:
            text.append("\n")
        if index == selected:
            text.append(f"> {item}", style=HIGHLIGHT_STYLE)
        else:
            text.append(f"  {item}")
    return text


def error_text(message: Optional[str]) -> Text:
    return Text(message or "", style=ERROR_STYLE)


def render_engine_selection(state: SessionState) -> RenderableType:
    labels = [engine.label for engine in ENGINES]
    return Panel(selection_list(labels, state.selected_engine), title="Select database engine")


def render_message_popup(state: SessionState) -> RenderableType:
    return Panel(Text(state.popup_message or "", justify="center"), title="Message", border_style="yellow")


def render_connection_input(state: SessionState) -> RenderableType:
    form = state.connection_input
    lines = Text()
    for index, field in enumerate(INPUT_FIELDS):
        value = form.value(field)
        if field is InputField.PASSWORD:
            value = "*" * len(value)
        if index:
            lines.append("\n")
        label = f"{field.value.capitalize():<10} {value}"
        if field is form.active_field:
            lines.append(label, style="bold")
            lines.append(" <", style=HIGHLIGHT_STYLE)
        else:
            lines.append(label)

    parts: list[RenderableType] = [lines]
    if state.connection_error_message:
        parts.append(Panel(error_text(state.connection_error_message), title="Error", border_style="red"))
    return Panel(Group(*parts), title=f"Connect to {state.engine.label}")


def render_database_selection(state: SessionState) -> RenderableType:
    body: RenderableType = selection_list(state.databases, state.selected_database)
    if not state.databases:
        body = Text("No databases", style="dim")
    parts: list[RenderableType] = [body]
    if state.last_error:
        parts.append(Panel(error_text(state.last_error), title="Error", border_style="red"))
    return Panel(Group(*parts), title="Select database")


def tables_pane(state: SessionState) -> RenderableType:
    text = Text()
    for index, table in enumerate(state.tables):
        if index:
            text.append("\n")
        marker = "v" if state.expanded_table == index else ">"
        line = f"{marker} {table}"
        if index == state.selected_table and state.focus is Focus.TABLES_LIST:
            text.append(line, style=HIGHLIGHT_STYLE)
        elif index == state.selected_table:
            text.append(line, style="bold")
        else:
            text.append(line)
        if state.expanded_table == index and table in state.table_schemas:
            for column_line in format_table_schema(state.table_schemas[table])[1:]:
                text.append(f"\n    {column_line}", style="dim")
    if not state.tables:
        text = Text("No tables", style="dim")
    border = FOCUSED_BORDER if state.focus is Focus.TABLES_LIST else BLURRED_BORDER
    title = Text(f"Tables ({state.current_database})" if state.current_database else "Tables")
    return Panel(text, title=title, border_style=border)


def sql_pane(state: SessionState) -> RenderableType:
    text = Text(state.sql_buffer)
    if state.focus is Focus.SQL_EDITOR:
        text.append("_", style="blink")
    border = FOCUSED_BORDER if state.focus is Focus.SQL_EDITOR else BLURRED_BORDER
    return Panel(text, title="SQL", border_style=border)


def result_table(state: SessionState) -> Table:
    table = Table(expand=True, show_lines=False)
    for header in result_headers(state.last_result):
        table.add_column(Text(header), overflow="fold")
    for cells in result_cells(state.last_result):
        table.add_row(*(Text(cell) for cell in cells))
    return table


def result_pane(state: SessionState) -> RenderableType:
    if state.last_error:
        body: RenderableType = error_text(state.last_error)
    elif state.last_result:
        body = result_table(state)
    elif state.last_success_message:
        body = Text(state.last_success_message, style=SUCCESS_STYLE)
    else:
        body = Text(NO_RESULTS_MESSAGE, style="dim")
    return Panel(body, title="Result")


def render_table_view(state: SessionState) -> RenderableType:
    grid = Table.grid(expand=True)
    grid.add_column(ratio=1)
    grid.add_column(ratio=3)
    grid.add_row(tables_pane(state), Group(sql_pane(state), result_pane(state)))
    return grid


RENDERERS = {
    Screen.ENGINE_SELECTION: render_engine_selection,
    Screen.MESSAGE_POPUP: render_message_popup,
    Screen.CONNECTION_INPUT: render_connection_input,
    Screen.DATABASE_SELECTION: render_database_selection,
    Screen.TABLE_VIEW: render_table_view,
}


def render_screen(state: SessionState) -> RenderableType:
    return RENDERERS[state.screen](state)


def render_help(state: SessionState, busy: bool = False) -> Text:
    if busy:
        return Text("Working...  Esc: cancel", style="yellow")
    return Text(HELP_TEXT[state.screen], style="dim")
