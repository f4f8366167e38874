"""Tests for state helpers and the Rich renderables of each screen."""

from rich.console import Console

from dbterm.tui.render import render_help, render_screen
from dbterm.tui.state import Focus, InputField, Screen, SessionState, clamp_index, move_down, move_up


def render_text(renderable) -> str:
    console = Console(width=300, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestCursorHelpers:
    def test_bounds(self):
        assert move_up(0, 3) == 0
        assert move_down(2, 3) == 2
        assert move_down(0, 0) == 0
        assert clamp_index(7, 3) == 2


class TestScreens:
    def test_engine_selection_lists_engines(self):
        text = render_text(render_screen(SessionState()))
        for label in ("PostgreSQL", "MySQL", "SQLite"):
            assert label in text

    def test_password_is_masked(self):
        state = SessionState(screen=Screen.CONNECTION_INPUT)
        state.connection_input.password = "hunter2"
        state.connection_input.active_field = InputField.PASSWORD
        state.connection_error_message = "Connection refused"

        text = render_text(render_screen(state))
        assert "hunter2" not in text
        assert "*******" in text
        assert "Connection refused" in text

    def test_table_view_with_schema_and_results(self, users_schema):
        state = SessionState(screen=Screen.TABLE_VIEW, focus=Focus.SQL_EDITOR)
        state.tables = ["users"]
        state.expanded_table = 0
        state.table_schemas["users"] = users_schema
        state.last_result = [{"id": "1", "name": None}]

        text = render_text(render_screen(state))
        assert "name: character varying (Nullable: True, Default: None)" in text
        assert "NULL" in text

    def test_table_view_without_results(self):
        state = SessionState(screen=Screen.TABLE_VIEW)
        assert "No results" in render_text(render_screen(state))

    def test_popup(self):
        state = SessionState(screen=Screen.MESSAGE_POPUP, popup_message="SQLite is not implemented yet.")
        assert "SQLite is not implemented yet." in render_text(render_screen(state))

    def test_help_line(self):
        state = SessionState(screen=Screen.TABLE_VIEW)
        assert "F5" in render_help(state).plain
        assert "cancel" in render_help(state, busy=True).plain

    def test_brackets_in_data_are_shown_literally(self):
        state = SessionState(screen=Screen.TABLE_VIEW, current_database="[red]db")
        state.tables = ["[i]orders"]
        state.last_result = [{"[b]col": "[/]"}]

        text = render_text(render_screen(state))
        assert "[b]col" in text
        assert "[/]" in text
        assert "Tables ([red]db)" in text
        assert "[i]orders" in text
