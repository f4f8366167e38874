"""Terminal user interface: key model, session state machine and Textual app."""

from dbterm.tui.keys import KeyCode, KeyEvent
from dbterm.tui.session import Session
from dbterm.tui.state import Focus, InputField, Screen, SessionState

__all__ = ["Focus", "InputField", "KeyCode", "KeyEvent", "Screen", "Session", "SessionState"]
