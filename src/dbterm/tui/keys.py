"""Terminal-independent key events consumed by the session."""

import enum
from dataclasses import dataclass
from typing import Optional


class KeyCode(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ENTER = "enter"
    BACKSPACE = "backspace"
    TAB = "tab"
    ESC = "escape"
    F1 = "f1"
    F5 = "f5"
    CHAR = "char"
    OTHER = "other"


_NAMED_KEYS = {code.value: code for code in KeyCode if code not in (KeyCode.CHAR, KeyCode.OTHER)}


@dataclass(frozen=True)
class KeyEvent:
    code: KeyCode
    char: Optional[str] = None
    ctrl: bool = False

    @classmethod
    def of(cls, char: str) -> "KeyEvent":
        """A printable character."""
        return cls(KeyCode.CHAR, char=char)

    @classmethod
    def ctrl_key(cls, char: str) -> "KeyEvent":
        return cls(KeyCode.CHAR, char=char.lower(), ctrl=True)

    @property
    def is_text(self) -> bool:
        return self.code is KeyCode.CHAR and not self.ctrl and bool(self.char)

    @property
    def is_execute(self) -> bool:
        """F5 or Ctrl+E submit the SQL buffer."""
        return self.code is KeyCode.F5 or (self.ctrl and self.char == "e")

    def is_char(self, char: str) -> bool:
        return self.is_text and self.char == char


def from_terminal(key: str, character: Optional[str] = None, is_printable: bool = False) -> KeyEvent:
    """Translate a Textual key name (``"up"``, ``"ctrl+e"``, ``"a"``) into a ``KeyEvent``."""
    if key in _NAMED_KEYS:
        return KeyEvent(_NAMED_KEYS[key])
    if key.startswith("ctrl+") and len(key) == len("ctrl+") + 1:
        return KeyEvent.ctrl_key(key[-1])
    if is_printable and character:
        return KeyEvent.of(character)
    return KeyEvent(KeyCode.OTHER)
