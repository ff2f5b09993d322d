"""
Terminal capability: size, cursor moves, screen writes and key reads.

Writes are buffered and go out in one piece on flush(), so a repaint reaches
the tty as a single write. Raw mode is scoped to session().
"""
import contextlib
import termios
from typing import List, Optional, Tuple

from . import config  # noqa: F401  (sets ESCDELAY before blessed loads)
from blessed import Terminal as BlessedTerminal
from blessed.keyboard import Keystroke

from .errors import InitError, InitErrorKind, PaintError, UserInputError

# raw mode hands us bytes that blessed does not always name
KEY_ALIASES = {
    '\x03': 'KEY_CTRL_C',
    '\x7f': 'KEY_BACKSPACE',
    '\x08': 'KEY_BACKSPACE',
    '\r': 'KEY_ENTER',
    '\n': 'KEY_ENTER',
}


def key_name(key: Keystroke) -> Optional[str]:
    return KEY_ALIASES.get(str(key), key.name)


class Terminal:
    def __init__(self, term: Optional[BlessedTerminal] = None):
        self.term = term if term is not None else BlessedTerminal()
        self._out: List[str] = []

    def size(self) -> Tuple[int, int]:
        return self.term.width, self.term.height

    def move_cursor(self, x: int, y: int):
        self._out.append(self.term.move_xy(x, y))

    def write(self, text: str):
        self._out.append(text)

    def clear(self):
        self._out.append(self.term.home + self.term.clear)

    def hide_cursor(self):
        self._out.append(self.term.hide_cursor)

    def show_cursor(self):
        self._out.append(self.term.normal_cursor)

    def flush(self):
        out = "".join(self._out)
        self._out.clear()
        try:
            self.term.stream.write(out)
            self.term.stream.flush()
        except (OSError, ValueError) as e:
            raise PaintError("Could not flush display buffer to TTY.") from e

    def read_key(self, timeout: Optional[float] = None) -> Optional[Keystroke]:
        """Blocks until a key arrives (or timeout). None when nothing was read."""
        try:
            key = self.term.inkey(timeout=timeout)
        except (OSError, ValueError) as e:
            raise UserInputError("Could not determine user input.") from e
        return key if str(key) else None

    @contextlib.contextmanager
    def session(self):
        """Raw mode + alternate screen for the life of the block, restored on every exit path."""
        if not self.term.is_a_tty:
            raise InitError(InitErrorKind.NO_TERMINAL, "Could not initialize terminal (stdout is not a tty).")
        with contextlib.ExitStack() as stack:
            try:
                stack.enter_context(self.term.raw())
            except (OSError, termios.error) as e:
                raise InitError(InitErrorKind.NO_TERMINAL, f"Could not enter RAW mode: {e}") from e
            stack.enter_context(self.term.fullscreen())
            stack.callback(self._restore_cursor)
            yield self

    def _restore_cursor(self):
        self._out.clear()
        self.term.stream.write(self.term.normal_cursor)
        self.term.stream.flush()
