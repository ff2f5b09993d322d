"""
The three screen sections and the state behind them.

Every section exposes paint(width, height) -> list of exactly `height`
strings, each exactly `width` characters. Painting never mutates anything;
all state changes go through the other methods, on the event loop thread.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from blessed.keyboard import Keystroke

from .codec import HEX_DIGITS, decode_pairs, hex_digits, hex_dump
from .config import GUTTER_WIDTH
from .errors import StreamWriteError
from .terminal import key_name

log = logging.getLogger(__name__)

PaintOutput = List[str]

PROMPT = " Input:".ljust(GUTTER_WIDTH - 1) + " │ "
BLANK_ROW = " " * GUTTER_WIDTH + "│ "


def fit(text: str, width: int, fill: str = ' ') -> str:
    """Truncate or pad `text` to exactly `width` characters."""
    if width <= 0:
        return ""
    return text[:width].ljust(width, fill)


def divider(joint: str, width: int) -> str:
    return fit("─" * GUTTER_WIDTH + joint, width, '─')


def pad_rows(rows: PaintOutput, width: int, height: int) -> PaintOutput:
    rows = rows[:max(0, height)]
    return rows + [fit("", width)] * (height - len(rows))


@dataclass
class Title:
    peer: Tuple[str, int]
    status: str = ""

    def banner(self) -> str:
        host, port = self.peer[0], self.peer[1]
        text = f"HexCat. Connected to {host} (on port {port}). Ctrl-C to quit."
        if self.status:
            text += f"  [{self.status}]"
        return text

    def paint(self, width: int, height: int) -> PaintOutput:
        return pad_rows([fit(self.banner(), width), divider("┬", width)], width, height)


class Origin(Enum):
    LOCAL = "LOCAL"
    REMOTE = "REMOTE"

    @property
    def label(self) -> str:
        # "  LOCAL │ " / " REMOTE │ "
        return self.value.rjust(GUTTER_WIDTH - 1) + " │ "


@dataclass(frozen=True)
class Message:
    origin: Origin
    payload: bytes

    def render(self, width: int) -> str:
        # three columns per byte, so anything past width // 3 + 1 bytes is cut anyway
        shown = self.payload[:max(0, width) // 3 + 1]
        return fit(self.origin.label + hex_dump(shown), width)


class MessageLog:
    """
    Append-only history of sent and received messages.

    Local messages are written to the connection as they are appended.
    `scroll` counts rows back from the newest message; 0 follows the tail.
    """
    def __init__(self, writer):
        self.writer = writer
        self.messages: List[Message] = []
        self.scroll = 0

    def __len__(self):
        return len(self.messages)

    def append(self, message: Message):
        error = None
        if message.origin is Origin.LOCAL:
            try:
                self.writer.sendall(message.payload)
            except OSError as e:
                log.warning("write of %d bytes failed: %s", len(message.payload), e)
                error = StreamWriteError(str(e))
                error.__cause__ = e
        self.messages.append(message)
        # a scrolled-back view stays on the rows it was showing
        if self.scroll:
            self.scroll += 1
        if error:
            raise error

    def render_window(self, width: int, height: int) -> PaintOutput:
        if height <= 0:
            return []
        body = height - 1  # last row is the divider the input section joins
        end = len(self.messages) - self.scroll
        visible = self.messages[max(0, end - body):end]
        rows = [m.render(width) for m in visible]
        rows += [fit(BLANK_ROW, width)] * (body - len(rows))
        rows.append(divider("┼", width))
        return rows

    paint = render_window

    def scroll_page(self, direction: int, height: int) -> bool:
        """Move the view one page back (direction < 0) or forward. True if it moved."""
        body = max(1, height - 1)
        page = max(1, body - 1)
        top = max(0, len(self.messages) - body)
        scroll = min(top, max(0, self.scroll - direction * page))
        if scroll == self.scroll:
            return False
        self.scroll = scroll
        return True


@dataclass
class InputState:
    chars: List[str] = field(default_factory=list)
    cursor: int = 0
    scroll: int = 0

    @property
    def text(self) -> str:
        return "".join(self.chars)

    def handle_key(self, key: Keystroke) -> bool:
        '''
        Apply one key to the buffer. Returns whether anything changed.
        Only hex digits and whitespace are typed in; whitespace is kept as a plain space.
        '''
        name = key_name(key)
        if name == 'KEY_BACKSPACE':
            if self.cursor == 0: return False
            del self.chars[self.cursor - 1]
            self.cursor -= 1
        elif name == 'KEY_DELETE':
            if self.cursor >= len(self.chars): return False
            del self.chars[self.cursor]
        elif name == 'KEY_LEFT':
            if self.cursor == 0: return False
            self.cursor -= 1
        elif name == 'KEY_RIGHT':
            if self.cursor >= len(self.chars): return False
            self.cursor += 1
        elif name == 'KEY_HOME':
            if self.cursor == 0 and self.scroll == 0: return False
            self.cursor = self.scroll = 0
        elif name == 'KEY_END':
            if self.cursor == len(self.chars): return False
            self.cursor = len(self.chars)
        else:
            ch = str(key)
            if len(ch) != 1 or name == 'KEY_ENTER':
                return False
            if ch in HEX_DIGITS:
                self._insert(ch)
            elif ch.isspace():
                self._insert(' ')
            else:
                return False
        self.scroll = min(self.scroll, len(self.chars))
        return True

    def _insert(self, ch: str):
        self.chars.insert(self.cursor, ch)
        self.cursor += 1

    def commit(self) -> Optional[bytes]:
        """
        Decode the buffer into bytes and clear it.
        An odd digit count (or no digits) is rejected: None, buffer untouched.
        """
        digits = hex_digits(self.chars)
        if not digits:
            return None
        payload = decode_pairs(digits)
        if payload is None:
            return None
        self.chars.clear()
        self.cursor = self.scroll = 0
        return payload

    @staticmethod
    def window(width: int) -> int:
        # columns left for text after the prompt; the last cell is kept for the cursor
        return max(0, width - len(PROMPT) - 1)

    def scroll_into_view(self, width: int) -> bool:
        window = self.window(width)
        scroll = min(self.scroll, max(0, len(self.chars) - window))
        if self.cursor < scroll:
            scroll = self.cursor
        elif self.cursor - scroll > window:
            scroll = self.cursor - window
        changed = scroll != self.scroll
        self.scroll = scroll
        return changed

    def cursor_column(self, width: int) -> int:
        column = len(PROMPT) + min(self.cursor - self.scroll, self.window(width))
        return max(0, min(column, width - 1))

    def paint(self, width: int, height: int) -> PaintOutput:
        visible = "".join(self.chars[self.scroll:self.scroll + self.window(width)])
        return pad_rows([divider("┼", width), fit(PROMPT + visible, width)], width, height)


@dataclass
class Sections:
    title: Title
    log: MessageLog
    input: InputState = field(default_factory=InputState)
