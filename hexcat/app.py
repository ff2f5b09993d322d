import logging
import time
from enum import Enum
from typing import Callable, Optional, Tuple

from . import config
from .channel import ChannelClosed
from .errors import ChannelBroken, StreamWriteError, UserInputError
from .paint import SectionKind, compose_and_paint, layout
from .sections import Message, Origin, Sections
from .terminal import key_name
from .workers import Receivers

log = logging.getLogger(__name__)


class State(Enum):
    RUNNING = "running"
    QUITTING = "quitting"


class App:
    """
    The event loop. Owns every piece of UI state and is the only thing
    that writes to the screen or the connection.

    Each tick takes at most one item from each channel, repaints if anything
    changed (or the terminal was resized), then sleeps for `tick` seconds.
    """
    def __init__(self, terminal, sections: Sections, receivers: Receivers,
                 tick: float = config.TICK_S, sleep: Callable[[float], None] = time.sleep):
        self.terminal = terminal
        self.sections = sections
        self.receivers = receivers
        self.tick_s = tick
        self.sleep = sleep
        self.state = State.RUNNING
        self.dirty = True
        self.size: Optional[Tuple[int, int]] = None

    def run(self):
        self.terminal.clear()
        while self.state is State.RUNNING:
            self.tick()
            self.sleep(self.tick_s)
        self.terminal.clear()
        self.terminal.move_cursor(0, 0)
        self.terminal.flush()

    def tick(self):
        self._poll_messages()
        self._poll_keys()
        if self.state is State.QUITTING:
            return
        size = self.terminal.size()
        if self.dirty or size != self.size:
            self.repaint(size)

    def repaint(self, size: Tuple[int, int]):
        self.sections.input.scroll_into_view(size[0])
        self.size = compose_and_paint(self.sections, self.terminal, size)
        self.dirty = False

    def _poll_messages(self):
        try:
            data = self.receivers.message.try_recv()
        except ChannelClosed as e:
            context = f"Connection reader stopped ({e.reason})." if e.reason else "Connection closed by the remote end."
            raise ChannelBroken(context) from e
        if data is not None:
            self.sections.log.append(Message(Origin.REMOTE, data))
            self.dirty = True

    def _poll_keys(self):
        try:
            key = self.receivers.input.try_recv()
        except ChannelClosed as e:
            if isinstance(e.reason, UserInputError):
                raise e.reason
            raise ChannelBroken("User input thread communication broke.") from e
        if key is None:
            return

        name = key_name(key)
        if name == 'KEY_CTRL_C':
            log.info("quit requested")
            self.state = State.QUITTING
        elif name == 'KEY_ENTER':
            payload = self.sections.input.commit()
            if payload is not None:
                self._send(payload)
        elif name in ('KEY_PGUP', 'KEY_PGDOWN'):
            direction = -1 if name == 'KEY_PGUP' else 1
            if self.sections.log.scroll_page(direction, self._log_height()):
                self.dirty = True
        elif self.sections.input.handle_key(key):
            self.dirty = True

    def _send(self, payload: bytes):
        try:
            self.sections.log.append(Message(Origin.LOCAL, payload))
            self.sections.title.status = ""
        except StreamWriteError as e:
            log.warning("send failed: %s", e.context)
            self.sections.title.status = "send failed"
        self.dirty = True

    def _log_height(self) -> int:
        width, height = self.size or self.terminal.size()
        return layout(width, height)[SectionKind.LOG].h
