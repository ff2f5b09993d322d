"""
Reader threads. Each one blocks on its own source and forwards what it reads
to the event loop through a Channel, closing the channel when it stops.
Neither thread touches the screen or any UI state.
"""
import logging
import socket
import threading
from dataclasses import dataclass

from . import config
from .channel import Channel
from .errors import InitError, InitErrorKind, UserInputError

log = logging.getLogger(__name__)


def listen_connection(connection: socket.socket, sink: Channel, buffer_size: int = config.BUFFER_SIZE):
    """One recv() that yields bytes is one message. Runs until EOF or a hard error."""
    reason = None
    try:
        while True:
            try:
                data = connection.recv(buffer_size)
            except BlockingIOError:
                continue
            except OSError as e:
                log.info("connection read failed: %s", e)
                reason = e
                break
            if not data:
                log.info("connection closed by peer")
                break
            sink.send(bytes(data))
    finally:
        sink.close(reason)


def listen_keys(terminal, sink: Channel):
    reason = None
    try:
        while True:
            key = terminal.read_key()
            if key is not None:
                sink.send(key)
    except UserInputError as e:
        log.error("key reader stopped: %s", e.__cause__ or e)
        reason = e
    finally:
        sink.close(reason)


@dataclass
class Receivers:
    message: Channel
    input: Channel


def spawn_threads(connection: socket.socket, terminal) -> Receivers:
    receivers = Receivers(message=Channel("message"), input=Channel("input"))
    threads = [
        threading.Thread(target=listen_connection, args=(connection, receivers.message),
                         name="hexcat-connection", daemon=True),
        threading.Thread(target=listen_keys, args=(terminal, receivers.input),
                         name="hexcat-input", daemon=True),
    ]
    try:
        for t in threads:
            t.start()
    except RuntimeError as e:
        raise InitError(InitErrorKind.THREADS, f"Could not start communication threads: {e}") from e
    return receivers
