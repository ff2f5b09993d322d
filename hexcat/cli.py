"""
Command line entry point: ``hexcat <ip-address> <port>``.

Connects first, then takes over the terminal, so connection errors are
printed on a normal screen. Returns the process exit code.
"""
import argparse
import ipaddress
import logging
import socket
from typing import List, Optional, Tuple

from rich.console import Console

from . import __version__, config
from .app import App
from .errors import HexcatError, InitError, InitErrorKind
from .log import setup_logging
from .sections import MessageLog, Sections, Title
from .terminal import Terminal
from .workers import spawn_threads

log = logging.getLogger(__name__)


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        kind = InitErrorKind.INVALID_CONNECTION_SETTINGS
        if "required" in message:
            kind = InitErrorKind.NOT_ENOUGH_ARGUMENTS
            message = "You must supply at least 2 arguments (IP Address and Port)."
        raise InitError(kind, message)


def build_parser() -> ArgumentParser:
    p = ArgumentParser(prog="hexcat", description="Send and receive raw bytes over TCP, typed and shown as hex.")
    p.add_argument("address", help="IPv4 or IPv6 address of the remote end")
    p.add_argument("port", help="TCP port")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def parse_endpoint(argv: Optional[List[str]] = None) -> Tuple[str, int]:
    args, extra = build_parser().parse_known_args(argv)
    if extra:
        log.info("ignoring extra arguments: %s", " ".join(extra))
    try:
        addr = ipaddress.ip_address(args.address)
    except ValueError as e:
        raise InitError(InitErrorKind.INVALID_CONNECTION_SETTINGS, f"Invalid IP address: {args.address!r}.") from e
    # plain ASCII decimal only; int() would also take "+80", " 80", "8_0" and other scripts' digits
    if not (args.port.isascii() and args.port.isdigit()):
        raise InitError(InitErrorKind.INVALID_CONNECTION_SETTINGS, f"Invalid port number: {args.port!r}.")
    port = int(args.port)
    if not 0 <= port <= 65535:
        raise InitError(InitErrorKind.INVALID_CONNECTION_SETTINGS, f"Invalid port number: {port}.")
    return str(addr), port


def connect(addr: str, port: int, timeout: float = config.CONNECT_TIMEOUT_S) -> socket.socket:
    try:
        connection = socket.create_connection((addr, port), timeout=timeout)
    except OSError as e:
        raise InitError(
            InitErrorKind.COULD_NOT_CONNECT,
            f"Could not connect to remote server (using {addr} on port {port}): {e}"
        ) from e
    connection.settimeout(None)
    log.info("connected to %s port %d", addr, port)
    return connection


def run(argv: Optional[List[str]] = None):
    addr, port = parse_endpoint(argv)
    connection = connect(addr, port)
    with connection:
        # the reader thread gets its own handle; the event loop keeps this one for writes
        reader = connection.dup()
        terminal = Terminal()
        with reader, terminal.session():
            receivers = spawn_threads(reader, terminal)
            sections = Sections(title=Title(peer=connection.getpeername()[:2]), log=MessageLog(connection))
            App(terminal, sections, receivers).run()


def report(error: HexcatError, console: Optional[Console] = None):
    console = console or Console(stderr=True, highlight=False)
    console.print(f"[bold red]error:[/] {error.summary}")
    if error.context:
        console.print(f"  {error.context}", markup=False)
    cause = error.__cause__
    if cause is not None and str(cause) and str(cause) not in (error.context or ""):
        console.print(f"  caused by: {cause}", markup=False)


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    try:
        run(argv)
    except HexcatError as e:
        log.error("fatal: %s", e.describe())
        report(e)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0
