"""
Error taxonomy.

Initialization errors abort startup before the UI exists. Runtime errors
happen inside the event loop; all of them are fatal except StreamWriteError,
which the loop absorbs.
"""
from enum import Enum
from typing import Optional


class HexcatError(Exception):
    summary = "Something went wrong."

    def __init__(self, context: Optional[str] = None):
        super().__init__(context or self.summary)
        self.context = context

    def describe(self) -> str:
        """One-line summary plus the attached context, if any."""
        if self.context:
            return f"{self.summary} {self.context}"
        return self.summary


class InitErrorKind(Enum):
    NOT_ENOUGH_ARGUMENTS = "not enough arguments"
    INVALID_CONNECTION_SETTINGS = "invalid connection settings"
    COULD_NOT_CONNECT = "could not connect"
    NO_TERMINAL = "no terminal"
    THREADS = "threads"


class InitError(HexcatError):
    summary = "App could not start."

    def __init__(self, kind: InitErrorKind, context: Optional[str] = None):
        super().__init__(context)
        self.kind = kind


class AppError(HexcatError):
    pass


class PaintError(AppError):
    summary = "Could not paint to the terminal."


class ChannelBroken(AppError):
    summary = "A worker thread stopped unexpectedly."


class UserInputError(AppError):
    summary = "Could not read user input."


class StreamWriteError(AppError):
    summary = "Could not write to the connection."
