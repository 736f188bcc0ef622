"""Named logger writing tagged messages to standard error."""

from __future__ import annotations

import sys
from typing import TextIO


class LoggedError(RuntimeError):
    """Error raised by :meth:`Logger.error` when asked to raise."""


class Logger:
    """Prefixes messages with the logger's name."""

    def __init__(self, name: str, stream: TextIO | None = None) -> None:
        self.name = name
        self.stream = stream

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stderr

    def error(self, message: str, raise_error: bool = True) -> None:
        """Raise :class:`LoggedError`, or only report the error when ``raise_error`` is false."""
        text = f"[ {self.name} ] -> ERROR: {message}"
        if raise_error:
            raise LoggedError(text)
        self._out().write(text + "\n")

    def info(self, message: str) -> None:
        """Report an informational message."""
        self._out().write(f"[ {self.name} ] -> INFO: {message}\n")