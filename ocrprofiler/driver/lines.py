"""
Line handling for the profiler's stderr.

The profiler writes free-form diagnostics to stderr. They are forwarded
to a line logger one complete line at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, Union, runtime_checkable


@runtime_checkable
class LineLogger(Protocol):
    """Receives the profiler's stderr, one line (without newline) per call."""

    def log(self, line: str) -> None: ...


LineSink = Callable[[str], None]


class LoggingLineLogger:
    """
    Line logger that writes to a standard library logger.

    Example:
        >>> profiler = Profiler(logger=LoggingLineLogger(logging.getLogger("profiler")))
    """

    def __init__(self, logger: logging.Logger, level: int = logging.INFO) -> None:
        self.logger = logger
        self.level = level

    def log(self, line: str) -> None:
        self.logger.log(self.level, "%s", line)


def as_line_sink(logger: Union[LineLogger, LineSink, logging.Logger]) -> LineSink:
    """Turn a line logger, a callable or a ``logging.Logger`` into a callable."""
    if isinstance(logger, (logging.Logger, logging.LoggerAdapter)):
        return LoggingLineLogger(logger).log
    if isinstance(logger, LineLogger):
        return logger.log
    if callable(logger):
        return logger
    raise TypeError(f"not a line logger: {logger!r}")


class LineSplitter:
    """
    Accumulates bytes and splits them into complete lines.

    Example:
        >>> splitter = LineSplitter()
        >>> splitter.feed(b"first\\nsec")
        ['first']
        >>> splitter.feed(b"ond\\n")
        ['second']
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding
        self._buffer = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes of the current, not yet terminated line."""
        return bytes(self._buffer)

    def feed(self, data: bytes) -> list[str]:
        """Append data and return all lines completed by it."""
        self._buffer.extend(data)
        lines = []
        while (pos := self._buffer.find(b"\n")) != -1:
            lines.append(self._buffer[:pos].decode(self.encoding, errors="replace"))
            del self._buffer[: pos + 1]
        return lines
