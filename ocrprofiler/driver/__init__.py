"""
Process driver for the external profiler.

Runs the profiler executable as a subprocess, streams tokens to its stdin
and decodes its stdout, forwarding stderr to an optional line logger.
"""

from ocrprofiler.driver.lines import (
    LineLogger,
    LineSplitter,
    LoggingLineLogger,
)
from ocrprofiler.driver.process import (
    OutputMode,
    Profiler,
    build_args,
    profile,
    stream_candidates,
)

__all__ = [
    # Driver
    "Profiler",
    "OutputMode",
    "build_args",
    "profile",
    "stream_candidates",
    # stderr
    "LineLogger",
    "LoggingLineLogger",
    "LineSplitter",
]
