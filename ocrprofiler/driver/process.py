"""
Process driver for the profiler executable.

A Profiler runs the external profiler once per call. It writes the
encoded tokens to the process's stdin while concurrently reading its
stdout and (if a line logger is given) its stderr:

- ``run()`` requests a JSON profile and decodes it after the process exited.
- ``run_func()`` requests the simple output and hands every candidate line
  to a callback as soon as it arrives.

Each run uses one asyncio task per pipe. If any of them fails, or the run
times out or is cancelled, the remaining tasks are cancelled and the
process is terminated before the error is raised.

Example:
    >>> profiler = Profiler(ProfilerConfig(executable="profiler"), logger=print)
    >>> profile = await profiler.run("german.ini", [OCRToken("Vnheilfolles")])
    >>> profile["Vnheilfolles"].candidates[0].suggestion
    'unheilvolles'
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
import shlex
import signal
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum
from pathlib import Path
from typing import Any, Union

from ocrprofiler.codec.candidates import parse_candidate
from ocrprofiler.codec.profile import decode_profile
from ocrprofiler.config import ProfilerConfig
from ocrprofiler.driver.lines import LineLogger, LineSink, LineSplitter, as_line_sink
from ocrprofiler.exceptions import (
    DecodeError,
    ExecutionError,
    LaunchError,
    MalformedCandidateError,
    MalformedPatternError,
    MalformedProfileError,
    ProfilerTimeoutError,
    WriteError,
)
from ocrprofiler.languages import LanguageConfiguration
from ocrprofiler.models import Candidate, Profile
from ocrprofiler.tokens import Token, format_token

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 4096

ConfigPath = Union[str, Path, LanguageConfiguration]
CandidateCallback = Callable[[str, Candidate], Union[Awaitable[Any], None]]


def _signal_group(process: asyncio.subprocess.Process, sig: int) -> None:
    """Send a signal to the profiler and every process it started."""
    try:
        os.killpg(process.pid, sig)
    except ProcessLookupError:
        pass  # already gone


class OutputMode(Enum):
    """Output formats requested from the profiler."""

    JSON = "json"  # one JSON document, --jsonOutput
    SIMPLE = "simple"  # one candidate per line, --simpleOutput


def build_args(
    config_path: ConfigPath,
    mode: OutputMode,
    *,
    types: bool = False,
    adaptive: bool = False,
) -> list[str]:
    """
    Build the profiler's command line arguments (without the executable).

    Args:
        config_path: Language configuration file.
        mode: Requested output format.
        types: Add ``--types``.
        adaptive: Add ``--adaptive``.
    """
    if isinstance(config_path, LanguageConfiguration):
        config_path = config_path.path
    args = [
        "--config",
        str(config_path),
        "--sourceFormat",
        "EXT",
        "--sourceFile",
        "/dev/stdin",
    ]
    if mode is OutputMode.JSON:
        args += ["--jsonOutput", "/dev/stdout"]
    else:
        args.append("--simpleOutput")
    if types:
        args.append("--types")
    if adaptive:
        args.append("--adaptive")
    return args


class Profiler:
    """
    Runs the profiler executable on a list of tokens.

    A Profiler holds no per-run state; concurrent runs are independent.
    A shared line logger must be safe to call from concurrent runs, since
    their stderr lines may interleave.

    Args:
        config: Profiler configuration (defaults to ProfilerConfig()).
        logger: Optional receiver of the profiler's stderr: a LineLogger,
            a callable taking one line, or a ``logging.Logger``.
    """

    def __init__(
        self,
        config: ProfilerConfig | None = None,
        logger: LineLogger | LineSink | logging.Logger | None = None,
    ) -> None:
        self.config = config or ProfilerConfig()
        self._log_sink = as_line_sink(logger) if logger is not None else None

    def build_args(self, config_path: ConfigPath, mode: OutputMode) -> list[str]:
        return build_args(
            config_path, mode, types=self.config.types, adaptive=self.config.adaptive
        )

    async def run(
        self,
        config_path: ConfigPath,
        tokens: Iterable[Token],
        *,
        timeout: float | None = None,
    ) -> Profile:
        """
        Profile tokens and return the decoded JSON profile.

        Args:
            config_path: Language configuration of the profiler.
            tokens: Tokens to profile, written in order.
            timeout: Seconds to wait for the profiler (overrides config.timeout).

        Returns:
            The profile of the run.

        Raises:
            LaunchError: If the profiler cannot be started.
            WriteError: If writing the tokens fails.
            ExecutionError: If the profiler exits with a non-zero status.
            DecodeError: If the output is not a valid JSON profile.
            ProfilerTimeoutError: If the timeout expires.
        """
        args = self.build_args(config_path, OutputMode.JSON)
        data = await self._execute(args, tokens, self._read_all, timeout)
        try:
            return decode_profile(data)
        except MalformedProfileError as e:
            raise DecodeError(str(e)) from e

    async def run_func(
        self,
        config_path: ConfigPath,
        tokens: Iterable[Token],
        callback: CandidateCallback,
        *,
        timeout: float | None = None,
    ) -> None:
        """
        Profile tokens and call ``callback(ocr, candidate)`` for every candidate.

        The callback may be a coroutine function. Callbacks run in output
        order while the profiler is still running. If the callback raises,
        the profiler is terminated and the exception propagates unchanged.
        Callbacks that already ran are not undone when the run fails later.

        Raises:
            LaunchError: If the profiler cannot be started.
            WriteError: If writing the tokens fails.
            ExecutionError: If the profiler exits with a non-zero status.
            DecodeError: If an output line is not a valid candidate.
            ProfilerTimeoutError: If the timeout expires.
        """
        args = self.build_args(config_path, OutputMode.SIMPLE)

        async def consume(stdout: asyncio.StreamReader) -> None:
            await self._read_candidates(stdout, callback)

        await self._execute(args, tokens, consume, timeout)

    # -------------------------------------------------------------------------
    # Process lifecycle
    # -------------------------------------------------------------------------

    async def _execute(
        self,
        args: list[str],
        tokens: Iterable[Token],
        consume: Callable[[asyncio.StreamReader], Awaitable[Any]],
        timeout: float | None,
    ) -> Any:
        if timeout is None:
            timeout = self.config.timeout
        task = asyncio.ensure_future(self._run_process(args, tokens, consume))
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout)
        except asyncio.CancelledError:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            raise
        if task in done:
            return task.result()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise ProfilerTimeoutError(f"profiler did not finish within {timeout}s")

    async def _run_process(
        self,
        args: list[str],
        tokens: Iterable[Token],
        consume: Callable[[asyncio.StreamReader], Awaitable[Any]],
    ) -> Any:
        argv = [self.config.executable, *args]
        logger.debug("Starting profiler: %s", shlex.join(argv))
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=(
                    asyncio.subprocess.PIPE
                    if self._log_sink is not None
                    else asyncio.subprocess.DEVNULL
                ),
                limit=self.config.stream_limit,
                start_new_session=True,
            )
        except OSError as e:
            raise LaunchError(f"cannot start {self.config.executable}: {e}") from e

        try:
            result = await self._communicate(process, tokens, consume)
        except asyncio.CancelledError:
            await self._terminate(process, graceful=False)
            raise
        except BaseException:
            await self._terminate(process)
            raise
        logger.debug("Profiler (pid %d) finished", process.pid)
        return result

    async def _communicate(
        self,
        process: asyncio.subprocess.Process,
        tokens: Iterable[Token],
        consume: Callable[[asyncio.StreamReader], Awaitable[Any]],
    ) -> Any:
        writer = asyncio.create_task(self._write_tokens(process.stdin, tokens))
        reader = asyncio.create_task(consume(process.stdout))
        tasks = [writer, reader]
        if self._log_sink is not None:
            tasks.append(asyncio.create_task(self._forward_stderr(process.stderr, self._log_sink)))

        write_error = None
        try:
            pending = set(tasks)
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_EXCEPTION)
                for task in done:
                    exc = task.exception()
                    if exc is None:
                        continue
                    if task is writer and isinstance(exc, WriteError):
                        # report the exit status first if the process failed
                        write_error = exc
                        continue
                    raise exc
            returncode = await process.wait()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        if returncode != 0:
            raise ExecutionError(returncode) from write_error
        if write_error is not None:
            raise write_error
        return reader.result()

    async def _terminate(
        self, process: asyncio.subprocess.Process, *, graceful: bool = True
    ) -> None:
        """
        Stop the profiler's process group and reap the profiler.

        A graceful stop sends SIGTERM and escalates to SIGKILL after
        ``terminate_timeout`` seconds. Otherwise SIGKILL is sent right away.
        """
        if process.returncode is not None:
            return
        if graceful:
            logger.debug("Terminating profiler (pid %d)", process.pid)
            _signal_group(process, signal.SIGTERM)
            try:
                await asyncio.wait_for(process.wait(), self.config.terminate_timeout)
                return
            except asyncio.TimeoutError:
                logger.warning(
                    "Profiler (pid %d) did not terminate within %.1fs, killing it",
                    process.pid,
                    self.config.terminate_timeout,
                )
        else:
            logger.debug("Killing profiler (pid %d)", process.pid)
        _signal_group(process, signal.SIGKILL)
        await process.wait()

    # -------------------------------------------------------------------------
    # Pipe tasks
    # -------------------------------------------------------------------------

    async def _write_tokens(self, stdin: asyncio.StreamWriter, tokens: Iterable[Token]) -> None:
        token_format = self.config.token_format
        n = 0
        try:
            for token in tokens:
                stdin.write(format_token(token, token_format).encode("utf-8") + b"\n")
                n += 1
                await stdin.drain()
            stdin.close()
            await stdin.wait_closed()
        except (BrokenPipeError, ConnectionResetError) as e:
            raise WriteError(f"write token {n}: {e}") from e
        logger.debug("Wrote %d tokens", n)

    async def _forward_stderr(self, stderr: asyncio.StreamReader, sink: LineSink) -> None:
        splitter = LineSplitter()
        while True:
            chunk = await stderr.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            for line in splitter.feed(chunk):
                sink(line)
        if splitter.pending:
            logger.debug("Dropping unterminated stderr line: %r", splitter.pending)

    async def _read_all(self, stdout: asyncio.StreamReader) -> bytes:
        return await stdout.read()

    async def _read_candidates(
        self, stdout: asyncio.StreamReader, callback: CandidateCallback
    ) -> None:
        n = 0
        while True:
            try:
                raw = await stdout.readline()
            except ValueError as e:
                raise DecodeError(f"read candidate: {e}") from e
            if not raw:
                break
            try:
                line = raw.decode("utf-8").rstrip("\r\n")
                if not line:
                    continue
                candidate, ocr = parse_candidate(line)
            except (UnicodeDecodeError, MalformedCandidateError, MalformedPatternError) as e:
                raise DecodeError(f"read candidate: {e}") from e
            result = callback(ocr or "", candidate)
            if inspect.isawaitable(result):
                await result
            n += 1
        logger.debug("Read %d candidates", n)


# -----------------------------------------------------------------------------
# Synchronous helpers
# -----------------------------------------------------------------------------


def profile(
    config_path: ConfigPath,
    tokens: Iterable[Token],
    *,
    config: ProfilerConfig | None = None,
    logger: LineLogger | LineSink | logging.Logger | None = None,
    timeout: float | None = None,
) -> Profile:
    """Run the profiler in a new event loop and return the JSON profile."""
    return asyncio.run(Profiler(config, logger).run(config_path, tokens, timeout=timeout))


def stream_candidates(
    config_path: ConfigPath,
    tokens: Iterable[Token],
    callback: CandidateCallback,
    *,
    config: ProfilerConfig | None = None,
    logger: LineLogger | LineSink | logging.Logger | None = None,
    timeout: float | None = None,
) -> None:
    """Run the profiler in a new event loop and call back for every candidate."""
    asyncio.run(
        Profiler(config, logger).run_func(config_path, tokens, callback, timeout=timeout)
    )
