"""
Exception classes for ocrprofiler.

All ocrprofiler exceptions inherit from ProfilerError,
making it easy to catch all library errors.

Example:
    >>> try:
    ...     profile = ocrprofiler.profile("german.ini", tokens)
    ... except ocrprofiler.ProfilerTimeoutError:
    ...     print("gave up waiting for the profiler")
    ... except ocrprofiler.ProfilerError as e:
    ...     print(f"profiling failed: {e}")
"""


class ProfilerError(Exception):
    """
    Base exception for all ocrprofiler errors.

    Catch this to handle any ocrprofiler-specific error.
    """

    pass


class ConfigurationError(ProfilerError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> ProfilerConfig(terminate_timeout=-1)
        ConfigurationError: terminate_timeout must be >= 0, got -1
    """

    pass


class LanguageNotFoundError(ProfilerError, LookupError):
    """Raised when no language configuration matches the requested language."""

    def __init__(self, language: str, backend: str) -> None:
        super().__init__(f"language configuration not found: {language!r} in {backend}")
        self.language = language
        self.backend = backend


# -----------------------------------------------------------------------------
# Codec errors
# -----------------------------------------------------------------------------


class MalformedPatternError(ProfilerError, ValueError):
    """
    Raised when a pattern literal does not match `(left:right,pos)`.

    Example:
        >>> parse_pattern("(a:b)")
        MalformedPatternError: invalid pattern: '(a:b)'
    """

    def __init__(self, text: str) -> None:
        super().__init__(f"invalid pattern: {text!r}")
        self.text = text


class MalformedCandidateError(ProfilerError, ValueError):
    """Raised when a simple-output line is not a valid candidate record."""

    def __init__(self, line: str, reason: str = "") -> None:
        message = f"invalid candidate: {line!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.line = line


class MalformedProfileError(ProfilerError, ValueError):
    """Raised when a JSON profile cannot be decoded."""

    pass


# -----------------------------------------------------------------------------
# Process errors
# -----------------------------------------------------------------------------


class ProcessError(ProfilerError):
    """
    Base class for failures while running the profiler executable.

    Attributes:
        phase: Phase of the run that failed ("launch", "write", "read", "wait").
    """

    phase = "run"

    def __init__(self, message: str) -> None:
        super().__init__(f"run profiler: {self.phase}: {message}")


class LaunchError(ProcessError):
    """Raised when the profiler process cannot be started."""

    phase = "launch"


class WriteError(ProcessError):
    """Raised when writing tokens to the profiler's stdin fails (e.g. broken pipe)."""

    phase = "write"


class ExecutionError(ProcessError):
    """
    Raised when the profiler exits with a non-zero status.

    Attributes:
        returncode: Exit status of the process (negative for signals).
    """

    phase = "wait"

    def __init__(self, returncode: int) -> None:
        super().__init__(f"profiler exited with status {returncode}")
        self.returncode = returncode


class DecodeError(ProcessError):
    """
    Raised when the profiler's output does not match the expected grammar.

    The originating codec error is available as ``__cause__``.
    """

    phase = "read"


class ProfilerCancelledError(ProcessError):
    """Raised when a run was abandoned before the profiler finished."""

    phase = "wait"


class ProfilerTimeoutError(ProfilerCancelledError, TimeoutError):
    """Raised when the profiler did not finish within the configured timeout."""

    pass
