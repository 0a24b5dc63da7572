"""
Configuration for running the profiler executable.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ocrprofiler.exceptions import ConfigurationError
from ocrprofiler.tokens import TokenFormat

DEFAULT_STREAM_LIMIT = 1024 * 1024  # longest stdout line in simple output


@dataclass
class ProfilerConfig:
    """
    Configuration for a profiler run.

    All options have sensible defaults; usually only the executable
    needs to be set.

    Example:
        >>> config = ProfilerConfig(executable="/usr/local/bin/profiler", adaptive=True)
        >>> profiler = Profiler(config)
    """

    # Profiler executable (path or name on PATH)
    executable: str = "profiler"

    # Output options passed as command line switches
    types: bool = False  # --types
    adaptive: bool = False  # --adaptive

    # Input line grammar used for all tokens of a run
    token_format: TokenFormat = TokenFormat.COLON

    # Process handling
    timeout: float | None = None  # seconds; None waits forever
    terminate_timeout: float = 5.0  # grace period between SIGTERM and SIGKILL
    stream_limit: int = DEFAULT_STREAM_LIMIT

    def __post_init__(self):
        """Validate configuration."""
        if isinstance(self.token_format, str):
            try:
                self.token_format = TokenFormat(self.token_format)
            except ValueError:
                valid = tuple(f.value for f in TokenFormat)
                raise ConfigurationError(
                    f"token_format must be one of {valid}, got {self.token_format!r}"
                ) from None
        if not self.executable:
            raise ConfigurationError("executable must not be empty")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"timeout must be > 0, got {self.timeout}")
        if self.terminate_timeout < 0:
            raise ConfigurationError(
                f"terminate_timeout must be >= 0, got {self.terminate_timeout}"
            )
        if self.stream_limit < 1:
            raise ConfigurationError(f"stream_limit must be >= 1, got {self.stream_limit}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProfilerConfig:
        """
        Create a configuration from a mapping of option names.

        Raises:
            ConfigurationError: On unknown options or invalid values.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown profiler options: {', '.join(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(f"invalid profiler options: {e}") from e

    @classmethod
    def from_yaml(cls, path: str | Path) -> ProfilerConfig:
        """
        Load a configuration from a YAML file.

        An empty file yields the default configuration.

        Args:
            path: YAML file with a mapping of option names to values.

        Raises:
            ConfigurationError: If the file cannot be read or is invalid.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"cannot read profiler config {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML in {path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(f"profiler config {path} must contain a mapping")
        return cls.from_dict(data)
