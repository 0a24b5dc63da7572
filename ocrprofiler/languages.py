"""
Discovery of the profiler's language configurations.

A profiler backend directory holds one ``.ini`` file per language, e.g.
``german.ini`` or ``Latin.ini``. The language name is the lower-cased
file name without the suffix.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ocrprofiler.exceptions import ConfigurationError, LanguageNotFoundError

logger = logging.getLogger(__name__)

CONFIG_SUFFIX = ".ini"


@dataclass(frozen=True)
class LanguageConfiguration:
    """A language name and the path of its configuration file."""

    language: str
    path: str


def list_languages(backend: str | Path, suffix: str = CONFIG_SUFFIX) -> list[LanguageConfiguration]:
    """
    List the language configurations in a backend directory.

    Args:
        backend: Backend directory to scan (not recursive).
        suffix: File suffix of configuration files.

    Returns:
        Language configurations sorted by file name.

    Raises:
        ConfigurationError: If the directory cannot be listed.
    """
    try:
        entries = sorted(Path(backend).iterdir())
    except OSError as e:
        raise ConfigurationError(f"cannot list languages: {e}") from e

    configurations = []
    for entry in entries:
        if entry.is_dir() or not entry.name.endswith(suffix):
            continue
        configurations.append(
            LanguageConfiguration(
                language=entry.name[: len(entry.name) - len(suffix)].lower(),
                path=str(Path(backend) / entry.name),
            )
        )
    logger.debug("Found %d language configurations in %s", len(configurations), backend)
    return configurations


def find_language(backend: str | Path, language: str) -> LanguageConfiguration:
    """
    Find the configuration for a language (case-insensitive).

    Raises:
        LanguageNotFoundError: If no configuration matches.
        ConfigurationError: If the backend directory cannot be listed.
    """
    search = language.lower()
    for configuration in list_languages(backend):
        if configuration.language == search:
            return configuration
    raise LanguageNotFoundError(language, str(backend))
