"""
Pytest configuration and fixtures for ocrprofiler tests.
"""

import sys
import textwrap
from pathlib import Path

import pytest

from ocrprofiler.tokens import CorrectedToken, LexiconEntry, OCRToken


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def profile_json(fixtures_dir) -> bytes:
    """Return the JSON profile fixture."""
    return (fixtures_dir / "profile.json").read_bytes()


@pytest.fixture
def tokens():
    """Two lexicon entries and four OCR tokens, two of them corrected."""
    return [
        LexiconEntry("LE-entry-1"),
        LexiconEntry("LE-entry-2"),
        CorrectedToken("OCR1", "COR1"),
        CorrectedToken("OCR2", "COR2"),
        OCRToken("OCR3"),
        OCRToken("OCR4"),
    ]


@pytest.fixture
def make_stub(tmp_path):
    """
    Return a factory for stub profiler executables.

    The stub is a Python script run by the current interpreter; ``body``
    is its source code.
    """

    def _make(name: str, body: str) -> str:
        path = tmp_path / name
        path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body), encoding="utf-8")
        path.chmod(0o755)
        return str(path)

    return _make
