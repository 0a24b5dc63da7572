"""
Codec for the compact pattern notation ``(left:right,pos)``.

Patterns appear in the profiler's simple output, either alone or
concatenated without a separator::

    (un:vn,0)(ff:ſſ,2)
"""

from __future__ import annotations

import re

from ocrprofiler.exceptions import MalformedPatternError
from ocrprofiler.models import Pattern, format_patterns

__all__ = ["PATTERN_RE", "format_pattern", "format_patterns", "parse_pattern", "parse_patterns"]

# left is greedy up to the last ':'; neither side contains ')'
PATTERN_RE = re.compile(r"\((?P<left>[^)]*):(?P<right>[^:)]*),(?P<pos>[0-9]+)\)")

# one parenthesized literal
_PATTERN_CHUNK_RE = re.compile(r"\([^)]*\)")


def parse_pattern(text: str) -> Pattern:
    """
    Parse one pattern literal.

    Args:
        text: Literal of the form ``(left:right,pos)``.

    Returns:
        The parsed pattern (with a probability of 0).

    Raises:
        MalformedPatternError: If the literal does not match the grammar.
    """
    m = PATTERN_RE.fullmatch(text)
    if m is None:
        raise MalformedPatternError(text)
    return Pattern(left=m["left"], right=m["right"], pos=int(m["pos"]))


def parse_patterns(text: str) -> tuple[Pattern, ...]:
    """
    Parse zero or more concatenated pattern literals.

    Raises:
        MalformedPatternError: If any literal is invalid or text is left over.
    """
    patterns = []
    pos = 0
    while pos < len(text):
        m = _PATTERN_CHUNK_RE.match(text, pos)
        if m is None:
            raise MalformedPatternError(text[pos:])
        patterns.append(parse_pattern(m.group()))
        pos = m.end()
    return tuple(patterns)


def format_pattern(pattern: Pattern) -> str:
    """Render a pattern as ``(left:right,pos)``."""
    return pattern.format()
