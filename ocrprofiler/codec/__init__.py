"""
Codecs for the profiler's output grammars.

- Pattern notation ``(left:right,pos)``
- Candidate records of the simple (streamed) output
- JSON profiles
"""

from ocrprofiler.codec.candidates import format_candidate, parse_candidate
from ocrprofiler.codec.patterns import (
    format_pattern,
    format_patterns,
    parse_pattern,
    parse_patterns,
)
from ocrprofiler.codec.profile import decode_profile, encode_profile

__all__ = [
    # Patterns
    "parse_pattern",
    "parse_patterns",
    "format_pattern",
    "format_patterns",
    # Candidates
    "parse_candidate",
    "format_candidate",
    # Profiles
    "decode_profile",
    "encode_profile",
]
