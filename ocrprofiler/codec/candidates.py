"""
Codec for candidate records of the profiler's simple output.

Each line of ``--simpleOutput`` describes one correction candidate::

    Vnheilfolles@unheilvolles:{unheilvolles+[(un:vn,0)]}+ocr[(v:f,7)],voteWeight=8.234560e-01,levDistance=2,dict=dict_modern_hypothetic_errors

The ``ocr@`` prefix names the OCR token the candidate belongs to. Older
profiler versions omit it; callers then have to know the token from
context.
"""

from __future__ import annotations

import re

from ocrprofiler.codec.patterns import parse_patterns
from ocrprofiler.exceptions import MalformedCandidateError
from ocrprofiler.models import Candidate, to_float32

CANDIDATE_RE = re.compile(
    r"(?:(?P<ocr>[^@]*)@)?"
    r"(?P<suggestion>.*?):\{(?P<modern>.*)\+\[(?P<hist>.*)\]\}"
    r"\+ocr\[(?P<ocr_patterns>.*)\]"
    r",voteWeight=(?P<weight>[^,]*)"
    r",levDistance=(?P<distance>[^,]*)"
    r",dict=(?P<dict>.*)"
)


def _parse_weight(text: str, line: str) -> float:
    try:
        return to_float32(float(text))
    except ValueError:
        raise MalformedCandidateError(line, f"invalid voteWeight {text!r}") from None
    except OverflowError:
        raise MalformedCandidateError(line, f"voteWeight out of range {text!r}") from None


def parse_candidate(line: str) -> tuple[Candidate, str | None]:
    """
    Parse one simple output line.

    Args:
        line: Candidate record, with or without the ``ocr@`` prefix and
            without the trailing newline.

    Returns:
        Tuple of the candidate and the OCR token named by the prefix
        (None if the line has no prefix).

    Raises:
        MalformedCandidateError: If the record structure or a number is invalid.
        MalformedPatternError: If an embedded pattern is invalid.
    """
    m = CANDIDATE_RE.fullmatch(line)
    if m is None:
        raise MalformedCandidateError(line)

    distance_text = m["distance"]
    if not re.fullmatch(r"[+-]?[0-9]+", distance_text):
        raise MalformedCandidateError(line, f"invalid levDistance {distance_text!r}")

    candidate = Candidate(
        suggestion=m["suggestion"],
        modern=m["modern"],
        dictionary=m["dict"],
        hist_patterns=parse_patterns(m["hist"]),
        ocr_patterns=parse_patterns(m["ocr_patterns"]),
        distance=int(distance_text),
        weight=_parse_weight(m["weight"], line),
    )
    return candidate, m["ocr"]


def format_candidate(candidate: Candidate, ocr: str | None = None) -> str:
    """Render a candidate as a simple output line (with ``ocr@`` prefix if given)."""
    return candidate.format(ocr)
