"""
Codec for the profiler's JSON output (``--jsonOutput``).

The document maps every OCR token to its interpretation::

    {
      "Vnheilfolles": {
        "OCR": "Vnheilfolles",
        "N": 3,
        "Candidates": [
          {"Suggestion": "unheilvolles", "Modern": "unheilvolles", "Dict": "...",
           "HistPatterns": [{"Left": "un", "Right": "vn", "Prob": 0.3, "Pos": 0}],
           "OCRPatterns": [{"Left": "v", "Right": "f", "Prob": 0.1, "Pos": 7}],
           "Distance": 2, "Weight": 0.82}
        ]
      }
    }
"""

from __future__ import annotations

import json
import logging

from ocrprofiler.exceptions import MalformedProfileError
from ocrprofiler.models import Interpretation, Profile

logger = logging.getLogger(__name__)


def decode_profile(data: bytes | str) -> Profile:
    """
    Decode a JSON profile.

    Empty input, ``null`` and ``{}`` all decode to an empty profile.

    Args:
        data: The JSON document as written by the profiler.

    Returns:
        The decoded profile.

    Raises:
        MalformedProfileError: If the document is not valid JSON or does
            not have the profile shape.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedProfileError(f"cannot decode profile: {e}") from e
    if not data.strip():
        return Profile()

    try:
        document = json.loads(data)
    except json.JSONDecodeError as e:
        raise MalformedProfileError(f"cannot decode profile: {e}") from e

    if document is None:
        return Profile()
    if not isinstance(document, dict):
        raise MalformedProfileError(
            f"cannot decode profile: expected an object, got {type(document).__name__}"
        )

    interpretations = {}
    for ocr, value in document.items():
        if value is None:
            interpretations[ocr] = Interpretation(ocr=ocr)
            continue
        try:
            interpretations[ocr] = Interpretation.from_dict(value, ocr=ocr)
        except (AttributeError, TypeError, ValueError, OverflowError) as e:
            raise MalformedProfileError(f"cannot decode interpretation of {ocr!r}: {e}") from e

    logger.debug("Decoded profile with %d interpretations", len(interpretations))
    return Profile(interpretations)


def encode_profile(profile: Profile, indent: int | None = None) -> str:
    """Encode a profile in the profiler's JSON shape."""
    return json.dumps(profile.to_dict(), ensure_ascii=False, indent=indent)
