"""
Data models for ocrprofiler.

These models represent the output of a profiler run: a Profile maps every
profiled OCR token to its Interpretation, which holds the ranked correction
Candidates. Candidates carry the historical and OCR error Patterns that
explain them.
"""

from __future__ import annotations

import math
import struct
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from ocrprofiler.exceptions import MalformedProfileError


def to_float32(value: float) -> float:
    """
    Round a float to the nearest 32-bit float (the profiler's weight type).

    Raises:
        OverflowError: If a finite value is out of the 32-bit float range.
    """
    result = struct.unpack("f", struct.pack("f", value))[0]
    if math.isinf(result) and not math.isinf(value):
        raise OverflowError(f"{value!r} is out of range for a 32-bit float")
    return result


def _lookup(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    """Look up a JSON object key, falling back to a case-insensitive match."""
    if not isinstance(data, Mapping):
        raise MalformedProfileError(f"expected an object, got {type(data).__name__}")
    if key in data:
        return data[key]
    folded = key.casefold()
    for k, v in data.items():
        if isinstance(k, str) and k.casefold() == folded:
            return v
    return default


def _lookup_str(data: Mapping[str, Any], key: str) -> str:
    value = _lookup(data, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedProfileError(f"{key}: expected a string, got {value!r}")
    return value


def _lookup_int(data: Mapping[str, Any], key: str) -> int:
    value = _lookup(data, key)
    if value is None:
        return 0
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedProfileError(f"{key}: expected an integer, got {value!r}")
    return value


def _lookup_float(data: Mapping[str, Any], key: str) -> float:
    value = _lookup(data, key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedProfileError(f"{key}: expected a number, got {value!r}")
    return float(value)


def _lookup_list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = _lookup(data, key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedProfileError(f"{key}: expected an array, got {value!r}")
    return value


@dataclass(frozen=True)
class Pattern:
    """
    An error pattern in a string.

    ``left`` is the true (expected) form, ``right`` the actual form found
    in the string at position ``pos``. ``probability`` is a global corpus
    statistic and is only known for patterns read from a JSON profile.

    Example:
        >>> Pattern("un", "vn", 0).format()
        '(un:vn,0)'
    """

    left: str
    right: str
    pos: int
    probability: float = 0.0

    @property
    def key(self) -> str:
        """Key used in the global pattern tables."""
        return f"{self.left}:{self.right}"

    def format(self) -> str:
        """Render the pattern as ``(left:right,pos)``; the probability is dropped."""
        return f"({self.left}:{self.right},{self.pos})"

    def to_dict(self) -> dict[str, Any]:
        return {"Left": self.left, "Right": self.right, "Prob": self.probability, "Pos": self.pos}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Pattern:
        return cls(
            left=_lookup_str(data, "Left"),
            right=_lookup_str(data, "Right"),
            pos=_lookup_int(data, "Pos"),
            probability=_lookup_float(data, "Prob"),
        )


def format_patterns(patterns: Iterable[Pattern]) -> str:
    """Render patterns as concatenated literals, e.g. ``(un:vn,0)(t:th,3)``."""
    return "".join(p.format() for p in patterns)


@dataclass(frozen=True)
class Candidate:
    """
    A correction candidate for an OCR token.

    Attributes:
        suggestion: Correction suggestion.
        modern: Modern variant of the suggestion.
        dictionary: Name of the dictionary the suggestion came from.
        hist_patterns: Historical spelling patterns.
        ocr_patterns: OCR error patterns.
        distance: Levenshtein distance between OCR token and suggestion.
        weight: Vote weight (32-bit float precision).
    """

    suggestion: str
    modern: str = ""
    dictionary: str = ""
    hist_patterns: tuple[Pattern, ...] = ()
    ocr_patterns: tuple[Pattern, ...] = ()
    distance: int = 0
    weight: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "hist_patterns", tuple(self.hist_patterns))
        object.__setattr__(self, "ocr_patterns", tuple(self.ocr_patterns))
        object.__setattr__(self, "weight", to_float32(self.weight))

    def format(self, ocr: str | None = None) -> str:
        """
        Render the candidate in the profiler's simple output grammar.

        Args:
            ocr: Optional OCR token, rendered as an ``ocr@`` prefix.

        Returns:
            ``suggestion:{modern+[hist]}+ocr[ocr],voteWeight=...,levDistance=...,dict=...``
        """
        hist = format_patterns(self.hist_patterns)
        ocrp = format_patterns(self.ocr_patterns)
        line = (
            f"{self.suggestion}:{{{self.modern}+[{hist}]}}+ocr[{ocrp}],"
            f"voteWeight={self.weight:e},levDistance={self.distance},dict={self.dictionary}"
        )
        if ocr is not None:
            line = f"{ocr}@{line}"
        return line

    def to_dict(self) -> dict[str, Any]:
        return {
            "Suggestion": self.suggestion,
            "Modern": self.modern,
            "Dict": self.dictionary,
            "HistPatterns": [p.to_dict() for p in self.hist_patterns],
            "OCRPatterns": [p.to_dict() for p in self.ocr_patterns],
            "Distance": self.distance,
            "Weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Candidate:
        return cls(
            suggestion=_lookup_str(data, "Suggestion"),
            modern=_lookup_str(data, "Modern"),
            dictionary=_lookup_str(data, "Dict"),
            hist_patterns=tuple(Pattern.from_dict(p) for p in _lookup_list(data, "HistPatterns")),
            ocr_patterns=tuple(Pattern.from_dict(p) for p in _lookup_list(data, "OCRPatterns")),
            distance=_lookup_int(data, "Distance"),
            weight=_lookup_float(data, "Weight"),
        )


@dataclass(frozen=True)
class Interpretation:
    """The candidates for one distinct OCR token and its occurrence count."""

    ocr: str
    n: int = 0
    candidates: tuple[Candidate, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "candidates", tuple(self.candidates))

    def to_dict(self) -> dict[str, Any]:
        return {
            "OCR": self.ocr,
            "N": self.n,
            "Candidates": [c.to_dict() for c in self.candidates],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], ocr: str = "") -> Interpretation:
        return cls(
            ocr=_lookup_str(data, "OCR") or ocr,
            n=_lookup_int(data, "N"),
            candidates=tuple(Candidate.from_dict(c) for c in _lookup_list(data, "Candidates")),
        )


class Profile(Mapping[str, Interpretation]):
    """
    Maps the OCR tokens of a profiled document to their interpretations.

    A Profile is read-only. The global pattern tables are computed by
    scanning all candidates on every call.

    Example:
        >>> profile = decode_profile(data)
        >>> len(profile["Vnheilfolles"].candidates)
        41
        >>> profile.global_ocr_patterns()["u:v"]
        0.1
    """

    def __init__(self, interpretations: Mapping[str, Interpretation] | None = None) -> None:
        self._interpretations: dict[str, Interpretation] = dict(interpretations or {})

    def __getitem__(self, ocr: str) -> Interpretation:
        return self._interpretations[ocr]

    def __iter__(self) -> Iterator[str]:
        return iter(self._interpretations)

    def __len__(self) -> int:
        return len(self._interpretations)

    def __repr__(self) -> str:
        return f"Profile({self._interpretations!r})"

    def candidates(self) -> Iterator[tuple[str, Candidate]]:
        """Iterate over ``(ocr, candidate)`` pairs in profile order."""
        for ocr, interpretation in self._interpretations.items():
            for candidate in interpretation.candidates:
                yield ocr, candidate

    def global_hist_patterns(self) -> dict[str, float]:
        """
        Collect all historical patterns of the profile.

        Returns:
            Mapping of ``left:right`` to the pattern probability. If a key
            occurs more than once, the last one in profile order wins.
        """
        return {p.key: p.probability for _, c in self.candidates() for p in c.hist_patterns}

    def global_ocr_patterns(self) -> dict[str, float]:
        """
        Collect all OCR error patterns of the profile.

        Returns:
            Mapping of ``left:right`` to the pattern probability. If a key
            occurs more than once, the last one in profile order wins.
        """
        return {p.key: p.probability for _, c in self.candidates() for p in c.ocr_patterns}

    def to_dict(self) -> dict[str, Any]:
        """Convert to the profiler's JSON shape."""
        return {ocr: i.to_dict() for ocr, i in self._interpretations.items()}
