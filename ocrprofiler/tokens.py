"""
Profiler input tokens and their line encoding.

The profiler reads one token per line from its source file. A token is
either an entry for the extended lexicon or an OCR token with an optional
manual correction. Tokens must never contain whitespace; this is not
checked here.

Example:
    >>> format_token(LexiconEntry("Wasser"))
    '#Wasser'
    >>> format_token(CorrectedToken("Waſſer", "Wasser"))
    'Waſſer:Wasser'
    >>> format_token(OCRToken("Vnheil"), TokenFormat.SLASH)
    'Vnheil'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class TokenFormat(Enum):
    """Line grammars understood by the profiler's EXT source format."""

    COLON = "colon"  # ocr:cor, ocr:
    SLASH = "slash"  # ocr/cor, ocr


@dataclass(frozen=True)
class LexiconEntry:
    """An entry for the extended lexicon."""

    entry: str

    def format(self, token_format: TokenFormat = TokenFormat.COLON) -> str:
        return f"#{self.entry}"


@dataclass(frozen=True)
class OCRToken:
    """An OCR token without a manual correction."""

    ocr: str

    def format(self, token_format: TokenFormat = TokenFormat.COLON) -> str:
        if token_format is TokenFormat.SLASH:
            return self.ocr
        # Uncorrected tokens still end with the separator.
        return f"{self.ocr}:"


@dataclass(frozen=True)
class CorrectedToken:
    """An OCR token with a manual correction (which may be empty)."""

    ocr: str
    correction: str

    def format(self, token_format: TokenFormat = TokenFormat.COLON) -> str:
        sep = "/" if token_format is TokenFormat.SLASH else ":"
        return f"{self.ocr}{sep}{self.correction}"


Token = Union[LexiconEntry, OCRToken, CorrectedToken]


def format_token(token: Token, token_format: TokenFormat = TokenFormat.COLON) -> str:
    """
    Encode a token as one profiler input line (without the newline).

    Args:
        token: Token to encode.
        token_format: Line grammar to use.

    Returns:
        The encoded line.

    Raises:
        TypeError: If token is not one of the token variants.
    """
    if not isinstance(token, (LexiconEntry, OCRToken, CorrectedToken)):
        raise TypeError(f"not a profiler token: {token!r}")
    return token.format(token_format)
