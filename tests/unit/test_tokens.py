"""
Unit tests for token encoding.
"""

import pytest

from ocrprofiler.tokens import (
    CorrectedToken,
    LexiconEntry,
    OCRToken,
    TokenFormat,
    format_token,
)


class TestColonFormat:
    """Tests for the default ocr:cor line grammar."""

    def test_lexicon_entry(self):
        assert format_token(LexiconEntry("Wasser")) == "#Wasser"

    def test_corrected_token(self):
        assert format_token(CorrectedToken("Waſſer", "Wasser")) == "Waſſer:Wasser"

    def test_uncorrected_token_keeps_separator(self):
        """Tokens without correction still end with a colon."""
        assert format_token(OCRToken("Vnheil")) == "Vnheil:"

    def test_empty_correction(self):
        """An empty correction is encoded like a missing one."""
        assert format_token(CorrectedToken("Vnheil", "")) == "Vnheil:"


class TestSlashFormat:
    """Tests for the historical ocr/cor line grammar."""

    def test_lexicon_entry(self):
        assert format_token(LexiconEntry("Wasser"), TokenFormat.SLASH) == "#Wasser"

    def test_corrected_token(self):
        token = CorrectedToken("Waſſer", "Wasser")
        assert format_token(token, TokenFormat.SLASH) == "Waſſer/Wasser"

    def test_uncorrected_token_is_bare(self):
        assert format_token(OCRToken("Vnheil"), TokenFormat.SLASH) == "Vnheil"

    def test_empty_correction_differs_from_missing(self):
        """Here an empty correction still produces the separator."""
        assert format_token(CorrectedToken("Vnheil", ""), TokenFormat.SLASH) == "Vnheil/"


class TestTokenVariants:
    """Tests for the token variants themselves."""

    def test_variants_are_distinct(self):
        assert OCRToken("a") != CorrectedToken("a", "")

    def test_tokens_are_hashable(self):
        assert len({OCRToken("a"), OCRToken("a"), LexiconEntry("a")}) == 2

    def test_no_validation(self):
        """Whitespace is the caller's responsibility and passes through."""
        assert format_token(LexiconEntry("two words")) == "#two words"

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            format_token("Vnheil")
