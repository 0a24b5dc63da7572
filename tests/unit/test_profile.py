"""
Unit tests for the profile model and the JSON profile codec.
"""

import json

import pytest

from ocrprofiler.codec.profile import decode_profile, encode_profile
from ocrprofiler.exceptions import MalformedProfileError
from ocrprofiler.models import Candidate, Interpretation, Pattern, Profile


@pytest.fixture(scope="module")
def profile(profile_json):
    return decode_profile(profile_json)


class TestDecodeProfile:
    """Tests for decode_profile() against the JSON fixture."""

    @pytest.mark.parametrize(
        "ocr,ncands",
        [
            ("Vnheilfolles", 41),
            ("Waſſer", 6),
            ("empty", 0),
            ("null", 0),
        ],
    )
    def test_candidate_counts(self, profile, ocr, ncands):
        interpretation = profile[ocr]
        assert interpretation.ocr == ocr
        assert len(interpretation.candidates) == ncands

    def test_interpretation_count(self, profile):
        assert len(profile) == 4

    def test_first_candidate(self, profile):
        candidate = profile["Vnheilfolles"].candidates[0]
        assert candidate.suggestion == "unheilvolles"
        assert candidate.dictionary == "dict_modern_hypothetic_errors"
        assert candidate.distance == 2
        assert candidate.hist_patterns == (Pattern("un", "vn", 0, probability=0.3),)
        assert candidate.ocr_patterns[0] == Pattern("u", "v", 0, probability=0.1)
        assert candidate.weight == pytest.approx(0.98)

    def test_occurrence_count(self, profile):
        assert profile["Waſſer"].n == 12

    @pytest.mark.parametrize("data", [b"", b"  \n", b"null", b"{}", ""])
    def test_empty_profiles(self, data):
        """Empty input, null and {} decode to an empty profile."""
        assert len(decode_profile(data)) == 0

    def test_null_interpretation(self):
        profile = decode_profile('{"x": null}')
        assert profile["x"] == Interpretation(ocr="x")

    def test_missing_ocr_uses_key(self):
        profile = decode_profile('{"x": {"Candidates": []}}')
        assert profile["x"].ocr == "x"

    def test_keys_are_case_insensitive(self):
        """Keys match regardless of case."""
        profile = decode_profile(
            '{"x": {"ocr": "x", "n": 2, "candidates": '
            '[{"suggestion": "y", "weight": 0.5, "histpatterns": '
            '[{"left": "a", "right": "b", "pos": 1, "prob": 0.25}]}]}}'
        )
        candidate = profile["x"].candidates[0]
        assert profile["x"].n == 2
        assert candidate.suggestion == "y"
        assert candidate.hist_patterns == (Pattern("a", "b", 1, 0.25),)

    @pytest.mark.parametrize(
        "data",
        [
            b"{",
            b"[]",
            b"42",
            b'{"x": []}',
            b'{"x": {"Candidates": [1, 2]}}',
            b'{"x": {"N": "many"}}',
            b"\xff\xfe",
            b'{"x": {"Candidates": [{"Weight": 1e99}]}}',
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(MalformedProfileError):
            decode_profile(data)


class TestGlobalPatterns:
    """Tests for the global pattern tables."""

    def test_ocr_patterns(self, profile):
        patterns = profile.global_ocr_patterns()
        assert patterns["u:v"] == 0.1
        assert patterns["v:f"] == 0.05
        assert "un:vn" not in patterns

    def test_hist_patterns(self, profile):
        patterns = profile.global_hist_patterns()
        assert patterns["un:vn"] == 0.3
        assert patterns["ss:ſſ"] == 0.9
        assert "u:v" not in patterns

    def test_tables_cover_all_patterns(self, profile):
        hist = {p.key for _, c in profile.candidates() for p in c.hist_patterns}
        ocr = {p.key for _, c in profile.candidates() for p in c.ocr_patterns}
        assert set(profile.global_hist_patterns()) == hist
        assert set(profile.global_ocr_patterns()) == ocr

    def test_last_duplicate_wins(self):
        """Duplicate keys resolve to the last pattern in profile order."""
        first = Candidate("x", hist_patterns=[Pattern("t", "th", 0, 0.1)])
        last = Candidate("y", hist_patterns=[Pattern("t", "th", 2, 0.4)])
        profile = Profile(
            {
                "a": Interpretation("a", 1, [first]),
                "b": Interpretation("b", 1, [last]),
            }
        )
        assert profile.global_hist_patterns() == {"t:th": 0.4}

    def test_empty_profile(self):
        assert Profile().global_hist_patterns() == {}
        assert Profile().global_ocr_patterns() == {}


class TestProfileModel:
    """Tests for Profile as a read-only mapping."""

    def test_read_only(self, profile):
        with pytest.raises(TypeError):
            profile["new"] = Interpretation("new")

    def test_copy_of_input(self):
        interpretations = {"a": Interpretation("a")}
        profile = Profile(interpretations)
        interpretations["b"] = Interpretation("b")
        assert list(profile) == ["a"]

    def test_equality(self, profile, profile_json):
        assert profile == decode_profile(profile_json)

    def test_encode_round_trip(self, profile):
        assert decode_profile(encode_profile(profile)) == profile

    def test_encoded_shape(self, profile):
        document = json.loads(encode_profile(profile))
        assert document["empty"] == {"OCR": "empty", "N": 1, "Candidates": []}
        assert document["Vnheilfolles"]["Candidates"][0]["HistPatterns"][0] == {
            "Left": "un",
            "Right": "vn",
            "Prob": 0.3,
            "Pos": 0,
        }


class TestFieldTypes:
    """Tests that decoded fields must have their JSON types."""

    @pytest.mark.parametrize(
        "interpretation",
        [
            '{"OCR": 5}',
            '{"N": true}',
            '{"N": 1.5}',
            '{"Candidates": {}}',
            '{"Candidates": [{"Suggestion": 1}]}',
            '{"Candidates": [{"Distance": "2"}]}',
            '{"Candidates": [{"Weight": "0.5"}]}',
            '{"Candidates": [{"Weight": false}]}',
            '{"Candidates": [{"HistPatterns": "(a:b,0)"}]}',
            '{"Candidates": [{"OCRPatterns": [{"Left": 5}]}]}',
            '{"Candidates": [{"OCRPatterns": [{"Pos": 1.5}]}]}',
            '{"Candidates": [{"OCRPatterns": [{"Pos": true}]}]}',
            '{"Candidates": [{"OCRPatterns": [{"Pos": "1"}]}]}',
            '{"Candidates": [{"OCRPatterns": [{"Prob": "0.1"}]}]}',
        ],
    )
    def test_wrong_type(self, interpretation):
        with pytest.raises(MalformedProfileError):
            decode_profile(f'{{"x": {interpretation}}}')

    def test_integral_weight(self):
        """JSON integers are valid numbers."""
        profile = decode_profile('{"x": {"Candidates": [{"Weight": 1, "Distance": 0}]}}')
        assert profile["x"].candidates[0].weight == 1.0

    def test_null_fields_use_defaults(self):
        profile = decode_profile(
            '{"x": {"OCR": null, "N": null, "Candidates": '
            '[{"Suggestion": null, "Weight": null, "OCRPatterns": [{"Pos": null}]}]}}'
        )
        candidate = profile["x"].candidates[0]
        assert profile["x"].ocr == "x"
        assert profile["x"].n == 0
        assert candidate.suggestion == ""
        assert candidate.weight == 0.0
        assert candidate.ocr_patterns == (Pattern("", "", 0),)
