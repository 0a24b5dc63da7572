"""
Unit tests for language configuration discovery.
"""

import pytest

from ocrprofiler.exceptions import ConfigurationError, LanguageNotFoundError
from ocrprofiler.languages import LanguageConfiguration, find_language, list_languages


@pytest.fixture
def backend(tmp_path):
    """A backend directory with four language configurations."""
    for name in ["german.ini", "Latin.ini", "english.ini", "GREEK.ini", "README.txt"]:
        (tmp_path / name).write_text("", encoding="utf-8")
    (tmp_path / "subdir.ini").mkdir()
    return tmp_path


class TestListLanguages:
    """Tests for list_languages()."""

    def test_lists_ini_files(self, backend):
        languages = list_languages(backend)
        assert len(languages) == 4
        assert {lc.language for lc in languages} == {"german", "latin", "english", "greek"}

    def test_paths(self, backend):
        languages = {lc.language: lc.path for lc in list_languages(backend)}
        assert languages["latin"] == str(backend / "Latin.ini")

    def test_missing_backend(self, tmp_path):
        with pytest.raises(ConfigurationError, match="cannot list languages"):
            list_languages(tmp_path / "missing")


class TestFindLanguage:
    """Tests for find_language()."""

    @pytest.mark.parametrize(
        "language,expected",
        [
            ("german", ("german", "german.ini")),
            ("Latin", ("latin", "Latin.ini")),
            ("LATIN", ("latin", "Latin.ini")),
            ("English", ("english", "english.ini")),
            ("greek", ("greek", "GREEK.ini")),
        ],
    )
    def test_case_insensitive(self, backend, language, expected):
        name, filename = expected
        assert find_language(backend, language) == LanguageConfiguration(
            name, str(backend / filename)
        )

    def test_not_found(self, backend):
        with pytest.raises(LanguageNotFoundError) as exc_info:
            find_language(backend, "no-such-language")
        assert exc_info.value.language == "no-such-language"

    def test_not_found_is_lookup_error(self, backend):
        with pytest.raises(LookupError):
            find_language(backend, "klingon")
