"""Unit tests for language and event type normalization."""

import pytest

from infrastructure.templates import (
    Language,
    is_supported_language,
    normalize_event_key,
    normalize_language,
)


@pytest.mark.unit
class TestNormalizeLanguage:
    """Tests for normalize_language()."""

    @pytest.mark.parametrize(
        "hint,expected",
        [
            ("en", Language.ENGLISH),
            ("English", Language.ENGLISH),
            ("fr", Language.FRENCH),
            (" FRENCH ", Language.FRENCH),
            ("français", Language.FRENCH),
            ("francais", Language.FRENCH),
            ("rw", Language.KINYARWANDA),
            ("kin", Language.KINYARWANDA),
            ("Kinyarwanda", Language.KINYARWANDA),
        ],
    )
    def test_aliases_map_to_canonical_language(self, hint, expected):
        assert normalize_language(hint) == expected

    @pytest.mark.parametrize("hint", [None, "", "de", "klingon", 42])
    def test_unknown_hints_fall_back_to_english(self, hint):
        assert normalize_language(hint) == Language.ENGLISH

    def test_is_supported_language(self):
        assert is_supported_language("fr")
        assert is_supported_language("kinyarwanda")
        assert not is_supported_language("german")
        assert not is_supported_language(None)


@pytest.mark.unit
class TestNormalizeEventKey:
    """Tests for normalize_event_key()."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("received", "received"),
            ("In-Progress", "in_progress"),
            ("in progress", "in_progress"),
            ("  in__progress  ", "in_progress"),
            ("-trip remaining-time_", "trip_remaining_time"),
        ],
    )
    def test_separators_collapse_to_underscore(self, value, expected):
        assert normalize_event_key(value) == expected
