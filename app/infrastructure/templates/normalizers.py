"""Normalization of free-form language hints and event type strings."""

import re
from typing import Any

from infrastructure.templates.models import BASE_LANGUAGE, Language

_LANGUAGE_ALIASES = {
    "en": Language.ENGLISH,
    "english": Language.ENGLISH,
    "fr": Language.FRENCH,
    "french": Language.FRENCH,
    "français": Language.FRENCH,
    "francais": Language.FRENCH,
    "rw": Language.KINYARWANDA,
    "kin": Language.KINYARWANDA,
    "kinyarwanda": Language.KINYARWANDA,
}

_SEPARATORS = re.compile(r"[-_\s]+")


def _clean(hint: Any) -> str:
    if not isinstance(hint, str):
        return ""
    return hint.strip().lower()


def normalize_language(hint: Any) -> Language:
    """Map a free-form language hint to a supported language.

    Unknown, empty or non-string hints resolve to the base language.

    >>> normalize_language(" FR ")
    <Language.FRENCH: 'french'>
    >>> normalize_language("klingon")
    <Language.ENGLISH: 'english'>
    """
    return _LANGUAGE_ALIASES.get(_clean(hint), BASE_LANGUAGE)


def is_supported_language(hint: Any) -> bool:
    """True when the hint names a supported language (by code or alias)."""
    return _clean(hint) in _LANGUAGE_ALIASES


def normalize_event_key(value: Any) -> str:
    """Canonical event key: lower case, runs of ``-``, ``_`` and whitespace
    collapsed to one underscore, no leading or trailing separator.

    >>> normalize_event_key("In-Progress")
    'in_progress'
    >>> normalize_event_key(" trip  arrival--notice ")
    'trip_arrival_notice'
    """
    return _SEPARATORS.sub("_", _clean(value)).strip("_")
