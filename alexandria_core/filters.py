"""
Advanced result filters.

SearchFilters holds the optional refinements a search request can carry
(language, source trust, availability, NSFW mode, collection, subject,
uploader). matches_advanced_filters() checks one record against all of
them; an unset or unrecognized filter value never excludes a record.

Trust and availability filters read the ``source_trust`` and
``availability`` fields, which pipeline.rank_results() attaches to every
record it returns.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from .config import EngineConfig
from .nsfw import matches_mode, normalize_nsfw_mode
from .records import to_text_list

ANY = "any"

SOURCE_TRUST_ALIASES = {
    "any": ANY, "all": ANY,
    "high": "high", "trusted": "high", "curated": "high",
    "medium": "medium", "standard": "medium", "default": "medium",
    "low": "low", "community": "low", "experimental": "low",
}

AVAILABILITY_ALIASES = {
    "any": ANY, "all": ANY,
    "online": "online", "live": "online",
    "archived-only": "archived-only", "archived": "archived-only", "archive": "archived-only",
    "offline": "offline",
}

TRUST_FIELDS = ("source_trust", "source_trust_level", "trust_level")
UPLOADER_FIELDS = ("uploader", "submitter", "creator")
FILTER_LIST_SEPARATOR = re.compile(r"[,\n]+")


@dataclass
class SearchFilters:
    language: Optional[str] = None
    source_trust: Optional[str] = None
    availability: Optional[str] = None
    nsfw_mode: Optional[str] = None
    collection: Optional[str] = None
    subject: Optional[str] = None
    uploader: Optional[str] = None


def _lookup(value: Optional[str], aliases: Mapping[str, str]) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return aliases.get(value.strip().lower())


def normalize_source_trust(value: Optional[str]) -> Optional[str]:
    """
    Examples:
        >>> normalize_source_trust("Curated")
        'high'
        >>> normalize_source_trust("unknown") is None
        True
    """
    return _lookup(value, SOURCE_TRUST_ALIASES)


def normalize_availability(value: Optional[str]) -> Optional[str]:
    """
    Examples:
        >>> normalize_availability("archive")
        'archived-only'
    """
    return _lookup(value, AVAILABILITY_ALIASES)


def extract_language_list(record: Mapping[str, Any]) -> List[str]:
    """All languages of a record, lowercased."""
    for key in ("language", "languages", "lang"):
        value = record.get(key)
        if value:
            if isinstance(value, str):
                return [value.strip().lower()] if value.strip() else []
            return [entry.lower() for entry in to_text_list(value)] if isinstance(value, (list, tuple)) else []
    return []


def _filter_values(raw: Optional[str]) -> List[str]:
    if not isinstance(raw, str):
        return []
    return [entry.strip().lower() for entry in FILTER_LIST_SEPARATOR.split(raw) if entry.strip()]


def _lowered_field(record: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value.strip().lower() if isinstance(value, str) else None
    return None


def _lowered_values(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [entry.strip().lower() for entry in value if isinstance(entry, str) and entry.strip()]


def matches_advanced_filters(
    record: Mapping[str, Any],
    filters: SearchFilters,
    config: Optional[EngineConfig] = None,
) -> bool:
    """
    True if a record passes every active filter.
    
    - language: some record language contains the filter value
    - source_trust / availability: exact match on the attached field
    - nsfw_mode: the mode table (record classified from content)
    - collection / subject: any listed value equals a record value
    - uploader: some uploader/submitter/creator contains the filter value
    """
    if not isinstance(record, Mapping):
        return False

    language = filters.language.strip().lower() if isinstance(filters.language, str) else ""
    if language and not any(language in entry for entry in extract_language_list(record)):
        return False

    trust = normalize_source_trust(filters.source_trust)
    if trust and trust != ANY and _lowered_field(record, *TRUST_FIELDS) != trust:
        return False

    availability = normalize_availability(filters.availability)
    if availability and availability != ANY and _lowered_field(record, "availability") != availability:
        return False

    mode = normalize_nsfw_mode(filters.nsfw_mode)
    if mode is not None and not matches_mode(record, mode, config):
        return False

    collections = _filter_values(filters.collection)
    if collections:
        record_collections = _lowered_values(record.get("collection"))
        if not any(value in record_collections for value in collections):
            return False

    subjects = _filter_values(filters.subject)
    if subjects:
        subject_value = record.get("subject", record.get("subjects"))
        if isinstance(subject_value, str):
            subject_value = re.split(r"[,;]+", subject_value)
        if not any(value in _lowered_values(subject_value) for value in subjects):
            return False

    uploader = filters.uploader.strip().lower() if isinstance(filters.uploader, str) else ""
    if uploader:
        uploader_value = None
        for key in UPLOADER_FIELDS:
            if record.get(key):
                uploader_value = record.get(key)
                break
        if not any(uploader in value for value in _lowered_values(uploader_value)):
            return False

    return True
