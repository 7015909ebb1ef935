"""
Lightweight record signals for the primary scorer: metadata completeness,
popularity, availability and language.
"""

import math
from enum import Enum
from typing import Any, Mapping, Optional

from ..records import first_text, get_mapping, has_text, to_number, value_kind, ValueKind
from .relevance import clamp

# (field names, points) - a group scores when any of its fields has text
QUALITY_SIGNALS = (
    (("title",), 0.25),
    (("description",), 0.25),
    (("creator",), 0.2),
    (("year", "date", "publicdate"), 0.15),
    (("thumbnail", "image"), 0.1),
    # top-level fields only; links.original counts for availability, not quality
    (("original_url", "originalurl"), 0.05),
)

POPULARITY_SATURATION = 4.0  # log10(10_000)


class Availability(str, Enum):
    ONLINE = "online"
    ARCHIVED_ONLY = "archived-only"


def _has_value(value: Any) -> bool:
    return has_text(value) or value_kind(value) is ValueKind.NUMBER


def compute_document_quality(record: Mapping[str, Any]) -> float:
    """
    Metadata completeness in [0, 1].
    
    Examples:
        >>> compute_document_quality({"title": "Maps", "description": "Atlas", "year": 1901})
        0.65
    """
    if not isinstance(record, Mapping):
        return 0.0
    score = sum(
        points
        for names, points in QUALITY_SIGNALS
        if any(_has_value(record.get(name)) for name in names)
    )
    return clamp(round(score, 6))


def compute_popularity_score(record: Mapping[str, Any]) -> float:
    """log10(downloads + 1) / 4, clamped; 0 without a positive count."""
    downloads = to_number(record.get("downloads")) if isinstance(record, Mapping) else None
    if downloads is None or downloads <= 0:
        return 0.0
    return clamp(math.log10(downloads + 1) / POPULARITY_SATURATION)


def original_url(record: Mapping[str, Any]) -> Optional[str]:
    """Original (live web) URL of a record, if any."""
    if not isinstance(record, Mapping):
        return None
    links = get_mapping(record, "links") or {}
    return first_text(record.get("original_url"), record.get("originalurl"), links.get("original"))


def determine_availability(record: Mapping[str, Any]) -> Availability:
    """online when an original URL is known, archived-only otherwise."""
    return Availability.ONLINE if original_url(record) else Availability.ARCHIVED_ONLY


def extract_language(record: Mapping[str, Any]) -> Optional[str]:
    """
    First language named by language / languages / lang.
    
    Examples:
        >>> extract_language({"languages": ["", "eng"]})
        'eng'
    """
    if not isinstance(record, Mapping):
        return None
    for key in ("language", "languages", "lang"):
        value = record.get(key)
        if not value:
            continue
        if isinstance(value, str):
            return value.strip() or None
        if isinstance(value, (list, tuple)):
            return first_text(*value)
        return None
    return None
