"""
Credibility heuristics: authenticity, historical value, transparency.

authenticity
    +0.45  per distinct curated collection
    +0.12  per collection whose name holds an institutional keyword
    +0.18  creator names an institution
    +0.15  publisher names an institution
    +0.30  original URL host ends in .gov/.mil/.edu/.museum/.int
    +0.10  original URL host contains archive.org
    +0.10  title/metadata mention a primary-source hint (diary, manuscript...)

historical value
    Age of the earliest plausible year (year/date/publicdate, identifier as
    a last resort) mapped through fixed steps; 0.35 when no year is found.
    +0.10 for a primary-source hint in description/metadata.

transparency
    Share of a metadata completeness checklist that is filled in,
    +0.10 when the description cites a link, DOI or ISBN.

trust level
    high (authenticity >= 0.6), medium (>= 0.4), low otherwise.

All scores are clamped to [0, 1]. Malformed values never raise: a bad URL
scores as no URL, an unparsable date as no year.
"""

import logging
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Mapping, Optional
from urllib.parse import urlsplit

from ..records import collect_strings, get_mapping, has_text, to_text_list, value_kind, ValueKind
from .fields import FieldTexts
from .quality import original_url
from .relevance import clamp

logger = logging.getLogger(__name__)

TRUSTED_COLLECTIONS = frozenset([
    "smithsonian", "library_of_congress", "gutenberg", "naropa", "prelinger",
    "opensource_audio", "americanlibraries", "americana", "biodiversity",
    "brooklynmuseum", "getty", "moa", "thomasjeffersonlibrary",
    "universallibrary", "usnationalarchives", "wellcomelibrary",
])

INSTITUTION_KEYWORDS = (
    "library", "university", "museum", "archives", "archive", "institution",
    "college", "press", "society", "foundation", "historical", "history",
    "national", "government", "gov", "federal", "state", "city", "county",
    "records", "official", "academy", "research",
)

PRIMARY_SOURCE_HINTS = (
    "manuscript", "manuscripts", "diary", "diaries", "letter", "letters",
    "journal", "journals", "log", "logs", "transcript", "transcripts",
    "minutes", "primary source", "primary-source", "official record",
    "official records", "official report", "official reports",
    "original publication", "first-hand", "first hand",
)

TRUSTED_TLDS = (".gov", ".mil", ".edu", ".museum", ".int")

YEAR_PATTERN = re.compile(r"(1[0-9]{3}|20[0-9]{2}|2100)")
MIN_YEAR = 1000
MAX_YEAR = 3000
YEAR_FIELDS = ("year", "date", "publicdate", "public_date", "publicDate")

# (minimum age in years, score), checked top-down
AGE_STEPS = ((150, 1.0), (120, 0.9), (80, 0.75), (50, 0.6), (30, 0.45), (10, 0.35))
YOUNG_RECORD_SCORE = 0.25
UNDATED_RECORD_SCORE = 0.35
PRIMARY_SOURCE_BONUS = 0.1

TRANSPARENCY_CHECKS = (
    ("creator", 1.0), ("description", 1.0), ("publisher", 1.0),
    ("contributor", 1.0), ("language", 1.0), ("subject", 1.0), ("tags", 1.0),
    ("keywords", 1.0), ("source", 1.0), ("references", 1.0),
)
METADATA_TEXT_WEIGHT = 0.5
LINKS_WEIGHT = 0.5
DEFAULT_TRANSPARENCY = 0.35
CITATION_MARKERS = ("http", "doi", "isbn")
CITATION_BONUS = 0.1


class TrustLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _mentions_institution(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in INSTITUTION_KEYWORDS)


def has_primary_source_hint(text: str) -> bool:
    lowered = text.lower()
    return any(hint in lowered for hint in PRIMARY_SOURCE_HINTS)


def _url_host(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    try:
        host = urlsplit(url).hostname
    except ValueError:
        logger.debug(f"Ignoring malformed URL: {url!r}")
        return None
    return host.lower() if host else None


def score_authenticity(record: Mapping[str, Any], field_texts: FieldTexts) -> float:
    """
    Provenance score in [0, 1].
    
    Args:
        record: Archive record
        field_texts: build_field_texts(record)
    """
    if not isinstance(record, Mapping):
        return 0.0

    score = 0.0
    collections: List[str] = []
    for entry in to_text_list(record.get("collection")):
        lowered = entry.lower()
        if lowered not in collections:
            collections.append(lowered)
    for collection in collections:
        if collection in TRUSTED_COLLECTIONS:
            score += 0.45
        if _mentions_institution(collection):
            score += 0.12

    creator_text = " ".join(collect_strings(record.get("creator")))
    if creator_text and _mentions_institution(creator_text):
        score += 0.18

    publisher = record.get("publisher")
    if isinstance(publisher, str) and _mentions_institution(publisher):
        score += 0.15

    host = _url_host(original_url(record))
    if host:
        if host.endswith(TRUSTED_TLDS):
            score += 0.3
        if "archive.org" in host:
            score += 0.1

    if has_primary_source_hint(f"{field_texts.title} {field_texts.metadata}"):
        score += PRIMARY_SOURCE_BONUS

    return clamp(score)


def extract_year(value: Any) -> Optional[int]:
    """
    Plausible year (1000-3000) from a number or date-like string.
    
    Examples:
        >>> extract_year("1969-07-20T00:00:00Z")
        1969
        >>> extract_year("n.d.") is None
        True
        >>> extract_year(1888.0)
        1888
    """
    kind = value_kind(value)
    if kind is ValueKind.NUMBER:
        year = int(value)
        return year if MIN_YEAR <= year <= MAX_YEAR else None
    if kind is ValueKind.TEXT:
        match = YEAR_PATTERN.search(value)
        if match:
            year = int(match.group(1))
            if MIN_YEAR <= year <= MAX_YEAR:
                return year
    return None


def earliest_year(record: Mapping[str, Any]) -> Optional[int]:
    """Earliest year among the date fields; the identifier only as fallback."""
    if not isinstance(record, Mapping):
        return None
    candidates = [year for year in (extract_year(record.get(name)) for name in YEAR_FIELDS) if year is not None]
    if not candidates:
        identifier_year = extract_year(record.get("identifier"))
        if identifier_year is not None:
            candidates.append(identifier_year)
    return min(candidates) if candidates else None


def score_historical_value(
    record: Mapping[str, Any],
    field_texts: FieldTexts,
    current_year: Optional[int] = None,
) -> float:
    """
    Age-based historical value in [0, 1].
    
    Args:
        record: Archive record
        field_texts: build_field_texts(record)
        current_year: Reference year (default: current UTC year)
    """
    year = earliest_year(record)
    score = UNDATED_RECORD_SCORE
    if year is not None:
        now = current_year if current_year is not None else datetime.now(timezone.utc).year
        age = int(clamp(now - year, 0, 1000))
        score = YOUNG_RECORD_SCORE
        for min_age, step_score in AGE_STEPS:
            if age >= min_age:
                score = step_score
                break

    if has_primary_source_hint(f"{field_texts.description} {field_texts.metadata}"):
        score += PRIMARY_SOURCE_BONUS
    return clamp(score)


def score_transparency(record: Mapping[str, Any], field_texts: FieldTexts) -> float:
    """
    Metadata completeness checklist score in [0, 1].
    
    Ten descriptive fields weigh 1 each; a non-empty metadata text and a
    links object weigh 0.5 each and only enter the total when present.
    """
    if not isinstance(record, Mapping):
        return 0.0

    signals = 0.0
    total = 0.0
    for name, weight in TRANSPARENCY_CHECKS:
        total += weight
        if has_text(record.get(name)):
            signals += weight

    if field_texts.metadata.strip():
        signals += METADATA_TEXT_WEIGHT
        total += METADATA_TEXT_WEIGHT

    if get_mapping(record, "links") is not None:
        signals += LINKS_WEIGHT
        total += LINKS_WEIGHT

    score = signals / total if total > 0 else DEFAULT_TRANSPARENCY
    description = field_texts.description.lower()
    if any(marker in description for marker in CITATION_MARKERS):
        score += CITATION_BONUS
    return clamp(score)


def determine_trust_level(authenticity: float) -> TrustLevel:
    """
    Examples:
        >>> determine_trust_level(0.63).value
        'high'
        >>> determine_trust_level(0.1).value
        'low'
    """
    if authenticity >= 0.6:
        return TrustLevel.HIGH
    if authenticity >= 0.4:
        return TrustLevel.MEDIUM
    return TrustLevel.LOW
