"""
Field texts and per-field weights for relevance scoring.

A record is scored over four logical fields:

    title       - title (identifier when there is no title)
    description - description
    metadata    - creator, collection, language, subject, tags, keywords,
                  topic(s), publisher, contributor, series, identifier
    fulltext    - fulltext, text

Each field carries (weight, keyword_base, fuzzy_base). Media types shift
the weights, e.g. images lean on metadata, texts lean on fulltext.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from ..records import fold_strings
from ..text import strip_html
from ..text.normalizer import collapse_whitespace


@dataclass(frozen=True)
class FieldWeights:
    weight: float
    keyword_base: float
    fuzzy_base: float


@dataclass(frozen=True)
class FieldTexts:
    title: str = ""
    description: str = ""
    metadata: str = ""
    fulltext: str = ""

    def items(self) -> Iterator[Tuple[str, str]]:
        yield "title", self.title
        yield "description", self.description
        yield "metadata", self.metadata
        yield "fulltext", self.fulltext


FIELD_NAMES = ("title", "description", "metadata", "fulltext")

BASE_FIELD_CONFIG: Dict[str, FieldWeights] = {
    "title": FieldWeights(weight=1.0, keyword_base=0.7, fuzzy_base=0.3),
    "description": FieldWeights(weight=0.85, keyword_base=0.55, fuzzy_base=0.25),
    "metadata": FieldWeights(weight=0.6, keyword_base=0.45, fuzzy_base=0.22),
    "fulltext": FieldWeights(weight=0.4, keyword_base=0.3, fuzzy_base=0.18),
}

# Partial overrides, merged over BASE_FIELD_CONFIG
MEDIA_TYPE_FIELD_OVERRIDES: Dict[str, Dict[str, Dict[str, float]]] = {
    "texts": {
        "description": {"weight": 0.95, "keyword_base": 0.6},
        "fulltext": {"weight": 0.65, "keyword_base": 0.45, "fuzzy_base": 0.2},
    },
    "audio": {
        "description": {"weight": 0.9, "keyword_base": 0.6},
        "metadata": {"weight": 0.75, "keyword_base": 0.5},
    },
    "movies": {
        "description": {"weight": 0.95, "keyword_base": 0.6},
        "metadata": {"weight": 0.7, "keyword_base": 0.5},
    },
    "image": {
        "title": {"weight": 1.05, "keyword_base": 0.78},
        "description": {"weight": 0.6, "keyword_base": 0.5},
        "metadata": {"weight": 0.9, "keyword_base": 0.6},
    },
    "software": {
        "description": {"weight": 0.8, "keyword_base": 0.58},
        "metadata": {"weight": 0.85, "keyword_base": 0.58, "fuzzy_base": 0.26},
    },
    "web": {
        "metadata": {"weight": 0.68, "keyword_base": 0.5},
        "fulltext": {"weight": 0.5, "keyword_base": 0.35},
    },
    "data": {
        "metadata": {"weight": 0.82, "keyword_base": 0.6},
        "description": {"weight": 0.72, "keyword_base": 0.52},
    },
}

MEDIA_TYPE_ALIASES: Dict[str, str] = {
    "texts": "texts", "text": "texts", "book": "texts", "books": "texts", "literature": "texts",
    "audio": "audio", "sound": "audio", "music": "audio", "spokenword": "audio",
    "movies": "movies", "movie": "movies", "video": "movies", "videos": "movies",
    "film": "movies", "films": "movies",
    "image": "image", "images": "image", "photo": "image", "photos": "image",
    "picture": "image", "pictures": "image",
    "software": "software", "program": "software", "programs": "software",
    "app": "software", "apps": "software",
    "web": "web", "website": "web", "websites": "web", "html": "web",
    "data": "data", "dataset": "data", "datasets": "data", "statistics": "data", "stats": "data",
    "collection": "collection", "collections": "collection",
    "etree": "etree",
    "tvnews": "tvnews",
}

MEDIA_TYPE_KEYS = ("mediatype", "mediaType", "media_type", "type")

METADATA_FIELDS = (
    "creator", "collection", "language", "subject", "tags", "keywords",
    "topic", "topics", "publisher", "contributor", "series", "identifier",
)
FULLTEXT_FIELDS = ("fulltext", "text")


def _normalize_media_type(value: Any) -> Optional[str]:
    if isinstance(value, str):
        normalized = value.strip().lower()
        if not normalized:
            return None
        return MEDIA_TYPE_ALIASES.get(normalized, normalized)
    if isinstance(value, (list, tuple)):
        for entry in value:
            normalized = _normalize_media_type(entry)
            if normalized:
                return normalized
    return None


def extract_media_type(record: Mapping[str, Any]) -> Optional[str]:
    """
    Canonical media type of a record, or None.
    
    Examples:
        >>> extract_media_type({"mediatype": "Film"})
        'movies'
        >>> extract_media_type({"type": ["", "books"]})
        'texts'
    """
    if not isinstance(record, Mapping):
        return None
    for key in MEDIA_TYPE_KEYS:
        if key in record:
            normalized = _normalize_media_type(record[key])
            if normalized:
                return normalized
    return None


def resolve_field_config(record: Mapping[str, Any]) -> Dict[str, FieldWeights]:
    """Field weights for a record, media-type overrides applied."""
    config = dict(BASE_FIELD_CONFIG)
    overrides = MEDIA_TYPE_FIELD_OVERRIDES.get(extract_media_type(record) or "")
    if not overrides:
        return config
    for field_name, override in overrides.items():
        config[field_name] = replace(config[field_name], **override)
    return config


def _join(values: List[Any], seen: Set[int]) -> str:
    parts: List[str] = []
    for value in values:
        for text in fold_strings(value, seen=seen):
            cleaned = collapse_whitespace(strip_html(text))
            if cleaned:
                parts.append(cleaned)
    return collapse_whitespace(" ".join(parts))


def build_field_texts(record: Mapping[str, Any]) -> FieldTexts:
    """
    Flatten a record into the four scored field texts.
    
    HTML is stripped and whitespace collapsed; nested lists and mappings
    are folded (bounded depth, cycle-safe).
    
    Examples:
        >>> build_field_texts({"identifier": "apollo11", "creator": ["NASA"]}).title
        'apollo11'
    """
    if not isinstance(record, Mapping):
        return FieldTexts()

    title_source = record.get("title") or record.get("identifier")
    return FieldTexts(
        title=_join([title_source], set()),
        description=_join([record.get("description")], set()),
        metadata=_join([record.get(name) for name in METADATA_FIELDS], set()),
        fulltext=_join([record.get(name) for name in FULLTEXT_FIELDS], set()),
    )
