"""
NSFW classification of text and archive records.

Classification pipeline:
1. Harvest strings from a fixed set of record fields (nested lists and
   mappings folded to depth 6, cycle-safe)
2. Match each string against the explicit, adult and violent keyword groups
3. Severity is the highest tier with a match: explicit > violent > mild
4. Matches aggregate the triggering tier and every lower tier

annotate_record() writes the result onto a shallow copy of the record as
``nsfw`` / ``nsfwLevel`` / ``nsfwMatches``. The annotation is derived from
content alone, so annotating twice gives the same record.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from ..config import EngineConfig, resolve_config
from ..records import fold_strings, get_mapping
from .matcher import detect_keyword_matches

logger = logging.getLogger(__name__)

NSFW_FLAG_KEY = "nsfw"
NSFW_LEVEL_KEY = "nsfwLevel"
NSFW_MATCHES_KEY = "nsfwMatches"

HARVEST_FIELDS = (
    "title", "description", "identifier", "mediatype", "creator", "collection",
    "subject", "tags", "keywords", "topic", "topics",
    "originalUrl", "original_url", "archiveUrl", "archive_url",
)
HARVEST_METADATA_FIELDS = ("tags", "subject", "keywords", "topic", "topics")
HARVEST_LINK_FIELDS = ("archive", "original")


class Severity(str, Enum):
    EXPLICIT = "explicit"
    VIOLENT = "violent"
    MILD = "mild"


@dataclass(frozen=True)
class NSFWClassification:
    flagged: bool = False
    severity: Optional[Severity] = None
    matches: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "flagged": self.flagged,
            "severity": self.severity.value if self.severity else None,
            "matches": list(self.matches),
        }


UNFLAGGED = NSFWClassification()


@dataclass(frozen=True)
class NSFWAnalysis:
    """Per-tier view of a free-text prompt."""
    has_explicit: bool = False
    has_violent: bool = False
    has_mild: bool = False
    matches: List[str] = field(default_factory=list)

    @property
    def flagged(self) -> bool:
        return self.has_explicit or self.has_violent or self.has_mild

    @property
    def severity(self) -> Optional[Severity]:
        if self.has_explicit:
            return Severity.EXPLICIT
        if self.has_violent:
            return Severity.VIOLENT
        if self.has_mild:
            return Severity.MILD
        return None


def harvest_record_strings(record: Mapping[str, Any]) -> List[str]:
    """
    Strings the classifier looks at, in field order.
    
    One identity set is shared across all fields, so a container
    referenced from two fields is only read once.
    """
    if not isinstance(record, Mapping):
        return []

    values: List[Any] = [record.get(name) for name in HARVEST_FIELDS]
    metadata = get_mapping(record, "metadata")
    if metadata is not None:
        values.extend(metadata.get(name) for name in HARVEST_METADATA_FIELDS)
    links = get_mapping(record, "links")
    if links is not None:
        values.extend(links.get(name) for name in HARVEST_LINK_FIELDS)

    seen: Set[int] = set()
    return [text for value in values for text in fold_strings(value, seen=seen)]


def _merge(*groups: Iterable[str]) -> Tuple[str, ...]:
    merged: List[str] = []
    seen = set()
    for group in groups:
        for term in group:
            key = term.lower()
            if key not in seen:
                seen.add(key)
                merged.append(term)
    return tuple(merged)


def _collect_matches(values: Sequence[str], config: EngineConfig) -> Tuple[List[str], List[str], List[str]]:
    groups = config.keyword_groups
    explicit: List[str] = []
    adult: List[str] = []
    violent: List[str] = []
    for value in values:
        explicit.extend(detect_keyword_matches(value, groups.explicit, config))
        adult.extend(detect_keyword_matches(value, groups.adult, config))
        violent.extend(detect_keyword_matches(value, groups.violent, config))
    return explicit, adult, violent


def _classify_strings(values: Sequence[str], config: EngineConfig) -> NSFWClassification:
    explicit, adult, violent = _collect_matches(values, config)

    if explicit:
        return NSFWClassification(True, Severity.EXPLICIT, _merge(explicit, adult, violent))
    if violent:
        return NSFWClassification(True, Severity.VIOLENT, _merge(violent, adult))
    if adult:
        return NSFWClassification(True, Severity.MILD, _merge(adult))
    return UNFLAGGED


def classify_text(
    text: Union[str, Sequence[str]],
    config: Optional[EngineConfig] = None,
) -> NSFWClassification:
    """
    Classify a string or a list of strings.
    
    Args:
        text: Text, or several texts classified together
        config: Engine config (default: shared)
    
    Returns:
        NSFWClassification; blank input is unflagged
    
    Examples:
        >>> classify_text("climate analysis and reconstruction studies").flagged
        False
        >>> classify_text("safe anal sex practices").matches
        ('anal',)
    """
    config = resolve_config(config)
    if isinstance(text, str):
        values = [text]
    elif isinstance(text, (list, tuple)):
        values = [entry for entry in text if isinstance(entry, str)]
    else:
        values = []
    return _classify_strings([value for value in values if value.strip()], config)


def classify_record(record: Mapping[str, Any], config: Optional[EngineConfig] = None) -> NSFWClassification:
    """Classify an archive record from its harvested field strings."""
    config = resolve_config(config)
    classification = _classify_strings(harvest_record_strings(record), config)
    if classification.flagged:
        logger.debug(
            f"Record {record.get('identifier', '?')!r} flagged {classification.severity.value}: "
            f"{', '.join(classification.matches)}"
        )
    return classification


def apply_classification(record: Mapping[str, Any], classification: NSFWClassification) -> Dict[str, Any]:
    """Shallow copy of record carrying the given classification."""
    annotated = dict(record)
    annotated[NSFW_FLAG_KEY] = classification.flagged
    if classification.flagged:
        annotated[NSFW_LEVEL_KEY] = classification.severity.value
        annotated[NSFW_MATCHES_KEY] = list(classification.matches)
    else:
        annotated.pop(NSFW_LEVEL_KEY, None)
        annotated.pop(NSFW_MATCHES_KEY, None)
    return annotated


def annotate_record(record: Mapping[str, Any], config: Optional[EngineConfig] = None) -> Dict[str, Any]:
    """
    Shallow copy of record with nsfw / nsfwLevel / nsfwMatches set.
    
    Existing nsfw fields are ignored and replaced (or removed when the
    content is clean), so annotate_record(annotate_record(r)) equals
    annotate_record(r). The input is not modified.
    """
    if not isinstance(record, Mapping):
        record = {}
    return apply_classification(record, classify_record(record, config))


def is_nsfw_content(text: str, config: Optional[EngineConfig] = None) -> bool:
    return classify_text(text, config).flagged


def analyze_text(text: str, config: Optional[EngineConfig] = None) -> NSFWAnalysis:
    """
    Per-tier keyword analysis of a free-text prompt.
    
    Example:
        >>> analysis = analyze_text("nude beheading footage")
        >>> analysis.has_violent, analysis.has_mild
        (True, True)
    """
    if not isinstance(text, str) or not text.strip():
        return NSFWAnalysis()
    config = resolve_config(config)
    explicit, adult, violent = _collect_matches([text], config)
    return NSFWAnalysis(
        has_explicit=bool(explicit),
        has_violent=bool(violent),
        has_mild=bool(adult),
        matches=list(_merge(explicit, violent, adult)),
    )
