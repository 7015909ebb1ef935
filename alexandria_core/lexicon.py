"""
Static vocabularies consumed by the classifier and query expansion.

- KeywordGroups: explicit / adult / violent NSFW term lists
- MorphologyRule: suffix and next-word exception tables for short,
  ambiguous targets ("anal" in "analysis", "cum" in "cumulative")
- Synonym dictionary: term → related search terms

All three are plain immutable data. config.load_engine_config() builds
them once per process; nothing here mutates after construction.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

logger = logging.getLogger(__name__)


def normalize_term_list(values: Iterable[Any]) -> Tuple[str, ...]:
    """Trim, lowercase and deduplicate (first-seen order); non-strings dropped."""
    result: List[str] = []
    seen = set()
    for value in values or ():
        if not isinstance(value, str):
            continue
        term = value.strip().lower()
        if term and term not in seen:
            seen.add(term)
            result.append(term)
    return tuple(result)


class _TermListModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name == "categories":
            return value if isinstance(value, Mapping) else None
        return list(value) if isinstance(value, (list, tuple)) else []


class KeywordCategories(_TermListModel):
    explicit: List[Any] = []
    mild: List[Any] = []
    violent: List[Any] = []


class KeywordDocument(_TermListModel):
    """
    Accepted NSFW keyword document shapes:
    
        {"explicit": [...], "adult": [...], "violent": [...]}
        {"categories": {"explicit": [...], "mild": [...]}}
        {"keywords": [...]}                      (all explicit)
    """
    explicit: List[Any] = []
    adult: List[Any] = []
    violent: List[Any] = []
    keywords: List[Any] = []
    categories: Optional[KeywordCategories] = None


@dataclass(frozen=True)
class KeywordGroups:
    explicit: Tuple[str, ...] = ()
    adult: Tuple[str, ...] = ()
    violent: Tuple[str, ...] = ()

    @classmethod
    def from_document(cls, payload: Mapping[str, Any]) -> "KeywordGroups":
        """
        Normalize any accepted keyword document into three tiers.
        
        Explicit wins: a term listed as explicit is removed from the adult
        and violent tiers.
        
        Examples:
            >>> groups = KeywordGroups.from_document(
            ...     {"categories": {"explicit": ["XXX"], "mild": ["xxx", "nude"]}})
            >>> groups.explicit, groups.adult
            (('xxx',), ('nude',))
        """
        if not isinstance(payload, Mapping):
            logger.warning(f"NSFW keyword document is not an object ({type(payload).__name__}), using empty groups")
            return cls()

        document = KeywordDocument.model_validate(dict(payload))
        explicit = list(document.explicit) + list(document.keywords)
        adult = list(document.adult)
        violent = list(document.violent)
        if document.categories is not None:
            explicit += document.categories.explicit
            adult += document.categories.mild
            violent += document.categories.violent

        explicit_terms = normalize_term_list(explicit)
        explicit_set = set(explicit_terms)
        return cls(
            explicit=explicit_terms,
            adult=tuple(t for t in normalize_term_list(adult) if t not in explicit_set),
            violent=tuple(t for t in normalize_term_list(violent) if t not in explicit_set),
        )

    @property
    def all_terms(self) -> Tuple[str, ...]:
        return self.explicit + self.adult + self.violent


@dataclass(frozen=True)
class MorphologyRule:
    """
    Exception tables for one ambiguous target word.
    
    A token starting with ``target`` is judged in this order:
    
    1. bare target: match, unless the next token is in ``safe_next``;
       when ``bare_needs_context`` is set the bare target only matches at
       the end of the text or before a word in ``explicit_next``
    2. token starts with a ``safe_prefixes`` entry or is a ``safe_tokens``
       entry: no match
    3. remainder starts with an ``explicit_suffixes`` entry: match
    4. remainder starts with a ``safe_suffixes`` entry: no match
    5. remainder starts with a digit, or is at most 2 characters: match
    """
    target: str
    explicit_suffixes: Tuple[str, ...] = ()
    safe_suffixes: Tuple[str, ...] = ()
    explicit_next: frozenset = frozenset()
    safe_next: frozenset = frozenset()
    safe_prefixes: Tuple[str, ...] = ()
    safe_tokens: frozenset = frozenset()
    bare_needs_context: bool = False
    max_unknown_remainder: int = 2


ANAL_RULE = MorphologyRule(
    target="anal",
    explicit_suffixes=(
        "sex", "sexual", "sexed", "sexes", "sexing", "play", "plays", "player",
        "players", "plug", "plugs", "porn", "porno", "porns", "pornography",
        "fuck", "fucks", "fucking", "fucked", "cream", "creampie", "creampies",
        "gape", "gapes", "gaping", "toy", "toys", "vid", "video", "videos", "xxx",
        "queen", "queens", "whore", "whores", "slut", "sluts", "mania", "maniac",
        "maniacs", "bead", "beads", "beaded", "beading", "fist", "fists",
        "fisting", "train", "trainer", "trainers", "training", "penetration",
        "penetrations", "penetrate", "penetrated", "penetrating", "penetrative",
        "lick", "licks", "licking", "job", "jobs",
    ),
    safe_suffixes=(
        "ysis", "yses", "yse", "yzed", "yzes", "yzing", "yzer", "yzers", "ytic",
        "ytics", "ytical", "ytically", "yst", "ysts", "ogue", "ogues", "ogy",
        "ogies", "ogic", "ogical", "ogist", "ogists", "ogous", "emma", "emmas",
        "ects", "ecta", "ectic", "gesic", "gesics", "gesia", "gesias", "gesis",
        "geses", "ges", "getic", "getics", "glyph", "glyphs",
    ),
    explicit_next=frozenset([
        "sex", "sexual", "sexually", "porn", "porno", "pornography", "video",
        "videos", "vid", "vids", "xxx", "content", "scene", "scenes", "clip",
        "clips", "toy", "toys", "plug", "plugs", "play", "player", "players",
        "fetish", "material", "photo", "photos", "picture", "pictures", "image",
        "images", "job", "jobs", "creampie", "creampies", "gape", "gaping", "dp",
        "penetration", "penetrations", "penetrate", "penetrating", "penetrative",
        "fist", "fisting", "stories", "story", "act", "acts", "action",
        "actions", "collection", "collections",
    ]),
    bare_needs_context=True,
)

CUM_RULE = MorphologyRule(
    target="cum",
    explicit_suffixes=(
        "shot", "shots", "slut", "sluts", "dump", "dumps", "dumped", "dumping",
        "dumpster", "tribute", "tributes", "drip", "drips", "dripping",
        "dripped", "soak", "soaks", "soaked", "soaking", "load", "loads",
        "loading", "loader", "loaders", "play", "plays", "playing", "stain",
        "stains", "stained", "bath", "baths", "bucket", "buckets", "blast",
        "blasts", "stream", "streams", "streaming", "swap", "swaps", "swapping",
        "face", "facial", "guzzle", "guzzler", "guzzlers", "guzzling", "cover",
        "covered", "covering", "coat", "coating", "paint", "painted",
        "painting", "spray", "sprays", "spraying", "ming",
    ),
    safe_suffixes=(
        "ulate", "ulated", "ulates", "ulating", "ulation", "ulations",
        "ulative", "ulatively", "ulator", "ulators", "ulatory", "ulus", "ulous",
        "ulum", "ulums", "ulonimbus", "ulent", "ulence", "ulene", "ulic", "ules",
        "ulite", "ulousness", "ulousnesses", "ber", "bers", "bersome",
        "berland", "berlands", "berbatch",
    ),
    safe_next=frozenset(["laude"]),
    safe_prefixes=("cumul",),
    safe_tokens=frozenset(["cumin", "cummings", "cummer", "cummerbund", "cummerbunds"]),
)

DEFAULT_MORPHOLOGY_RULES: Tuple[MorphologyRule, ...] = (ANAL_RULE, CUM_RULE)


def normalize_synonyms(payload: Mapping[str, Any]) -> Dict[str, Tuple[str, ...]]:
    """
    Normalize a synonym document {term: [synonyms...]}.
    
    Keys and values are trimmed and lowercased; non-list values dropped.
    """
    if not isinstance(payload, Mapping):
        logger.warning(f"Synonym document is not an object ({type(payload).__name__}), using empty dictionary")
        return {}
    dictionary: Dict[str, Tuple[str, ...]] = {}
    for key, values in payload.items():
        if not isinstance(key, str) or not key.strip():
            continue
        if not isinstance(values, (list, tuple)):
            continue
        terms = normalize_term_list(values)
        if terms:
            dictionary[key.strip().lower()] = terms
    return dictionary
