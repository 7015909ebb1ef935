"""
Query expansion for the archive search backend.

The search backend speaks Lucene-style syntax, so an expanded query is an
OR-combination of clauses:

    (original query) OR (tok1~ tok2~) OR (tok1* tok2*) OR ("syn1" OR "syn2")

- fuzzy clause: every normalized token with the fuzzy operator "~"
- wildcard clause: tokens of 4+ characters with the prefix operator "*"
- synonym clause: up to 4 quoted synonyms per token from the dictionary

Everything here is string building only; no request is ever sent.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..config import EngineConfig, resolve_config
from ..text import tokenize

logger = logging.getLogger(__name__)

WILDCARD_MIN_LENGTH = 4
MAX_SYNONYMS_PER_TOKEN = 4
MAX_SUGGESTIONS = 5
FUZZY_OPERATOR = "~"
WILDCARD_OPERATOR = "*"


@dataclass(frozen=True)
class QueryTokens:
    original: List[str]     # whitespace-split query, casing kept
    normalized: List[str]   # normalize()d tokens


def tokenize_query(query: str) -> QueryTokens:
    """
    Split a query both ways.
    
    Examples:
        >>> tokenize_query("Émile Zola").normalized
        ['emile', 'zola']
    """
    if not isinstance(query, str):
        return QueryTokens(original=[], normalized=[])
    return QueryTokens(original=query.split(), normalized=tokenize(query))


def expand_with_wildcards(tokens: Sequence[str]) -> List[str]:
    """Suffix tokens of length >= 4 with the wildcard operator."""
    return [f"{token}{WILDCARD_OPERATOR}" for token in tokens if len(token) >= WILDCARD_MIN_LENGTH]


def lookup_synonyms(token: str, config: Optional[EngineConfig] = None) -> List[str]:
    """Up to 4 distinct synonyms for a normalized token."""
    config = resolve_config(config)
    direct = config.synonyms.get(token, ())
    unique: List[str] = []
    for entry in direct:
        if entry not in unique:
            unique.append(entry)
    return unique[:MAX_SYNONYMS_PER_TOKEN]


def expand_synonyms(tokens: Sequence[str], config: Optional[EngineConfig] = None) -> List[str]:
    config = resolve_config(config)
    synonyms: List[str] = []
    for token in tokens:
        synonyms.extend(lookup_synonyms(token, config))
    return synonyms


def build_hybrid_search_expression(
    query: str,
    include_fuzzy: bool = True,
    config: Optional[EngineConfig] = None,
) -> str:
    """
    Build the OR-joined hybrid query string.
    
    Args:
        query: Raw user query
        include_fuzzy: Add the fuzzy clause
        config: Engine config (default: shared)
    
    Returns:
        Hybrid expression, or "" for a blank query
    
    Example:
        >>> build_hybrid_search_expression("climate data", True)
        '(climate data) OR (climate~ data~) OR (climate* data*) OR ("weather" OR "environment" OR "meteorology" OR "dataset" OR "statistics" OR "records")'
    """
    sanitized = query.strip() if isinstance(query, str) else ""
    if not sanitized:
        return ""

    config = resolve_config(config)
    normalized = tokenize_query(sanitized).normalized
    segments = [f"({sanitized})"]

    if include_fuzzy and normalized:
        fuzzy_clause = " ".join(f"{token}{FUZZY_OPERATOR}" for token in normalized)
        segments.append(f"({fuzzy_clause})")

    wildcard_tokens = expand_with_wildcards(normalized)
    if wildcard_tokens:
        segments.append(f"({' '.join(wildcard_tokens)})")

    synonym_tokens = expand_synonyms(normalized, config)
    if synonym_tokens:
        synonym_clause = " OR ".join(f'"{token}"' for token in synonym_tokens)
        segments.append(f"({synonym_clause})")

    unique_segments: List[str] = []
    for segment in segments:
        if segment.strip("() ") and segment not in unique_segments:
            unique_segments.append(segment)

    expression = " OR ".join(unique_segments)
    logger.debug(f"Hybrid expression for {sanitized!r}: {len(unique_segments)} segments")
    return expression


def suggest_alternative_queries(query: str, config: Optional[EngineConfig] = None) -> List[str]:
    """
    Suggest up to 5 rewrites of a query.
    
    Each token with known synonyms is swapped for each synonym in turn;
    a wildcard variant (4+ character tokens suffixed with "*") is appended
    last. A suggestion never equals the input, ignoring case.
    
    Examples:
        >>> suggest_alternative_queries("book history")
        ['books history', 'text history', 'manuscript history', 'volume history', 'book historical']
        >>> suggest_alternative_queries("")
        []
    """
    config = resolve_config(config)
    normalized = tokenize_query(query).normalized
    if not normalized:
        return []

    reference = query.strip().lower()
    suggestions: List[str] = []

    def add(candidate: str) -> None:
        candidate = candidate.strip()
        if candidate and candidate.lower() != reference and candidate not in suggestions:
            suggestions.append(candidate)

    for token in normalized:
        for synonym in lookup_synonyms(token, config):
            add(" ".join(synonym if entry == token else entry for entry in normalized))
            if len(suggestions) >= MAX_SUGGESTIONS:
                return suggestions

    wildcard_suggestion = " ".join(
        f"{token}{WILDCARD_OPERATOR}" if len(token) >= WILDCARD_MIN_LENGTH else token
        for token in normalized
    )
    add(wildcard_suggestion)

    return suggestions[:MAX_SUGGESTIONS]
