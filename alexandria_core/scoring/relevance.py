"""
Relevance scoring.

Two families of relevance live here:

1. Token-set relevance (primary result scorer)
   - compute_keyword_relevance: fraction of query keywords present verbatim
   - compute_semantic_relevance: per keyword, best of exact (1.0),
     synonym (0.85) or edit-distance similarity, averaged

2. Field-weighted relevance (truth scorer), summed over
   title / description / metadata / fulltext:
   - exact normalized-query substring: +weight
   - keyword occurrences: keyword_base*weight for the first, 0.05*weight
     for each further occurrence
   - fuzzy bonus when a keyword is absent: nearest word at edit distance
     1-2 with closeness > 0.35, max(0.1, closeness*fuzzy_base)*weight
   - proximity of two distinct keywords: <=3 words 0.20, <=6 0.12,
     <=10 0.08 (times weight)
   The raw sum is squashed with 1 - e^(-raw) into [0, 1].
"""

import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Set

from ..config import EngineConfig, resolve_config
from ..query.expansion import lookup_synonyms
from ..records import fold_strings, get_mapping
from ..text import QueryContext, levenshtein_distance, normalize_for_scoring, token_similarity, tokenize
from .fields import BASE_FIELD_CONFIG, FieldTexts, FieldWeights

MAX_TOKEN_SAMPLE = 80
SYNONYM_MATCH_SCORE = 0.85
REPEAT_OCCURRENCE_CREDIT = 0.05
MAX_FUZZY_DISTANCE = 2
MIN_FUZZY_CLOSENESS = 0.35
MIN_FUZZY_BONUS = 0.1
DEFAULT_RELEVANCE = 0.2

# (max word distance, bonus) - first qualifying tier wins
PROXIMITY_BONUS = ((3, 0.2), (6, 0.12), (10, 0.08))

DOCUMENT_TOKEN_FIELDS = (
    "title", "description", "identifier", "creator", "subject", "collection",
    "keywords", "tags", "topic", "topics",
)
DOCUMENT_METADATA_FIELDS = ("title", "description", "subject", "keywords")


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def gather_document_tokens(record: Mapping[str, Any], limit: int = MAX_TOKEN_SAMPLE) -> List[str]:
    """
    First `limit` normalized tokens of a record's descriptive fields.
    
    Reads title, description, identifier, creator, subject, collection,
    keywords, tags, topic(s) and metadata.{title, description, subject,
    keywords}, in that order.
    """
    if not isinstance(record, Mapping):
        return []

    values = [record.get(name) for name in DOCUMENT_TOKEN_FIELDS]
    metadata = get_mapping(record, "metadata")
    if metadata is not None:
        values.extend(metadata.get(name) for name in DOCUMENT_METADATA_FIELDS)

    seen: Set[int] = set()
    texts = [text for value in values for text in fold_strings(value, seen=seen)]
    return tokenize(" ".join(texts))[:limit]


def compute_keyword_relevance(query_tokens: Sequence[str], doc_tokens: Iterable[str]) -> float:
    """
    Fraction of query tokens found verbatim among the document tokens.
    
    Examples:
        >>> compute_keyword_relevance(["climate", "change"], {"climate", "report"})
        0.5
    """
    doc_token_set = set(doc_tokens)
    if not query_tokens or not doc_token_set:
        return 0.0
    matches = sum(1 for token in query_tokens if token in doc_token_set)
    return matches / len(query_tokens)


def compute_semantic_relevance(
    query_tokens: Sequence[str],
    doc_tokens: Iterable[str],
    config: Optional[EngineConfig] = None,
) -> float:
    """
    Average best-match score of each query token against the document.
    
    Per token: 1.0 on an exact match, 0.85 when a dictionary synonym is
    present, otherwise the best edit-distance similarity to any document
    token.
    """
    doc_token_set = set(doc_tokens)
    if not query_tokens or not doc_token_set:
        return 0.0

    config = resolve_config(config)
    # Sorted so similarity ties resolve the same way on every run
    candidates = sorted(doc_token_set)
    total = 0.0
    for token in query_tokens:
        best = 1.0 if token in doc_token_set else 0.0
        if best < 1.0 and any(synonym in doc_token_set for synonym in lookup_synonyms(token, config)):
            best = SYNONYM_MATCH_SCORE
        if best < 1.0:
            for candidate in candidates:
                best = max(best, token_similarity(token, candidate))
                if best >= 0.99:
                    break
        total += best

    return clamp(total / len(query_tokens))


def count_occurrences(text: str, term: str) -> int:
    """Non-overlapping occurrences of term in text."""
    if not text or not term:
        return 0
    return text.count(term)


def compute_fuzzy_bonus(words: Sequence[str], keyword: str, weights: FieldWeights) -> float:
    best = 0.0
    for word in words:
        if word == keyword:
            continue
        distance = levenshtein_distance(word, keyword)
        if distance == 0 or distance > MAX_FUZZY_DISTANCE:
            continue
        closeness = 1.0 - distance / (max(len(word), len(keyword)) or 1)
        if closeness <= MIN_FUZZY_CLOSENESS:
            continue
        best = max(best, max(MIN_FUZZY_BONUS, closeness * weights.fuzzy_base) * weights.weight)
    return best


def compute_proximity_bonus(words: Sequence[str], keywords: Sequence[str], weight: float) -> float:
    """
    Bonus for the closest pair of distinct keywords in a field.
    
    A word counts as a keyword hit when it equals or contains the keyword.
    
    Examples:
        >>> compute_proximity_bonus(["climate", "change"], ["climate", "change"], 1.0)
        0.2
    """
    if len(set(keywords)) < 2 or not words:
        return 0.0

    positions = [
        (keyword, index)
        for index, word in enumerate(words)
        for keyword in set(keywords)
        if keyword in word
    ]
    min_distance = None
    for i, (keyword_a, index_a) in enumerate(positions):
        for keyword_b, index_b in positions[i + 1:]:
            if keyword_a == keyword_b:
                continue
            distance = abs(index_a - index_b)
            if min_distance is None or distance < min_distance:
                min_distance = distance

    if min_distance is None:
        return 0.0
    for max_distance, bonus in PROXIMITY_BONUS:
        if min_distance <= max_distance:
            return bonus * weight
    return 0.0


def compute_relevance(
    field_texts: FieldTexts,
    context: QueryContext,
    field_config: Optional[Mapping[str, FieldWeights]] = None,
) -> float:
    """
    Field-weighted relevance of a record to a query.
    
    Args:
        field_texts: Output of build_field_texts()
        context: Prepared query (create_query_context)
        field_config: Per-field weights (default: base weights)
    
    Returns:
        Relevance in [0, 1]; 0.2 when the query is blank
    """
    if not context.normalized_query and not context.keywords:
        return DEFAULT_RELEVANCE

    field_config = field_config or BASE_FIELD_CONFIG
    raw_score = 0.0

    for field_name, text in field_texts.items():
        weights = field_config.get(field_name) or BASE_FIELD_CONFIG.get(field_name)
        if not text or weights is None:
            continue
        normalized_field = normalize_for_scoring(text)
        if not normalized_field:
            continue
        words = normalized_field.split(" ")

        if context.normalized_query and context.normalized_query in normalized_field:
            raw_score += weights.weight

        for keyword in context.keywords:
            occurrences = count_occurrences(normalized_field, keyword)
            if occurrences > 0:
                raw_score += weights.keyword_base * weights.weight
                raw_score += (occurrences - 1) * REPEAT_OCCURRENCE_CREDIT * weights.weight
            else:
                raw_score += compute_fuzzy_bonus(words, keyword, weights)

        raw_score += compute_proximity_bonus(words, context.keywords, weights.weight)

    return clamp(1.0 - math.exp(-raw_score))

