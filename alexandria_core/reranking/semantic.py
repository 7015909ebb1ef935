"""
Optional semantic re-rank of a scored result set.

For the first `limit` records:

    total = score*0.55 + cosine(query, title+description)*0.35
            + keyword_boost + mode_adjustment

    keyword_boost   = min(0.25, query tokens (3+ chars) found / query tokens)
    mode_adjustment = safe: flagged -0.8, clean +0.15
                      moderate: explicit/violent -0.45
                      nsfw-only: flagged +0.4, clean -0.6

Records past the limit keep total 0 and follow in their original order.
The re-rank is best effort: without a provider, for a blank query, or
when the provider fails, the input order comes back unchanged.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from ..config import EngineConfig, resolve_config
from ..nsfw import FilterMode, Severity, classify_record, resolve_mode
from ..text import tokenize
from .base import BaseEmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_RERANK_LIMIT = 40
METADATA_WEIGHT = 0.55
SIMILARITY_WEIGHT = 0.35
MAX_KEYWORD_BOOST = 0.25
MIN_BOOST_TOKEN_LENGTH = 3


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity; 0.0 for empty, mismatched, zero or non-finite vectors.
    
    Examples:
        >>> cosine_similarity([1.0, 0.0], [1.0, 0.0])
        1.0
        >>> cosine_similarity([1.0, 0.0], [0.0, 0.0])
        0.0
        >>> cosine_similarity([float("nan"), 1.0], [1.0, 0.0])
        0.0
    """
    vec_a = np.asarray(a, dtype=float)
    vec_b = np.asarray(b, dtype=float)
    if vec_a.size == 0 or vec_a.shape != vec_b.shape:
        return 0.0
    if not (np.isfinite(vec_a).all() and np.isfinite(vec_b).all()):
        return 0.0
    denom = np.linalg.norm(vec_a) * np.linalg.norm(vec_b)
    if denom == 0:
        return 0.0
    similarity = float(np.dot(vec_a, vec_b) / denom)
    return similarity if np.isfinite(similarity) else 0.0


def compute_keyword_boost(tokens: Sequence[str], text: str) -> float:
    """
    Examples:
        >>> compute_keyword_boost(["apollo", "11"], "Apollo 11 mission")
        0.25
    """
    if not tokens or not text:
        return 0.0
    haystack = text.lower()
    matches = sum(1 for token in tokens if len(token) >= MIN_BOOST_TOKEN_LENGTH and token in haystack)
    return min(MAX_KEYWORD_BOOST, matches / len(tokens)) if matches else 0.0


def compute_mode_adjustment(mode: FilterMode, flagged: bool, severity: Optional[Severity]) -> float:
    if mode is FilterMode.SAFE:
        return -0.8 if flagged else 0.15
    if mode is FilterMode.MODERATE:
        return -0.45 if severity in (Severity.EXPLICIT, Severity.VIOLENT) else 0.0
    if mode is FilterMode.NSFW_ONLY:
        return 0.4 if flagged else -0.6
    return 0.0


def _document_text(record: Mapping[str, Any]) -> str:
    parts = [record.get(name) for name in ("title", "description")]
    return " ".join(part.strip() for part in parts if isinstance(part, str) and part.strip())


def _metadata_score(record: Mapping[str, Any]) -> float:
    score = record.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return 0.0
    return float(score) if np.isfinite(score) else 0.0


def rerank_documents(
    records: Sequence[Mapping[str, Any]],
    query: str,
    mode: Union[str, FilterMode],
    provider: Optional[BaseEmbeddingProvider] = None,
    limit: int = DEFAULT_RERANK_LIMIT,
    config: Optional[EngineConfig] = None,
) -> List[Dict[str, Any]]:
    """
    Re-rank records by blending metadata score with embedding similarity.
    
    Args:
        records: Scored records (``score`` field read when numeric)
        query: Raw user query
        mode: NSFW filter mode or alias
        provider: Embedding provider; None skips the re-rank
        limit: Number of leading records to embed
        config: Engine config for NSFW classification (default: shared)
    
    Returns:
        Fresh record copies carrying semantic_score, ai_rank_score and
        keyword_boost, sorted by ai_rank_score; or the input records in
        their original order when the re-rank cannot run
    """
    trimmed = query.strip() if isinstance(query, str) else ""
    if provider is None or not trimmed or not records:
        return [dict(record) for record in records]

    config = resolve_config(config)
    resolved = resolve_mode(mode)
    head = list(records[:max(limit, 0)])
    tail = list(records[max(limit, 0):])

    texts = [_document_text(record) for record in head]
    to_embed = [trimmed] + [text for text in texts if text]
    try:
        vectors = provider.embed(to_embed)
        if len(vectors) != len(to_embed):
            raise ValueError(f"Provider returned {len(vectors)} vectors for {len(to_embed)} texts")
    except Exception as e:
        logger.warning(f"Semantic re-rank unavailable, keeping metadata order: {e}")
        return [dict(record) for record in records]

    query_vector = vectors[0]
    doc_vectors = iter(vectors[1:])
    tokens = tokenize(trimmed)

    scored = []
    for record, text in zip(head, texts):
        similarity = cosine_similarity(query_vector, next(doc_vectors)) if text else 0.0
        classification = classify_record(record, config)
        boost = compute_keyword_boost(tokens, text)
        total = (
            _metadata_score(record) * METADATA_WEIGHT
            + similarity * SIMILARITY_WEIGHT
            + boost
            + compute_mode_adjustment(resolved, classification.flagged, classification.severity)
        )
        scored.append((record, total, similarity, boost))

    scored.extend((record, 0.0, 0.0, 0.0) for record in tail)
    # sorted() is stable, so equal totals keep their input order
    scored = sorted(scored, key=lambda entry: entry[1], reverse=True)

    reranked = []
    for record, total, similarity, boost in scored:
        item = dict(record)
        item["semantic_score"] = similarity
        item["ai_rank_score"] = total
        item["keyword_boost"] = boost
        reranked.append(item)

    logger.debug(f"Re-ranked {len(head)} of {len(records)} records for {trimmed!r}")
    return reranked
