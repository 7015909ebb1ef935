"""
End-to-end ranking of one page of archive search results.

Pipeline:
1. Annotate every record with its NSFW classification
2. Score it (primary breakdown + truth breakdown) and attach
   score, availability, source trust and language
3. Apply the NSFW mode filter (nsfw-only falls back to unfiltered
   results rather than an empty page)
4. Order by truth score, descending (stable)
5. Optionally blend in embedding similarity (best effort)

Alternate query suggestions are attached when the filtered page is empty.
Input records are never modified; every returned item is a new dict.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .config import EngineConfig, resolve_config
from .nsfw import FilterMode, filter_by_mode
from .query import suggest_alternative_queries
from .reranking import BaseEmbeddingProvider, rerank_documents
from .scoring import score_archive_record, score_record_truth
from .text import create_query_context

logger = logging.getLogger(__name__)


@dataclass
class RankedResults:
    items: List[Dict[str, Any]] = field(default_factory=list)
    hidden_count: int = 0
    fallback_applied: bool = False
    alternate_queries: List[str] = field(default_factory=list)


def score_result(
    record: Mapping[str, Any],
    query: str,
    config: Optional[EngineConfig] = None,
    current_year: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Copy of record with scoring fields attached.
    
    Attached fields:
        score            truth combined score (ranking key)
        score_breakdown  primary breakdown (keywordRelevance, ...)
        truth_breakdown  truth breakdown (relevance, authenticity, ...)
        availability     "online" | "archived-only"
        source_trust     "high" | "medium" | "low"
        language         first language or None
    """
    config = resolve_config(config)
    analysis = score_archive_record(record, query, config)
    truth = score_record_truth(record, create_query_context(query), current_year)

    item = dict(record)
    item["score"] = truth.combined_score
    item["score_breakdown"] = analysis.breakdown.to_dict()
    item["truth_breakdown"] = truth.to_dict()
    item["availability"] = analysis.availability.value
    item["source_trust"] = truth.trust_level.value
    item["language"] = analysis.language
    return item


def rank_results(
    records: Sequence[Mapping[str, Any]],
    query: str,
    mode: Union[str, FilterMode, None] = None,
    config: Optional[EngineConfig] = None,
    provider: Optional[BaseEmbeddingProvider] = None,
    rerank_limit: Optional[int] = None,
    current_year: Optional[int] = None,
) -> RankedResults:
    """
    Annotate, score, filter and order a page of results.
    
    Args:
        records: Raw archive records
        query: Raw user query
        mode: NSFW filter mode or alias (default: config.default_mode;
            unknown values mean safe)
        config: Engine config (default: shared)
        provider: Optional embedding provider for the semantic re-rank
        rerank_limit: Records embedded by the re-rank (default: config.rerank_limit)
        current_year: Reference year for age scoring (default: now, UTC)
    
    Returns:
        RankedResults
    """
    config = resolve_config(config)
    if mode is None:
        mode = config.default_mode
    if rerank_limit is None:
        rerank_limit = config.rerank_limit
    filtered = filter_by_mode(records, mode, config)

    scored = [score_result(item, query, config, current_year) for item in filtered.items]
    scored = sorted(scored, key=lambda item: item["score"], reverse=True)

    if provider is not None:
        scored = rerank_documents(scored, query, mode, provider=provider, limit=rerank_limit, config=config)

    alternate_queries: List[str] = []
    if not scored:
        alternate_queries = suggest_alternative_queries(query, config)

    logger.debug(
        f"Ranked {len(scored)} of {len(records)} records "
        f"(hidden={filtered.hidden_count}, fallback={filtered.fallback_applied})"
    )
    return RankedResults(
        items=scored,
        hidden_count=filtered.hidden_count,
        fallback_applied=filtered.fallback_applied,
        alternate_queries=alternate_queries,
    )
