"""
Record scorers.

score_archive_record() - primary result ranking:
    combined = keyword*0.5 + semantic*0.3 + quality*0.1 + popularity*0.1

score_record_truth() - credibility-weighted ranking:
    combined = relevance*0.4 + authenticity*0.3 + historical*0.15 + transparency*0.15
    (falls back to relevance when the weighted sum is not positive)

Every sub-score is clamped to [0, 1] and rounded to 3 decimals. Both
scorers are pure: the record is read, never modified.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..config import EngineConfig, resolve_config
from ..text import QueryContext, create_query_context, extract_keywords
from .fields import build_field_texts, resolve_field_config
from .quality import (
    Availability,
    compute_document_quality,
    compute_popularity_score,
    determine_availability,
    extract_language,
)
from .relevance import (
    clamp,
    compute_keyword_relevance,
    compute_relevance,
    compute_semantic_relevance,
    gather_document_tokens,
)
from .trust import (
    TrustLevel,
    determine_trust_level,
    score_authenticity,
    score_historical_value,
    score_transparency,
)

# Primary score weights
KEYWORD_WEIGHT = 0.5
SEMANTIC_WEIGHT = 0.3
QUALITY_WEIGHT = 0.1
POPULARITY_WEIGHT = 0.1

# Truth score weights
RELEVANCE_WEIGHT = 0.4
AUTHENTICITY_WEIGHT = 0.3
HISTORICAL_WEIGHT = 0.15
TRANSPARENCY_WEIGHT = 0.15


def format_score(value: float) -> float:
    return round(clamp(value), 3)


@dataclass(frozen=True)
class ScoreBreakdown:
    keyword_relevance: float
    semantic_relevance: float
    document_quality: float
    popularity_score: float
    combined_score: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "keywordRelevance": self.keyword_relevance,
            "semanticRelevance": self.semantic_relevance,
            "documentQuality": self.document_quality,
            "popularityScore": self.popularity_score,
            "combinedScore": self.combined_score,
        }


@dataclass(frozen=True)
class ResultAnalysis:
    breakdown: ScoreBreakdown
    availability: Availability
    trust_level: TrustLevel
    language: Optional[str]


@dataclass(frozen=True)
class TruthBreakdown:
    relevance: float
    authenticity: float
    historical_value: float
    transparency: float
    combined_score: float
    trust_level: TrustLevel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "relevance": self.relevance,
            "authenticity": self.authenticity,
            "historicalValue": self.historical_value,
            "transparency": self.transparency,
            "combinedScore": self.combined_score,
            "trustLevel": self.trust_level.value,
        }


def score_archive_record(
    record: Mapping[str, Any],
    query: str,
    config: Optional[EngineConfig] = None,
) -> ResultAnalysis:
    """
    Primary relevance/quality score of one record.
    
    Args:
        record: Archive record (never modified)
        query: Raw user query
        config: Engine config for synonym lookups (default: shared)
    
    Returns:
        ResultAnalysis with the score breakdown, availability, trust level
        and language
    """
    config = resolve_config(config)
    record = record if isinstance(record, Mapping) else {}

    doc_tokens = gather_document_tokens(record)
    query_tokens = extract_keywords(query)

    keyword_relevance = compute_keyword_relevance(query_tokens, doc_tokens)
    semantic_relevance = compute_semantic_relevance(query_tokens, doc_tokens, config)
    document_quality = compute_document_quality(record)
    popularity_score = compute_popularity_score(record)

    combined = clamp(
        keyword_relevance * KEYWORD_WEIGHT
        + semantic_relevance * SEMANTIC_WEIGHT
        + document_quality * QUALITY_WEIGHT
        + popularity_score * POPULARITY_WEIGHT
    )

    # Same trust rule as the truth scorer, so one record never gets two levels
    authenticity = score_authenticity(record, build_field_texts(record))

    return ResultAnalysis(
        breakdown=ScoreBreakdown(
            keyword_relevance=format_score(keyword_relevance),
            semantic_relevance=format_score(semantic_relevance),
            document_quality=format_score(document_quality),
            popularity_score=format_score(popularity_score),
            combined_score=format_score(combined),
        ),
        availability=determine_availability(record),
        trust_level=determine_trust_level(authenticity),
        language=extract_language(record),
    )


def score_record_truth(
    record: Mapping[str, Any],
    context: QueryContext,
    current_year: Optional[int] = None,
) -> TruthBreakdown:
    """
    Credibility-weighted score of one record.
    
    Args:
        record: Archive record (never modified)
        context: Prepared query, shared across the result set
        current_year: Reference year for age scoring (default: now, UTC)
    
    Example:
        >>> context = create_query_context("climate change research")
        >>> truth = score_record_truth({"title": "Weather observations in the arctic"}, context)
        >>> truth.trust_level.value
        'low'
    """
    record = record if isinstance(record, Mapping) else {}
    field_texts = build_field_texts(record)

    relevance = compute_relevance(field_texts, context, resolve_field_config(record))
    authenticity = score_authenticity(record, field_texts)
    historical_value = score_historical_value(record, field_texts, current_year)
    transparency = score_transparency(record, field_texts)

    combined = clamp(
        relevance * RELEVANCE_WEIGHT
        + authenticity * AUTHENTICITY_WEIGHT
        + historical_value * HISTORICAL_WEIGHT
        + transparency * TRANSPARENCY_WEIGHT
    )
    if combined <= 0:
        combined = relevance

    return TruthBreakdown(
        relevance=format_score(relevance),
        authenticity=format_score(authenticity),
        historical_value=format_score(historical_value),
        transparency=format_score(transparency),
        combined_score=format_score(combined),
        trust_level=determine_trust_level(authenticity),
    )


def score_record(record: Mapping[str, Any], query: str, current_year: Optional[int] = None) -> TruthBreakdown:
    """score_record_truth() for a one-off query string."""
    return score_record_truth(record, create_query_context(query), current_year)
