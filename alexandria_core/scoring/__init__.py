"""
Result scoring: relevance, document quality and credibility.

Components:
- fields: field texts and media-type specific field weights
- relevance: token-set and field-weighted relevance
- quality: completeness, popularity, availability, language
- trust: authenticity, historical value, transparency, trust level
- scorer: the two combined scorers
"""

from .fields import FieldTexts, FieldWeights, build_field_texts, extract_media_type, resolve_field_config
from .quality import (
    Availability,
    compute_document_quality,
    compute_popularity_score,
    determine_availability,
    extract_language,
)
from .relevance import (
    compute_keyword_relevance,
    compute_relevance,
    compute_semantic_relevance,
    gather_document_tokens,
)
from .scorer import (
    ResultAnalysis,
    ScoreBreakdown,
    TruthBreakdown,
    score_archive_record,
    score_record,
    score_record_truth,
)
from .trust import (
    TrustLevel,
    determine_trust_level,
    extract_year,
    score_authenticity,
    score_historical_value,
    score_transparency,
)

__all__ = [
    "FieldTexts",
    "FieldWeights",
    "build_field_texts",
    "extract_media_type",
    "resolve_field_config",
    "Availability",
    "compute_document_quality",
    "compute_popularity_score",
    "determine_availability",
    "extract_language",
    "compute_keyword_relevance",
    "compute_relevance",
    "compute_semantic_relevance",
    "gather_document_tokens",
    "ResultAnalysis",
    "ScoreBreakdown",
    "TruthBreakdown",
    "score_archive_record",
    "score_record",
    "score_record_truth",
    "TrustLevel",
    "determine_trust_level",
    "extract_year",
    "score_authenticity",
    "score_historical_value",
    "score_transparency",
]
