"""
Result scoring, trust evaluation, NSFW classification and query expansion
for archive search.

The search transport, UI and model inference live elsewhere; this package
only turns raw archive records and query strings into scores,
classifications, filtered result pages and expanded query strings.

Components:
- text: normalization, tokenization, keyword extraction
- query: hybrid query expressions, alternate queries, spell correction
- scoring: relevance, document quality, authenticity, historical value,
  transparency
- nsfw: morphology-aware keyword classification and visibility modes
- filters: advanced result filters (language, trust, availability, ...)
- reranking: optional embedding re-rank with metadata-only fallback
- pipeline: annotate → score → filter → order for one result page

Shared vocabularies (keyword groups, synonyms, morphology rules) are loaded
once into an immutable EngineConfig (see config).
"""

from .config import (
    ConfigurationError,
    EngineConfig,
    Settings,
    get_engine_config,
    load_engine_config,
    load_settings,
    set_engine_config,
)
from .filters import SearchFilters, matches_advanced_filters
from .nsfw import (
    FilterMode,
    NSFWClassification,
    Severity,
    annotate_record,
    classify_record,
    classify_text,
    filter_by_mode,
    matches_mode,
    should_suppress_generation,
)
from .pipeline import RankedResults, rank_results
from .query import build_hybrid_search_expression, suggest_alternative_queries
from .scoring import score_archive_record, score_record_truth
from .text import create_query_context, extract_keywords, normalize, tokenize

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "EngineConfig",
    "Settings",
    "get_engine_config",
    "load_engine_config",
    "load_settings",
    "set_engine_config",
    "SearchFilters",
    "matches_advanced_filters",
    "FilterMode",
    "NSFWClassification",
    "Severity",
    "annotate_record",
    "classify_record",
    "classify_text",
    "filter_by_mode",
    "matches_mode",
    "should_suppress_generation",
    "RankedResults",
    "rank_results",
    "build_hybrid_search_expression",
    "suggest_alternative_queries",
    "score_archive_record",
    "score_record_truth",
    "create_query_context",
    "extract_keywords",
    "normalize",
    "tokenize",
]
