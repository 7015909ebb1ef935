"""
Query-side helpers, used before a search request is issued.

Components:
- expansion: hybrid (exact + fuzzy + wildcard + synonym) query strings
  and alternate query suggestions
- spelling: frequency-based spell correction and "did you mean" lookup
"""

from .expansion import (
    QueryTokens,
    build_hybrid_search_expression,
    expand_synonyms,
    expand_with_wildcards,
    lookup_synonyms,
    suggest_alternative_queries,
    tokenize_query,
)
from .spelling import SpellCorrector, SpellcheckResult, get_fuzzy_suggestion, get_spell_corrector

__all__ = [
    "QueryTokens",
    "build_hybrid_search_expression",
    "expand_synonyms",
    "expand_with_wildcards",
    "lookup_synonyms",
    "suggest_alternative_queries",
    "tokenize_query",
    "SpellCorrector",
    "SpellcheckResult",
    "get_fuzzy_suggestion",
    "get_spell_corrector",
]
