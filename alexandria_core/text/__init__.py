"""
Text normalization and tokenization shared by every scorer.

Components:
- normalizer: lowercase + diacritic stripping + punctuation collapsing
- tokenizer: token splitting, stopword filtering, query keyword extraction
- similarity: edit-distance based token similarity
"""

from .normalizer import normalize, normalize_for_scoring, strip_diacritics, strip_html
from .tokenizer import STOPWORDS, QueryContext, create_query_context, extract_keywords, tokenize
from .similarity import levenshtein_distance, token_similarity

__all__ = [
    "normalize",
    "normalize_for_scoring",
    "strip_diacritics",
    "strip_html",
    "STOPWORDS",
    "QueryContext",
    "create_query_context",
    "extract_keywords",
    "tokenize",
    "levenshtein_distance",
    "token_similarity",
]
