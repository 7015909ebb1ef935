"""
Tokenizer and query keyword extraction.

tokenize() splits on the same boundary normalize() collapses, so the
two always agree. extract_keywords() builds the keyword list every
relevance scorer consumes:

1. Tokenize the query
2. Drop stopwords and tokens of length <= 2
3. Deduplicate (first-seen order), cap at 24
4. If nothing survives, fall back to the raw tokens so any non-blank
   query yields at least one keyword
"""

from dataclasses import dataclass, field
from typing import List

from .normalizer import normalize, normalize_for_scoring

MAX_KEYWORDS = 24
MIN_KEYWORD_LENGTH = 3

# English stopwords (NLTK-style list used for query keyword extraction)
STOPWORDS = frozenset([
    'a', 'about', 'above', 'after', 'again', 'against', 'all', 'am', 'an',
    'and', 'any', 'are', 'as', 'at', 'be', 'because', 'been', 'before',
    'being', 'below', 'between', 'both', 'but', 'by', 'can', 'could', 'did',
    'do', 'does', 'doing', 'down', 'during', 'each', 'few', 'for', 'from',
    'further', 'had', 'has', 'have', 'having', 'he', 'her', 'here', 'hers',
    'herself', 'him', 'himself', 'his', 'how', 'i', 'if', 'in', 'into', 'is',
    'it', 'its', 'itself', 'just', 'me', 'more', 'most', 'my', 'myself', 'no',
    'nor', 'not', 'now', 'of', 'off', 'on', 'once', 'only', 'or', 'other',
    'our', 'ours', 'ourselves', 'out', 'over', 'own', 'same', 'she', 'should',
    'so', 'some', 'such', 'than', 'that', 'the', 'their', 'theirs', 'them',
    'themselves', 'then', 'there', 'these', 'they', 'this', 'those',
    'through', 'to', 'too', 'under', 'until', 'up', 'very', 'was', 'we',
    'were', 'what', 'when', 'where', 'which', 'while', 'who', 'whom', 'why',
    'with', 'would', 'you', 'your', 'yours', 'yourself', 'yourselves'
])


@dataclass(frozen=True)
class QueryContext:
    """Query prepared once and shared by every record scored against it."""
    original_query: str
    normalized_query: str
    keywords: List[str] = field(default_factory=list)


def tokenize(text: str) -> List[str]:
    """
    Normalize text and split it into tokens.
    
    Examples:
        >>> tokenize("Apollo-11: Mission Reports")
        ['apollo', '11', 'mission', 'reports']
        >>> tokenize("   ")
        []
    """
    normalized = normalize(text)
    if not normalized:
        return []
    return [token for token in normalized.split(" ") if token]


def extract_keywords(query: str) -> List[str]:
    """
    Extract deduplicated, stopword-filtered keywords from a query.
    
    Args:
        query: Raw user query
    
    Returns:
        Up to 24 keywords; raw tokens when filtering removes everything
    
    Examples:
        >>> extract_keywords("the history of the book")
        ['history', 'book']
        >>> extract_keywords("to be or not")
        ['to', 'be', 'or', 'not']
    """
    tokens = tokenize(normalize_for_scoring(query) if isinstance(query, str) else "")
    if not tokens:
        return []

    filtered = [
        token for token in tokens
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOPWORDS
    ]
    source = filtered or tokens

    keywords: List[str] = []
    seen = set()
    for token in source:
        if token in seen:
            continue
        seen.add(token)
        keywords.append(token)
        if len(keywords) >= MAX_KEYWORDS:
            break
    return keywords


def create_query_context(query: str) -> QueryContext:
    """Build the QueryContext for a raw query string."""
    trimmed = query.strip() if isinstance(query, str) else ""
    return QueryContext(
        original_query=trimmed,
        normalized_query=normalize_for_scoring(trimmed),
        keywords=extract_keywords(trimmed),
    )
