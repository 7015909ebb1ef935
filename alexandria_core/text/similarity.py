"""
Edit-distance token similarity (via NLTK).

similarity = 1 - levenshtein(a, b) / max(len(a), len(b)), clamped to [0, 1].
Identical tokens short-circuit to 1.0 without computing a distance.
"""

from nltk.metrics.distance import edit_distance


def levenshtein_distance(a: str, b: str) -> int:
    """
    Plain Levenshtein distance (insert/delete/substitute, cost 1 each).
    
    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
    """
    return edit_distance(a, b)


def token_similarity(a: str, b: str) -> float:
    """
    Normalized similarity between two tokens.
    
    Examples:
        >>> token_similarity("climate", "climate")
        1.0
        >>> round(token_similarity("archive", "archives"), 3)
        0.875
    """
    if a == b:
        return 1.0
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    similarity = 1.0 - levenshtein_distance(a, b) / max_len
    return min(max(similarity, 0.0), 1.0)
