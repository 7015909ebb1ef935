"""
Text normalization for scoring and classification.

Normalization pipeline:
1. Lowercase conversion
2. Unicode NFD decomposition + combining mark removal ("Café" → "cafe")
3. Collapse every run of non-letter/non-digit characters to one space
4. Trim

Letters and digits are Unicode-aware: "Ελληνικά" and "日本語" survive,
only punctuation, symbols and whitespace act as boundaries.
"""

import re
import unicodedata

# Anything that is not a letter or a digit in any script
# ([^\W_] is "word character minus underscore")
BOUNDARY_PATTERN = re.compile(r"[\W_]+", re.UNICODE)
HTML_TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")


def strip_diacritics(value: str) -> str:
    """
    Remove combining marks after NFD decomposition.
    
    Examples:
        >>> strip_diacritics("Müller")
        'Muller'
        >>> strip_diacritics("écrits")
        'ecrits'
    """
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def strip_html(value: str) -> str:
    """Replace HTML tags with spaces (archive descriptions often carry markup)."""
    return HTML_TAG_PATTERN.sub(" ", value)


def normalize(text: str) -> str:
    """
    Normalize text for matching.
    
    Args:
        text: Raw text (None and non-strings degrade to "")
    
    Returns:
        Lowercase, diacritic-free text with single spaces between tokens
    
    Examples:
        >>> normalize("  Les Misérables -- Vol. 2!  ")
        'les miserables vol 2'
        >>> normalize("")
        ''
    """
    if not isinstance(text, str) or not text:
        return ""
    lowered = strip_diacritics(text).lower()
    return BOUNDARY_PATTERN.sub(" ", lowered).strip()


def normalize_for_scoring(text: str) -> str:
    """Normalize field text, dropping HTML markup first."""
    if not isinstance(text, str) or not text:
        return ""
    return normalize(strip_html(text))


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text).strip()
