"""
Unit tests for text normalization, tokenization and keyword extraction.
"""

import pytest

from alexandria_core.text import (
    create_query_context,
    extract_keywords,
    levenshtein_distance,
    normalize,
    normalize_for_scoring,
    strip_diacritics,
    token_similarity,
    tokenize,
)
from alexandria_core.text.tokenizer import MAX_KEYWORDS

pytestmark = pytest.mark.unit


class TestNormalize:
    """Test lowercase + diacritic + boundary normalization"""
    
    def test_basic_normalization(self):
        assert normalize("  Les Misérables -- Vol. 2!  ") == "les miserables vol 2"
    
    def test_diacritics_stripped(self):
        assert strip_diacritics("Müller") == "Muller"
        assert normalize("Café Société") == "cafe societe"
    
    def test_non_latin_letters_survive(self):
        """Letters of any script are kept, only accents are removed"""
        assert normalize("Ελληνικά κείμενα") == "ελληνικα κειμενα"
    
    def test_underscore_is_a_boundary(self):
        assert normalize("snake_case_name") == "snake case name"
    
    def test_non_string_input(self):
        """None and non-strings degrade to empty string"""
        assert normalize(None) == ""
        assert normalize(123) == ""
        assert normalize("") == ""
    
    def test_html_stripped_for_scoring(self):
        assert normalize_for_scoring("<p><b>Bold</b> move</p>") == "bold move"


class TestTokenize:
    """Test token splitting"""
    
    def test_splits_on_punctuation(self):
        assert tokenize("Apollo-11: Mission Reports") == ["apollo", "11", "mission", "reports"]
    
    def test_blank_input(self):
        assert tokenize("") == []
        assert tokenize("   ") == []
        assert tokenize("!!! ---") == []


class TestExtractKeywords:
    """Test query keyword extraction"""
    
    def test_stopwords_and_short_tokens_removed(self):
        assert extract_keywords("the history of the book") == ["history", "book"]
    
    def test_falls_back_to_raw_tokens(self):
        """A query of only stopwords still yields keywords"""
        assert extract_keywords("to be or not") == ["to", "be", "or", "not"]
    
    def test_deduplicated_in_first_seen_order(self):
        assert extract_keywords("Jazz blues JAZZ swing blues") == ["jazz", "blues", "swing"]
    
    def test_capped(self):
        query = " ".join(f"term{i}" for i in range(40))
        keywords = extract_keywords(query)
        assert len(keywords) == MAX_KEYWORDS
        assert keywords[0] == "term0"
    
    def test_blank_query(self):
        assert extract_keywords("") == []
        assert extract_keywords("   ") == []
        assert extract_keywords(None) == []


class TestQueryContext:
    """Test QueryContext construction"""
    
    def test_context_fields(self):
        context = create_query_context("  Climate Change ")
        assert context.original_query == "Climate Change"
        assert context.normalized_query == "climate change"
        assert context.keywords == ["climate", "change"]
    
    def test_blank_context(self):
        context = create_query_context("")
        assert context.normalized_query == ""
        assert context.keywords == []


class TestSimilarity:
    """Test edit-distance similarity"""
    
    def test_levenshtein(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
    
    def test_token_similarity(self):
        assert token_similarity("climate", "climate") == 1.0
        assert token_similarity("archive", "archives") == pytest.approx(0.875)
        assert token_similarity("", "") == 1.0
    
    def test_similarity_bounds(self):
        assert 0.0 <= token_similarity("abc", "xyzxyz") <= 1.0
