"""
Spell correction for search queries.

SpellCorrector is a frequency-ranked edit-distance corrector: a word
that is known is kept, otherwise the most frequent known word one edit
away wins, then two edits away. Ties break alphabetically.

get_fuzzy_suggestion() is the lighter "did you mean" lookup over a small
topic list, used when a query returns nothing.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set

from ..config import EngineConfig, resolve_config
from ..text import levenshtein_distance

logger = logging.getLogger(__name__)

ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
WORD_PATTERN = re.compile(r"[a-z0-9]+")

DEFAULT_TOPICS = (
    "history", "science", "technology", "literature", "photography", "music",
    "architecture", "manuscripts", "newspapers", "magazines", "biography",
    "world war", "map", "painting", "astronomy", "education", "mathematics",
    "poetry",
)

MAX_SUGGESTION_CLOSENESS = 0.5


@dataclass
class Correction:
    original: str
    corrected: str


@dataclass
class SpellcheckResult:
    original_query: str
    corrected_query: str
    corrections: List[Correction] = field(default_factory=list)


def _clean(word: str) -> Optional[str]:
    cleaned = re.sub(r"[^a-z0-9]", "", word.lower())
    return cleaned or None


class SpellCorrector:
    """
    Frequency-based spell corrector.
    
    Instances learn as they correct (an accepted correction bumps the
    corrected word's frequency), so share one per request stream, not
    across threads.
    """
    
    def __init__(self, seed_words: Iterable[str] = ()):
        self.frequencies: Counter = Counter()
        self.learn_words(seed_words)
    
    def learn_from_text(self, text: str) -> None:
        self.learn_words(WORD_PATTERN.findall(text.lower()))
    
    def learn_words(self, words: Iterable[str]) -> None:
        for word in words:
            cleaned = _clean(word) if isinstance(word, str) else None
            if cleaned:
                self.frequencies[cleaned] += 1
    
    def correct(self, word: str) -> Optional[str]:
        """
        Best known spelling for a word.
        
        Returns:
            The word itself if known or uncorrectable, the correction
            otherwise, None for input without letters or digits
        """
        cleaned = _clean(word)
        if not cleaned:
            return None
        if cleaned in self.frequencies:
            return cleaned

        candidates = self._known(self._edits1(cleaned))
        if candidates:
            return self._most_frequent(candidates)

        candidates = {
            edit2
            for edit1 in self._edits1(cleaned)
            for edit2 in self._edits1(edit1)
            if edit2 in self.frequencies
        }
        if candidates:
            return self._most_frequent(candidates)
        return cleaned
    
    def check_query(self, query: str) -> SpellcheckResult:
        """
        Correct each whitespace-separated token of a query.
        
        Example:
            >>> corrector = SpellCorrector(["history", "climate"])
            >>> corrector.check_query("histroy of climte").corrected_query
            'history of climate'
        """
        corrected_tokens: List[str] = []
        corrections: List[Correction] = []

        for token in query.split():
            cleaned = _clean(token)
            corrected = self.correct(token) if cleaned else None
            if corrected and corrected != cleaned:
                corrections.append(Correction(original=token, corrected=corrected))
                corrected_tokens.append(corrected)
                self.learn_words([corrected])
            else:
                corrected_tokens.append(token)

        if corrections:
            logger.debug(f"Spellcheck: {len(corrections)} correction(s) for {query!r}")
        corrected_query = " ".join(corrected_tokens) if corrections else query
        return SpellcheckResult(original_query=query, corrected_query=corrected_query, corrections=corrections)
    
    def _known(self, words: Iterable[str]) -> Set[str]:
        return {word for word in words if word in self.frequencies}
    
    def _most_frequent(self, words: Iterable[str]) -> str:
        return min(words, key=lambda word: (-self.frequencies[word], word))
    
    @staticmethod
    def _edits1(word: str) -> Set[str]:
        splits = [(word[:i], word[i:]) for i in range(len(word) + 1)]
        deletes = [left + right[1:] for left, right in splits if right]
        transposes = [left + right[1] + right[0] + right[2:] for left, right in splits if len(right) > 1]
        replaces = [left + c + right[1:] for left, right in splits if right for c in ALPHABET]
        inserts = [left + c + right for left, right in splits for c in ALPHABET]
        return set(deletes + transposes + replaces + inserts)


def create_default_spell_corrector(config: Optional[EngineConfig] = None) -> SpellCorrector:
    """Corrector seeded with the synonym vocabulary and the topic list."""
    config = resolve_config(config)
    words: List[str] = []
    for term, synonyms in config.synonyms.items():
        words.append(term)
        words.extend(synonyms)
    for topic in DEFAULT_TOPICS:
        words.extend(topic.split())
    return SpellCorrector(words)


def get_spell_corrector(config: Optional[EngineConfig] = None) -> SpellCorrector:
    """Fresh default corrector (correctors learn, so they are not shared)."""
    return create_default_spell_corrector(config)


def get_fuzzy_suggestion(query: str, dataset: Sequence[str] = ()) -> Optional[str]:
    """
    Closest topic term to a query, or None.
    
    A term qualifies when distance / max(len) <= 0.5; the smallest
    distance wins, earlier terms win ties.
    
    Examples:
        >>> get_fuzzy_suggestion("histroy")
        'history'
        >>> get_fuzzy_suggestion("zzzzzz") is None
        True
    """
    if not isinstance(query, str) or not query.strip():
        return None

    source: List[str] = []
    for term in list(dataset) + list(DEFAULT_TOPICS):
        if term and term not in source:
            source.append(term)

    normalized_query = query.strip().lower()
    best: Optional[str] = None
    smallest = None
    for term in source:
        normalized_term = term.lower()
        distance = levenshtein_distance(normalized_query, normalized_term)
        closeness = distance / max(len(normalized_term), len(normalized_query))
        if closeness <= MAX_SUGGESTION_CLOSENESS and (smallest is None or distance < smallest):
            smallest = distance
            best = term
    return best
