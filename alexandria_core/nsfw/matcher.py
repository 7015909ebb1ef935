"""
Keyword matching with morphology exceptions.

Plain substring matching over-triggers on short terms: "analysis" holds
"anal" and "cumulative" holds "cum". Keywords that have a MorphologyRule
are therefore matched token by token against the rule's suffix and
next-word tables. Every other keyword matches on token equality, token
prefix, or substring of the normalized text.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from ..config import EngineConfig, resolve_config
from ..lexicon import MorphologyRule
from ..text import normalize


@dataclass(frozen=True)
class PreparedText:
    """Normalized text and its tokens, computed once per classified string."""
    normalized: str
    tokens: Sequence[str]

    @classmethod
    def from_text(cls, text: str) -> "PreparedText":
        normalized = normalize(text)
        return cls(normalized=normalized, tokens=normalized.split(" ") if normalized else [])


def matches_rule(rule: MorphologyRule, token: str, next_token: Optional[str]) -> bool:
    """
    Decide whether one token is an explicit use of the rule's target.
    
    Examples:
        >>> from alexandria_core.lexicon import ANAL_RULE, CUM_RULE
        >>> matches_rule(ANAL_RULE, "analysis", None)
        False
        >>> matches_rule(ANAL_RULE, "anal", "sex")
        True
        >>> matches_rule(CUM_RULE, "cumshot", None)
        True
    """
    target = rule.target
    if token == target:
        if next_token is not None and next_token in rule.safe_next:
            return False
        if rule.bare_needs_context:
            return next_token is None or next_token in rule.explicit_next
        return True

    if not token.startswith(target):
        return False
    if token.startswith(rule.safe_prefixes) or token in rule.safe_tokens:
        return False

    remainder = token[len(target):]
    if remainder.startswith(rule.explicit_suffixes):
        return True
    if remainder.startswith(rule.safe_suffixes):
        return False
    # Unknown short or numbered remainders ("anal2", "cumz") are treated as explicit
    return remainder[0].isdigit() or len(remainder) <= rule.max_unknown_remainder


def _matches_prepared(prepared: PreparedText, keyword: str, rule: Optional[MorphologyRule]) -> bool:
    tokens = prepared.tokens
    if rule is not None:
        return any(
            matches_rule(rule, token, tokens[index + 1] if index + 1 < len(tokens) else None)
            for index, token in enumerate(tokens)
        )

    target = normalize(keyword)
    if not target:
        return False
    if any(token == target or token.startswith(target) for token in tokens):
        return True
    return target in prepared.normalized


def keyword_matches(text: str, keyword: str, config: Optional[EngineConfig] = None) -> bool:
    """
    True if text contains keyword, honoring morphology rules.
    
    Args:
        text: Any text (blank text never matches)
        keyword: Lowercase keyword or phrase
        config: Engine config holding the morphology rules (default: shared)
    """
    if not isinstance(text, str) or not text.strip() or not keyword:
        return False
    config = resolve_config(config)
    return _matches_prepared(PreparedText.from_text(text), keyword, config.rule_for(keyword))


def detect_keyword_matches(
    text: str,
    keywords: Iterable[str],
    config: Optional[EngineConfig] = None,
) -> List[str]:
    """
    Keywords (in the given order) that match text.
    
    Examples:
        >>> detect_keyword_matches("cumulative climate data", ["cum", "nude"])
        []
    """
    if not isinstance(text, str) or not text.strip():
        return []
    config = resolve_config(config)
    prepared = PreparedText.from_text(text)
    if not prepared.tokens:
        return []
    return [keyword for keyword in keywords if _matches_prepared(prepared, keyword, config.rule_for(keyword))]
