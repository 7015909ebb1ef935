"""
Mode filter and generation admission gate.

Four visibility modes:

    safe          only unflagged records
    moderate      unflagged and mild records (explicit and violent hidden)
    unrestricted  everything
    nsfw-only     only flagged records; when none qualify the first N
                  records are returned instead of an empty page

should_suppress_generation() applies the same policy to a free-text
prompt before any downstream text generation runs.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..config import EngineConfig, resolve_config
from .classifier import (
    NSFWClassification,
    Severity,
    analyze_text,
    apply_classification,
    classify_record,
)

logger = logging.getLogger(__name__)


class FilterMode(str, Enum):
    SAFE = "safe"
    MODERATE = "moderate"
    UNRESTRICTED = "unrestricted"
    NSFW_ONLY = "nsfw-only"


MODE_ALIASES: Dict[str, FilterMode] = {
    "safe": FilterMode.SAFE,
    "moderate": FilterMode.MODERATE,
    "unrestricted": FilterMode.UNRESTRICTED,
    "off": FilterMode.UNRESTRICTED,
    "none": FilterMode.UNRESTRICTED,
    "disabled": FilterMode.UNRESTRICTED,
    "no_filter": FilterMode.UNRESTRICTED,
    "nsfw-only": FilterMode.NSFW_ONLY,
    "nsfw_only": FilterMode.NSFW_ONLY,
    "only": FilterMode.NSFW_ONLY,
    "only-nsfw": FilterMode.NSFW_ONLY,
    "only_nsfw": FilterMode.NSFW_ONLY,
    "nsfw": FilterMode.NSFW_ONLY,
    "adults": FilterMode.NSFW_ONLY,
}

# Severities moderate mode hides
MODERATE_BLOCKED = frozenset([Severity.EXPLICIT, Severity.VIOLENT])

SUPPRESSION_MESSAGES = {
    FilterMode.SAFE: "AI Mode: This content is hidden because Safe Search is enabled.",
    FilterMode.MODERATE: "AI Mode: Explicit or violent requests are blocked while Moderate NSFW mode is active.",
    FilterMode.NSFW_ONLY: "AI Mode: Only-NSFW mode requires adult keywords before suggestions can be generated.",
}

PROMPT_INSTRUCTIONS = {
    FilterMode.SAFE: (
        "Never suggest explicit material. Filter out adult topics entirely "
        "and respond with safe, educational alternatives."
    ),
    FilterMode.MODERATE: (
        "You may reference mature themes at a high level, but avoid explicit "
        "descriptions or graphic archive materials."
    ),
    FilterMode.UNRESTRICTED: (
        "Respect all legal requests without filtering, but ensure responses "
        "remain factual and relevant to the archive."
    ),
    FilterMode.NSFW_ONLY: (
        "Focus exclusively on NSFW-tagged archive items or well-known adult "
        "keywords. Do not suggest safe or general content."
    ),
}


@dataclass
class ModeFilterResult:
    items: List[Dict[str, Any]] = field(default_factory=list)
    hidden_count: int = 0
    fallback_applied: bool = False


@dataclass(frozen=True)
class SuppressionDecision:
    suppressed: bool = False
    severity: Optional[Severity] = None
    message: Optional[str] = None


def normalize_nsfw_mode(value: Union[str, FilterMode, None]) -> Optional[FilterMode]:
    """
    Map a mode name or alias to FilterMode; None when unrecognized.
    
    Examples:
        >>> normalize_nsfw_mode(" OFF ")
        <FilterMode.UNRESTRICTED: 'unrestricted'>
        >>> normalize_nsfw_mode("strict") is None
        True
    """
    if isinstance(value, FilterMode):
        return value
    if not isinstance(value, str):
        return None
    return MODE_ALIASES.get(value.strip().lower())


def resolve_mode(value: Union[str, FilterMode, None]) -> FilterMode:
    """normalize_nsfw_mode(), defaulting to safe for unknown values."""
    return normalize_nsfw_mode(value) or FilterMode.SAFE


def classification_allowed(classification: NSFWClassification, mode: FilterMode) -> bool:
    """The mode table, applied to an existing classification."""
    if mode is FilterMode.UNRESTRICTED:
        return True
    if mode is FilterMode.NSFW_ONLY:
        return classification.flagged
    if mode is FilterMode.SAFE:
        return not classification.flagged
    return not classification.flagged or classification.severity not in MODERATE_BLOCKED


def matches_mode(
    record: Mapping[str, Any],
    mode: Union[str, FilterMode],
    config: Optional[EngineConfig] = None,
) -> bool:
    """
    True if the record is visible in the given mode.
    
    The record is classified from its content; nsfw fields it already
    carries are not trusted.
    """
    resolved = resolve_mode(mode)
    if resolved is FilterMode.UNRESTRICTED:
        return True
    return classification_allowed(classify_record(record, config), resolved)


def filter_by_mode(
    records: Sequence[Mapping[str, Any]],
    mode: Union[str, FilterMode],
    config: Optional[EngineConfig] = None,
) -> ModeFilterResult:
    """
    Annotate records and keep the ones the mode allows, in input order.
    
    Args:
        records: Archive records (not modified)
        mode: Filter mode or alias (unknown values mean safe)
        config: Engine config (default: shared)
    
    Returns:
        ModeFilterResult with annotated copies. In nsfw-only mode with no
        flagged record, the first config.nsfw_only_fallback annotated
        records are returned and fallback_applied is set.
    """
    config = resolve_config(config)
    resolved = resolve_mode(mode)

    annotated: List[Dict[str, Any]] = []
    allowed: List[Dict[str, Any]] = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        classification = classify_record(record, config)
        item = apply_classification(record, classification)
        annotated.append(item)
        if classification_allowed(classification, resolved):
            allowed.append(item)

    if resolved is FilterMode.NSFW_ONLY and not allowed and annotated:
        fallback = annotated[:config.nsfw_only_fallback]
        logger.info(f"No NSFW records matched, returning {len(fallback)} unfiltered results")
        return ModeFilterResult(
            items=fallback,
            hidden_count=len(annotated) - len(fallback),
            fallback_applied=True,
        )

    hidden = len(annotated) - len(allowed)
    if hidden:
        logger.debug(f"Mode {resolved.value} hid {hidden} of {len(annotated)} records")
    return ModeFilterResult(items=allowed, hidden_count=hidden)


def count_hidden_by_mode(
    records: Sequence[Mapping[str, Any]],
    mode: Union[str, FilterMode],
    config: Optional[EngineConfig] = None,
) -> int:
    """
    Records a restrictive mode hides (0 for unrestricted and nsfw-only).
    """
    resolved = resolve_mode(mode)
    if resolved in (FilterMode.UNRESTRICTED, FilterMode.NSFW_ONLY):
        return 0
    return sum(
        1 for record in records
        if isinstance(record, Mapping) and not matches_mode(record, resolved, config)
    )


def should_suppress_generation(
    text: str,
    mode: Union[str, FilterMode],
    config: Optional[EngineConfig] = None,
) -> SuppressionDecision:
    """
    Decide whether a generation request may run in the given mode.
    
    - safe: suppressed on any NSFW signal
    - moderate: suppressed on explicit or violent signal
    - nsfw-only: suppressed when there is no NSFW signal
    - unrestricted: never suppressed
    
    Blank text is never suppressed.
    
    Examples:
        >>> should_suppress_generation("nude portraits", "moderate").suppressed
        False
        >>> should_suppress_generation("steam engines", "nsfw-only").suppressed
        True
    """
    resolved = resolve_mode(mode)
    if not isinstance(text, str) or not text.strip() or resolved is FilterMode.UNRESTRICTED:
        return SuppressionDecision()

    analysis = analyze_text(text, config)
    severity = analysis.severity

    if resolved is FilterMode.SAFE:
        suppressed = analysis.flagged
    elif resolved is FilterMode.MODERATE:
        suppressed = severity in MODERATE_BLOCKED
    else:
        suppressed = not analysis.flagged

    if not suppressed:
        return SuppressionDecision()
    return SuppressionDecision(suppressed=True, severity=severity, message=SUPPRESSION_MESSAGES[resolved])


def build_generation_prompt(mode: Union[str, FilterMode], user_prompt: str) -> str:
    """
    Prefix a user prompt with the mode's content instruction.
    
    Example:
        >>> build_generation_prompt("safe", "jazz records").splitlines()[-1]
        'AI:'
    """
    resolved = resolve_mode(mode)
    instruction = f'NSFW mode is currently set to: "{resolved.value}". {PROMPT_INSTRUCTIONS[resolved]}'
    return f"{instruction}\nUser: {user_prompt.strip() if isinstance(user_prompt, str) else ''}\nAI:"
