"""
NSFW classification and visibility modes.

Components:
- matcher: keyword matching with morphology exception rules
- classifier: record/text classification and record annotation
- modes: four-state mode filter and generation admission gate
"""

from .classifier import (
    NSFWAnalysis,
    NSFWClassification,
    Severity,
    analyze_text,
    annotate_record,
    classify_record,
    classify_text,
    harvest_record_strings,
    is_nsfw_content,
)
from .matcher import detect_keyword_matches, keyword_matches, matches_rule
from .modes import (
    FilterMode,
    ModeFilterResult,
    SuppressionDecision,
    build_generation_prompt,
    count_hidden_by_mode,
    filter_by_mode,
    matches_mode,
    normalize_nsfw_mode,
    resolve_mode,
    should_suppress_generation,
)

__all__ = [
    "NSFWAnalysis",
    "NSFWClassification",
    "Severity",
    "analyze_text",
    "annotate_record",
    "classify_record",
    "classify_text",
    "harvest_record_strings",
    "is_nsfw_content",
    "detect_keyword_matches",
    "keyword_matches",
    "matches_rule",
    "FilterMode",
    "ModeFilterResult",
    "SuppressionDecision",
    "build_generation_prompt",
    "count_hidden_by_mode",
    "filter_by_mode",
    "matches_mode",
    "normalize_nsfw_mode",
    "resolve_mode",
    "should_suppress_generation",
]
