"""
Archive record values and bounded traversal.

Archive records are semi-structured JSON documents. A field value is one of:

    Text    - str
    Number  - int / float (bool is NOT a number here, it is ignored)
    Items   - list / tuple / set of values
    Mapping - nested dict

Every traversal that walks record values (NSFW string harvesting,
authenticity/field text gathering) goes through fold_strings(), which
bounds recursion depth and tracks container identity so self-referencing
records terminate.
"""

import math
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set

ArchiveRecord = Dict[str, Any]

MAX_VALUE_DEPTH = 6


class ValueKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    ITEMS = "items"
    MAPPING = "mapping"
    EMPTY = "empty"


def value_kind(value: Any) -> ValueKind:
    """Tag a raw record value with its kind."""
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, bool) or value is None:
        return ValueKind.EMPTY
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER if math.isfinite(value) else ValueKind.EMPTY
    if isinstance(value, (list, tuple, set, frozenset)):
        return ValueKind.ITEMS
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    return ValueKind.EMPTY


def fold_strings(
    value: Any,
    max_depth: int = MAX_VALUE_DEPTH,
    seen: Optional[Set[int]] = None,
    _depth: int = 0,
) -> Iterator[str]:
    """
    Yield every non-blank string reachable from a value.
    
    Numbers are rendered with str(); integral floats drop the ".0".
    Containers deeper than max_depth are skipped, and a container already
    visited (by identity) is never entered twice.
    
    Args:
        value: Any record value
        max_depth: Maximum container nesting to descend into
        seen: Shared identity set (pass one set to fold several fields
            of the same record)
    
    Examples:
        >>> list(fold_strings(["Jazz", {"year": 1958}, None, True]))
        ['Jazz', '1958']
    """
    if seen is None:
        seen = set()

    kind = value_kind(value)
    if kind is ValueKind.TEXT:
        trimmed = value.strip()
        if trimmed:
            yield trimmed
        return
    if kind is ValueKind.NUMBER:
        yield format_number(value)
        return
    if kind is ValueKind.EMPTY or _depth >= max_depth:
        return

    if id(value) in seen:
        return
    seen.add(id(value))

    children = value.values() if kind is ValueKind.MAPPING else value
    for child in children:
        yield from fold_strings(child, max_depth, seen, _depth + 1)


def collect_strings(value: Any, max_depth: int = MAX_VALUE_DEPTH) -> List[str]:
    return list(fold_strings(value, max_depth))


def format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def get_mapping(record: Mapping[str, Any], key: str) -> Optional[Mapping[str, Any]]:
    """Return record[key] if it is a nested mapping, else None."""
    candidate = record.get(key) if isinstance(record, Mapping) else None
    return candidate if isinstance(candidate, Mapping) else None


def first_text(*values: Any) -> Optional[str]:
    """First value that is a non-blank string, stripped."""
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def has_text(value: Any) -> bool:
    """True for a non-blank string or a list holding one."""
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return any(isinstance(entry, str) and entry.strip() for entry in value)
    return False


def to_text_list(value: Any) -> List[str]:
    """
    Coerce a list-ish field to trimmed strings.
    
    Strings are split on commas, semicolons and newlines.
    
    Examples:
        >>> to_text_list("smithsonian; americana")
        ['smithsonian', 'americana']
    """
    if isinstance(value, str):
        parts = value.replace(";", ",").replace("\n", ",").split(",")
        return [part.strip() for part in parts if part.strip()]
    if isinstance(value, (list, tuple)):
        return [entry.strip() for entry in value if isinstance(entry, str) and entry.strip()]
    return []


def to_number(value: Any) -> Optional[float]:
    """
    Parse a numeric field ("1,024" → 1024.0); None when unparsable.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        cleaned = "".join(value.split()).replace(",", "")
        if not cleaned:
            return None
        try:
            parsed = float(cleaned)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None
