"""
Structural checks for loosely-typed data from external tools.

Search scripts, the conversation fetcher and the LLM summarizer all hand
back JSON of uncertain shape. These helpers answer yes/no questions about
that data without raising, so callers can reject bad input instead of
coercing it.

Keys may arrive as plain strings (JSON) or as Enum members whose value is
the field name (Python callers building mappings by hand). key_name()
renders both to the same string so lookups treat them interchangeably.
"""
import json
from collections.abc import Mapping
from enum import Enum
from typing import Any, Iterable, List, Optional


def key_name(key: Any) -> str:
    """Render a mapping key to its string field name."""
    if isinstance(key, Enum):
        return str(key.value)
    return str(key)


def normalize_keys(mapping: Mapping) -> dict[str, Any]:
    """
    Copy a mapping with every key rendered by key_name().

    When the same field is present both as a string and as an Enum member,
    the string-keyed value wins.
    """
    normalized: dict[str, Any] = {}
    for key, value in mapping.items():
        if not isinstance(key, str):
            normalized.setdefault(key_name(key), value)
    for key, value in mapping.items():
        if isinstance(key, str):
            normalized[key] = value
    return normalized


def get_field(mapping: Mapping, name: str, default: Any = None) -> Any:
    """Look up a field by its string name, tolerating Enum keys."""
    if not isinstance(mapping, Mapping):
        return default
    return normalize_keys(mapping).get(name, default)


def valid_json(text: Any) -> bool:
    """True if text parses as JSON. Never raises."""
    try:
        json.loads(text)
    except (TypeError, ValueError, RecursionError):
        return False
    return True


def has_required_keys(mapping: Any, *keys: Any) -> bool:
    """
    True only if mapping is a Mapping holding every key.

    A key counts as present under its exact form or its string-rendered
    form, so has_required_keys({"a": 1}, Field.A) holds when Field.A.value
    is "a".
    """
    if not isinstance(mapping, Mapping):
        return False
    return all(key in mapping or key_name(key) in mapping for key in keys)


def no_duplicates(values: Any) -> bool:
    """
    True if a list/tuple holds no duplicates.

    Strings compare case- and whitespace-insensitively; other values compare
    as-is, so 1 and "1" are distinct. Non-sequence input is vacuously true.
    """
    if not isinstance(values, (list, tuple)):
        return True

    seen: List[Any] = []
    for item in values:
        normalized = item.strip().lower() if isinstance(item, str) else item
        if normalized in seen:
            return False
        seen.append(normalized)
    return True


def extract_errors(value: Any) -> List[Any]:
    """
    Return value's validation errors, or [] if it has no such capability.

    Any object exposing a validation_errors attribute or method qualifies.
    """
    probe: Optional[Any] = getattr(value, "validation_errors", None)
    if probe is None:
        return []
    errors: Optional[Iterable[Any]] = probe() if callable(probe) else probe
    return list(errors or [])
