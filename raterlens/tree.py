"""Total lookups over schema-free evaluation records.

Evaluation records are plain JSON values: None, str, int, float, bool,
list or dict. Every helper here returns None for anything it can't walk
instead of raising, so a missing or malformed field is just "absent".
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

PathSpec = Sequence[str | int]


def split_path(path: str | PathSpec) -> tuple[str | int, ...]:
    """Turn a dotted string ("a.b.0.c") or a sequence into path steps.

    Purely numeric string segments become list indices.
    """
    if isinstance(path, str):
        steps = path.split(".") if path else []
    else:
        steps = list(path)
    return tuple(int(s) if isinstance(s, str) and s.isdigit() else s for s in steps)


def get_path(value: Any, path: str | PathSpec) -> Any:
    """Resolve path against a nested value, or None if any step is missing."""
    current = value
    for step in split_path(path):
        if isinstance(current, Mapping):
            # JSON keys are strings even when they look like indices
            current = current.get(step) if step in current else current.get(str(step))
        elif isinstance(current, list) and isinstance(step, int):
            current = current[step] if -len(current) <= step < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def get_text(value: Any, path: str | PathSpec) -> str | None:
    """Resolve path to a trimmed non-empty string.

    A list of strings (e.g. title tokens) is joined with spaces.
    """
    found = get_path(value, path)
    if isinstance(found, list) and found and all(isinstance(t, str) for t in found):
        found = " ".join(found)
    if isinstance(found, str) and found.strip():
        return found.strip()
    return None


def get_number(value: Any, path: str | PathSpec) -> float | None:
    """Resolve path to a number. Booleans and numeric strings don't count."""
    found = get_path(value, path)
    if isinstance(found, bool) or not isinstance(found, (int, float)):
        return None
    return float(found)


def first_text(value: Any, paths: Iterable[str | PathSpec]) -> str | None:
    """First non-empty string among candidate paths."""
    for path in paths:
        text = get_text(value, path)
        if text is not None:
            return text
    return None
