"""Identifier synthesis for generated classes and fields."""

from __future__ import annotations

import keyword
from collections import defaultdict
from typing import Dict, Iterable, List

from pydantic import BaseModel

_DISALLOWED = frozenset("\n' */-().!?#:+{}&,")
_RESERVED_FIELDS = frozenset(name for name in dir(BaseModel) if not name.startswith("__"))


def sanitize(name: str) -> str:
    """Replace disallowed punctuation with underscores and guard a leading digit.

    Empty input becomes a single underscore so the result is always usable.
    """
    cleaned = "".join("_" if char in _DISALLOWED else char for char in name)
    if not cleaned:
        return "_"
    if cleaned[0].isdecimal():
        cleaned = "_" + cleaned
    return cleaned


def to_identifier(name: str) -> str:
    """Return ``sanitize(name)`` further coerced into a valid Python identifier."""
    cleaned = "".join(
        char if ("_" + char).isidentifier() else "_" for char in sanitize(name)
    )
    if not cleaned.isidentifier():
        cleaned = "_" + cleaned
    if keyword.iskeyword(cleaned):
        cleaned += "_"
    return cleaned


def field_identifier(key: str) -> str:
    """Attribute name for a JSON key on a generated pydantic model."""
    cleaned = to_identifier(key).lstrip("_")
    if not cleaned.isidentifier() or cleaned.startswith("model_"):
        cleaned = "f_" + cleaned
    if cleaned in _RESERVED_FIELDS or keyword.iskeyword(cleaned):
        cleaned += "_"
    return cleaned


def pascal_case(name: str) -> str:
    parts = [part for part in field_identifier(name).split("_") if part]
    if not parts:
        return "Item"
    return "".join(part[0].upper() + part[1:] for part in parts)


def dedupe_names(names: Iterable[str], reserved: Iterable[str] = ()) -> List[str]:
    """Keep the first occurrence of each name and suffix the rest ``_1``, ``_2``...

    Names in ``reserved`` count as an earlier occurrence, so their first
    appearance in ``names`` already receives ``_1``. A suffix that is itself
    already taken is skipped: ``["Order_1", "Order", "Order"]`` gives
    ``["Order_1", "Order", "Order_2"]``.
    """
    seen: Dict[str, int] = defaultdict(int)
    for name in reserved:
        seen[name] = 1
    taken = set(seen)
    result: List[str] = []
    for name in names:
        count = seen[name]
        candidate = name if count == 0 else f"{name}_{count}"
        while candidate in taken:
            count += 1
            candidate = f"{name}_{count}"
        seen[name] = count + 1
        taken.add(candidate)
        result.append(candidate)
    return result


__all__ = ["dedupe_names", "field_identifier", "pascal_case", "sanitize", "to_identifier"]
