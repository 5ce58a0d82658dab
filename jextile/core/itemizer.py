from __future__ import annotations

"""Turn the value at the current path into displayable items.

Filtering is a pure view transform: it never reorders or mutates the
underlying container. Callers must disable reordering while a filter term is
active, since positions in a filtered view are not storage positions.
"""

import json
from typing import List, Optional

from jextile.core.models import Item, JsonValue

__all__ = [
    "is_container",
    "itemize",
    "filter_items",
    "serialize_value",
    "item_preview",
    "resolve_heading",
]


def is_container(value: JsonValue) -> bool:
    """Return True for objects and arrays (the values one can drill into)."""
    return isinstance(value, (dict, list))


def itemize(value: JsonValue) -> List[Item]:
    """Return the children of ``value`` in display order.

    Arrays yield ``(index, value)`` pairs, objects yield ``(key, value)`` pairs
    in insertion order, primitives and ``None`` yield nothing.
    """
    if isinstance(value, list):
        return [Item(index, child) for index, child in enumerate(value)]
    if isinstance(value, dict):
        return [Item(key, child) for key, child in value.items()]
    return []


def serialize_value(value: JsonValue) -> str:
    """Compact JSON text for ``value`` (used for search and previews)."""
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return str(value)


def filter_items(items: List[Item], term: str) -> List[Item]:
    """Keep items whose name or serialized value contains ``term``.

    Matching is case-insensitive. An empty term returns ``items`` unchanged.
    """
    if not term:
        return items
    needle = term.lower()
    return [
        item
        for item in items
        if needle in str(item.name).lower() or needle in serialize_value(item.value).lower()
    ]


def item_preview(value: JsonValue, limit: int = 30) -> str:
    text = serialize_value(value)
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def resolve_heading(value: JsonValue, key: str) -> Optional[JsonValue]:
    """Return the entry of an object whose key matches ``key`` ignoring case.

    Used for the optional title/subtitle display preferences. Non-objects and
    blank keys resolve to None.
    """
    if not isinstance(value, dict) or not key:
        return None
    wanted = key.lower()
    for candidate, entry in value.items():
        if candidate.lower() == wanted:
            return entry
    return None
