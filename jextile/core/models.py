from __future__ import annotations

"""Shared data structures used across the JExTile core.

This module exposes the value objects passed between the engine layers
(itemizer, selection, reorder, navigation, controller). It is intentionally
free of UI / I/O code so the contained objects can be reused in any context
(unit-tests, CLI, GUI, etc.).

JSON values themselves are plain Python objects as produced by :mod:`json`
(``dict``, ``list``, ``str``, ``int``, ``float``, ``bool``, ``None``). They are
never mutated in place once they belong to a document snapshot.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

__all__ = [
    "JsonValue",
    "PathSegment",
    "Path",
    "Item",
    "DocumentMeta",
    "DetailView",
    "SelectionState",
    "DragContext",
]

JsonValue = Any
PathSegment = Union[str, int]
Path = Tuple[PathSegment, ...]


@dataclass(frozen=True)
class Item:
    """One child of the value at the current path, in display order.

    Attributes
    ----------
    name
        Array index (int) or object key (str).
    value
        The child value (shared by reference with the document).
    """

    name: PathSegment
    value: JsonValue


@dataclass(frozen=True)
class DocumentMeta:
    """File-level information recorded when a document is loaded."""

    name: str
    size: int = 0


@dataclass(frozen=True)
class DetailView:
    """A value opened for inspection/editing outside the grid.

    ``full_path`` addresses the value from the document root so that an
    edited replacement can be written back through the path resolver.
    """

    value: JsonValue
    name: PathSegment
    full_path: Path


@dataclass(frozen=True)
class SelectionState:
    """Focus, selection and range anchor over the current item list.

    ``Empty`` is ``focused_index is None`` with no selection; ``Single(i)`` is a
    one-element selection focused on ``i``; anything else is ``Multi``.
    """

    focused_index: Optional[int] = None
    selected_indices: FrozenSet[int] = field(default_factory=frozenset)
    anchor_index: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.focused_index is None and not self.selected_indices

    def sorted_selection(self) -> List[int]:
        return sorted(self.selected_indices)


@dataclass(frozen=True)
class DragContext:
    """Snapshot captured at the start of a drag gesture.

    The commit at gesture end reads only this record (plus the last advisory
    target), never live controller state.
    """

    source_index: int
    indices_to_move: FrozenSet[int]
    items_snapshot: Tuple[Item, ...]


def items_as_mapping(items: List[Item]) -> Dict[str, JsonValue]:
    """Rebuild an object from items, inserting keys in item order."""
    return {str(item.name): item.value for item in items}
