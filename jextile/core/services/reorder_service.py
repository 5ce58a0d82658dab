from __future__ import annotations

"""Deterministic multi-item reorder for the children of one container.

The same algorithm serves the keyboard "move block" command and the end of a
drag gesture. Targets are expressed in the original (pre-removal) ordering and
mean "insert immediately before the item currently at that position"; a
target equal to the list length appends.

Drag gestures follow a two-phase protocol implemented by
:class:`DragSession`:

1. ``begin`` captures an immutable :class:`~jextile.core.models.DragContext`.
2. ``hover`` updates a purely advisory target on every pointer-over event.
3. ``end`` is the single authoritative commit. It reads only the captured
   context and the last advisory target and fires at most once, whether or
   not an intermediate ``drop`` signal was delivered.
"""

from dataclasses import dataclass
import logging
from typing import Iterable, List, Optional, Sequence

from jextile.core.models import DragContext, Item, JsonValue, SelectionState, items_as_mapping
from jextile.core import selection as sel

__all__ = [
    "ReorderResult",
    "compute_reorder",
    "serialize_items",
    "block_target",
    "hover_target",
    "DragSession",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReorderResult:
    """Outcome of a reorder computation.

    Attributes
    ----------
    items
        The full item list in its new order.
    insertion_index
        Position of the first moved item (the clamped, adjusted target).
    moved_count
        Number of items that were moved.
    selection
        New selection: the moved block, focused and anchored at its start.
    """

    items: tuple
    insertion_index: int
    moved_count: int
    selection: SelectionState

    def container_value(self, like: JsonValue) -> JsonValue:
        """Re-serialize the items into a container of the same kind as ``like``."""
        return serialize_items(list(self.items), isinstance(like, list))


def serialize_items(items: List[Item], as_array: bool) -> JsonValue:
    """Build an array of values or an object keyed by item names, in order."""
    if as_array:
        return [item.value for item in items]
    return items_as_mapping(items)


def compute_reorder(items: Sequence[Item], indices: Iterable[int], target: int) -> Optional[ReorderResult]:
    """Move the items at ``indices`` so they start before position ``target``.

    Moved items keep their original relative order regardless of the order in
    which they were picked. Indices outside the list are ignored; when nothing
    valid remains to move the result is None.
    """
    items = list(items)
    moving = sorted({i for i in indices if 0 <= i < len(items)})
    if not moving:
        return None

    moving_set = set(moving)
    to_move = [items[i] for i in moving]
    to_stay = [item for i, item in enumerate(items) if i not in moving_set]

    insertion = target - sum(1 for i in moving if i < target)
    insertion = max(0, min(insertion, len(to_stay)))

    reordered = to_stay[:insertion] + to_move + to_stay[insertion:]
    logger.debug(
        "Reorder: indices=%s target=%d insertion=%d count=%d",
        moving, target, insertion, len(items),
    )
    return ReorderResult(
        items=tuple(reordered),
        insertion_index=insertion,
        moved_count=len(to_move),
        selection=sel.select_block(insertion, len(to_move)),
    )


def block_target(selected: Iterable[int], direction: str) -> Optional[int]:
    """Reorder target that shifts a selection block by one position.

    ``backward`` inserts before the item preceding the block; ``forward``
    steps over the item following it.
    """
    selected = list(selected)
    if not selected:
        return None
    if direction == "backward":
        return max(0, min(selected) - 1)
    if direction == "forward":
        return max(selected) + 2
    raise ValueError(f"Unsupported block direction '{direction}'")


def hover_target(index: int, pointer_x: float, item_left: float, item_width: float) -> int:
    """Advisory drop target for a pointer hovering over item ``index``.

    Past the item's horizontal midpoint the target is the next position.
    """
    if pointer_x - item_left > item_width / 2:
        return index + 1
    return index


class DragSession:
    """One drag gesture at a time, committed exactly once.

    The session never looks at live controller state after ``begin``: the
    items and indices to move are frozen in the captured context.
    """

    def __init__(self) -> None:
        self._context: Optional[DragContext] = None
        self._target: Optional[int] = None

    @property
    def active(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> Optional[DragContext]:
        return self._context

    @property
    def target(self) -> Optional[int]:
        """Last advisory target (drop indicator position), if any."""
        return self._target

    def begin(self, index: int, selected: Iterable[int], items: Sequence[Item]) -> Optional[DragContext]:
        """Capture the drag context for a gesture starting on ``index``.

        Dragging a selected item moves the whole selection; dragging an
        unselected item moves only that item.
        """
        if not 0 <= index < len(items):
            return None
        selected = frozenset(selected)
        to_move = selected if index in selected else frozenset({index})
        self._context = DragContext(index, to_move, tuple(items))
        self._target = None
        logger.debug("Drag begin: source=%d moving=%s", index, sorted(to_move))
        return self._context

    def hover(self, index: int, pointer_x: float, item_left: float, item_width: float) -> Optional[int]:
        if self._context is None:
            return None
        self._target = hover_target(index, pointer_x, item_left, item_width)
        return self._target

    def set_target(self, target: Optional[int]) -> None:
        if self._context is not None:
            self._target = target

    def drop(self) -> None:
        """Drop signal: accepted and ignored; :meth:`end` commits."""

    def end(self) -> Optional[ReorderResult]:
        """Commit the gesture from the captured snapshot and reset.

        Returns None when there is no active gesture or no target was ever
        resolved (e.g. released outside the grid).
        """
        context, target = self._context, self._target
        self._context = None
        self._target = None
        if context is None:
            return None
        if target is None:
            logger.debug("Drag discarded: no target")
            return None
        return compute_reorder(context.items_snapshot, context.indices_to_move, target)

    def cancel(self) -> None:
        if self._context is not None:
            logger.debug("Drag cancelled")
        self._context = None
        self._target = None
