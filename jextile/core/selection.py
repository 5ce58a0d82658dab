from __future__ import annotations

"""Selection and focus state machine for the item grid.

All transitions are pure functions taking a :class:`SelectionState` and
returning a new one; the controller owns the single current instance.

States
------
- ``Empty``: no focus, no selection (initial state on every path change).
- ``Single(i)``: focus ``i``, selection ``{i}``.
- ``Multi(set, anchor)``: any other combination produced by toggle/range
  operations.

Every index handed out by these functions is below the ``count`` they were
given; :func:`clamp` re-establishes that invariant after the item list
shrinks (deletion, undo, filtering).
"""

from typing import Iterable, List, Mapping, Optional, Set, Tuple

from jextile.core.models import SelectionState

__all__ = [
    "EMPTY",
    "ARROW_KEYS",
    "DEFAULT_GRID_BREAKPOINTS",
    "single",
    "click",
    "toggle_click",
    "range_click",
    "move_focus",
    "clear",
    "clamp",
    "select_block",
    "delete_targets",
    "after_delete",
    "columns_for_width",
    "breakpoints_from_mapping",
]

EMPTY = SelectionState()

ARROW_KEYS = ("ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight")

# (minimum width, columns), widest first
DEFAULT_GRID_BREAKPOINTS: Tuple[Tuple[int, int], ...] = ((1280, 4), (1024, 3), (768, 2))


def _range(a: int, b: int) -> frozenset:
    start, end = min(a, b), max(a, b)
    return frozenset(range(start, end + 1))


def single(index: int) -> SelectionState:
    return SelectionState(index, frozenset({index}), index)


def click(state: SelectionState, index: int) -> SelectionState:
    """Plain click: collapse to ``Single(index)``."""
    return single(index)


def toggle_click(state: SelectionState, index: int) -> SelectionState:
    """Ctrl/Cmd-click: add or remove ``index``; focus and anchor follow it."""
    selected = set(state.selected_indices)
    if index in selected:
        selected.discard(index)
    else:
        selected.add(index)
    return SelectionState(index, frozenset(selected), index)


def range_click(state: SelectionState, index: int) -> SelectionState:
    """Shift-click: select the contiguous range from the anchor to ``index``."""
    if state.anchor_index is None:
        return single(index)
    return SelectionState(index, _range(state.anchor_index, index), state.anchor_index)


def _next_focus(current: Optional[int], key: str, count: int, columns: int) -> int:
    last = count - 1
    if current is None:
        return 0 if key in ("ArrowRight", "ArrowDown") else last
    if key == "ArrowRight":
        return min(current + 1, last)
    if key == "ArrowLeft":
        return max(current - 1, 0)
    if key == "ArrowUp":
        return max(current - columns, 0)
    if key == "ArrowDown":
        return min(current + columns, last)
    return current


def move_focus(
    state: SelectionState,
    key: str,
    count: int,
    columns: int = 1,
    extend: bool = False,
) -> SelectionState:
    """Arrow-key navigation in a grid of ``columns`` columns.

    With ``extend`` (Shift held) the selection becomes the range from the
    anchor to the new focus; the anchor is taken from the previous focus when
    none is set. Without it the state collapses to ``Single(new focus)``.
    """
    if count <= 0 or key not in ARROW_KEYS:
        return state
    columns = max(1, int(columns))
    previous = state.focused_index
    if previous is not None and previous >= count:
        previous = count - 1
    new_focus = _next_focus(previous, key, count, columns)

    if extend:
        anchor = state.anchor_index
        if anchor is None or anchor >= count:
            anchor = previous if previous is not None else new_focus
        return SelectionState(new_focus, _range(anchor, new_focus), anchor)
    return single(new_focus)


def clear(state: SelectionState) -> SelectionState:
    return EMPTY


def clamp(state: SelectionState, count: int) -> SelectionState:
    """Drop indices that no longer exist in a list of ``count`` items."""
    if count <= 0:
        return EMPTY
    selected = frozenset(i for i in state.selected_indices if 0 <= i < count)
    focus = state.focused_index
    if focus is not None and focus >= count:
        focus = count - 1
    anchor = state.anchor_index
    if anchor is not None and anchor >= count:
        anchor = focus
    if (focus, selected, anchor) == (state.focused_index, state.selected_indices, state.anchor_index):
        return state
    return SelectionState(focus, selected, anchor)


def select_block(start: int, length: int) -> SelectionState:
    """Selection of ``length`` contiguous items starting at ``start``."""
    return SelectionState(start, frozenset(range(start, start + length)), start)


def delete_targets(state: SelectionState) -> List[int]:
    """Indices a Delete command applies to, ascending.

    The selection wins over the focus; an empty state yields nothing.
    """
    if state.selected_indices:
        return state.sorted_selection()
    if state.focused_index is not None:
        return [state.focused_index]
    return []


def after_delete(deleted: Iterable[int], remaining_count: int) -> SelectionState:
    """Focus the earliest deleted position (clamped); clear the selection."""
    deleted = list(deleted)
    if not deleted or remaining_count <= 0:
        return EMPTY
    focus = min(min(deleted), remaining_count - 1)
    return SelectionState(focus, frozenset(), focus)


def columns_for_width(width: int, breakpoints: Iterable[Tuple[int, int]] = DEFAULT_GRID_BREAKPOINTS) -> int:
    """Grid column count for an available display width in pixels."""
    for min_width, columns in sorted(breakpoints, key=lambda bp: bp[0], reverse=True):
        if width >= min_width:
            return max(1, int(columns))
    return 1


def breakpoints_from_mapping(mapping: Mapping[int, int]) -> Tuple[Tuple[int, int], ...]:
    """Normalize a ``{min_width: columns}`` config mapping to breakpoints."""
    pairs: Set[Tuple[int, int]] = set()
    for width, columns in (mapping or {}).items():
        pairs.add((int(width), int(columns)))
    return tuple(sorted(pairs, reverse=True))
