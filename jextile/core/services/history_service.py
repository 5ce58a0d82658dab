from __future__ import annotations

"""Undo/redo history of immutable document snapshots.

The history is a single frozen :class:`History` record; :func:`push`,
:func:`undo` and :func:`redo` are pure transitions returning a new record.
:class:`UndoService` holds the current record for callers that prefer an
object API (the grid controller).

Design principles
-----------------
- No UI imports and no I/O.
- Snapshots are the documents themselves. Documents are never mutated once
  stored, so no serialization or copying is needed and undo/redo hand back
  the identical object that was pushed.
- Any push clears the redo timeline.
- Memory usage is bounded by ``max_history`` (oldest entries are evicted).
"""

from dataclasses import dataclass, replace
import logging
from typing import Optional, Tuple

from jextile.core.models import JsonValue

__all__ = ["MAX_HISTORY", "History", "push", "undo", "redo", "UndoService"]

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


@dataclass(frozen=True)
class History:
    """Linear undo/redo timeline.

    Attributes
    ----------
    past :
        Earlier documents, oldest first.
    present :
        The current document, or None when nothing is loaded.
    future :
        Documents available for redo, soonest first.
    max_history :
        Upper bound on ``len(past)``.
    """

    past: Tuple[JsonValue, ...] = ()
    present: Optional[JsonValue] = None
    future: Tuple[JsonValue, ...] = ()
    max_history: int = MAX_HISTORY

    @classmethod
    def start(cls, document: JsonValue, max_history: int = MAX_HISTORY) -> "History":
        return cls((), document, (), max(1, int(max_history)))

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)


def push(history: History, new_document: JsonValue) -> History:
    """Record ``new_document`` as the present state.

    The previous present moves to the end of ``past`` (evicting the oldest
    entry when the bound is exceeded) and ``future`` is cleared. Without a
    present document the history is returned unchanged.
    """
    if history.present is None:
        return history
    past = history.past + (history.present,)
    overflow = len(past) - history.max_history
    if overflow > 0:
        past = past[overflow:]
    return replace(history, past=past, present=new_document, future=())


def undo(history: History) -> History:
    if not history.past:
        return history
    return replace(
        history,
        past=history.past[:-1],
        present=history.past[-1],
        future=(history.present,) + history.future,
    )


def redo(history: History) -> History:
    if not history.future:
        return history
    return replace(
        history,
        past=history.past + (history.present,),
        present=history.future[0],
        future=history.future[1:],
    )


class UndoService:
    """Manage the undo/redo timeline of the loaded document.

    Parameters
    ----------
    max_history : int, default=50
        Maximum number of undo snapshots to keep. Must be >= 1; lower values
        are coerced to 1.

    Notes
    -----
    - ``undo``/``redo`` return True only when the present document changed.
    - No logging of document contents; only timeline sizes are logged.

    Examples
    --------
    >>> svc = UndoService(max_history=10)
    >>> svc.reset([{"id": 1}])
    >>> svc.push_snapshot([])
    >>> svc.undo()
    True
    >>> svc.present
    [{'id': 1}]
    """

    def __init__(self, max_history: int = MAX_HISTORY) -> None:
        self._max_history: int = max(1, int(max_history))
        self._history: History = History(max_history=self._max_history)

    # --------------------------------------------------------------------- API

    @property
    def history(self) -> History:
        return self._history

    @property
    def present(self) -> Optional[JsonValue]:
        return self._history.present

    @property
    def max_history(self) -> int:
        return self._max_history

    def reset(self, document: JsonValue) -> None:
        """Start a fresh timeline whose present is ``document``."""
        self._history = History.start(document, self._max_history)
        logger.debug("History reset")

    def clear(self) -> None:
        """Forget the document and both timelines."""
        self._history = History(max_history=self._max_history)

    def push_snapshot(self, document: JsonValue) -> None:
        before = self._history
        self._history = push(before, document)
        if self._history is before:
            logger.debug("History push ignored: no document loaded")
        else:
            logger.debug("History push: past=%d", len(self._history.past))

    def undo(self) -> bool:
        before = self._history
        self._history = undo(before)
        changed = self._history is not before
        if changed:
            logger.debug("Undo: past=%d future=%d", len(self._history.past), len(self._history.future))
        return changed

    def redo(self) -> bool:
        before = self._history
        self._history = redo(before)
        changed = self._history is not before
        if changed:
            logger.debug("Redo: past=%d future=%d", len(self._history.past), len(self._history.future))
        return changed

    def can_undo(self) -> bool:
        """Return True if an undo operation is currently possible."""
        return self._history.can_undo

    def can_redo(self) -> bool:
        """Return True if a redo operation is currently possible."""
        return self._history.can_redo
