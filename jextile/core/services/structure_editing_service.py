from __future__ import annotations

"""Service layer for structural edits on an in-memory JSON document.

This module provides a UI-agnostic, testable service that encapsulates the
edits a user can make from the item grid: deleting children, reordering
children and replacing a value opened in the detail view.

Scope and guarantees:
- Operates purely on immutable documents: every successful operation returns
  a *new* document in ``OperationResult.document`` and leaves the input
  untouched. Containers off the edited path are shared by reference.
- Conservative behavior with boundary checks; invalid operations return
  OperationResult(success=False, ...) with clear messaging, never raise.
- Root edits are guarded: a result whose root is not a list of objects is
  rejected and the prior document is retained by the caller.

Examples
--------
Basic usage:

    service = StructureEditingService()
    result = service.delete_items(doc, ("tags",), items, [0, 2])
    if result.success:
        doc = result.document
    else:
        print(result.message)

"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from jextile.core.exceptions import InvalidRootError
from jextile.core.itemizer import itemize
from jextile.core.models import Item, JsonValue, Path
from jextile.core.path_resolver import NOT_FOUND, get_at_path, update_document
from jextile.core.services.reorder_service import ReorderResult, compute_reorder

__all__ = ["OperationResult", "StructureEditingService"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Result of a structural editing operation.

    Attributes
    ----------
    success
        Whether the operation completed successfully.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    document
        The new document when ``success`` is True, else None.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None
    document: Optional[JsonValue] = None


class StructureEditingService:
    """Encapsulates structural edit operations on a JSON document.

    Design principles:
    - No UI dependencies, no disk I/O.
    - No exceptions for expected invalid actions; return OperationResult.
    - Item positions handed in are positions in the list the user saw
      (possibly filtered); they are mapped back to real keys/indices through
      the items' names before touching the container.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger(f"{__name__}.StructureEditingService")

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def delete_items(
        self,
        document: JsonValue,
        path: Path,
        visible_items: Sequence[Item],
        positions: Iterable[int],
    ) -> OperationResult:
        """Delete the children shown at ``positions`` of the node at ``path``.

        Arrays lose the matching indices (removed in descending order so
        earlier removals do not shift later ones); objects lose the matching
        keys.
        """
        positions = sorted({p for p in positions if 0 <= p < len(visible_items)})
        logger.info("Edit: delete_items path=%s count=%d", _fmt_path(path), len(positions))
        if not positions:
            logger.info("Edit noop: delete_items nothing selected")
            return OperationResult(False, "Nothing selected to delete.", {"path": path})

        container = get_at_path(document, path)
        if container is NOT_FOUND or not isinstance(container, (list, dict)):
            logger.warning("Edit FAIL: delete_items container_not_found path=%s", _fmt_path(path))
            return OperationResult(False, "Current node is not a container.", {"path": path})

        targets = [visible_items[p] for p in positions]
        if isinstance(container, list):
            new_value = list(container)
            removed = 0
            for index in sorted((int(item.name) for item in targets), reverse=True):
                if 0 <= index < len(new_value):
                    del new_value[index]
                    removed += 1
        else:
            new_value = dict(container)
            removed = 0
            for item in targets:
                if str(item.name) in new_value:
                    del new_value[str(item.name)]
                    removed += 1

        if removed == 0:
            logger.info("Edit noop: delete_items stale targets path=%s", _fmt_path(path))
            return OperationResult(False, "No items deleted.", {"path": path, "deleted": 0})

        result = self._commit(document, path, new_value, "delete_items")
        if not result.success:
            return result
        logger.info("Edit OK: delete_items path=%s deleted=%d", _fmt_path(path), removed)
        return OperationResult(
            True,
            f"Deleted {removed} item{'s' if removed != 1 else ''}.",
            {"path": path, "deleted": removed, "positions": positions, "remaining": _size(new_value)},
            result.document,
        )

    def move_items(
        self,
        document: JsonValue,
        path: Path,
        items: Sequence[Item],
        positions: Iterable[int],
        target: int,
    ) -> OperationResult:
        """Move the children at ``positions`` to ``target`` (insert-before).

        ``items`` must be the unfiltered child list of the node at ``path``.
        """
        logger.info("Edit: move_items path=%s target=%d", _fmt_path(path), target)
        reorder = compute_reorder(items, positions, target)
        if reorder is None:
            logger.info("Edit noop: move_items nothing selected")
            return OperationResult(False, "Nothing selected to move.", {"path": path})
        return self.apply_reorder(document, path, reorder)

    def apply_reorder(self, document: JsonValue, path: Path, reorder: ReorderResult) -> OperationResult:
        """Write a computed reorder back into the node at ``path``."""
        container = get_at_path(document, path)
        if container is NOT_FOUND or not isinstance(container, (list, dict)):
            logger.warning("Edit FAIL: apply_reorder container_not_found path=%s", _fmt_path(path))
            return OperationResult(False, "Current node is not a container.", {"path": path})

        current_names = [item.name for item in itemize(container)]
        if sorted(map(str, current_names)) != sorted(str(item.name) for item in reorder.items):
            # The snapshot the reorder was computed from no longer matches the document.
            logger.warning("Edit FAIL: apply_reorder stale snapshot path=%s", _fmt_path(path))
            return OperationResult(False, "Items changed since the move started.", {"path": path})

        new_value = reorder.container_value(container)
        result = self._commit(document, path, new_value, "apply_reorder")
        if not result.success:
            return result
        logger.info(
            "Edit OK: apply_reorder path=%s insertion=%d moved=%d",
            _fmt_path(path), reorder.insertion_index, reorder.moved_count,
        )
        return OperationResult(
            True,
            f"Moved {reorder.moved_count} item{'s' if reorder.moved_count != 1 else ''}.",
            {"path": path, "insertion_index": reorder.insertion_index, "moved": reorder.moved_count},
            result.document,
        )

    def replace_value(self, document: JsonValue, path: Path, new_value: JsonValue) -> OperationResult:
        """Replace the value at ``path`` (detail view save)."""
        logger.info("Edit: replace_value path=%s", _fmt_path(path))
        result = self._commit(document, path, new_value, "replace_value")
        if result.success:
            logger.info("Edit OK: replace_value path=%s", _fmt_path(path))
            return OperationResult(True, "Value updated.", {"path": path}, result.document)
        return result

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _commit(self, document: JsonValue, path: Path, new_value: JsonValue, op: str) -> OperationResult:
        try:
            new_document = update_document(document, path, new_value)
        except InvalidRootError as exc:
            logger.error("Edit FAIL: %s invalid_root error=%s", op, exc)
            return OperationResult(False, str(exc), {"path": path, "reason": "invalid_root"})
        except (IndexError, ValueError, TypeError) as exc:
            logger.error("Edit FAIL: %s path=%s error=%s", op, _fmt_path(path), exc, exc_info=True)
            return OperationResult(False, "Edit failed.", {"path": path, "error": str(exc)})
        return OperationResult(True, "ok", {"path": path}, new_document)


def _fmt_path(path: Path) -> str:
    return "/" + "/".join(str(segment) for segment in path)


def _size(value: JsonValue) -> int:
    return len(value) if isinstance(value, (list, dict)) else 0
