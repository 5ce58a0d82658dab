from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, List, Optional, Tuple

from jextile.config.settings import EditorSettings
from jextile.core import selection as sel
from jextile.core.document_loader import normalize_document
from jextile.core.exceptions import InvalidDocumentError
from jextile.core.itemizer import filter_items, is_container, item_preview, itemize, resolve_heading
from jextile.core.models import DetailView, DocumentMeta, Item, JsonValue, Path, SelectionState
from jextile.core.navigation import NavigationStack
from jextile.core.path_resolver import NOT_FOUND, get_at_path
from jextile.core.services.history_service import UndoService
from jextile.core.services.reorder_service import DragSession, block_target
from jextile.core.services.structure_editing_service import OperationResult, StructureEditingService

__all__ = ["KeyEvent", "GridController"]

logger = logging.getLogger(__name__)

SaveHandler = Callable[[JsonValue, DocumentMeta], Any]


@dataclass(frozen=True)
class KeyEvent:
    """Toolkit-neutral keyboard event.

    ``key`` uses DOM-style names: single characters (``"s"``, ``"d"``) and
    ``"Enter"``, ``"Tab"``, ``"Escape"``, ``"Delete"``, ``"ArrowUp"`` ...
    """

    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def command(self) -> bool:
        """Ctrl on Linux/Windows, Cmd on macOS."""
        return self.ctrl or self.meta


class GridController:
    """Single state container for navigating and editing a JSON document.

    The controller holds the transient UI state (path, search term, selection,
    drag gesture, detail view) and delegates document changes to the editing
    service and the undo service. It contains no UI toolkit code; a front-end
    forwards pointer and keyboard events and re-renders from the query
    properties (:attr:`visible_items`, :attr:`selection`, :meth:`breadcrumbs`).

    Parameters
    ----------
    editing_service : StructureEditingService, optional
        Service that performs structural edits.
    undo_service : UndoService, optional
        History of document snapshots. Created from ``settings`` if omitted.
    settings : EditorSettings, optional
        Grid layout, history size and display preferences. Defaults to the
        built-in defaults (no config files are read).
    save_handler : callable, optional
        ``save_handler(document, meta)`` collaborator invoked by :meth:`save`
        (e.g. a save dialog followed by :func:`jextile.core.document_io.write_document`).

    Notes
    -----
    - Routine validation failures do not raise; edit methods return an
      OperationResult and navigation methods return booleans.
    - Items and selection are derived from the current document on every
      query; they are never stored in the history.
    """

    def __init__(
        self,
        editing_service: Optional[StructureEditingService] = None,
        undo_service: Optional[UndoService] = None,
        settings: Optional[EditorSettings] = None,
        save_handler: Optional[SaveHandler] = None,
        display_width: int = 1280,
    ) -> None:
        # Dependencies
        self.settings: EditorSettings = settings or EditorSettings()
        self.editing_service: StructureEditingService = editing_service or StructureEditingService()
        self.undo_service: UndoService = undo_service or UndoService(self.settings.max_history)
        self.save_handler: Optional[SaveHandler] = save_handler

        # Transient UI-related state
        self.meta: Optional[DocumentMeta] = None
        self.navigation: NavigationStack = NavigationStack()
        self.search_term: str = ""
        self.search_focused: bool = False
        self.selection: SelectionState = sel.EMPTY
        self.detail: Optional[DetailView] = None
        self.error: Optional[str] = None
        self.display_width: int = display_width
        self._drag = DragSession()

    # ---------------------------------------------------------------------------------
    # Document lifecycle
    # ---------------------------------------------------------------------------------

    def load_document(self, value: JsonValue, name: str, size: int = 0) -> None:
        """Replace the edited document with a freshly decoded value.

        Raises
        ------
        InvalidDocumentError
            If ``value`` holds no list of objects. The previous document and
            all controller state are left untouched.
        """
        try:
            document = normalize_document(value)
        except InvalidDocumentError as exc:
            self.error = str(exc)
            logger.warning("Load rejected: %s (%s)", name, exc)
            raise

        self.undo_service.reset(document)
        self.meta = DocumentMeta(name, int(size))
        self.error = None
        self.detail = None
        self._drag.cancel()
        self._set_navigation(NavigationStack(), force=True)
        logger.info("Loaded document %s: %d objects", name, len(document))

    def reset_document(self) -> None:
        """Forget the document and return to the empty state."""
        self.undo_service.clear()
        self.meta = None
        self.error = None
        self.detail = None
        self._drag.cancel()
        self._set_navigation(NavigationStack(), force=True)
        logger.info("Document reset")

    @property
    def has_document(self) -> bool:
        return self.undo_service.present is not None

    def current_document(self) -> Optional[JsonValue]:
        """The present document snapshot (safe to serialize at any time)."""
        return self.undo_service.present

    def save(self) -> bool:
        """Hand the current document to the save collaborator."""
        document = self.current_document()
        if document is None or self.meta is None or self.save_handler is None:
            return False
        try:
            self.save_handler(document, self.meta)
        except OSError as exc:
            logger.error("Export failed: %s", exc, exc_info=True)
            self.error = f"Export failed: {exc}"
            return False
        logger.info("Saved document %s", self.meta.name)
        return True

    # ---------------------------------------------------------------------------------
    # Derived view state
    # ---------------------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self.navigation.path

    @property
    def current_value(self) -> JsonValue:
        """Value at the current path, or None if the path no longer resolves."""
        document = self.current_document()
        if document is None:
            return None
        value = get_at_path(document, self.path)
        return None if value is NOT_FOUND else value

    @property
    def all_items(self) -> List[Item]:
        return itemize(self.current_value)

    @property
    def visible_items(self) -> List[Item]:
        return filter_items(self.all_items, self.search_term)

    @property
    def is_filtering(self) -> bool:
        return bool(self.search_term)

    @property
    def columns(self) -> int:
        return sel.columns_for_width(self.display_width, self.settings.grid_breakpoints)

    @property
    def drag_target(self) -> Optional[int]:
        """Advisory drop position for drawing the drop indicator."""
        return self._drag.target

    def breadcrumbs(self) -> List[Tuple[str, int]]:
        root_label = self.meta.name if self.meta else ""
        return self.navigation.breadcrumbs(root_label)

    def item_heading(self, item: Item) -> Tuple[Optional[JsonValue], Optional[JsonValue]]:
        """Title and subtitle for an object item per the display preferences."""
        prefs = self.settings.display
        title = resolve_heading(item.value, prefs.title_key) if prefs.show_title else None
        subtitle = resolve_heading(item.value, prefs.subtitle_key) if prefs.show_subtitle else None
        return title, subtitle

    def item_preview(self, item: Item) -> str:
        return item_preview(item.value, self.settings.preview_length)

    def can_undo(self) -> bool:
        return self.undo_service.can_undo()

    def can_redo(self) -> bool:
        return self.undo_service.can_redo()

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    def _set_navigation(self, navigation: NavigationStack, force: bool = False) -> bool:
        """Switch path; any change resets selection, search and drag."""
        if navigation == self.navigation and not force:
            return False
        self.navigation = navigation
        self.selection = sel.EMPTY
        self.search_term = ""
        self.search_focused = False
        self._drag.cancel()
        return True

    def _sync_selection(self) -> None:
        self.selection = sel.clamp(self.selection, len(self.visible_items))

    def _recorded_edit(self, mutate: Callable[[JsonValue], OperationResult]) -> OperationResult:
        """Run an edit against the present document and push its result.

        The edit receives the present document and returns an OperationResult
        carrying the new document; only successful results reach the history.
        """
        document = self.current_document()
        if document is None:
            return OperationResult(success=False, message="No document loaded")
        result = mutate(document)
        if result.success and result.document is not None:
            self.undo_service.push_snapshot(result.document)
            self.error = None
        elif result.details and result.details.get("reason") == "invalid_root":
            self.error = result.message
        return result

    def _item_at(self, index: int) -> Optional[Item]:
        items = self.visible_items
        if 0 <= index < len(items):
            return items[index]
        return None

    # ---------------------------------------------------------------------------------
    # History
    # ---------------------------------------------------------------------------------

    def undo(self) -> bool:
        changed = self.undo_service.undo()
        if changed:
            self._sync_selection()
        return changed

    def redo(self) -> bool:
        changed = self.undo_service.redo()
        if changed:
            self._sync_selection()
        return changed

    # ---------------------------------------------------------------------------------
    # Navigation
    # ---------------------------------------------------------------------------------

    def activate_item(self, index: int) -> bool:
        """Drill into item ``index`` or open it in the detail view.

        Containers are drilled into; primitives open the detail view without
        changing the path.
        """
        item = self._item_at(index)
        if item is None:
            return False
        if is_container(item.value):
            return self._set_navigation(self.navigation.drill_down(item.name))
        self.detail = DetailView(item.value, item.name, self.navigation.child_path(item.name))
        return True

    def drill_down(self) -> bool:
        """Drill into the focused item."""
        if self.selection.focused_index is None:
            return False
        return self.activate_item(self.selection.focused_index)

    def drill_up(self) -> bool:
        if self.navigation.is_root:
            return False
        return self._set_navigation(self.navigation.drill_up())

    def jump_to(self, depth: int) -> bool:
        """Breadcrumb navigation: truncate the path to ``depth`` segments."""
        return self._set_navigation(self.navigation.jump_to(depth))

    # ---------------------------------------------------------------------------------
    # Search
    # ---------------------------------------------------------------------------------

    def set_search_term(self, term: str) -> List[Item]:
        self.search_term = term or ""
        if self.search_term:
            self._drag.cancel()
        self._sync_selection()
        return self.visible_items

    def focus_search(self) -> None:
        self.search_focused = True

    def blur_search(self) -> None:
        self.search_focused = False

    # ---------------------------------------------------------------------------------
    # Selection (pointer)
    # ---------------------------------------------------------------------------------

    def click_item(self, index: int, ctrl: bool = False, shift: bool = False) -> SelectionState:
        if self._item_at(index) is None:
            return self.selection
        if ctrl:
            self.selection = sel.toggle_click(self.selection, index)
        elif shift:
            self.selection = sel.range_click(self.selection, index)
        else:
            self.selection = sel.click(self.selection, index)
        return self.selection

    def click_background(self) -> None:
        self.selection = sel.clear(self.selection)

    def set_display_width(self, width: int) -> None:
        self.display_width = int(width)

    # ---------------------------------------------------------------------------------
    # Editing
    # ---------------------------------------------------------------------------------

    def delete_selection(self) -> OperationResult:
        """Delete the selected items, or the focused one when none is selected."""
        return self._delete_positions(sel.delete_targets(self.selection))

    def delete_item(self, index: int) -> OperationResult:
        """Delete from an item's own delete control.

        Deleting a selected item deletes the whole selection; deleting an
        unselected one deletes just that item.
        """
        if index in self.selection.selected_indices:
            return self._delete_positions(self.selection.sorted_selection())
        return self._delete_positions([index])

    def _delete_positions(self, positions: List[int]) -> OperationResult:
        items = self.visible_items
        positions = [p for p in positions if 0 <= p < len(items)]
        if not positions:
            return OperationResult(success=False, message="No items selected to delete")
        path = self.path
        result = self._recorded_edit(
            lambda doc: self.editing_service.delete_items(doc, path, items, positions)
        )
        if result.success:
            self.selection = sel.after_delete(positions, len(self.visible_items))
        return result

    def move_selection(self, target: int) -> OperationResult:
        """Move the selected block so it starts before position ``target``."""
        if self.is_filtering:
            return OperationResult(success=False, message="Cannot reorder while filtering")
        positions = self.selection.sorted_selection()
        if not positions:
            return OperationResult(success=False, message="No items selected to move")
        path = self.path
        items = self.all_items
        result = self._recorded_edit(
            lambda doc: self.editing_service.move_items(doc, path, items, positions, target)
        )
        if result.success:
            insertion = result.details["insertion_index"]
            self.selection = sel.select_block(insertion, result.details["moved"])
        return result

    def move_block(self, direction: str) -> OperationResult:
        """Shift the selection block one position ``backward`` or ``forward``."""
        target = block_target(self.selection.selected_indices, direction)
        if target is None:
            return OperationResult(success=False, message="No items selected to move")
        return self.move_selection(target)

    # ---------------------------------------------------------------------------------
    # Drag and drop
    # ---------------------------------------------------------------------------------

    def begin_drag(self, index: int) -> bool:
        """Start a drag gesture on item ``index``; refused while filtering."""
        if self.is_filtering:
            return False
        items = self.all_items
        context = self._drag.begin(index, self.selection.selected_indices, items)
        if context is None:
            return False
        if index not in self.selection.selected_indices:
            self.selection = sel.single(index)
        return True

    def drag_over(self, index: int, pointer_x: float, item_left: float, item_width: float) -> Optional[int]:
        return self._drag.hover(index, pointer_x, item_left, item_width)

    def drop(self) -> None:
        self._drag.drop()

    def end_drag(self) -> OperationResult:
        """Commit the gesture. Always call this, whether or not a drop fired."""
        reorder = self._drag.end()
        if reorder is None or self.is_filtering:
            return OperationResult(success=False, message="Drag discarded")
        path = self.path
        result = self._recorded_edit(
            lambda doc: self.editing_service.apply_reorder(doc, path, reorder)
        )
        if result.success:
            self.selection = reorder.selection
        return result

    def cancel_drag(self) -> None:
        self._drag.cancel()

    # ---------------------------------------------------------------------------------
    # Detail view
    # ---------------------------------------------------------------------------------

    def open_detail(self, index: Optional[int] = None) -> Optional[DetailView]:
        """Open an item (or, without an index, the current node) in detail."""
        if not self.has_document:
            return None
        if index is not None:
            item = self._item_at(index)
            if item is None:
                return None
            self.detail = DetailView(item.value, item.name, self.navigation.child_path(item.name))
        else:
            name = self.navigation.current_name
            if name is None:
                name = self.meta.name if self.meta else ""
            self.detail = DetailView(self.current_value, name, self.path)
        return self.detail

    def close_detail(self) -> None:
        self.detail = None

    def save_detail(self, new_value: JsonValue) -> OperationResult:
        """Write the edited detail value back at its path."""
        if self.detail is None:
            return OperationResult(success=False, message="No value open")
        full_path = self.detail.full_path
        result = self._recorded_edit(
            lambda doc: self.editing_service.replace_value(doc, full_path, new_value)
        )
        if result.success:
            self.detail = None
            self._sync_selection()
        return result

    # ---------------------------------------------------------------------------------
    # Keyboard surface
    # ---------------------------------------------------------------------------------

    def escape(self) -> bool:
        if self.search_focused:
            self.blur_search()
            return True
        if not self.selection.is_empty:
            self.selection = sel.clear(self.selection)
            return True
        return False

    def handle_key(self, event: KeyEvent) -> bool:
        """Dispatch a key press; return True when the event was consumed."""
        key = event.key
        lowered = key.lower()

        # The detail editor handles its own save and undo shortcuts
        if self.detail is not None:
            return False

        if event.command and lowered == "s":
            self.save()
            return True

        if event.shift and key in ("Enter", "Tab"):
            self.drill_up()
            return True

        if self.search_focused:
            # The search field keeps its own editing keys (including native undo)
            if key == "Escape":
                return self.escape()
            return False

        if event.command and lowered == "z":
            if event.shift:
                self.redo()
            else:
                self.undo()
            return True
        if event.command and lowered == "y":
            self.redo()
            return True

        if key == "s" and not event.command:
            self.focus_search()
            return True

        if key == "Escape":
            return self.escape()

        if key == "d" and not event.command:
            self.open_detail(self.selection.focused_index)
            return True

        if key in ("Enter", "Tab") and self.selection.focused_index is not None:
            self.drill_down()
            return True

        if key == "Delete" and not event.shift and not event.ctrl:
            self.delete_selection()
            return True

        count = len(self.visible_items)
        if count == 0 or key not in sel.ARROW_KEYS:
            return False

        if event.ctrl:
            if self.selection.focused_index is None or self.is_filtering or not self.selection.selected_indices:
                return False
            direction = "backward" if key in ("ArrowLeft", "ArrowUp") else "forward"
            self.move_block(direction)
            return True

        self.selection = sel.move_focus(self.selection, key, count, self.columns, extend=event.shift)
        return True
