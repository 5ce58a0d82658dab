from __future__ import annotations

"""Editing services (history, reorder, structural edits).

Services are UI-agnostic and operate on immutable documents.
"""

from .history_service import UndoService  # noqa: F401
from .reorder_service import DragSession  # noqa: F401
from .structure_editing_service import StructureEditingService  # noqa: F401

__all__: list[str] = [
    "UndoService",
    "DragSession",
    "StructureEditingService",
]
