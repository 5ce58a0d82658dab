"""Top-level package for JExTile, a recursive JSON document editor.

This package hosts the GUI-agnostic editing engine. Front-ends (Tk, web view,
CLI) should only depend on the public API exposed here rather than importing
internal modules directly.
"""

from .ui.controllers.grid_controller import GridController, KeyEvent  # re-export for convenience

__all__: list[str] = [
    "GridController",
    "KeyEvent",
]
