from .grid_controller import GridController, KeyEvent  # noqa: F401

__all__ = ["GridController", "KeyEvent"]
