from __future__ import annotations

"""Typed view over the ``editor`` configuration section."""

from dataclasses import dataclass
import logging
from typing import Any, Dict, Optional, Tuple

from jextile.core.selection import DEFAULT_GRID_BREAKPOINTS, breakpoints_from_mapping
from jextile.core.services.history_service import MAX_HISTORY

__all__ = ["DisplayPreferences", "EditorSettings"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayPreferences:
    """Which object fields to surface as an item's title/subtitle."""

    show_title: bool = False
    show_subtitle: bool = False
    title_key: str = "Title"
    subtitle_key: str = "Subtitle"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DisplayPreferences":
        data = data or {}
        return cls(
            show_title=bool(data.get("show_title", False)),
            show_subtitle=bool(data.get("show_subtitle", False)),
            title_key=str(data.get("title_key") or "Title"),
            subtitle_key=str(data.get("subtitle_key") or "Subtitle"),
        )


@dataclass(frozen=True)
class EditorSettings:
    max_history: int = MAX_HISTORY
    grid_breakpoints: Tuple[Tuple[int, int], ...] = DEFAULT_GRID_BREAKPOINTS
    preview_length: int = 30
    display: DisplayPreferences = DisplayPreferences()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EditorSettings":
        """Build settings from a config mapping, falling back per field."""
        data = data or {}
        try:
            max_history = max(1, int(data.get("max_history", MAX_HISTORY)))
        except (TypeError, ValueError):
            logger.warning("Invalid max_history %r; using %d", data.get("max_history"), MAX_HISTORY)
            max_history = MAX_HISTORY

        breakpoints = DEFAULT_GRID_BREAKPOINTS
        raw_breakpoints = data.get("grid_breakpoints")
        if isinstance(raw_breakpoints, dict) and raw_breakpoints:
            try:
                breakpoints = breakpoints_from_mapping(raw_breakpoints)
            except (TypeError, ValueError):
                logger.warning("Invalid grid_breakpoints %r; using defaults", raw_breakpoints)

        try:
            preview_length = max(1, int(data.get("preview_length", 30)))
        except (TypeError, ValueError):
            preview_length = 30

        return cls(
            max_history=max_history,
            grid_breakpoints=breakpoints,
            preview_length=preview_length,
            display=DisplayPreferences.from_dict(data.get("display")),
        )

    @classmethod
    def from_config(cls) -> "EditorSettings":
        from jextile.config.manager import ConfigManager

        return cls.from_dict(ConfigManager().get_editor_config())
