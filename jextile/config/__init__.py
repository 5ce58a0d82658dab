"""Configuration files (YAML) and helpers.

`ConfigManager` reads the default files shipped in this folder and merges them
with user overrides; `EditorSettings` is the typed view the engine consumes.
"""

from .manager import ConfigManager
from .settings import DisplayPreferences, EditorSettings

__all__ = [
    "ConfigManager",
    "DisplayPreferences",
    "EditorSettings",
]
