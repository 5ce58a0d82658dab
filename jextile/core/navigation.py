from __future__ import annotations

"""Navigation stack over the document tree.

The stack is an immutable path value: every operation returns a new
:class:`NavigationStack`. The controller resets selection and search whenever
the path it holds changes.
"""

from dataclasses import dataclass
from typing import List, Tuple

from jextile.core.itemizer import is_container
from jextile.core.models import JsonValue, Path, PathSegment

__all__ = ["NavigationStack"]


@dataclass(frozen=True)
class NavigationStack:
    """Current position inside the document as a key/index path."""

    path: Path = ()

    @property
    def depth(self) -> int:
        return len(self.path)

    @property
    def is_root(self) -> bool:
        return not self.path

    def can_drill_into(self, value: JsonValue) -> bool:
        return is_container(value)

    def drill_down(self, name: PathSegment) -> "NavigationStack":
        return NavigationStack(self.path + (name,))

    def drill_up(self) -> "NavigationStack":
        if not self.path:
            return self
        return NavigationStack(self.path[:-1])

    def jump_to(self, depth: int) -> "NavigationStack":
        """Truncate the path to ``depth`` segments (breadcrumb click)."""
        depth = max(0, min(int(depth), len(self.path)))
        if depth == len(self.path):
            return self
        return NavigationStack(self.path[:depth])

    def breadcrumbs(self, root_label: str) -> List[Tuple[str, int]]:
        """Return ``(label, depth)`` pairs from the root to the current node."""
        crumbs = [(root_label, 0)]
        for depth, segment in enumerate(self.path, start=1):
            crumbs.append((str(segment), depth))
        return crumbs

    def child_path(self, name: PathSegment) -> Path:
        return self.path + (name,)

    @property
    def current_name(self) -> PathSegment | None:
        return self.path[-1] if self.path else None
