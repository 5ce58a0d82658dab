from __future__ import annotations

"""Path-based addressing into a JSON document.

A path is a tuple of object keys (``str``) and array indices (``int``) leading
from the document root to a subtree. ``set_at_path`` is copy-on-write along
the path only: every container on the path is shallow-copied, every subtree
off the path is reused by reference. Per-edit allocation is therefore bounded
by path depth rather than document size.
"""

import logging
from typing import Iterable

from jextile.core.exceptions import InvalidRootError
from jextile.core.models import JsonValue, Path, PathSegment

__all__ = [
    "NOT_FOUND",
    "get_at_path",
    "set_at_path",
    "update_document",
    "is_valid_root",
]

logger = logging.getLogger(__name__)


class _NotFound:
    """Sentinel returned by :func:`get_at_path` for unresolvable paths."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND = _NotFound()


def _child(container: JsonValue, segment: PathSegment) -> JsonValue:
    if isinstance(container, list):
        if isinstance(segment, int) and not isinstance(segment, bool) and 0 <= segment < len(container):
            return container[segment]
        return NOT_FOUND
    if isinstance(container, dict):
        return container.get(str(segment), NOT_FOUND)
    return NOT_FOUND


def get_at_path(document: JsonValue, path: Iterable[PathSegment]) -> JsonValue:
    """Return the subtree at ``path`` or :data:`NOT_FOUND`.

    Paths built by drilling into existing containers always resolve; the
    sentinel only shows up for stale paths (e.g. after an undo removed the
    node being viewed).
    """
    current = document
    for segment in path:
        current = _child(current, segment)
        if current is NOT_FOUND:
            return NOT_FOUND
    return current


def _empty_for(next_segment: PathSegment) -> JsonValue:
    return [] if isinstance(next_segment, int) and not isinstance(next_segment, bool) else {}


def _set(node: JsonValue, path: Path, value: JsonValue) -> JsonValue:
    if not path:
        return value

    head, rest = path[0], path[1:]

    if isinstance(node, list):
        copy = list(node)
        index = int(head)
        existing = copy[index] if 0 <= index < len(copy) else NOT_FOUND
        if existing is NOT_FOUND:
            existing = _empty_for(rest[0]) if rest else None
        new_child = _set(existing, rest, value)
        if index == len(copy):
            copy.append(new_child)
        elif 0 <= index < len(copy):
            copy[index] = new_child
        else:
            raise IndexError(f"Index {index} out of range for array of length {len(copy)}")
        return copy

    if isinstance(node, dict):
        copy = dict(node)
        key = str(head)
        existing = copy.get(key, NOT_FOUND)
        if existing is NOT_FOUND:
            existing = _empty_for(rest[0]) if rest else None
        copy[key] = _set(existing, rest, value)
        return copy

    # Primitive (or missing) node on the path: synthesize a container for it
    # from the type of the segment that indexes into it.
    return _set(_empty_for(head), path, value)


def set_at_path(document: JsonValue, path: Iterable[PathSegment], value: JsonValue) -> JsonValue:
    """Return a new document with ``value`` stored at ``path``.

    An empty path returns ``value`` itself. ``document`` is never mutated.
    """
    return _set(document, tuple(path), value)


def is_valid_root(value: JsonValue) -> bool:
    """Return True if ``value`` is a list whose entries are all objects."""
    return isinstance(value, list) and all(isinstance(entry, dict) for entry in value)


def update_document(document: JsonValue, path: Iterable[PathSegment], value: JsonValue) -> JsonValue:
    """Set ``value`` at ``path`` and enforce the root shape for root edits.

    Raises
    ------
    InvalidRootError
        If ``path`` is empty and ``value`` is not a list of objects. The
        caller keeps its previous document.
    """
    path = tuple(path)
    new_root = set_at_path(document, path, value)
    if not path and not is_valid_root(new_root):
        logger.debug("Root update rejected: type=%s", type(new_root).__name__)
        raise InvalidRootError("Root update failed validation: must be an array of objects.", path, value)
    return new_root
