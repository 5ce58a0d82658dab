from __future__ import annotations

"""Exception classes for the JExTile editing engine.

Routine edit failures (nothing selected, nothing to move) are reported through
``OperationResult`` objects rather than exceptions. The classes below cover
the cases where a caller must be told *why* an input was refused.
"""

from typing import Any, Optional

from jextile.core.models import Path


class JExTileError(Exception):
    """Base exception for all JExTile errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidDocumentError(JExTileError):
    """Raised when a loaded value does not contain a list of objects.

    The message is human-readable and suitable for display as-is.
    """


class InvalidRootError(JExTileError):
    """Raised when an edit at the root would not leave a list of objects."""

    def __init__(self, message: str, path: Path = (), value: Any = None) -> None:
        super().__init__(message)
        self.path = path
        self.value = value


class DocumentReadError(JExTileError):
    """Raised when a document file cannot be read or decoded."""

    def __init__(self, file_path: str, cause: Optional[Exception] = None) -> None:
        self.file_path = file_path
        if cause is not None:
            message = f"Could not read JSON document '{file_path}': {cause}"
        else:
            message = f"Could not read JSON document '{file_path}'"
        super().__init__(message, cause)
