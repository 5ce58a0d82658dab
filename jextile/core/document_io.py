from __future__ import annotations

"""File collaborator: read JSON documents from disk and write them back.

The editing engine never touches the filesystem itself; hosts use these
helpers to feed :meth:`GridController.load_document` and as the controller's
save handler.
"""

import json
import logging
from pathlib import Path
from typing import Tuple, Union

from jextile.core.exceptions import DocumentReadError
from jextile.core.models import DocumentMeta, JsonValue

__all__ = ["read_document", "dumps_document", "write_document", "make_save_handler"]

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_document(file_path: PathLike) -> Tuple[JsonValue, str, int]:
    """Decode the JSON file at ``file_path``.

    Returns
    -------
    tuple
        ``(value, name, size)`` ready for ``load_document``.

    Raises
    ------
    DocumentReadError
        If the file cannot be read or is not well-formed JSON.
    """
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Read failed: %s (%s)", path, exc)
        raise DocumentReadError(str(path), exc) from exc
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Malformed JSON in %s: %s", path, exc)
        raise DocumentReadError(str(path), exc) from exc
    size = path.stat().st_size
    logger.info("Read document %s (%d bytes)", path.name, size)
    return value, path.name, size


def dumps_document(document: JsonValue) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


def write_document(file_path: PathLike, document: JsonValue) -> Path:
    """Write ``document`` as two-space indented JSON; return the path written."""
    path = Path(file_path)
    path.write_text(dumps_document(document), encoding="utf-8")
    logger.info("Wrote document %s", path)
    return path


def make_save_handler(directory: PathLike):
    """Save handler writing into ``directory`` under the document's own name.

    Stands in for a native save dialog when the host has none.
    """
    target_dir = Path(directory)

    def _save(document: JsonValue, meta: DocumentMeta) -> Path:
        name = meta.name or "data.json"
        return write_document(target_dir / name, document)

    return _save
