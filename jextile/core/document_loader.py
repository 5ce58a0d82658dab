from __future__ import annotations

"""Normalize freshly decoded JSON into an editable document.

A document is always a list of objects. Loaded values are coerced into that
shape where there is an obvious reading of them and rejected otherwise:

- a list keeps only its object entries;
- an object that holds a non-empty list of objects (the first such value)
  contributes that list; any other object is wrapped as a one-element list;
- primitives and ``None`` are rejected.
"""

import logging
from typing import List

from jextile.core.exceptions import InvalidDocumentError
from jextile.core.models import JsonValue

__all__ = ["EMPTY_DOCUMENT_MESSAGE", "normalize_document"]

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT_MESSAGE = "The JSON file does not contain a valid list of objects to display."


def _embedded_list(value: dict) -> List[dict] | None:
    for candidate in value.values():
        if isinstance(candidate, list) and candidate and isinstance(candidate[0], dict):
            return candidate
    return None


def normalize_document(value: JsonValue) -> List[dict]:
    """Return the list of objects to edit for a decoded JSON ``value``.

    Raises
    ------
    InvalidDocumentError
        If no non-empty list of objects can be derived from ``value``.
    """
    document: List[dict] = []
    if isinstance(value, list):
        document = [entry for entry in value if isinstance(entry, dict)]
        if len(document) != len(value):
            logger.info("Load: dropped %d non-object root entries", len(value) - len(document))
    elif isinstance(value, dict):
        embedded = _embedded_list(value)
        if embedded is not None:
            logger.info("Load: using embedded list of %d objects", len(embedded))
            document = [entry for entry in embedded if isinstance(entry, dict)]
        else:
            document = [value]

    if not document:
        raise InvalidDocumentError(EMPTY_DOCUMENT_MESSAGE)
    return document
