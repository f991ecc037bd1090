"""Validation example sampling.

This module draws a small, ordered, duplicate-free prefix of the training
documents for held-out reporting inside the alloy.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Set
from itertools import islice
from typing import Any, Iterable, Iterator

from core.types import Document, DocumentProducer


def create_validation_set(docs: DocumentProducer, num: int) -> list[Document]:
    """Create a validation set of at most ``num`` distinct documents.

    The producer is invoked afresh and consumed lazily, so documents past
    the ``num``-th distinct one are never read.

    Args:
        docs: Replayable document producer.
        num: Maximum number of documents to keep.

    Returns:
        First ``num`` distinct documents in traversal order.
    """
    if num <= 0:
        return []
    return list(islice(iter_distinct_documents(docs()), num))


def iter_distinct_documents(documents: Iterable[Document]) -> Iterator[Document]:
    """Yield documents whose full value has not been seen before.

    Documents sharing a key are confirmed with ``==``.
    """
    seen: dict[Hashable, list[Document]] = {}
    for document in documents:
        bucket = seen.setdefault(document_key(document), [])
        if any(previous == document for previous in bucket):
            continue
        bucket.append(document)
        yield document


def document_key(document: Document) -> Hashable:
    """Build a hashable structural key for one document.

    Equal documents share a key. Containers keep their kind, so a tuple and
    a list with the same items get different keys.

    Args:
        document: JSON-like document.

    Returns:
        Nested frozen representation of the document.
    """
    return _freeze(document)


def _freeze(value: Any) -> Hashable:
    if isinstance(value, Mapping):
        return ("mapping", frozenset((key, _freeze(item)) for key, item in value.items()))
    if isinstance(value, list):
        return ("list", tuple(_freeze(item) for item in value))
    if isinstance(value, tuple):
        return ("tuple", tuple(_freeze(item) for item in value))
    if isinstance(value, Set):
        return ("set", frozenset(_freeze(item) for item in value))
    try:
        hash(value)
    except TypeError:
        return ("unhashable", type(value).__qualname__)
    return value
