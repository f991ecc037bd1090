"""Unit tests for label resolution."""

from __future__ import annotations

import pytest

from alloy.labels import resolve_labels
from core.errors import AssemblyError
from core.types import Label


def test_resolve_labels_creates_one_label_per_entry() -> None:
    """Each identifier should become one label."""
    labels = resolve_labels({"id-1": "Intent", "id-2": "Spam"})

    assert set(labels) == {Label("id-1", "Intent"), Label("id-2", "Spam")}


def test_resolve_labels_rejects_non_string_names() -> None:
    """Non-string label names should raise an assembly error."""
    with pytest.raises(AssemblyError):
        resolve_labels({"id-1": 7})
