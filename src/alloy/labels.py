"""Label resolution helpers."""

from __future__ import annotations

from typing import Mapping

from core.errors import AssemblyError
from core.types import Label


def resolve_labels(uuid_to_label: Mapping[str, object]) -> list[Label]:
    """Create one label per ``uuid -> name`` entry.

    Args:
        uuid_to_label: Mapping of label identifier to label name.

    Returns:
        Labels in mapping order; callers must not rely on that order.

    Raises:
        AssemblyError: If an identifier or name is not a string.
    """
    labels: list[Label] = []
    for uuid, label_name in uuid_to_label.items():
        if not isinstance(uuid, str) or not isinstance(label_name, str):
            raise AssemblyError(
                f"Invalid label entry {uuid!r} -> {label_name!r}: "
                "expected string identifier and string name."
            )
        labels.append(Label(uuid=uuid, name=label_name))
    return labels
