"""Replayable training document readers.

This module exposes JSONL training files as document producers that
re-open and stream the file on every call.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

from core.errors import DataGenerationError
from core.types import Document, DocumentProducer


def read_documents(source_path: str | Path) -> DocumentProducer:
    """Build a replayable producer over a JSONL training file.

    Args:
        source_path: Path to a JSONL file with one document per line.

    Returns:
        Zero-argument callable yielding documents lazily in file order.

    Raises:
        DataGenerationError: If the file does not exist.
    """
    file_path = Path(source_path).expanduser().resolve()
    if not file_path.is_file():
        raise DataGenerationError(
            f"Failed to read training documents at {file_path}: file does not exist. "
            "Provide a JSONL file with one document per line."
        )

    def _produce() -> Iterator[Document]:
        return _iter_jsonl_documents(file_path)

    return _produce


def _iter_jsonl_documents(file_path: Path) -> Iterator[Document]:
    with file_path.open(encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, 1):
            if not line.strip():
                continue
            yield _parse_jsonl_line(file_path, line, line_number)


def _parse_jsonl_line(file_path: Path, line: str, line_number: int) -> dict[str, Any]:
    """Parse and validate one document line.

    Raises:
        DataGenerationError: If the line is not a JSON object.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise DataGenerationError(
            f"Failed to parse training document at {file_path}:{line_number}: "
            f"{error.msg}. Fix the JSON syntax and retry training."
        ) from error
    if not isinstance(payload, dict):
        raise DataGenerationError(
            f"Invalid training document at {file_path}:{line_number}: "
            "expected a JSON object per line."
        )
    return payload
