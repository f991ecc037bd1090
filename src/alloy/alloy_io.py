"""Alloy artifact persistence.

This module writes a stable manifest for every trained alloy so downstream
systems can inspect labels, sub-models, rules, and validation documents
without guessing file names.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from alloy.artifact import Alloy
from alloy.rules import DocumentRules
from core.constants import (
    ALLOY_MANIFEST_FILE_NAME,
    RULES_FILE_NAME,
    TRAINING_CONFIG_FILE_NAME,
    VALIDATION_EXAMPLES_FILE_NAME,
)
from core.errors import AlloyIOError


def save_alloy(alloy: Alloy, output_dir: str | Path) -> Path:
    """Persist alloy metadata, rules, and validation documents.

    Args:
        alloy: Trained alloy.
        output_dir: Destination directory, created when missing.

    Returns:
        Path to the alloy manifest file.

    Raises:
        AlloyIOError: If any file cannot be written.
    """
    target_dir = Path(output_dir).expanduser().resolve()
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise AlloyIOError(f"Failed to create alloy directory {target_dir}: {error}.") from error
    _write_json(target_dir / RULES_FILE_NAME, _rules_payload(alloy))
    _write_validation_examples(target_dir / VALIDATION_EXAMPLES_FILE_NAME, alloy)
    if alloy.training_config is not None:
        _write_json(target_dir / TRAINING_CONFIG_FILE_NAME, dict(alloy.training_config))
    manifest_path = target_dir / ALLOY_MANIFEST_FILE_NAME
    _write_json(manifest_path, _manifest_payload(alloy))
    return manifest_path


def load_alloy_manifest(output_dir: str | Path) -> dict[str, object]:
    """Load a previously written alloy manifest.

    Raises:
        AlloyIOError: If the manifest is missing or invalid.
    """
    manifest_path = Path(output_dir).expanduser().resolve() / ALLOY_MANIFEST_FILE_NAME
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    except OSError as error:
        raise AlloyIOError(f"Failed to read alloy manifest {manifest_path}: {error}.") from error
    except json.JSONDecodeError as error:
        raise AlloyIOError(
            f"Failed to parse alloy manifest {manifest_path}: {error.msg}."
        ) from error
    if not isinstance(payload, dict):
        raise AlloyIOError(f"Invalid alloy manifest at {manifest_path}: expected JSON object.")
    return payload


def _manifest_payload(alloy: Alloy) -> dict[str, object]:
    return {
        "name": alloy.name,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "labels": [asdict(label) for label in alloy.labels],
        "models": {name: sorted(model.models) for name, model in alloy.models.items()},
        "training_summary": asdict(alloy.training_summary),
        "validation_examples_file": VALIDATION_EXAMPLES_FILE_NAME,
        "rules_file": RULES_FILE_NAME,
        "training_config_file": TRAINING_CONFIG_FILE_NAME if alloy.has_training_config else None,
    }


def _rules_payload(alloy: Alloy) -> dict[str, object]:
    return {
        name: {
            "label": model.label,
            "rules": [
                {"expression": expression, "weight": weight} for expression, weight in model.rules
            ],
        }
        for name, model in alloy.gang.models.items()
        if isinstance(model, DocumentRules)
    }


def _write_validation_examples(payload_path: Path, alloy: Alloy) -> None:
    lines = [json.dumps(document, sort_keys=True) for document in alloy.validation_examples]
    text = "\n".join(lines) + "\n" if lines else ""
    try:
        payload_path.write_text(text, encoding="utf-8")
    except OSError as error:
        raise AlloyIOError(
            f"Failed to write validation examples at {payload_path}: {error}."
        ) from error


def _write_json(payload_path: Path, payload: object) -> None:
    try:
        payload_path.write_text(json.dumps(payload, indent=2, default=str) + "\n", encoding="utf-8")
    except OSError as error:
        raise AlloyIOError(
            f"Failed to write alloy file at {payload_path}: {error}. "
            "Check directory permissions and retry."
        ) from error
