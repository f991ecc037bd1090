"""Labels-and-rules request parsing.

This module validates the request payload that accompanies training
documents and loads request or configuration files from disk.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, cast

from alloy.rules import parse_rule_record
from core.constants import PIPELINE_CONFIG_KEY
from core.errors import AssemblyError, SmelterDependencyError
from core.types import TrainingRequest


def parse_labels_and_rules(payload: Mapping[str, Any]) -> TrainingRequest:
    """Parse a labels-and-rules payload.

    Expects ``{"rules": [...], "uuid_to_label": {...}, "task_type": "..."}``.

    Args:
        payload: Raw request payload.

    Returns:
        Typed training request.

    Raises:
        AssemblyError: If a required field is missing or mistyped.
    """
    raw_rules = _require_field(payload, "rules", list)
    uuid_to_label = _require_field(payload, "uuid_to_label", dict)
    task_type = _require_field(payload, "task_type", str)
    return TrainingRequest(
        rules=tuple(parse_rule_record(item) for item in raw_rules),
        uuid_to_label=dict(uuid_to_label),
        task_type=task_type,
    )


def extract_pipeline_config(config: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Return the nested pipeline configuration when one was supplied.

    Raises:
        AssemblyError: If the nested value is not an object.
    """
    if config is None or PIPELINE_CONFIG_KEY not in config:
        return None
    pipeline_config = config[PIPELINE_CONFIG_KEY]
    if not isinstance(pipeline_config, Mapping):
        raise AssemblyError(
            f"Invalid training config: '{PIPELINE_CONFIG_KEY}' must be an object."
        )
    return dict(pipeline_config)


def load_payload_file(payload_path: str | Path) -> dict[str, Any]:
    """Load a JSON or YAML object from disk.

    Args:
        payload_path: ``.json``, ``.yaml`` or ``.yml`` file path.

    Returns:
        Parsed object payload.

    Raises:
        AssemblyError: If the file is missing, unparsable, or not an object.
    """
    file_path = Path(payload_path).expanduser().resolve()
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as error:
        raise AssemblyError(
            f"Failed to read {file_path}: {error}. Provide an existing JSON or YAML file."
        ) from error
    if file_path.suffix.lower() in {".yaml", ".yml"}:
        payload = _parse_yaml(file_path, text)
    else:
        payload = _parse_json(file_path, text)
    if not isinstance(payload, dict):
        raise AssemblyError(f"Invalid payload at {file_path}: expected a top-level object.")
    return cast(dict[str, Any], payload)


def _require_field(payload: Mapping[str, Any], field_name: str, expected_type: type) -> Any:
    if field_name not in payload:
        raise AssemblyError(
            f"Invalid labels-and-rules payload: missing required field '{field_name}'."
        )
    value = payload[field_name]
    if not isinstance(value, expected_type):
        raise AssemblyError(
            f"Invalid labels-and-rules payload: '{field_name}' must be "
            f"{expected_type.__name__}, got {type(value).__name__}."
        )
    return value


def _parse_json(file_path: Path, text: str) -> object:
    try:
        return json.loads(text)
    except json.JSONDecodeError as error:
        raise AssemblyError(f"Failed to parse JSON at {file_path}: {error.msg}.") from error


def _parse_yaml(file_path: Path, text: str) -> object:
    try:
        import yaml
    except ImportError as error:  # pragma: no cover - dependency failure
        raise SmelterDependencyError(
            "YAML config support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as error:
        raise AssemblyError(
            f"Failed to parse YAML at {file_path}: {error}. Fix YAML syntax and retry."
        ) from error
