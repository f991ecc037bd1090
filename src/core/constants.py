"""Core constants used across Smelter modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

DEFAULT_WORK_ROOT = Path(tempfile.gettempdir()) / "smelter" / "training"
WORKSPACE_DIR_PREFIX = "run-"
TRAINING_FILE_PREFIX = "labeled-points"
DEFAULT_PARALLELISM = 4
DEFAULT_STORAGE_FORMAT = "parquet"
STORAGE_FORMAT_EXTENSIONS = {"parquet": "parquet", "lance": "lance"}
SUPPORTED_STORAGE_FORMATS = tuple(STORAGE_FORMAT_EXTENSIONS)
LABEL_COLUMN = "label"
FEATURES_COLUMN = "features"
POSITIVE_POLARITY = 1.0
NEGATIVE_POLARITY = 0.0
DEFAULT_NUMBER_VALIDATION_EXAMPLES = 30
PIPELINE_CONFIG_KEY = "pipelineConfig"
GANG_MODEL_NAME = "gang"
MODEL_NAME_PREFIX = "model"
RULES_NAME_PREFIX = "rules"
ALLOY_MANIFEST_FILE_NAME = "alloy_manifest.json"
VALIDATION_EXAMPLES_FILE_NAME = "validation.jsonl"
RULES_FILE_NAME = "rules.json"
TRAINING_CONFIG_FILE_NAME = "training_config.json"
