"""Runtime configuration model for Smelter.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_NUMBER_VALIDATION_EXAMPLES,
    DEFAULT_PARALLELISM,
    DEFAULT_STORAGE_FORMAT,
    DEFAULT_WORK_ROOT,
    SUPPORTED_STORAGE_FORMATS,
)
from core.errors import SmelterConfigError


@dataclass(frozen=True)
class SmelterConfig:
    """Validated runtime configuration.

    Attributes:
        work_root: Parent directory for per-run training workspaces.
        parallelism: Number of partitions used for each label dataset.
        storage_format: Columnar format for intermediate training data.
        validation_examples: Maximum number of validation documents kept.
    """

    work_root: Path
    parallelism: int
    storage_format: str
    validation_examples: int

    @classmethod
    def from_env(cls) -> "SmelterConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SmelterConfigError: If environment values are invalid.
        """
        work_root_value = os.getenv("SMELTER_WORK_ROOT", str(DEFAULT_WORK_ROOT))
        parallelism = _parse_int(
            "SMELTER_PARALLELISM",
            os.getenv("SMELTER_PARALLELISM", str(DEFAULT_PARALLELISM)),
            minimum=1,
        )
        validation_examples = _parse_int(
            "SMELTER_VALIDATION_EXAMPLES",
            os.getenv("SMELTER_VALIDATION_EXAMPLES", str(DEFAULT_NUMBER_VALIDATION_EXAMPLES)),
            minimum=0,
        )
        storage_format = validate_storage_format(
            os.getenv("SMELTER_STORAGE_FORMAT", DEFAULT_STORAGE_FORMAT)
        )
        return cls(
            work_root=Path(work_root_value).expanduser().resolve(),
            parallelism=parallelism,
            storage_format=storage_format,
            validation_examples=validation_examples,
        )


def validate_storage_format(raw_value: str) -> str:
    """Validate a columnar storage format name.

    Args:
        raw_value: Requested format name.

    Returns:
        Normalized format name.

    Raises:
        SmelterConfigError: If the format is unsupported.
    """
    storage_format = raw_value.strip().lower()
    if storage_format not in SUPPORTED_STORAGE_FORMATS:
        raise SmelterConfigError(
            f"Unsupported storage format '{raw_value}'. "
            f"Use one of: {', '.join(SUPPORTED_STORAGE_FORMATS)}."
        )
    return storage_format


def _parse_int(variable_name: str, raw_value: str, minimum: int) -> int:
    """Parse one bounded integer environment value.

    Args:
        variable_name: Environment variable name for error context.
        raw_value: Raw string from environment.
        minimum: Smallest accepted value.

    Returns:
        Parsed integer.

    Raises:
        SmelterConfigError: If value is not an integer or is too small.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise SmelterConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a numeric value."
        ) from error
    if value < minimum:
        raise SmelterConfigError(
            f"Invalid {variable_name} value {value}: expected value >= {minimum}."
        )
    return value
