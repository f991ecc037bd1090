"""Unit tests for runtime configuration."""

from __future__ import annotations

import pytest

from core.config import SmelterConfig, validate_storage_format
from core.errors import SmelterConfigError


def test_from_env_reads_overrides(monkeypatch, tmp_path) -> None:
    """Config should parse every supported environment variable."""
    monkeypatch.setenv("SMELTER_WORK_ROOT", str(tmp_path))
    monkeypatch.setenv("SMELTER_PARALLELISM", "8")
    monkeypatch.setenv("SMELTER_STORAGE_FORMAT", "LANCE")
    monkeypatch.setenv("SMELTER_VALIDATION_EXAMPLES", "5")

    config = SmelterConfig.from_env()

    assert (
        config.work_root == tmp_path.resolve()
        and config.parallelism == 8
        and config.storage_format == "lance"
        and config.validation_examples == 5
    )


def test_from_env_uses_defaults(monkeypatch) -> None:
    """Unset variables should fall back to documented defaults."""
    for name in (
        "SMELTER_WORK_ROOT",
        "SMELTER_PARALLELISM",
        "SMELTER_STORAGE_FORMAT",
        "SMELTER_VALIDATION_EXAMPLES",
    ):
        monkeypatch.delenv(name, raising=False)

    config = SmelterConfig.from_env()

    assert config.storage_format == "parquet" and config.validation_examples == 30


def test_from_env_rejects_non_numeric_parallelism(monkeypatch) -> None:
    """Invalid parallelism should raise a config error."""
    monkeypatch.setenv("SMELTER_PARALLELISM", "many")

    with pytest.raises(SmelterConfigError):
        SmelterConfig.from_env()


def test_from_env_rejects_zero_parallelism(monkeypatch) -> None:
    """Parallelism below one should raise a config error."""
    monkeypatch.setenv("SMELTER_PARALLELISM", "0")

    with pytest.raises(SmelterConfigError):
        SmelterConfig.from_env()


def test_validate_storage_format_rejects_unknown_format() -> None:
    """Unknown storage formats should raise a config error."""
    with pytest.raises(SmelterConfigError):
        validate_storage_format("csv")
