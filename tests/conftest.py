"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
for _path in (_PROJECT_ROOT / "src", _PROJECT_ROOT):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from core.config import SmelterConfig  # noqa: E402


@pytest.fixture
def smelter_config(tmp_path: Path) -> SmelterConfig:
    """Runtime config rooted in the test temp directory."""
    return SmelterConfig(
        work_root=tmp_path / "work",
        parallelism=2,
        storage_format="parquet",
        validation_examples=30,
    )
