"""Unit tests for alloy artifact persistence."""

from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType

import pytest

from alloy.alloy_io import load_alloy_manifest, save_alloy
from alloy.artifact import Alloy, build_training_summary
from alloy.gang import merge_rules_with_models
from core.errors import AlloyIOError
from core.types import Label
from tests.training_fakes import RowCountModel


def _alloy(training_config=None) -> Alloy:
    labels = [Label(uuid="id-a", name="A"), Label(uuid="id-b", name="B")]
    gang = merge_rules_with_models(
        {"A": RowCountModel("A", 2)},
        {"B": [("/ba+d/", 0.8)]},
    )
    validation = [{"content": "bad"}, {"content": "good"}]
    return Alloy(
        name="demo",
        labels=tuple(labels),
        models=MappingProxyType({"gang": gang}),
        validation_examples=tuple(validation),
        training_summary=build_training_summary(labels, gang, validation),
        training_config=training_config,
    )


def test_save_alloy_writes_manifest_with_sub_models(tmp_path: Path) -> None:
    """Manifest should list labels and sorted gang sub-model names."""
    manifest_path = save_alloy(_alloy(), tmp_path / "alloy")
    manifest = load_alloy_manifest(tmp_path / "alloy")

    assert (
        manifest_path.name == "alloy_manifest.json"
        and manifest["name"] == "demo"
        and manifest["models"] == {"gang": ["model.A", "rules.B"]}
        and [label["name"] for label in manifest["labels"]] == ["A", "B"]
    )


def test_save_alloy_writes_rules_and_validation_files(tmp_path: Path) -> None:
    """Rules and validation documents should be persisted next to the manifest."""
    save_alloy(_alloy(), tmp_path)
    rules = json.loads((tmp_path / "rules.json").read_text(encoding="utf-8"))
    lines = (tmp_path / "validation.jsonl").read_text(encoding="utf-8").splitlines()

    assert rules == {
        "rules.B": {"label": "B", "rules": [{"expression": "/ba+d/", "weight": 0.8}]}
    } and [json.loads(line) for line in lines] == [{"content": "bad"}, {"content": "good"}]


def test_save_alloy_skips_training_config_when_absent(tmp_path: Path) -> None:
    """No training config file should be written without a supplied config."""
    save_alloy(_alloy(), tmp_path)
    manifest = load_alloy_manifest(tmp_path)

    assert manifest["training_config_file"] is None and not (
        tmp_path / "training_config.json"
    ).exists()


def test_save_alloy_writes_training_config_when_present(tmp_path: Path) -> None:
    """Supplied training config should be written verbatim."""
    save_alloy(_alloy({"pipelineConfig": {"ngrams": 2}}), tmp_path)
    payload = json.loads((tmp_path / "training_config.json").read_text(encoding="utf-8"))

    assert payload == {"pipelineConfig": {"ngrams": 2}}


def test_load_alloy_manifest_missing_raises(tmp_path: Path) -> None:
    """Loading from a directory without a manifest should fail."""
    with pytest.raises(AlloyIOError):
        load_alloy_manifest(tmp_path)


def test_load_alloy_manifest_invalid_json_raises(tmp_path: Path) -> None:
    """Malformed manifest JSON should fail with an alloy IO error."""
    (tmp_path / "alloy_manifest.json").write_text("{broken", encoding="utf-8")

    with pytest.raises(AlloyIOError):
        load_alloy_manifest(tmp_path)
