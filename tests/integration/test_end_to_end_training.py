"""Integration tests for training data generation and alloy assembly."""

from __future__ import annotations

import json
from pathlib import Path

import pyarrow.parquet as pq

from alloy.alloy_io import load_alloy_manifest, save_alloy
from alloy.trainer import AlloyTrainer
from datagen.document_reader import read_documents
from datagen.generator import LabeledPointDataGenerator
from tests.fixture_paths import fixture_path
from tests.training_fakes import (
    RowCountFitter,
    ZeroVectorPipeline,
    failing_format,
    intent_spam_documents,
    replayable,
)


def test_generated_files_hold_every_labeled_point(smelter_config) -> None:
    """Each label file should contain one row per annotation of that label."""
    with LabeledPointDataGenerator(smelter_config) as generator:
        datasets = generator.get_labeled_point_data(
            ZeroVectorPipeline(), replayable(intent_spam_documents())
        )
        workspace = generator.workspaces[0]
        rows = {
            label: pq.read_table(path).num_rows
            for label, path in (
                (name, Path(dataset.files[0])) for name, dataset in datasets.items()
            )
        }
        polarities = sorted(
            datasets["Intent"].to_table(columns=["label"]).column("label").to_pylist()
        )

    assert (
        rows == {"Intent": 3, "Spam": 1}
        and polarities == [0.0, 1.0, 1.0]
        and not workspace.path.exists()
    )


def test_failed_label_rejects_whole_run(smelter_config) -> None:
    """A failure for one label should return None and remove every label file."""
    generator = LabeledPointDataGenerator(smelter_config, columnar_format=failing_format(1))

    datasets = generator.get_labeled_point_data(
        ZeroVectorPipeline(), replayable(intent_spam_documents())
    )

    assert datasets is None and not generator.workspaces[0].path.exists()


def test_train_and_save_alloy_from_files(smelter_config, tmp_path: Path) -> None:
    """Training from fixture files should produce a saved, deduplicated alloy."""
    payload = json.loads(fixture_path("training/labels_and_rules.json").read_text("utf-8"))
    trainer = AlloyTrainer(LabeledPointDataGenerator(smelter_config), RowCountFitter())

    alloy = trainer.train_alloy(
        "fixture", read_documents(fixture_path("training/documents.jsonl")), payload
    )
    save_alloy(alloy, tmp_path / "alloy")
    manifest = load_alloy_manifest(tmp_path / "alloy")

    assert (
        alloy.gang.models["model.Intent"].rows == 4
        and alloy.gang.models["model.Spam"].rows == 1
        and len(alloy.validation_examples) == 3
        and manifest["models"]["gang"]
        == ["model.Intent", "model.Spam", "rules.Intent", "rules.Spam"]
    )


def test_rules_only_alloy_has_single_rules_model(smelter_config) -> None:
    """Empty fitted models with rules for one label should yield only that rule model."""

    class _NoModels:
        def melt(self, raw_data, data_generator, pipeline_config, task_type):
            return {}

    payload = {
        "rules": [{"label": "A", "expression": "foo", "weight": 0.5}],
        "uuid_to_label": {"id-a": "A"},
        "task_type": "classification.single",
    }
    trainer = AlloyTrainer(LabeledPointDataGenerator(smelter_config), _NoModels())

    alloy = trainer.train_alloy("rules", replayable([{"content": "foo"}]), payload)

    assert list(alloy.gang.models) == ["rules.A"] and alloy.gang.predict(
        {"content": "foo"}
    )["rules.A"].probability == 0.5
