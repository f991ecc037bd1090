"""Unit tests for gang ensemble assembly."""

from __future__ import annotations

from alloy.gang import merge_rules_with_models
from alloy.rules import DocumentRules
from tests.training_fakes import RowCountModel


def test_merge_rules_only_yields_single_rules_sub_model() -> None:
    """Rules without statistical models should produce one rules sub-model."""
    gang = merge_rules_with_models({}, {"A": [("foo", 1.0)]})

    assert list(gang.models) == ["rules.A"] and isinstance(gang.models["rules.A"], DocumentRules)


def test_merge_keeps_model_and_rules_for_same_label() -> None:
    """A label with both a model and rules should get two distinct sub-models."""
    gang = merge_rules_with_models({"A": RowCountModel("A", 3)}, {"A": [("foo", 1.0)]})

    assert set(gang.models) == {"model.A", "rules.A"}


def test_merge_tolerates_mismatched_label_sets() -> None:
    """Labels present in only one input should still be assembled."""
    gang = merge_rules_with_models({"A": RowCountModel("A", 1)}, {"B": [("bar", 0.5)]})

    assert set(gang.models) == {"model.A", "rules.B"} and len(gang) == 2


def test_gang_predict_fans_out_to_every_sub_model() -> None:
    """Gang predictions should be keyed by sub-model name."""
    gang = merge_rules_with_models({"A": RowCountModel("A", 1)}, {"A": [("foo", 1.0)]})

    predictions = gang.predict({"content": "foo"})

    assert predictions["model.A"] == 0.5 and predictions["rules.A"].probability == 1.0
