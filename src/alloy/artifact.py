"""Packaged alloy artifact.

This module defines the immutable alloy returned by training, together
with the training summary assembled from its gang sub-models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from alloy.gang import GangModel
from core.constants import GANG_MODEL_NAME
from core.types import Document, Label, SubModelSummary, TrainingSummary


@dataclass(frozen=True)
class Alloy:
    """Named, trained classification artifact.

    Attributes:
        name: User-friendly alloy name.
        labels: Labels the alloy predicts.
        models: Named top-level models; a single ``gang`` entry.
        validation_examples: Held-out reporting documents.
        training_summary: Summary of the training run.
        training_config: Read-only copy of the caller-supplied training config, when provided.
    """

    name: str
    labels: tuple[Label, ...]
    models: Mapping[str, GangModel]
    validation_examples: tuple[Document, ...]
    training_summary: TrainingSummary
    training_config: Mapping[str, Any] | None = None

    @property
    def has_training_config(self) -> bool:
        return self.training_config is not None

    @property
    def gang(self) -> GangModel:
        return self.models[GANG_MODEL_NAME]


def build_training_summary(
    labels: Sequence[Label],
    gang: GangModel,
    validation_examples: Sequence[Document],
) -> TrainingSummary:
    """Collect summaries from every sub-model exposing ``training_summary``."""
    sub_models: list[SubModelSummary] = []
    for name, model in gang.models.items():
        summarize = getattr(model, "training_summary", None)
        metrics = dict(summarize()) if callable(summarize) else {}
        sub_models.append(SubModelSummary(name=name, metrics=metrics))
    return TrainingSummary(
        label_count=len(labels),
        validation_example_count=len(validation_examples),
        sub_models=tuple(sub_models),
    )
