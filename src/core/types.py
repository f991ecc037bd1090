"""Shared typed models.

This module defines immutable data models used by the data generation,
assembly, and orchestration layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

Document = Mapping[str, Any]
DocumentProducer = Callable[[], Iterable[Document]]
"""Zero-argument callable returning a fresh traversal over training documents.

Every invocation must traverse the same documents in the same order.
"""

RuleList = list[tuple[str, float]]


@dataclass(frozen=True)
class Label:
    """Named classification target.

    Attributes:
        uuid: Stable label identifier.
        name: Human-readable label name.
    """

    uuid: str
    name: str


@dataclass(frozen=True)
class TrainingPoint:
    """One featurized example for one label.

    Attributes:
        label: Numeric polarity, 1.0 for positive and 0.0 for negative.
        features: Dense feature vector.
    """

    label: float
    features: tuple[float, ...]


@dataclass(frozen=True)
class RuleRecord:
    """One hand-authored rule for one label.

    Attributes:
        label: Label name the rule votes for.
        expression: Phrase, or regular expression wrapped in slashes.
        weight: Rule weight in [0, 1].
    """

    label: str
    expression: str
    weight: float


@dataclass(frozen=True)
class TrainingRequest:
    """Parsed labels-and-rules request.

    Attributes:
        rules: Rule records in input order.
        uuid_to_label: Label identifier to label name mapping.
        task_type: Classification task type, e.g. ``classification.single``.
    """

    rules: tuple[RuleRecord, ...]
    uuid_to_label: Mapping[str, str]
    task_type: str


@dataclass(frozen=True)
class SubModelSummary:
    """Training summary reported by one ensemble sub-model.

    Attributes:
        name: Sub-model name inside the gang.
        metrics: Summary values reported by the sub-model.
    """

    name: str
    metrics: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TrainingSummary:
    """Training summary attached to every alloy.

    Attributes:
        label_count: Number of labels in the alloy.
        validation_example_count: Number of validation documents kept.
        sub_models: Per sub-model summaries in gang order.
    """

    label_count: int
    validation_example_count: int
    sub_models: tuple[SubModelSummary, ...]
