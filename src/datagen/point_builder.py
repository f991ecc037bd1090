"""Per-label labeled point construction.

This module featurizes each training document once and fans the vector out
to one labeled point per annotation, grouped by label name.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

import numpy as np

from core.constants import NEGATIVE_POLARITY, POSITIVE_POLARITY
from core.errors import DataGenerationError
from core.types import Document, DocumentProducer, TrainingPoint


class FeaturePipeline(Protocol):
    """Primed feature pipeline converting documents into vectors."""

    def apply(self, document: Document) -> Sequence[float] | None:
        """Return the feature vector, or None when the document is filtered out."""
        ...


def build_per_label_points(
    pipeline: FeaturePipeline,
    docs: DocumentProducer,
) -> dict[str, list[TrainingPoint]]:
    """Featurize documents into labeled points split by label.

    Args:
        pipeline: Primed feature pipeline.
        docs: Replayable document producer.

    Returns:
        Mapping of label name to labeled points in traversal order.

    Raises:
        DataGenerationError: If an annotation is malformed.
    """
    per_label_points: dict[str, list[TrainingPoint]] = {}
    for document in docs():
        annotations = _document_annotations(document)
        if not annotations:
            continue
        vector = pipeline.apply(document)
        if vector is None:
            continue
        features = _to_features(vector)
        for annotation in annotations:
            label_name, polarity = _parse_annotation(annotation)
            point = TrainingPoint(label=polarity, features=features)
            per_label_points.setdefault(label_name, []).append(point)
    return per_label_points


def _document_annotations(document: Document) -> list[Mapping[str, Any]]:
    raw_annotations = document.get("annotations") or []
    if not isinstance(raw_annotations, list):
        raise DataGenerationError(
            "Invalid training document: 'annotations' must be a list of objects."
        )
    return raw_annotations


def _parse_annotation(annotation: Mapping[str, Any]) -> tuple[str, float]:
    """Extract label name and numeric polarity from one annotation."""
    label = annotation.get("label") if isinstance(annotation, Mapping) else None
    label_name = label.get("name") if isinstance(label, Mapping) else None
    if not isinstance(label_name, str) or not label_name:
        raise DataGenerationError(
            f"Invalid annotation {annotation!r}: expected {{'label': {{'name': ...}}}}."
        )
    is_positive = bool(annotation.get("isPositive", False))
    return label_name, POSITIVE_POLARITY if is_positive else NEGATIVE_POLARITY


def _to_features(vector: Sequence[float]) -> tuple[float, ...]:
    return tuple(np.asarray(vector, dtype=np.float64).ravel().tolist())
