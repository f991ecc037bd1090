"""Per-label dataset materialization.

This module parallelizes each label's labeled points independently
and logs a per-label polarity breakdown for observability.
"""

from __future__ import annotations

from collections import Counter
from typing import Mapping, Sequence

from core.logging_config import get_logger
from core.types import TrainingPoint
from datagen.engine import PartitionedDataset, PartitionEngine

_LOGGER = get_logger(__name__)


def materialize_per_label_datasets(
    engine: PartitionEngine,
    per_label_points: Mapping[str, Sequence[TrainingPoint]],
) -> dict[str, PartitionedDataset]:
    """Create one partitioned dataset per label.

    Args:
        engine: Partition engine used to parallelize points.
        per_label_points: Mapping of label name to labeled points.

    Returns:
        Mapping of label name to partitioned dataset.
    """
    datasets: dict[str, PartitionedDataset] = {}
    label_summaries: list[dict[str, object]] = []
    for label, points in per_label_points.items():
        datasets[label] = engine.parallelize(points)
        label_summaries.append(
            {
                "label": label,
                "point_count": len(points),
                "polarity_splits": summarize_polarity(points),
            }
        )
    _LOGGER.info(
        "labeled_points_created",
        label_count=len(datasets),
        labels=label_summaries,
    )
    return datasets


def summarize_polarity(points: Sequence[TrainingPoint]) -> dict[str, int]:
    """Count points per distinct polarity value.

    Args:
        points: Labeled points for one label.

    Returns:
        Mapping of polarity value (as text) to point count, sorted by polarity.
    """
    counts = Counter(point.label for point in points)
    return {str(polarity): counts[polarity] for polarity in sorted(counts)}
