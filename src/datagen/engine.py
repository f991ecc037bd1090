"""Partition-parallel dataset engine.

This module turns in-memory labeled points into immutable Arrow-backed
datasets split into record batch partitions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import pyarrow as pa

from core.constants import DEFAULT_PARALLELISM, FEATURES_COLUMN, LABEL_COLUMN
from core.errors import SmelterConfigError
from core.types import TrainingPoint

LABELED_POINT_SCHEMA = pa.schema(
    [
        pa.field(LABEL_COLUMN, pa.float64(), nullable=False),
        pa.field(FEATURES_COLUMN, pa.list_(pa.float64()), nullable=False),
    ]
)


@dataclass(frozen=True)
class PartitionedDataset:
    """Immutable labeled point dataset split into record batches."""

    partitions: tuple[pa.RecordBatch, ...]
    schema: pa.Schema = LABELED_POINT_SCHEMA

    def count(self) -> int:
        """Return total row count across partitions."""
        return sum(batch.num_rows for batch in self.partitions)

    def to_table(self) -> pa.Table:
        """Return all partitions as one Arrow table."""
        return pa.Table.from_batches(list(self.partitions), schema=self.schema)


class PartitionEngine:
    """Splits labeled point lists into partitioned datasets."""

    def __init__(self, parallelism: int = DEFAULT_PARALLELISM) -> None:
        if parallelism < 1:
            raise SmelterConfigError(
                f"Invalid parallelism {parallelism}: expected value >= 1."
            )
        self._parallelism = parallelism

    @property
    def parallelism(self) -> int:
        return self._parallelism

    def parallelize(self, points: Sequence[TrainingPoint]) -> PartitionedDataset:
        """Build a partitioned dataset from labeled points.

        Args:
            points: Labeled points in order.

        Returns:
            Dataset with at most ``parallelism`` partitions.
        """
        table = pa.Table.from_pylist(
            [
                {LABEL_COLUMN: point.label, FEATURES_COLUMN: list(point.features)}
                for point in points
            ],
            schema=LABELED_POINT_SCHEMA,
        )
        if table.num_rows == 0:
            return PartitionedDataset(partitions=())
        chunk_size = math.ceil(table.num_rows / self._parallelism)
        return PartitionedDataset(partitions=tuple(table.to_batches(max_chunksize=chunk_size)))
