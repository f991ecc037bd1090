"""Training data generation facade.

This module composes labeled point construction, partitioning, and columnar
persistence into a single all-or-nothing call used by model fitters.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

from core.config import SmelterConfig
from core.logging_config import get_logger
from core.types import DocumentProducer
from datagen.engine import PartitionEngine
from datagen.materializer import materialize_per_label_datasets
from datagen.persistence import (
    ColumnarFormat,
    ensure_columnar_format_available,
    load_persisted_dataset,
    persist_per_label_datasets,
    resolve_columnar_format,
)
from datagen.point_builder import FeaturePipeline, build_per_label_points
from datagen.workspace import TrainingWorkspace

_LOGGER = get_logger(__name__)


class LabeledPointDataGenerator:
    """Produces per-label training datasets backed by columnar files.

    Every call creates a fresh training workspace. Workspaces stay alive
    until ``release_workspaces`` is called (or the generator is used as a
    context manager), and are removed at interpreter exit otherwise.
    """

    def __init__(
        self,
        config: SmelterConfig,
        engine: PartitionEngine | None = None,
        columnar_format: ColumnarFormat | None = None,
    ) -> None:
        """Create a data generator.

        Args:
            config: Runtime configuration.
            engine: Optional partition engine; built from config when omitted.
            columnar_format: Optional storage format override.

        Raises:
            SmelterDependencyError: If the storage format dependency is missing.
        """
        self._config = config
        self._engine = engine or PartitionEngine(config.parallelism)
        self._format = columnar_format or resolve_columnar_format(config.storage_format)
        ensure_columnar_format_available(self._format)
        self._workspaces: list[TrainingWorkspace] = []

    @property
    def workspaces(self) -> tuple[TrainingWorkspace, ...]:
        return tuple(self._workspaces)

    def get_labeled_point_data(
        self,
        pipeline: FeaturePipeline,
        docs: DocumentProducer,
    ) -> dict[str, Any] | None:
        """Produce a lazily loaded dataset of labeled points for each label.

        Callers provide a producer returning a fresh traversal over the same
        documents on every call. Documents look like::

            {"content": "Who drives a chevy malibu? Would you recommend it?",
             "metadata": {"iso_639_1": "en"},
             "annotations": [{"label": {"name": "Intent"}, "isPositive": true}]}

        Args:
            pipeline: Primed feature pipeline.
            docs: Replayable document producer.

        Returns:
            Mapping of label name to reloaded dataset, or None when any
            label failed to persist.
        """
        per_label_points = build_per_label_points(pipeline, docs)
        datasets = materialize_per_label_datasets(self._engine, per_label_points)
        workspace = TrainingWorkspace.create(self._config.work_root)
        self._workspaces.append(workspace)
        outcomes = persist_per_label_datasets(workspace, datasets, self._format)
        failed_labels = [label for label, outcome in outcomes.items() if not outcome.succeeded]
        if failed_labels:
            _LOGGER.warning(
                "training_data_rejected",
                failed_labels=failed_labels,
                label_count=len(outcomes),
                workspace=str(workspace.path),
            )
            workspace.cleanup()
            return None
        return {
            label: load_persisted_dataset(outcome.path, self._format)
            for label, outcome in outcomes.items()
            if outcome.path is not None
        }

    def release_workspaces(self) -> None:
        """Remove every workspace created by this generator."""
        while self._workspaces:
            self._workspaces.pop().cleanup()

    def __enter__(self) -> "LabeledPointDataGenerator":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release_workspaces()
