"""Python SDK for alloy training.

This module exposes a high-level client wiring runtime configuration,
data generation, and model fitters into alloy training runs.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping

from alloy.alloy_io import save_alloy
from alloy.artifact import Alloy
from alloy.trainer import AlloyTrainer, ModelFitter
from core.config import SmelterConfig, validate_storage_format
from core.types import DocumentProducer
from datagen.generator import LabeledPointDataGenerator


class SmelterClient:
    """Primary SDK entry point for alloy training workflows."""

    def __init__(self, config: SmelterConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or SmelterConfig.from_env()

    @property
    def config(self) -> SmelterConfig:
        return self._config

    def data_generator(self) -> LabeledPointDataGenerator:
        """Build a data generator from the client configuration."""
        return LabeledPointDataGenerator(self._config)

    def train_alloy(
        self,
        name: str,
        docs: DocumentProducer,
        labels_and_rules: Mapping[str, Any],
        fitter: ModelFitter,
        config: Mapping[str, Any] | None = None,
    ) -> Alloy | None:
        """Train an alloy with the given fitter.

        Args:
            name: User-friendly alloy name.
            docs: Replayable training document producer.
            labels_and_rules: Labels-and-rules request payload.
            fitter: Model fitting step.
            config: Optional training config.

        Returns:
            Trained alloy, or None when no training data was generated.
        """
        trainer = AlloyTrainer(
            data_generator=self.data_generator(),
            fitter=fitter,
            number_of_validation_examples=self._config.validation_examples,
        )
        return trainer.train_alloy(name, docs, labels_and_rules, config)

    def save_alloy(self, alloy: Alloy, output_dir: str) -> Path:
        """Write alloy artifacts and return the manifest path."""
        return save_alloy(alloy, output_dir)

    def with_overrides(
        self,
        work_root: str | None = None,
        storage_format: str | None = None,
    ) -> "SmelterClient":
        """Clone the client with a different work root or storage format.

        Args:
            work_root: Optional workspace parent directory.
            storage_format: Optional columnar storage format.

        Returns:
            New SDK client instance.
        """
        config = self._config
        if work_root:
            config = replace(config, work_root=Path(work_root).expanduser().resolve())
        if storage_format:
            config = replace(config, storage_format=validate_storage_format(storage_format))
        return SmelterClient(config)
