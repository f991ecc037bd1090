"""Alloy training orchestration.

This module drives one training run end to end: it parses the request,
delegates data generation and model fitting to a pluggable fitter, merges
fitted models with rules, samples validation documents, and packages the
resulting alloy.
"""

from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any, Mapping, Protocol

from alloy.artifact import Alloy, build_training_summary
from alloy.gang import merge_rules_with_models
from alloy.labels import resolve_labels
from alloy.request import extract_pipeline_config, parse_labels_and_rules
from alloy.rules import group_rules
from alloy.stages import StageTracker
from alloy.validation import create_validation_set
from core.constants import DEFAULT_NUMBER_VALIDATION_EXAMPLES, GANG_MODEL_NAME
from core.errors import ModelFittingError, SmelterError
from core.logging_config import get_logger
from core.types import DocumentProducer
from datagen.point_builder import FeaturePipeline

_LOGGER = get_logger(__name__)


class DataGenerator(Protocol):
    """Training data generation capability handed to model fitters."""

    def get_labeled_point_data(
        self,
        pipeline: FeaturePipeline,
        docs: DocumentProducer,
    ) -> dict[str, Any] | None:
        """Return per-label datasets, or None when any label failed."""
        ...

    def release_workspaces(self) -> None:
        """Release intermediate storage created by previous calls."""
        ...


class ModelFitter(Protocol):
    """Pluggable step turning training documents into per-label models."""

    def melt(
        self,
        raw_data: DocumentProducer,
        data_generator: DataGenerator,
        pipeline_config: dict[str, Any] | None,
        task_type: str,
    ) -> Mapping[str, Any] | None:
        """Fit models per label, or return None when no training data was produced."""
        ...


class AlloyTrainer:
    """Trainer following the orthodox parse, fit, merge, package flow."""

    def __init__(
        self,
        data_generator: DataGenerator,
        fitter: ModelFitter,
        number_of_validation_examples: int = DEFAULT_NUMBER_VALIDATION_EXAMPLES,
    ) -> None:
        self._data_generator = data_generator
        self._fitter = fitter
        self._number_of_validation_examples = number_of_validation_examples

    def train_alloy(
        self,
        name: str,
        docs: DocumentProducer,
        labels_and_rules: Mapping[str, Any],
        config: Mapping[str, Any] | None = None,
    ) -> Alloy | None:
        """Train models and package them into an alloy.

        ``docs`` is invoked several times; each call must traverse exactly the
        documents traversed by previous calls, in the same order.

        Args:
            name: User-friendly alloy name.
            docs: Replayable training document producer.
            labels_and_rules: ``rules``, ``uuid_to_label`` and ``task_type`` payload.
            config: Optional training config, echoed into the alloy.

        Returns:
            Trained alloy, or None when no training data could be generated.

        Raises:
            AssemblyError: If the request or rules are malformed.
            ModelFittingError: If the fitter fails.
        """
        tracker = StageTracker(name)
        try:
            return self._train(tracker, name, docs, labels_and_rules, config)
        finally:
            self._data_generator.release_workspaces()

    def _train(
        self,
        tracker: StageTracker,
        name: str,
        docs: DocumentProducer,
        labels_and_rules: Mapping[str, Any],
        config: Mapping[str, Any] | None,
    ) -> Alloy | None:
        try:
            request = parse_labels_and_rules(labels_and_rules)
            labels = resolve_labels(request.uuid_to_label)
            parsed_rules = group_rules(request.rules)
            pipeline_config = extract_pipeline_config(config)
        except SmelterError as error:
            tracker.fail(str(error))
            raise
        tracker.advance("generate_training_data")
        models = self._fit_models(tracker, docs, pipeline_config, request.task_type)
        if models is None:
            _LOGGER.warning("alloy_training_rejected", name=name, history=tracker.history)
            return None
        tracker.advance("assemble_ensemble")
        gang = merge_rules_with_models(models, parsed_rules)
        tracker.advance("sample_validation")
        validation_examples = create_validation_set(docs, self._number_of_validation_examples)
        tracker.advance("package_artifact")
        alloy = Alloy(
            name=name,
            labels=tuple(labels),
            models=MappingProxyType({GANG_MODEL_NAME: gang}),
            validation_examples=tuple(validation_examples),
            training_summary=build_training_summary(labels, gang, validation_examples),
            training_config=_freeze_config(config),
        )
        tracker.advance("done")
        _LOGGER.info(
            "alloy_trained",
            name=name,
            label_count=len(alloy.labels),
            sub_models=list(gang.models),
            validation_examples=len(validation_examples),
            has_training_config=alloy.has_training_config,
        )
        return alloy

    def _fit_models(
        self,
        tracker: StageTracker,
        docs: DocumentProducer,
        pipeline_config: dict[str, Any] | None,
        task_type: str,
    ) -> Mapping[str, Any] | None:
        """Run the fitter and map its outcome onto training stages."""
        stage_aware_generator = _StageAwareDataGenerator(self._data_generator, tracker)
        try:
            models = self._fitter.melt(docs, stage_aware_generator, pipeline_config, task_type)
        except Exception as error:
            tracker.fail(str(error))
            if isinstance(error, SmelterError) or error is stage_aware_generator.failure:
                raise
            raise ModelFittingError(
                f"Model fitting failed for task type '{task_type}': {error}."
            ) from error
        if stage_aware_generator.rejected:
            tracker.fail("training data generation produced no result")
            return None
        if tracker.stage == "generate_training_data":
            tracker.advance("fit_models")
        if models is None:
            tracker.fail("model fitter produced no models")
            return None
        return models


def _freeze_config(config: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    if config is None:
        return None
    return MappingProxyType(copy.deepcopy(dict(config)))


class _StageAwareDataGenerator:
    """Data generator wrapper reporting generation outcomes to the tracker."""

    def __init__(self, delegate: DataGenerator, tracker: StageTracker) -> None:
        self._delegate = delegate
        self._tracker = tracker
        self.rejected = False
        self.failure: BaseException | None = None

    def get_labeled_point_data(
        self,
        pipeline: FeaturePipeline,
        docs: DocumentProducer,
    ) -> dict[str, Any] | None:
        try:
            datasets = self._delegate.get_labeled_point_data(pipeline, docs)
        except Exception as error:
            self.failure = error
            raise
        if datasets is None:
            self.rejected = True
        elif self._tracker.stage == "generate_training_data":
            self._tracker.advance("fit_models")
        return datasets

    def release_workspaces(self) -> None:
        self._delegate.release_workspaces()
