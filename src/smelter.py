"""Public SDK surface for Smelter.

This module provides a stable import path for alloy training users.
It re-exports the primary client, trainer, and typed models.
"""

from __future__ import annotations

from alloy.alloy_io import load_alloy_manifest, save_alloy
from alloy.artifact import Alloy
from alloy.client import SmelterClient
from alloy.gang import GangModel, merge_rules_with_models
from alloy.labels import resolve_labels
from alloy.rules import DocumentRules, parse_rules
from alloy.trainer import AlloyTrainer, DataGenerator, ModelFitter
from alloy.validation import create_validation_set
from core.config import SmelterConfig
from core.types import Document, DocumentProducer, Label, TrainingPoint, TrainingSummary
from datagen.document_reader import read_documents
from datagen.generator import LabeledPointDataGenerator
from datagen.point_builder import FeaturePipeline

__all__ = [
    "Alloy",
    "AlloyTrainer",
    "DataGenerator",
    "Document",
    "DocumentProducer",
    "DocumentRules",
    "FeaturePipeline",
    "GangModel",
    "Label",
    "LabeledPointDataGenerator",
    "ModelFitter",
    "SmelterClient",
    "SmelterConfig",
    "TrainingPoint",
    "TrainingSummary",
    "create_validation_set",
    "load_alloy_manifest",
    "merge_rules_with_models",
    "parse_rules",
    "read_documents",
    "resolve_labels",
    "save_alloy",
]
