"""Gang ensemble assembly.

This module merges fitted per-label models and rule sub-models into one
ensemble whose sub-model names never collide across the two families.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from alloy.rules import DocumentRules
from core.constants import MODEL_NAME_PREFIX, RULES_NAME_PREFIX
from core.types import Document, RuleList


class GangModel:
    """Composite model routing documents to named sub-models."""

    def __init__(self, models: Mapping[str, Any]) -> None:
        self._models = dict(models)

    @property
    def models(self) -> Mapping[str, Any]:
        return MappingProxyType(self._models)

    def predict(self, document: Document) -> dict[str, Any]:
        """Run every sub-model exposing ``predict`` on one document.

        Args:
            document: Document to classify.

        Returns:
            Mapping of sub-model name to that sub-model's prediction.
        """
        return {
            name: model.predict(document)
            for name, model in self._models.items()
            if callable(getattr(model, "predict", None))
        }

    def __len__(self) -> int:
        return len(self._models)


def model_name(label: str) -> str:
    return f"{MODEL_NAME_PREFIX}.{label}"


def rules_name(label: str) -> str:
    return f"{RULES_NAME_PREFIX}.{label}"


def merge_rules_with_models(
    models: Mapping[str, Any],
    rules: Mapping[str, RuleList],
) -> GangModel:
    """Combine fitted models with rule sub-models into one gang.

    Label sets of the two inputs do not need to match.

    Args:
        models: Mapping of label name to fitted model.
        rules: Mapping of label name to ordered ``(expression, weight)`` rules.

    Returns:
        Gang keyed by ``model.<label>`` and ``rules.<label>``.
    """
    sub_models: dict[str, Any] = {model_name(label): model for label, model in models.items()}
    for label, label_rules in rules.items():
        sub_models[rules_name(label)] = DocumentRules(label, label_rules)
    return GangModel(sub_models)
