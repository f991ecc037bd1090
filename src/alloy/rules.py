"""Rule parsing and rule-based document classification.

This module groups hand-authored rules by label and provides the
rule sub-model that scores documents with phrase and regex rules.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from core.errors import AssemblyError
from core.types import Document, RuleList, RuleRecord


def parse_rule_record(raw_rule: object) -> RuleRecord:
    """Parse one ``{"label", "expression", "weight"}`` rule record.

    Raises:
        AssemblyError: If a field is missing or mistyped.
    """
    if not isinstance(raw_rule, Mapping):
        raise AssemblyError(f"Invalid rule {raw_rule!r}: expected an object.")
    label = raw_rule.get("label")
    expression = raw_rule.get("expression")
    weight = raw_rule.get("weight")
    if not isinstance(label, str) or not isinstance(expression, str):
        raise AssemblyError(
            f"Invalid rule {dict(raw_rule)!r}: 'label' and 'expression' must be strings."
        )
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise AssemblyError(f"Invalid rule {dict(raw_rule)!r}: 'weight' must be a number.")
    return RuleRecord(label=label, expression=expression, weight=float(weight))


def group_rules(records: Iterable[RuleRecord]) -> dict[str, RuleList]:
    """Group rule records by label, keeping input order and duplicates."""
    grouped: dict[str, RuleList] = {}
    for record in records:
        grouped.setdefault(record.label, []).append((record.expression, record.weight))
    return grouped


def parse_rules(raw_rules: Sequence[object]) -> dict[str, RuleList]:
    """Create a map of label to ordered ``(expression, weight)`` rules.

    Args:
        raw_rules: Rule records, one rule per entry.

    Returns:
        Mapping of label name to rules in input order.

    Raises:
        AssemblyError: If any record is malformed.
    """
    return group_rules(parse_rule_record(raw_rule) for raw_rule in raw_rules)


@dataclass(frozen=True)
class RuleClassification:
    """Rule sub-model prediction for one document.

    Attributes:
        label: Label the rules vote for.
        probability: Match-weighted mean rule weight, 0.0 without matches.
        matches: Total number of rule matches in the document.
    """

    label: str
    probability: float
    matches: int


class DocumentRules:
    """Rule-based sub-model for one label.

    Expressions wrapped in slashes (``/colou?r/``) are regular expressions;
    all other expressions are matched as case-insensitive phrases.
    """

    def __init__(self, label: str, rules: RuleList) -> None:
        self.label = label
        self.rules: RuleList = list(rules)
        self._compiled = [
            (_compile_expression(label, expression), weight) for expression, weight in self.rules
        ]

    def predict(self, document: Document) -> RuleClassification:
        """Score document content against every rule."""
        content = document.get("content", "")
        if not isinstance(content, str):
            content = str(content)
        total_matches = 0
        weighted_sum = 0.0
        for pattern, weight in self._compiled:
            match_count = sum(1 for match in pattern.finditer(content) if match.group(0))
            total_matches += match_count
            weighted_sum += weight * match_count
        if total_matches == 0:
            return RuleClassification(label=self.label, probability=0.0, matches=0)
        probability = min(1.0, max(0.0, weighted_sum / total_matches))
        return RuleClassification(label=self.label, probability=probability, matches=total_matches)

    def training_summary(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "rule_count": len(self.rules),
            "regex_rule_count": sum(1 for expression, _ in self.rules if _is_regex(expression)),
        }


def _is_regex(expression: str) -> bool:
    return len(expression) >= 2 and expression.startswith("/") and expression.endswith("/")


def _compile_expression(label: str, expression: str) -> re.Pattern[str]:
    """Compile one rule expression.

    Raises:
        AssemblyError: If a regex rule does not compile.
    """
    if not expression:
        return re.compile(r"(?!)")
    if not _is_regex(expression):
        return re.compile(re.escape(expression), re.IGNORECASE)
    try:
        return re.compile(expression[1:-1])
    except re.error as error:
        raise AssemblyError(
            f"Invalid regular expression rule {expression!r} for label '{label}': {error}."
        ) from error
