"""Unit tests for rule parsing and rule sub-models."""

from __future__ import annotations

import pytest

from alloy.rules import DocumentRules, parse_rules
from core.errors import AssemblyError


def test_parse_rules_preserves_per_label_order() -> None:
    """Rules should group by label in input order."""
    rules = parse_rules(
        [
            {"label": "A", "expression": "x", "weight": 1},
            {"label": "A", "expression": "y", "weight": 2},
            {"label": "B", "expression": "z", "weight": 3},
        ]
    )

    assert rules == {"A": [("x", 1.0), ("y", 2.0)], "B": [("z", 3.0)]}


def test_parse_rules_keeps_duplicate_expressions() -> None:
    """Duplicate label and expression pairs stay as separate entries."""
    rules = parse_rules(
        [
            {"label": "A", "expression": "x", "weight": 0.5},
            {"label": "A", "expression": "x", "weight": 0.5},
        ]
    )

    assert rules == {"A": [("x", 0.5), ("x", 0.5)]}


@pytest.mark.parametrize(
    "raw_rule",
    [
        {"expression": "x", "weight": 1},
        {"label": "A", "weight": 1},
        {"label": "A", "expression": "x"},
        {"label": "A", "expression": "x", "weight": True},
        "not-a-rule",
    ],
)
def test_parse_rules_rejects_malformed_records(raw_rule: object) -> None:
    """Malformed rules should raise an assembly error."""
    with pytest.raises(AssemblyError):
        parse_rules([raw_rule])


def test_document_rules_matches_phrases_case_insensitively() -> None:
    """Phrase rules should match regardless of case."""
    rules = DocumentRules("Intent", [("Recommend", 0.8)])

    prediction = rules.predict({"content": "would you RECOMMEND it?"})

    assert prediction.matches == 1 and prediction.probability == pytest.approx(0.8)


def test_document_rules_weights_by_match_count() -> None:
    """Probability should be the match-weighted mean of rule weights."""
    rules = DocumentRules("Intent", [("/buy(ing)?/", 1.0), ("car", 0.4)])

    prediction = rules.predict({"content": "buying a car, then buy another car"})

    assert prediction.matches == 4 and prediction.probability == pytest.approx(0.7)


def test_document_rules_without_matches_scores_zero() -> None:
    """Documents matching no rule should score zero."""
    rules = DocumentRules("Spam", [("free money", 1.0), ("", 1.0)])

    prediction = rules.predict({"content": "hello there"})

    assert prediction.probability == 0.0 and prediction.matches == 0


def test_document_rules_rejects_invalid_regex() -> None:
    """Uncompilable regex rules should raise an assembly error."""
    with pytest.raises(AssemblyError):
        DocumentRules("Spam", [("/([a-z/", 1.0)])


def test_document_rules_training_summary_counts_rules() -> None:
    """Training summary should report total and regex rule counts."""
    rules = DocumentRules("Intent", [("/a+/", 1.0), ("b", 0.5)])

    assert rules.training_summary() == {"label": "Intent", "rule_count": 2, "regex_rule_count": 1}
