"""Unit tests for training stage tracking."""

from __future__ import annotations

import pytest

from alloy.stages import StageTracker, validate_transition
from core.errors import SmelterError


def test_stage_tracker_records_full_history() -> None:
    """Advancing through every stage should be recorded in order."""
    tracker = StageTracker("demo")
    for stage in (
        "generate_training_data",
        "fit_models",
        "assemble_ensemble",
        "sample_validation",
        "package_artifact",
        "done",
    ):
        tracker.advance(stage)

    assert tracker.history[0] == "parse_request" and tracker.stage == "done"


def test_stage_tracker_fails_from_data_generation() -> None:
    """Data generation may end the run in the failed stage."""
    tracker = StageTracker("demo")
    tracker.advance("generate_training_data")

    tracker.fail("no data")

    assert tracker.stage == "failed" and tracker.events[-1].message == "no data"


def test_validate_transition_rejects_skipped_stage() -> None:
    """Stages must not be skipped."""
    with pytest.raises(SmelterError):
        validate_transition("generate_training_data", "assemble_ensemble")


def test_validate_transition_rejects_leaving_terminal_stage() -> None:
    """Terminal stages have no outgoing transitions."""
    with pytest.raises(SmelterError):
        validate_transition("done", "failed")
