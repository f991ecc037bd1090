"""Training orchestration stages and transition validation.

This module defines the alloy training state machine and a tracker that
validates, logs, and records every stage change of one training run.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

from core.errors import SmelterError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)

TrainingStage = Literal[
    "parse_request",
    "generate_training_data",
    "fit_models",
    "assemble_ensemble",
    "sample_validation",
    "package_artifact",
    "done",
    "failed",
]
ALLOWED_STAGE_TRANSITIONS: dict[TrainingStage, tuple[TrainingStage, ...]] = {
    "parse_request": ("generate_training_data", "failed"),
    "generate_training_data": ("fit_models", "failed"),
    "fit_models": ("assemble_ensemble", "failed"),
    "assemble_ensemble": ("sample_validation",),
    "sample_validation": ("package_artifact",),
    "package_artifact": ("done",),
    "done": (),
    "failed": (),
}


@dataclass(frozen=True)
class StageEvent:
    """One stage transition event."""

    stage: TrainingStage
    timestamp: str
    message: str | None


def validate_transition(current: TrainingStage, next_stage: TrainingStage) -> None:
    """Validate one stage transition against allowed state machine edges."""
    allowed_stages = ALLOWED_STAGE_TRANSITIONS[current]
    if next_stage not in allowed_stages:
        raise SmelterError(
            f"Invalid training stage transition {current!r} -> {next_stage!r}. "
            f"Allowed: {', '.join(allowed_stages) or 'none'}."
        )


class StageTracker:
    """Tracks the stage history of one alloy training run."""

    def __init__(self, run_name: str) -> None:
        self._run_name = run_name
        self._events: list[StageEvent] = [
            StageEvent(stage="parse_request", timestamp=_utc_now_iso(), message=None)
        ]

    @property
    def stage(self) -> TrainingStage:
        return self._events[-1].stage

    @property
    def history(self) -> tuple[TrainingStage, ...]:
        return tuple(event.stage for event in self._events)

    @property
    def events(self) -> tuple[StageEvent, ...]:
        return tuple(self._events)

    def advance(self, next_stage: TrainingStage, message: str | None = None) -> None:
        """Move to ``next_stage`` after validating the transition."""
        previous = self.stage
        validate_transition(previous, next_stage)
        self._events.append(StageEvent(stage=next_stage, timestamp=_utc_now_iso(), message=message))
        _LOGGER.info(
            "training_stage_changed",
            run_name=self._run_name,
            previous_stage=previous,
            stage=next_stage,
            message=message,
        )

    def fail(self, message: str) -> None:
        """Move to the terminal failed stage."""
        self.advance("failed", message=message)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
