"""Smelter exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class SmelterError(Exception):
    """Base exception for all Smelter failures."""


class SmelterConfigError(SmelterError):
    """Raised for invalid runtime configuration."""


class SmelterDependencyError(SmelterError):
    """Raised when an optional runtime dependency is missing."""


class DataGenerationError(SmelterError):
    """Raised for malformed training documents or document sources."""


class PersistenceError(SmelterError):
    """Raised when one label's training data cannot be persisted."""

    def __init__(self, label: str, message: str) -> None:
        super().__init__(message)
        self.label = label


class AssemblyError(SmelterError):
    """Raised for malformed rule, label, or training request input."""


class ModelFittingError(SmelterError):
    """Raised when the pluggable model-fitting step fails."""


class AlloyIOError(SmelterError):
    """Raised when alloy artifacts cannot be written or read."""
