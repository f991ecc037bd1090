"""Model fitter loader.

This module loads user-provided Python fitter files.
It validates a melt(raw_data, data_generator, pipeline_config, task_type)
callable contract.
"""

from __future__ import annotations

import importlib.util
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, cast

from core.errors import ModelFittingError
from core.types import DocumentProducer

MeltCallable = Callable[[DocumentProducer, Any, Any, str], Any]


@dataclass(frozen=True)
class FunctionModelFitter:
    """Model fitter backed by a plain ``melt`` function."""

    melt_fn: MeltCallable

    def melt(
        self,
        raw_data: DocumentProducer,
        data_generator: Any,
        pipeline_config: dict[str, Any] | None,
        task_type: str,
    ) -> Mapping[str, Any] | None:
        models = self.melt_fn(raw_data, data_generator, pipeline_config, task_type)
        return cast("Mapping[str, Any] | None", models)


def load_model_fitter(fitter_path: str) -> FunctionModelFitter:
    """Load a model fitter from a Python file.

    Args:
        fitter_path: Path to a Python file defining ``melt``.

    Returns:
        Fitter wrapping the loaded function.

    Raises:
        ModelFittingError: If the path is invalid or ``melt`` is missing.
    """
    resolved_path = Path(fitter_path).expanduser().resolve()
    if not resolved_path.exists():
        raise ModelFittingError(
            f"Fitter file not found at {resolved_path}. Provide a valid --fitter-file path."
        )
    module = _load_python_module(resolved_path)
    melt_fn = getattr(module, "melt", None)
    if melt_fn is None or not callable(melt_fn):
        raise ModelFittingError(
            f"Invalid fitter file at {resolved_path}: "
            "missing callable melt(raw_data, data_generator, pipeline_config, task_type)."
        )
    return FunctionModelFitter(melt_fn=cast(MeltCallable, melt_fn))


def _load_python_module(module_path: Path) -> Any:
    """Load Python module from file path."""
    spec = importlib.util.spec_from_file_location("smelter_user_fitter", str(module_path))
    if spec is None or spec.loader is None:
        raise ModelFittingError(
            f"Failed to load fitter module at {module_path}. Verify the file path and syntax."
        )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
