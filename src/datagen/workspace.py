"""Per-run training workspace management.

This module creates a uniquely named temporary directory for one training
run and guarantees its removal on release or interpreter shutdown.
"""

from __future__ import annotations

import shutil
import tempfile
import weakref
from pathlib import Path
from types import TracebackType

from core.constants import TRAINING_FILE_PREFIX, WORKSPACE_DIR_PREFIX
from core.errors import DataGenerationError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class TrainingWorkspace:
    """Uniquely named temporary directory owned by one training run.

    The directory name carries a random component, so workspaces are never
    reused across runs. Cleanup runs when the workspace is released,
    garbage collected, or when the interpreter exits normally. A process
    killed by a signal Python does not handle, SIGTERM included, skips
    cleanup; long-running hosts that expect SIGTERM should install a handler
    that raises ``SystemExit`` so exit-time cleanup runs.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._closed = False
        self._finalizer = weakref.finalize(self, remove_path, path)

    @classmethod
    def create(cls, work_root: Path) -> "TrainingWorkspace":
        """Create a fresh workspace below ``work_root``.

        Args:
            work_root: Parent directory for workspaces, created when missing.

        Returns:
            New workspace handle.

        Raises:
            DataGenerationError: If the directory cannot be created.
        """
        try:
            work_root.mkdir(parents=True, exist_ok=True)
            path = Path(tempfile.mkdtemp(prefix=WORKSPACE_DIR_PREFIX, dir=work_root))
        except OSError as error:
            raise DataGenerationError(
                f"Failed to create training workspace under {work_root}: {error}. "
                "Check SMELTER_WORK_ROOT permissions and available disk space."
            ) from error
        workspace = cls(path)
        _LOGGER.info("training_workspace_created", path=str(workspace.path))
        return workspace

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def file_for_index(self, index: int, extension: str) -> Path:
        """Return the deterministic data file path for a label ordinal."""
        return self._path / f"{TRAINING_FILE_PREFIX}-{index}.{extension}"

    def cleanup(self) -> None:
        """Delete the workspace and every file inside it."""
        if self._closed:
            return
        self._closed = True
        self._finalizer()
        _LOGGER.info("training_workspace_removed", path=str(self._path))

    def __enter__(self) -> "TrainingWorkspace":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.cleanup()


def remove_path(path: Path) -> None:
    """Remove a file or directory if it exists."""
    if path.is_dir():
        shutil.rmtree(path, ignore_errors=True)
    else:
        path.unlink(missing_ok=True)
