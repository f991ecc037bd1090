"""Columnar persistence for per-label training datasets.

This module writes each label's partitioned dataset to its own file in the
training workspace, isolates per-label write failures, and reloads stored
files as lazily queryable datasets.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping

import pyarrow.dataset as pa_dataset
import pyarrow.parquet as pq

from core.config import validate_storage_format
from core.constants import STORAGE_FORMAT_EXTENSIONS
from core.errors import PersistenceError, SmelterDependencyError
from core.logging_config import get_logger
from datagen.engine import PartitionedDataset
from datagen.workspace import TrainingWorkspace, remove_path

_LOGGER = get_logger(__name__)

DatasetWriter = Callable[[PartitionedDataset, Path], None]
DatasetReader = Callable[[Path], Any]


@dataclass(frozen=True)
class ColumnarFormat:
    """Writer and lazy reader pair for one columnar storage format."""

    name: str
    extension: str
    write: DatasetWriter
    read: DatasetReader


@dataclass(frozen=True)
class LabelPersistenceOutcome:
    """Result of persisting one label's dataset.

    Attributes:
        label: Label name.
        path: Persisted file path when the write succeeded.
        error: Failure carrying the original write error as its cause.
    """

    label: str
    path: Path | None = None
    error: PersistenceError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.path is not None


def write_parquet_dataset(dataset: PartitionedDataset, path: Path) -> None:
    """Write partitions as row groups of one Parquet file."""
    with pq.ParquetWriter(str(path), dataset.schema) as writer:
        for batch in dataset.partitions:
            writer.write_batch(batch)


def read_parquet_dataset(path: Path) -> pa_dataset.Dataset:
    """Open a Parquet file as a lazily scanned Arrow dataset."""
    return pa_dataset.dataset(str(path), format="parquet")


def write_lance_dataset(dataset: PartitionedDataset, path: Path) -> None:
    """Write partitions to a new Apache Lance dataset."""
    lance = _import_lance()
    lance.write_dataset(dataset.to_table(), str(path), mode="create")


def read_lance_dataset(path: Path) -> Any:
    """Open an Apache Lance dataset for lazy scanning."""
    lance = _import_lance()
    return lance.dataset(str(path))


PARQUET_FORMAT = ColumnarFormat(
    name="parquet",
    extension=STORAGE_FORMAT_EXTENSIONS["parquet"],
    write=write_parquet_dataset,
    read=read_parquet_dataset,
)
LANCE_FORMAT = ColumnarFormat(
    name="lance",
    extension=STORAGE_FORMAT_EXTENSIONS["lance"],
    write=write_lance_dataset,
    read=read_lance_dataset,
)
_FORMATS = {PARQUET_FORMAT.name: PARQUET_FORMAT, LANCE_FORMAT.name: LANCE_FORMAT}


def resolve_columnar_format(storage_format: str) -> ColumnarFormat:
    """Return the columnar format registered under ``storage_format``.

    Raises:
        SmelterConfigError: If the format is unsupported.
    """
    return _FORMATS[validate_storage_format(storage_format)]


def persist_per_label_datasets(
    workspace: TrainingWorkspace,
    datasets: Mapping[str, PartitionedDataset],
    columnar_format: ColumnarFormat = PARQUET_FORMAT,
) -> dict[str, LabelPersistenceOutcome]:
    """Persist every label dataset into the workspace.

    File names use the label's ordinal position, because columnar writers
    refuse to overwrite existing paths. A failed label never stops its
    siblings from being written.

    Args:
        workspace: Training workspace that owns the files.
        datasets: Mapping of label name to partitioned dataset.
        columnar_format: Storage format used for writing.

    Returns:
        Exactly one outcome per input label.
    """
    outcomes: dict[str, LabelPersistenceOutcome] = {}
    for index, (label, dataset) in enumerate(datasets.items()):
        path = workspace.file_for_index(index, columnar_format.extension)
        outcomes[label] = _persist_label(label, dataset, path, columnar_format)
    return outcomes


def load_persisted_dataset(path: Path, columnar_format: ColumnarFormat = PARQUET_FORMAT) -> Any:
    """Reload one persisted label dataset as a lazy dataset handle.

    Args:
        path: Persisted dataset path.
        columnar_format: Storage format the file was written with.

    Returns:
        Dataset handle exposing ``count_rows`` and ``to_table``.
    """
    return columnar_format.read(path)


def _persist_label(
    label: str,
    dataset: PartitionedDataset,
    path: Path,
    columnar_format: ColumnarFormat,
) -> LabelPersistenceOutcome:
    """Write one label dataset and convert write errors into a failed outcome."""
    _LOGGER.info("label_persist_started", label=label, path=str(path), rows=dataset.count())
    try:
        columnar_format.write(dataset, path)
    except Exception as error:
        remove_path(path)
        _LOGGER.error(
            "label_persist_failed",
            label=label,
            path=str(path),
            storage_format=columnar_format.name,
            exc_info=error,
        )
        failure = PersistenceError(
            label,
            f"Failed to save training data for label '{label}' to {path}: {error}.",
        )
        failure.__cause__ = error
        return LabelPersistenceOutcome(label=label, error=failure)
    return LabelPersistenceOutcome(label=label, path=path)


def _import_lance() -> Any:
    """Import the Apache Lance dependency used by the lance storage format."""
    try:
        import lance
    except ImportError as error:
        raise SmelterDependencyError(
            "The lance storage format requires pylance, but it is not installed. "
            "Install smelter[lance] or set SMELTER_STORAGE_FORMAT=parquet."
        ) from error
    return lance


def ensure_columnar_format_available(columnar_format: ColumnarFormat) -> None:
    """Fail fast when the optional dependency behind a format is missing.

    Raises:
        SmelterDependencyError: If the lance format is selected without pylance.
    """
    if columnar_format.name == LANCE_FORMAT.name:
        _import_lance()
