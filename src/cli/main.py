"""Smelter CLI entry points.
This module exposes the alloy training command.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from typing import Any, Sequence

from alloy.client import SmelterClient
from alloy.fitter_loader import load_model_fitter
from alloy.request import load_payload_file
from core.constants import SUPPORTED_STORAGE_FORMATS
from datagen.document_reader import read_documents

EXIT_NO_TRAINING_DATA = 3


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="smelter", description="Smelter alloy training CLI")
    parser.add_argument("--work-root", help="Override SMELTER_WORK_ROOT for this command")
    parser.add_argument(
        "--storage-format",
        choices=SUPPORTED_STORAGE_FORMATS,
        help="Override SMELTER_STORAGE_FORMAT for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_train_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Smelter CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    client = SmelterClient().with_overrides(
        work_root=args.work_root,
        storage_format=args.storage_format,
    )
    if args.command == "train":
        return _run_train_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _run_train_command(client: SmelterClient, args: argparse.Namespace) -> int:
    """Handle train command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    docs = read_documents(args.documents)
    labels_and_rules = load_payload_file(args.labels_and_rules)
    config = load_payload_file(args.config) if args.config else None
    fitter = load_model_fitter(args.fitter_file)
    alloy = client.train_alloy(args.name, docs, labels_and_rules, fitter, config)
    if alloy is None:
        print("no training data generated; alloy was not created")
        return EXIT_NO_TRAINING_DATA
    manifest_path = client.save_alloy(alloy, args.output_dir)
    print(f"manifest_path={manifest_path}")
    print(f"labels={len(alloy.labels)}")
    print(f"sub_models={','.join(alloy.gang.models)}")
    print(f"validation_examples={len(alloy.validation_examples)}")
    return 0


def _add_train_command(subparsers: Any) -> None:
    """Register train subcommand."""
    parser = subparsers.add_parser("train", help="Train an alloy from annotated documents")
    parser.add_argument("--name", required=True, help="Alloy name")
    parser.add_argument("--documents", required=True, help="JSONL training documents file")
    parser.add_argument(
        "--labels-and-rules",
        required=True,
        help="JSON or YAML file with rules, uuid_to_label and task_type",
    )
    parser.add_argument(
        "--fitter-file",
        required=True,
        help="Python file defining melt(raw_data, data_generator, pipeline_config, task_type)",
    )
    parser.add_argument("--output-dir", required=True, help="Alloy artifact output directory")
    parser.add_argument("--config", help="Optional JSON or YAML training config file")
