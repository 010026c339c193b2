"""LogsViewer CLI entry points.
This module exposes commands for must-gather import and enrichment lookup.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import LogsViewerConfig
from core.errors import LogsViewerError
from core.types import SUPPORTED_RESOURCE_KINDS, IngestReport
from store.ingest_sdk import LogsViewerClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="logsviewer", description="LogsViewer ingest CLI")
    parser.add_argument("--data-root", help="Override LOGSVIEWER_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_import_command(subparsers)
    _add_ingest_command(subparsers)
    _add_lookup_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the LogsViewer CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
    except LogsViewerError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    try:
        return _run_command(parser, client, args)
    except LogsViewerError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


def _run_command(
    parser: argparse.ArgumentParser,
    client: LogsViewerClient,
    args: argparse.Namespace,
) -> int:
    """Dispatch a parsed command, always stopping the client store."""
    try:
        if args.command == "import":
            return _run_import_command(client, args)
        if args.command == "ingest":
            return _run_ingest_command(client, args)
        if args.command == "lookup":
            return _run_lookup_command(client, args)
        parser.error(f"Unsupported command: {args.command}")
        return 2
    finally:
        client.close()


def _build_client(data_root: str | None) -> LogsViewerClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = LogsViewerConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return LogsViewerClient(config)


def _run_import_command(client: LogsViewerClient, args: argparse.Namespace) -> int:
    """Handle import command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    summary = client.import_archive(args.archive, remove_source=not args.keep_archive)
    _print_reports(summary.reports)
    return 0


def _run_ingest_command(client: LogsViewerClient, args: argparse.Namespace) -> int:
    """Handle ingest command."""
    if args.kind:
        reports: tuple[IngestReport, ...] = (client.ingest(args.kind),)
    else:
        reports = client.ingest_all()
    _print_reports(reports)
    return 0


def _run_lookup_command(client: LogsViewerClient, args: argparse.Namespace) -> int:
    """Handle lookup command.

    Returns:
        ``0`` when the pod is indexed, ``1`` otherwise.
    """
    entry = client.lookup(args.namespace, args.name)
    if entry is None:
        print(f"no enrichment data for {args.namespace}/{args.name}", file=sys.stderr)
        return 1
    payload: dict[str, object] = {
        "host.name": entry.host_name,
        "host.ip": entry.host_ip,
        "pod.uid": entry.pod_uid,
    }
    if entry.owner_uids:
        payload["pod.ownerReferences"] = list(entry.owner_uids)
    print(json.dumps(payload, sort_keys=True))
    return 0


def _print_reports(reports: Sequence[IngestReport]) -> None:
    for report in reports:
        print(f"{report.kind}\t{report.record_count}\t{report.tier}\t{len(report.failures)}")


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser(
        "import", help="Extract a must-gather archive and ingest all resources"
    )
    parser.add_argument("archive", help="Path to a .tar.gz must-gather bundle")
    parser.add_argument(
        "--keep-archive",
        action="store_true",
        help="Do not delete the archive after a successful extraction",
    )


def _add_ingest_command(subparsers: Any) -> None:
    """Register ingest subcommand."""
    parser = subparsers.add_parser(
        "ingest", help="Ingest resources from the already-extracted tree"
    )
    parser.add_argument(
        "--kind",
        choices=SUPPORTED_RESOURCE_KINDS,
        help="Ingest a single resource kind (default: all kinds)",
    )


def _add_lookup_command(subparsers: Any) -> None:
    """Register lookup subcommand."""
    parser = subparsers.add_parser("lookup", help="Print enrichment data for a pod")
    parser.add_argument("namespace", help="Pod namespace")
    parser.add_argument("name", help="Pod name")
