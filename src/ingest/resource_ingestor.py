"""Per-kind resource ingestion from an extracted must-gather tree.

This module discovers manifest files for one resource kind, decodes
whichever physical encoding the producer used, forwards every record to
a sink, and maintains the pod enrichment index during pod passes.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from core.errors import (
    LogsViewerCancelledError,
    LogsViewerIngestError,
)
from core.logging_config import get_logger
from core.types import (
    SUPPORTED_RESOURCE_KINDS,
    FileFailure,
    IngestReport,
    PodRecord,
    ResourceKind,
    ResourceRecord,
)
from ingest.discovery import (
    DISCOVERY_PLANS,
    CombinedShape,
    DiscoveredFiles,
    discover_resource_files,
)
from ingest.enrichment_index import EnrichmentIndex
from ingest.manifest_decoder import decode_manifest, decode_manifest_list, iter_manifest_stream
from store.object_store import RecordSink

_LOGGER = get_logger(__name__)


@dataclass
class IngestSession:
    """Mutable state owned by exactly one ingestion call.

    Attributes:
        kind: Resource kind being ingested.
        sink: Record destination.
        fail_fast: Abort on the first failing file instead of recording it.
        cancel_event: Optional cooperative cancellation signal.
        enrichment_index: Pod enrichment table, only set for pod passes.
        record_count: Records forwarded so far.
        failures: Files skipped in tolerant mode.
    """

    kind: ResourceKind
    sink: RecordSink
    fail_fast: bool
    cancel_event: threading.Event | None = None
    enrichment_index: EnrichmentIndex | None = None
    record_count: int = 0
    failures: list[FileFailure] = field(default_factory=list)

    def check_cancelled(self) -> None:
        """Raise when the pass has been asked to stop."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise LogsViewerCancelledError(
                f"Ingestion of {self.kind} cancelled after {self.record_count} record(s)."
            )

    def forward(self, record: ResourceRecord) -> None:
        """Hand one record to the enrichment index and the sink."""
        if self.enrichment_index is not None and isinstance(record, PodRecord):
            self.enrichment_index.upsert_pod(record)
        self.sink.add(record)
        self.record_count += 1


class ResourceIngestor:
    """Ingests resource kinds from one extraction root.

    A single lock serializes every ingestion call on an instance, so at
    most one pass of any kind runs at a time.
    """

    def __init__(
        self,
        extraction_root: Path,
        sink: RecordSink,
        enrichment_data_file: Path,
        fail_fast: bool = True,
    ) -> None:
        self._extraction_root = extraction_root
        self._sink = sink
        self._enrichment_data_file = enrichment_data_file
        self._fail_fast = fail_fast
        self._lock = threading.Lock()

    def ingest(
        self,
        kind: ResourceKind,
        cancel_event: threading.Event | None = None,
    ) -> IngestReport:
        """Discover, decode, and forward every manifest of one kind.

        Args:
            kind: Resource kind to ingest.
            cancel_event: Optional signal checked between files and records.

        Returns:
            Ingestion report for the kind.

        Raises:
            LogsViewerDecodeError: If a manifest is invalid in fail-fast mode.
            LogsViewerDiscoveryError: If a discovery pattern is malformed.
            LogsViewerCancelledError: If ``cancel_event`` is set mid-pass.
            LogsViewerIngestError: If a file or the enrichment index cannot be
                read or written.
        """
        plan = DISCOVERY_PLANS.get(kind)
        if plan is None:
            raise LogsViewerIngestError(
                f"Unsupported resource kind '{kind}'. "
                f"Supported kinds: {', '.join(SUPPORTED_RESOURCE_KINDS)}."
            )
        with self._lock:
            session = self._open_session(kind, cancel_event)
            discovered = discover_resource_files(self._extraction_root, plan)
            for path in discovered.paths:
                session.check_cancelled()
                self._ingest_file(session, path, discovered)
            if session.enrichment_index is not None:
                session.enrichment_index.write(self._enrichment_data_file)
        report = IngestReport(
            kind=kind,
            tier=discovered.tier,
            file_count=len(discovered.paths),
            record_count=session.record_count,
            failures=tuple(session.failures),
        )
        _log_kind_ingested(report)
        return report

    def ingest_all(self, cancel_event: threading.Event | None = None) -> tuple[IngestReport, ...]:
        """Ingest every supported kind in a fixed order, pods first."""
        return tuple(self.ingest(kind, cancel_event) for kind in SUPPORTED_RESOURCE_KINDS)

    def _open_session(
        self,
        kind: ResourceKind,
        cancel_event: threading.Event | None,
    ) -> IngestSession:
        enrichment_index = None
        if kind == "Pod":
            enrichment_index = EnrichmentIndex.load(self._enrichment_data_file)
        return IngestSession(
            kind=kind,
            sink=self._sink,
            fail_fast=self._fail_fast,
            cancel_event=cancel_event,
            enrichment_index=enrichment_index,
        )

    def _ingest_file(
        self,
        session: IngestSession,
        path: Path,
        discovered: DiscoveredFiles,
    ) -> None:
        try:
            data = _read_manifest_file(path)
            for record in _decode_records(session.kind, data, str(path), discovered.combined_shape):
                session.check_cancelled()
                session.forward(record)
        except LogsViewerCancelledError:
            raise
        except LogsViewerIngestError as error:
            if session.fail_fast:
                raise
            session.failures.append(FileFailure(source_path=str(path), reason=str(error)))
            _LOGGER.warning(
                "manifest_skipped",
                kind=session.kind,
                source_path=str(path),
                error=str(error),
            )


def _read_manifest_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as error:
        raise LogsViewerIngestError(
            f"Failed to read manifest {path}: {error}. Check the extracted tree."
        ) from error


def _decode_records(
    kind: ResourceKind,
    data: bytes,
    source_path: str,
    combined_shape: CombinedShape | None,
) -> Iterable[ResourceRecord]:
    """Pick the decoder matching the file's physical encoding."""
    if combined_shape == "stream":
        return iter_manifest_stream(kind, data, source_path)
    if combined_shape == "list":
        return decode_manifest_list(kind, data, source_path)
    return (decode_manifest(kind, data, source_path),)


def _log_kind_ingested(report: IngestReport) -> None:
    _LOGGER.info(
        "kind_ingested",
        kind=report.kind,
        tier=report.tier,
        file_count=report.file_count,
        record_count=report.record_count,
        failure_count=len(report.failures),
    )
