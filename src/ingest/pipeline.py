"""Must-gather import orchestration.

This module coordinates archive extraction and per-kind ingestion
so one call turns a diagnostic bundle into forwarded records and an
up-to-date pod enrichment index.
"""

from __future__ import annotations

import threading
from pathlib import Path

from core.config import LogsViewerConfig
from core.logging_config import get_logger
from core.types import ImportSummary
from extract.archive_extractor import extract_archive
from ingest.resource_ingestor import ResourceIngestor

_LOGGER = get_logger(__name__)


def import_must_gather(
    archive_path: str | Path,
    config: LogsViewerConfig,
    ingestor: ResourceIngestor,
    remove_source: bool = True,
    cancel_event: threading.Event | None = None,
) -> ImportSummary:
    """Extract a must-gather archive and ingest every resource kind.

    Args:
        archive_path: Gzip-compressed tar bundle.
        config: Runtime configuration providing the extraction root.
        ingestor: Ingestor bound to the same extraction root.
        remove_source: Delete the archive after successful extraction.
        cancel_event: Optional signal that stops ingestion between files.

    Returns:
        Extraction result and per-kind ingestion reports.

    Raises:
        LogsViewerExtractionError: If the archive cannot be extracted.
        LogsViewerIngestError: If a resource kind fails to ingest.
    """
    extraction = extract_archive(archive_path, config.extraction_root, remove_source)
    reports = ingestor.ingest_all(cancel_event)
    _LOGGER.info(
        "must_gather_imported",
        archive_path=str(archive_path),
        file_count=len(extraction.written_files),
        record_count=sum(report.record_count for report in reports),
        failure_count=sum(len(report.failures) for report in reports),
    )
    return ImportSummary(extraction=extraction, reports=reports)
