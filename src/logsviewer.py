"""Public SDK surface for LogsViewer ingestion.

This module provides a stable import path for library users.
It re-exports the primary client and typed models.
"""

from __future__ import annotations

from core.config import LogsViewerConfig
from core.types import (
    SUPPORTED_RESOURCE_KINDS,
    EnrichmentEntry,
    ExtractionResult,
    ImportSummary,
    IngestReport,
    PodRecord,
    ResourceKind,
    ResourceRecord,
)
from extract.archive_extractor import extract_archive
from ingest.resource_ingestor import ResourceIngestor
from store.ingest_sdk import LogsViewerClient
from store.object_store import ObjectStore, RecordSink

__all__ = [
    "EnrichmentEntry",
    "ExtractionResult",
    "ImportSummary",
    "IngestReport",
    "LogsViewerClient",
    "LogsViewerConfig",
    "ObjectStore",
    "PodRecord",
    "RecordSink",
    "ResourceIngestor",
    "ResourceKind",
    "ResourceRecord",
    "SUPPORTED_RESOURCE_KINDS",
    "extract_archive",
]
