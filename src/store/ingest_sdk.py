"""Python SDK for must-gather ingestion.

This module exposes high-level APIs for archive import, per-kind
ingestion, and enrichment lookups backed by the object store.
"""

from __future__ import annotations

import threading
from pathlib import Path

from core.config import LogsViewerConfig
from core.types import EnrichmentEntry, ImportSummary, IngestReport, ResourceKind
from ingest.enrichment_index import EnrichmentIndex, enrichment_key
from ingest.pipeline import import_must_gather
from ingest.resource_ingestor import ResourceIngestor
from store.object_store import ObjectStore


class LogsViewerClient:
    """Primary SDK entry point for ingestion workflows."""

    def __init__(self, config: LogsViewerConfig | None = None) -> None:
        """Create SDK client and start its object store workers.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or LogsViewerConfig.from_env()
        self._store = ObjectStore(self._config.store_root, self._config.store_workers)
        self._store.start()
        self._ingestor = ResourceIngestor(
            extraction_root=self._config.extraction_root,
            sink=self._store,
            enrichment_data_file=self._config.enrichment_data_file,
            fail_fast=self._config.fail_fast,
        )

    @property
    def store(self) -> ObjectStore:
        return self._store

    def import_archive(
        self,
        archive_path: str | Path,
        remove_source: bool = True,
        cancel_event: threading.Event | None = None,
    ) -> ImportSummary:
        """Extract a must-gather archive and ingest all resource kinds.

        Args:
            archive_path: Gzip-compressed tar bundle.
            remove_source: Delete the archive after extraction.
            cancel_event: Optional ingestion cancel signal.

        Returns:
            Import summary.
        """
        return import_must_gather(
            archive_path,
            self._config,
            self._ingestor,
            remove_source=remove_source,
            cancel_event=cancel_event,
        )

    def ingest(
        self,
        kind: ResourceKind,
        cancel_event: threading.Event | None = None,
    ) -> IngestReport:
        """Ingest one resource kind from the extraction root."""
        return self._ingestor.ingest(kind, cancel_event)

    def ingest_all(self, cancel_event: threading.Event | None = None) -> tuple[IngestReport, ...]:
        """Ingest every resource kind from the extraction root."""
        return self._ingestor.ingest_all(cancel_event)

    def lookup(self, namespace: str, name: str) -> EnrichmentEntry | None:
        """Return persisted enrichment data for one pod, if any.

        Args:
            namespace: Pod namespace.
            name: Pod name.

        Returns:
            Enrichment entry or ``None`` when the pod is unknown.
        """
        index = EnrichmentIndex.load(self._config.enrichment_data_file)
        return index.get(enrichment_key(namespace, name))

    def close(self) -> None:
        """Stop the object store after draining queued records."""
        self._store.stop()
