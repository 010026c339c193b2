"""Asynchronous record sink backed by per-kind JSONL files.

Ingestion hands records to ``add`` without waiting for persistence.
A pool of worker threads drains the queue until a one-shot stop
signal, then finishes whatever is still queued and exits.
"""

from __future__ import annotations

import queue
import threading
from pathlib import Path
from typing import Protocol

from core.constants import STORE_RECORDS_SUFFIX
from core.errors import LogsViewerStoreError
from core.logging_config import get_logger
from core.types import SUPPORTED_RESOURCE_KINDS, ResourceKind, ResourceRecord
from store.record_payload import record_to_json_line

_LOGGER = get_logger(__name__)


class RecordSink(Protocol):
    """Destination for decoded resource records."""

    def add(self, record: ResourceRecord) -> None:
        """Accept one record for persistence."""


class ObjectStore:
    """Worker-pool record sink writing one JSONL file per resource kind."""

    def __init__(self, store_root: Path, workers: int = 1) -> None:
        """Create an idle store.

        Args:
            store_root: Directory for per-kind record files.
            workers: Number of persistence worker threads.
        """
        if workers < 1:
            raise LogsViewerStoreError(
                f"Object store needs at least one worker, got {workers}."
            )
        self._store_root = store_root
        self._worker_count = workers
        self._queue: queue.Queue[ResourceRecord | None] = queue.Queue()
        self._state_lock = threading.Lock()
        self._stopped = False
        self._threads: list[threading.Thread] = []
        self._file_locks = {kind: threading.Lock() for kind in SUPPORTED_RESOURCE_KINDS}
        self._stats_lock = threading.Lock()
        self._persisted_count = 0
        self._failures: list[str] = []

    @property
    def persisted_count(self) -> int:
        with self._stats_lock:
            return self._persisted_count

    def records_path(self, kind: ResourceKind) -> Path:
        """Return the JSONL file holding records of a kind."""
        return self._store_root / f"{kind}{STORE_RECORDS_SUFFIX}"

    def start(self) -> None:
        """Launch the persistence workers.

        Raises:
            LogsViewerStoreError: If the store was already started or stopped.
        """
        with self._state_lock:
            if self._threads or self._stopped:
                raise LogsViewerStoreError("Object store can only be started once.")
            self._ensure_store_root()
            for worker_index in range(self._worker_count):
                worker = threading.Thread(
                    target=self._drain_queue,
                    name=f"ObjectStoreWorker-{worker_index}",
                    daemon=True,
                )
                worker.start()
                self._threads.append(worker)
        _LOGGER.info(
            "object_store_started",
            store_root=str(self._store_root),
            workers=self._worker_count,
        )

    def add(self, record: ResourceRecord) -> None:
        """Queue a record for asynchronous persistence.

        Raises:
            LogsViewerStoreError: If the store has been stopped.
        """
        with self._state_lock:
            if self._stopped:
                raise LogsViewerStoreError(
                    f"Object store is stopped; cannot add {record.kind} {record.name}."
                )
            self._queue.put(record)

    def stop(self) -> None:
        """Signal the workers, drain queued records, and wait for them.

        Calling ``stop`` again is a no-op. A store that was never started
        drains its queue on the calling thread.

        Raises:
            LogsViewerStoreError: If any queued record failed to persist.
        """
        with self._state_lock:
            if self._stopped:
                return
            self._stopped = True
            for _ in range(max(len(self._threads), 1)):
                self._queue.put(None)
        if self._threads:
            for worker in self._threads:
                worker.join()
        else:
            self._ensure_store_root()
            self._drain_queue()
        _LOGGER.info(
            "object_store_stopped",
            persisted_count=self.persisted_count,
            failure_count=len(self._failures),
        )
        if self._failures:
            raise LogsViewerStoreError(
                f"Failed to persist {len(self._failures)} record(s); first failure: "
                f"{self._failures[0]}"
            )

    def _ensure_store_root(self) -> None:
        try:
            self._store_root.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise LogsViewerStoreError(
                f"Failed to create object store directory {self._store_root}: {error}."
            ) from error

    def _drain_queue(self) -> None:
        while True:
            record = self._queue.get()
            if record is None:
                return
            self._persist(record)

    def _persist(self, record: ResourceRecord) -> None:
        records_path = self.records_path(record.kind)
        try:
            line = record_to_json_line(record)
            with self._file_locks[record.kind]:
                with records_path.open("a", encoding="utf-8") as records_file:
                    records_file.write(line + "\n")
        except (OSError, TypeError, ValueError) as error:
            message = f"{record.kind} {record.namespace}/{record.name}: {error}"
            _LOGGER.error(
                "store_write_failed",
                kind=record.kind,
                source_path=record.source_path,
                error=str(error),
            )
            with self._stats_lock:
                self._failures.append(message)
            return
        with self._stats_lock:
            self._persisted_count += 1
