"""Pod enrichment index persistence.

The index maps ``namespace/name`` to the host, UID, and owner data a
log viewer needs to correlate pod logs with cluster context. It is
loaded at the start of a pod ingestion pass, updated in memory, and
rewritten wholesale only when the pass succeeds.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

from core.errors import LogsViewerIngestError
from core.logging_config import get_logger
from core.types import EnrichmentEntry, PodRecord

_LOGGER = get_logger(__name__)

HOST_NAME_FIELD = "host.name"
HOST_IP_FIELD = "host.ip"
POD_UID_FIELD = "pod.uid"
OWNER_REFERENCES_FIELD = "pod.ownerReferences"


class EnrichmentIndex:
    """In-memory enrichment table keyed by ``namespace/name``."""

    def __init__(self, entries: Mapping[str, EnrichmentEntry] | None = None) -> None:
        self._entries: dict[str, EnrichmentEntry] = dict(entries or {})

    @classmethod
    def load(cls, index_path: Path) -> "EnrichmentIndex":
        """Load a persisted index, starting empty when absent or unreadable.

        Args:
            index_path: Persisted JSON index file.

        Returns:
            Loaded index; never raises for a missing or corrupt file.
        """
        if not index_path.exists():
            _LOGGER.info("enrichment_index_missing", index_path=str(index_path))
            return cls()
        try:
            payload = json.loads(index_path.read_text(encoding="utf-8"))
            return cls.from_payload(payload)
        except (OSError, ValueError) as error:
            _LOGGER.warning(
                "enrichment_index_unreadable",
                index_path=str(index_path),
                error=str(error),
            )
            return cls()

    @classmethod
    def from_payload(cls, payload: object) -> "EnrichmentIndex":
        """Build an index from its JSON payload.

        Raises:
            ValueError: If the payload does not have the index shape.
        """
        if not isinstance(payload, dict):
            raise ValueError("enrichment index must be a JSON object")
        return cls({str(key): _entry_from_payload(key, value) for key, value in payload.items()})

    def upsert_pod(self, pod: PodRecord) -> str:
        """Insert or overwrite the entry for a pod.

        Args:
            pod: Decoded pod record.

        Returns:
            Index key the pod was stored under.
        """
        key = enrichment_key(pod.namespace, pod.name)
        self._entries[key] = entry_from_pod(pod)
        return key

    def get(self, key: str) -> EnrichmentEntry | None:
        return self._entries.get(key)

    def entries(self) -> dict[str, EnrichmentEntry]:
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def to_payload(self) -> dict[str, dict[str, Any]]:
        """Serialize all entries into the persisted JSON shape."""
        return {key: _entry_to_payload(entry) for key, entry in self._entries.items()}

    def write(self, index_path: Path) -> None:
        """Replace the persisted index with the full in-memory table.

        The payload is written to a sibling temporary file and renamed
        over the target so readers never see a partial file.

        Args:
            index_path: Persisted JSON index file.

        Raises:
            LogsViewerIngestError: If the index cannot be written.
        """
        temporary_path = index_path.with_name(f"{index_path.name}.tmp")
        serialized = json.dumps(self.to_payload(), indent=2, sort_keys=True) + "\n"
        try:
            index_path.parent.mkdir(parents=True, exist_ok=True)
            temporary_path.write_text(serialized, encoding="utf-8")
            os.replace(temporary_path, index_path)
        except OSError as error:
            raise LogsViewerIngestError(
                f"Failed to write enrichment index at {index_path}: {error}. "
                "Check write permissions on the data root."
            ) from error
        _LOGGER.info(
            "enrichment_index_written",
            index_path=str(index_path),
            entry_count=len(self._entries),
        )


def enrichment_key(namespace: str, name: str) -> str:
    """Build the ``namespace/name`` index key."""
    return f"{namespace}/{name}"


def entry_from_pod(pod: PodRecord) -> EnrichmentEntry:
    """Derive enrichment data from a pod record."""
    return EnrichmentEntry(
        host_name=pod.node_name,
        host_ip=pod.host_ip,
        pod_uid=pod.uid,
        owner_uids=pod.owner_uids,
    )


def _entry_to_payload(entry: EnrichmentEntry) -> dict[str, Any]:
    payload: dict[str, Any] = {
        HOST_NAME_FIELD: entry.host_name,
        HOST_IP_FIELD: entry.host_ip,
        POD_UID_FIELD: entry.pod_uid,
    }
    if entry.owner_uids:
        payload[OWNER_REFERENCES_FIELD] = list(entry.owner_uids)
    return payload


def _entry_from_payload(key: object, payload: object) -> EnrichmentEntry:
    if not isinstance(payload, dict):
        raise ValueError(f"enrichment entry '{key}' must be a JSON object")
    owner_uids = payload.get(OWNER_REFERENCES_FIELD) or []
    if not isinstance(owner_uids, list) or not all(isinstance(uid, str) for uid in owner_uids):
        raise ValueError(f"enrichment entry '{key}' has invalid '{OWNER_REFERENCES_FIELD}'")
    return EnrichmentEntry(
        host_name=_string_field(key, payload, HOST_NAME_FIELD),
        host_ip=_string_field(key, payload, HOST_IP_FIELD),
        pod_uid=_string_field(key, payload, POD_UID_FIELD),
        owner_uids=tuple(owner_uids),
    )


def _string_field(key: object, payload: Mapping[str, Any], field_name: str) -> str:
    value = payload.get(field_name, "")
    if not isinstance(value, str):
        raise ValueError(f"enrichment entry '{key}' has non-string '{field_name}'")
    return value
