"""Shared typed models.

This module defines immutable data models used by the extractor,
ingestor, enrichment index, and record sink to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Mapping

ResourceKind = Literal[
    "Pod",
    "Node",
    "PersistentVolumeClaim",
    "VirtualMachineInstance",
    "VirtualMachineInstanceMigration",
]
SUPPORTED_RESOURCE_KINDS: tuple[ResourceKind, ...] = (
    "Pod",
    "Node",
    "PersistentVolumeClaim",
    "VirtualMachineInstance",
    "VirtualMachineInstanceMigration",
)
DiscoveryTier = Literal["instance", "combined", "none"]


@dataclass(frozen=True)
class ResourceRecord:
    """Decoded cluster resource manifest tagged with its kind.

    Attributes:
        kind: Resource kind tag.
        manifest: Decoded manifest mapping as found on disk.
        source_path: File the manifest was decoded from.
    """

    kind: ResourceKind
    manifest: Mapping[str, Any]
    source_path: str

    @property
    def namespace(self) -> str:
        return str(_metadata(self.manifest).get("namespace") or "")

    @property
    def name(self) -> str:
        return str(_metadata(self.manifest).get("name") or "")

    @property
    def uid(self) -> str:
        return str(_metadata(self.manifest).get("uid") or "")

    def to_payload(self) -> dict[str, Any]:
        """Serialize record into a sink payload.

        Returns:
            Dictionary carrying the kind tag, identity, and manifest.
        """
        return {
            "kind": self.kind,
            "namespace": self.namespace,
            "name": self.name,
            "uid": self.uid,
            "source_path": self.source_path,
            "manifest": dict(self.manifest),
        }


@dataclass(frozen=True)
class PodRecord(ResourceRecord):
    """Pod record with the fields needed for log enrichment.

    Attributes:
        node_name: Node the pod was scheduled on (``spec.nodeName``).
        host_ip: Reported host IP (``status.hostIP``).
        owner_uids: Owner reference UIDs in manifest order.
    """

    node_name: str = ""
    host_ip: str = ""
    owner_uids: tuple[str, ...] = ()


@dataclass(frozen=True)
class EnrichmentEntry:
    """Per-pod correlation data keyed by ``namespace/name``.

    Attributes:
        host_name: Node name hosting the pod.
        host_ip: Host IP of that node.
        pod_uid: Pod UID.
        owner_uids: Owner reference UIDs; empty when the pod has no owners.
    """

    host_name: str
    host_ip: str
    pod_uid: str
    owner_uids: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtractionResult:
    """Summary of one archive extraction pass.

    Attributes:
        archive_path: Source archive path.
        target_dir: Extraction root directory.
        namespace_root: Segments stripped from every qualifying entry.
        written_files: Destination files in archive order.
        created_dirs: Directory entries materialized.
        renamed_files: Files written under a collision-versioned name.
        source_removed: Whether the source archive was deleted.
    """

    archive_path: Path
    target_dir: Path
    namespace_root: tuple[str, ...]
    written_files: tuple[Path, ...]
    created_dirs: tuple[Path, ...]
    renamed_files: tuple[Path, ...]
    source_removed: bool


@dataclass(frozen=True)
class FileFailure:
    """One file skipped by a tolerant ingestion pass."""

    source_path: str
    reason: str


@dataclass(frozen=True)
class IngestReport:
    """Summary of one resource-kind ingestion call.

    Attributes:
        kind: Ingested resource kind.
        tier: Discovery tier whose pattern produced the files.
        file_count: Number of files read.
        record_count: Number of records forwarded to the sink.
        failures: Files skipped in tolerant mode.
    """

    kind: ResourceKind
    tier: DiscoveryTier
    file_count: int
    record_count: int
    failures: tuple[FileFailure, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ImportSummary:
    """Archive import result: extraction plus per-kind ingestion reports."""

    extraction: ExtractionResult
    reports: tuple[IngestReport, ...]


def _metadata(manifest: Mapping[str, Any]) -> Mapping[str, Any]:
    metadata = manifest.get("metadata")
    return metadata if isinstance(metadata, Mapping) else {}
