"""Resource manifest discovery under an extraction root.

Different must-gather producer versions lay resources out differently:
one file per object, or one combined file per namespace. Each kind has
a per-instance glob pattern and, for some kinds, a combined-file pattern
that is only consulted when the per-instance pattern matches nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping

from core.errors import LogsViewerDiscoveryError
from core.types import DiscoveryTier, ResourceKind

CombinedShape = Literal["list", "stream"]


@dataclass(frozen=True)
class DiscoveryPlan:
    """Glob patterns used to find manifests of one resource kind.

    Attributes:
        kind: Resource kind the patterns locate.
        instance_pattern: One-file-per-object pattern, tried first.
        combined_pattern: Combined-file pattern, tried when the first is empty.
        combined_shape: Physical encoding of combined files.
    """

    kind: ResourceKind
    instance_pattern: str
    combined_pattern: str | None = None
    combined_shape: CombinedShape | None = None


@dataclass(frozen=True)
class DiscoveredFiles:
    """Files selected for one ingestion call."""

    tier: DiscoveryTier
    paths: tuple[Path, ...]
    combined_shape: CombinedShape | None = None


DISCOVERY_PLANS: Mapping[ResourceKind, DiscoveryPlan] = {
    "Pod": DiscoveryPlan(
        kind="Pod",
        instance_pattern="namespaces/*/pods/*/*.yaml",
    ),
    "Node": DiscoveryPlan(
        kind="Node",
        instance_pattern="cluster-scoped-resources/core/nodes/*.yaml",
    ),
    "PersistentVolumeClaim": DiscoveryPlan(
        kind="PersistentVolumeClaim",
        instance_pattern="namespaces/*/core/persistentvolumeclaims/*.yaml",
        combined_pattern="namespaces/*/core/persistentvolumeclaims.yaml",
        combined_shape="list",
    ),
    "VirtualMachineInstance": DiscoveryPlan(
        kind="VirtualMachineInstance",
        instance_pattern="namespaces/*/kubevirt.io/virtualmachineinstances/*.yaml",
        combined_pattern="namespaces/*/kubevirt.io/virtualmachineinstances.yaml",
        combined_shape="stream",
    ),
    "VirtualMachineInstanceMigration": DiscoveryPlan(
        kind="VirtualMachineInstanceMigration",
        instance_pattern="namespaces/*/kubevirt.io/virtualmachineinstancemigrations/*.yaml",
        combined_pattern="namespaces/*/kubevirt.io/virtualmachineinstancemigrations.yaml",
        combined_shape="list",
    ),
}


def discover_resource_files(extraction_root: Path, plan: DiscoveryPlan) -> DiscoveredFiles:
    """Select manifest files for a resource kind.

    Args:
        extraction_root: Root of the extracted must-gather tree.
        plan: Discovery patterns for the kind.

    Returns:
        Sorted files from the per-instance tier, or from the combined tier
        when the per-instance tier matched nothing.

    Raises:
        LogsViewerDiscoveryError: If a pattern is malformed.
    """
    instance_paths = _glob_files(extraction_root, plan.instance_pattern)
    if instance_paths:
        return DiscoveredFiles(tier="instance", paths=instance_paths)
    if plan.combined_pattern is None:
        return DiscoveredFiles(tier="none", paths=())
    combined_paths = _glob_files(extraction_root, plan.combined_pattern)
    if not combined_paths:
        return DiscoveredFiles(tier="none", paths=())
    return DiscoveredFiles(
        tier="combined",
        paths=combined_paths,
        combined_shape=plan.combined_shape,
    )


def _glob_files(extraction_root: Path, pattern: str) -> tuple[Path, ...]:
    """Return sorted regular files matching a relative glob pattern."""
    try:
        matches = extraction_root.glob(pattern)
        return tuple(sorted(path for path in matches if path.is_file()))
    except (ValueError, NotImplementedError) as error:
        raise LogsViewerDiscoveryError(
            f"Invalid discovery pattern '{pattern}' under {extraction_root}: {error}."
        ) from error
