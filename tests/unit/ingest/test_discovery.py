"""Unit tests for resource manifest discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import LogsViewerDiscoveryError
from ingest.discovery import DISCOVERY_PLANS, DiscoveryPlan, discover_resource_files
from tests.fixture_paths import copy_must_gather_tree


def test_discover_prefers_per_instance_files(tmp_path: Path) -> None:
    """Combined files must be ignored while per-instance files exist."""
    root = copy_must_gather_tree("per_instance", tmp_path / "space")

    discovered = discover_resource_files(root, DISCOVERY_PLANS["VirtualMachineInstance"])

    assert discovered.tier == "instance" and [path.name for path in discovered.paths] == [
        "vm-billing.yaml"
    ]


def test_discover_falls_back_to_combined_stream(tmp_path: Path) -> None:
    """Combined VMI files should be selected with the stream shape."""
    root = copy_must_gather_tree("combined", tmp_path / "space")

    discovered = discover_resource_files(root, DISCOVERY_PLANS["VirtualMachineInstance"])

    assert (discovered.tier, discovered.combined_shape, len(discovered.paths)) == (
        "combined",
        "stream",
        1,
    )


def test_discover_falls_back_to_combined_list(tmp_path: Path) -> None:
    """Combined PVC files should be selected with the list shape."""
    root = copy_must_gather_tree("combined", tmp_path / "space")

    discovered = discover_resource_files(root, DISCOVERY_PLANS["PersistentVolumeClaim"])

    assert discovered.combined_shape == "list"


def test_discover_returns_none_tier_without_matches(tmp_path: Path) -> None:
    """Kinds with no files and no combined pattern should report no tier."""
    root = copy_must_gather_tree("combined", tmp_path / "space")

    discovered = discover_resource_files(root, DISCOVERY_PLANS["Node"])

    assert discovered.tier == "none" and discovered.paths == ()


def test_discover_sorts_matches(tmp_path: Path) -> None:
    """Discovery order should be stable regardless of directory listing order."""
    root = copy_must_gather_tree("per_instance", tmp_path / "space")

    discovered = discover_resource_files(root, DISCOVERY_PLANS["Pod"])

    assert discovered.paths == tuple(sorted(discovered.paths))


def test_discover_raises_for_malformed_pattern(tmp_path: Path) -> None:
    """An empty glob pattern is a programming error surfaced as discovery error."""
    plan = DiscoveryPlan(kind="Pod", instance_pattern="")

    with pytest.raises(LogsViewerDiscoveryError):
        discover_resource_files(tmp_path, plan)

    assert plan.combined_pattern is None
