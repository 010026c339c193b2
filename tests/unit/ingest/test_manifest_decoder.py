"""Unit tests for manifest decoding."""

from __future__ import annotations

import pytest

from core.errors import LogsViewerDecodeError
from core.types import PodRecord
from ingest.manifest_decoder import (
    build_record,
    decode_manifest,
    decode_manifest_list,
    iter_manifest_stream,
)
from tests.fixture_paths import fixture_path

_POD_FIXTURE = "must_gather/per_instance/namespaces/shop/pods/web-7d9f-abcde/web-7d9f-abcde.yaml"


def test_decode_manifest_builds_pod_enrichment_fields() -> None:
    """Pod decoding should expose node, host IP, UID, and owner UIDs."""
    data = fixture_path(_POD_FIXTURE).read_bytes()

    record = decode_manifest("Pod", data, "web.yaml")

    assert isinstance(record, PodRecord) and (
        record.namespace,
        record.name,
        record.node_name,
        record.host_ip,
        record.uid,
        record.owner_uids,
    ) == (
        "shop",
        "web-7d9f-abcde",
        "worker-a",
        "10.0.0.11",
        "5b0c2a1e-1111-4c3b-9f00-aaaaaaaaaaaa",
        ("rs-uid-0001", "cm-uid-0002"),
    )


def test_decode_manifest_pod_without_owners_has_empty_owner_uids() -> None:
    """Pods without owner references should carry an empty owner tuple."""
    data = b"kind: Pod\nmetadata:\n  name: solo\n  namespace: ns\n"

    record = decode_manifest("Pod", data, "solo.yaml")

    assert isinstance(record, PodRecord) and record.owner_uids == ()


def test_decode_manifest_rejects_kind_mismatch() -> None:
    """A manifest of another kind should not decode as the requested kind."""
    data = b"kind: Service\nmetadata:\n  name: svc\n"

    with pytest.raises(LogsViewerDecodeError):
        decode_manifest("Pod", data, "svc.yaml")

    assert True


def test_decode_manifest_rejects_invalid_yaml() -> None:
    """Malformed YAML should raise a decode error."""
    with pytest.raises(LogsViewerDecodeError):
        decode_manifest("Node", b"metadata: [unterminated\n", "node.yaml")

    assert True


def test_decode_manifest_rejects_empty_document() -> None:
    """An empty file is not a manifest."""
    with pytest.raises(LogsViewerDecodeError):
        decode_manifest("Node", b"", "empty.yaml")

    assert True


def test_decode_manifest_rejects_non_string_host_ip() -> None:
    """Pod enrichment fields must be strings when present."""
    data = b"kind: Pod\nmetadata:\n  name: p\nstatus:\n  hostIP: [10, 0, 0, 1]\n"

    with pytest.raises(LogsViewerDecodeError):
        decode_manifest("Pod", data, "p.yaml")

    assert True


def test_iter_manifest_stream_yields_each_document() -> None:
    """Three concatenated documents should decode into three records."""
    data = fixture_path(
        "must_gather/combined/namespaces/shop/kubevirt.io/virtualmachineinstances.yaml"
    ).read_bytes()

    records = list(iter_manifest_stream("VirtualMachineInstance", data, "vmis.yaml"))

    assert [record.name for record in records] == ["vm-one", "vm-two", "vm-three"]


def test_iter_manifest_stream_skips_empty_documents() -> None:
    """Empty documents between separators should not produce records."""
    data = b"---\n---\nkind: Node\nmetadata:\n  name: n1\n---\n"

    records = list(iter_manifest_stream("Node", data, "nodes.yaml"))

    assert [record.name for record in records] == ["n1"]


def test_iter_manifest_stream_is_lazy_until_bad_document() -> None:
    """Records before a malformed document are yielded before the error."""
    data = b"kind: Node\nmetadata:\n  name: n1\n---\nmetadata: [broken\n"
    stream = iter_manifest_stream("Node", data, "nodes.yaml")

    first_record = next(stream)

    with pytest.raises(LogsViewerDecodeError):
        next(stream)
    assert first_record.name == "n1"


def test_decode_manifest_list_returns_items_in_order() -> None:
    """List items should become records equal to the original items."""
    data = b"""
kind: List
items:
- kind: PersistentVolumeClaim
  metadata: {name: a, namespace: ns}
- kind: PersistentVolumeClaim
  metadata: {name: b, namespace: ns}
"""

    records = decode_manifest_list("PersistentVolumeClaim", data, "pvcs.yaml")

    assert [record.manifest for record in records] == [
        {"kind": "PersistentVolumeClaim", "metadata": {"name": "a", "namespace": "ns"}},
        {"kind": "PersistentVolumeClaim", "metadata": {"name": "b", "namespace": "ns"}},
    ]


def test_decode_manifest_list_accepts_typed_list_kind() -> None:
    """``<Kind>List`` documents should be accepted like ``List``."""
    data = b"kind: VirtualMachineInstanceMigrationList\nitems:\n- metadata: {name: m1}\n"

    records = decode_manifest_list("VirtualMachineInstanceMigration", data, "vmims.yaml")

    assert [record.name for record in records] == ["m1"]


def test_decode_manifest_list_without_items_is_empty() -> None:
    """A list document without items should yield no records."""
    records = decode_manifest_list("PersistentVolumeClaim", b"kind: List\n", "pvcs.yaml")

    assert records == []


def test_decode_manifest_list_rejects_single_resource_document() -> None:
    """A non-list kind at the top level is not a combined list file."""
    data = b"kind: PersistentVolumeClaim\nmetadata: {name: a}\n"

    with pytest.raises(LogsViewerDecodeError):
        decode_manifest_list("PersistentVolumeClaim", data, "pvcs.yaml")

    assert True


def test_build_record_rejects_non_mapping_document() -> None:
    """Scalars and sequences are not manifests."""
    with pytest.raises(LogsViewerDecodeError):
        build_record("Node", ["not", "a", "mapping"], "nodes.yaml")

    assert True
