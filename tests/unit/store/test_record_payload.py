"""Unit tests for record JSONL serialization."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
import yaml

from core.types import PodRecord, ResourceRecord
from store.record_payload import read_record_payloads, record_to_json_line


def test_record_to_json_line_carries_identity_and_manifest() -> None:
    """Rows should expose kind, identity, provenance, and the raw manifest."""
    record = ResourceRecord(
        kind="Node",
        manifest={"kind": "Node", "metadata": {"name": "worker-a", "uid": "node-uid"}},
        source_path="nodes/worker-a.yaml",
    )

    payload = json.loads(record_to_json_line(record))

    assert payload == {
        "kind": "Node",
        "manifest": {"kind": "Node", "metadata": {"name": "worker-a", "uid": "node-uid"}},
        "name": "worker-a",
        "namespace": "",
        "source_path": "nodes/worker-a.yaml",
        "uid": "node-uid",
    }


def test_record_to_json_line_sorts_keys() -> None:
    """Serialized rows should be byte-stable across runs."""
    record = PodRecord(kind="Pod", manifest={"spec": {}, "kind": "Pod"}, source_path="p.yaml")

    line = record_to_json_line(record)

    assert line.index('"kind"') < line.index('"manifest"') < line.index('"source_path"')


def test_record_to_json_line_encodes_dates_and_bytes() -> None:
    """YAML dates and binary scalars should become JSON strings."""
    record = ResourceRecord(
        kind="Node",
        manifest={"metadata": {"name": "n"}, "day": date(2024, 3, 1), "blob": b"\x00\x01"},
        source_path="n.yaml",
    )

    manifest = json.loads(record_to_json_line(record))["manifest"]

    assert (manifest["day"], manifest["blob"]) == ("2024-03-01", "AAE=")


def test_record_to_json_line_rejects_unknown_types() -> None:
    """Values without a JSON representation should raise ``TypeError``."""
    record = ResourceRecord(kind="Node", manifest={"value": {1, 2}}, source_path="n.yaml")

    with pytest.raises(TypeError):
        record_to_json_line(record)

    assert record.name == ""


def test_read_record_payloads_skips_blank_lines(tmp_path: Path) -> None:
    """Blank rows should be ignored when reading a records file."""
    records_path = tmp_path / "Pod.jsonl"
    records_path.write_text('{"name": "a"}\n\n{"name": "b"}\n', encoding="utf-8")

    payloads = read_record_payloads(records_path)

    assert [payload["name"] for payload in payloads] == ["a", "b"]


def test_read_record_payloads_rejects_non_object_rows(tmp_path: Path) -> None:
    """Rows must be JSON objects."""
    records_path = tmp_path / "Pod.jsonl"
    records_path.write_text('{"name": "a"}\n[1, 2]\n', encoding="utf-8")

    with pytest.raises(ValueError, match="line 2"):
        read_record_payloads(records_path)

    assert records_path.exists()


def test_record_to_json_line_keeps_utc_designator() -> None:
    """Unquoted UTC timestamps should be stored with their ``Z`` suffix."""
    manifest = yaml.safe_load(
        "metadata:\n  name: web\n  creationTimestamp: 2024-03-01T10:00:00Z\n"
    )
    record = ResourceRecord(kind="Pod", manifest=manifest, source_path="web.yaml")

    payload = json.loads(record_to_json_line(record))

    assert payload["manifest"]["metadata"]["creationTimestamp"] == "2024-03-01T10:00:00Z"


def test_record_to_json_line_keeps_non_utc_offset() -> None:
    """Timestamps with a non-zero offset should keep that offset."""
    offset_time = datetime(2024, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    record = ResourceRecord(
        kind="Node", manifest={"metadata": {"name": "n"}, "seen": offset_time}, source_path="n.yaml"
    )

    manifest = json.loads(record_to_json_line(record))["manifest"]

    assert manifest["seen"] == "2024-03-01T12:00:00+02:00"
