"""Shared JSONL serialization for resource record payloads.

This module centralizes record JSON serialization logic.
It is reused by the object store writers and by record readers.
"""

from __future__ import annotations

import base64
import json
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

from core.types import ResourceRecord


def record_to_json_line(record: ResourceRecord) -> str:
    """Serialize a record into one JSONL row.

    Args:
        record: Resource record instance.

    Returns:
        JSON text without trailing newline.

    Raises:
        TypeError: If the manifest holds a value JSON cannot represent.
    """
    return json.dumps(record.to_payload(), sort_keys=True, default=_json_default)


def read_record_payloads(records_path: Path) -> list[dict[str, Any]]:
    """Read record payloads from a JSONL file.

    Args:
        records_path: Input JSONL file path.

    Returns:
        Parsed payloads in file order.

    Raises:
        ValueError: If JSONL rows are invalid.
    """
    payloads: list[dict[str, Any]] = []
    for line_number, line in enumerate(records_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        payloads.append(_parse_payload_line(line, line_number))
    return payloads


def _json_default(value: object) -> object:
    """Encode YAML scalar types that have no JSON counterpart.

    UTC timestamps keep the ``Z`` designator Kubernetes manifests use.
    """
    if isinstance(value, datetime) and value.utcoffset() == timedelta(0):
        return f"{value.replace(tzinfo=None).isoformat()}Z"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _parse_payload_line(line: str, line_number: int) -> dict[str, Any]:
    """Parse and validate one JSONL payload row.

    Args:
        line: Raw JSONL line.
        line_number: One-based line number.

    Returns:
        Parsed payload dictionary.

    Raises:
        ValueError: If JSON row is invalid.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise ValueError(f"Invalid JSON at line {line_number}: {error.msg}") from error
    if not isinstance(payload, dict):
        raise ValueError(f"Invalid payload at line {line_number}: expected JSON object")
    return payload
