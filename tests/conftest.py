"""Pytest configuration and shared fixtures for repository test runs."""

from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
for _import_root in (_PROJECT_ROOT / "src", _PROJECT_ROOT):
    if str(_import_root) not in sys.path:
        sys.path.insert(0, str(_import_root))

from core.types import ResourceRecord  # noqa: E402


class RecordingSink:
    """In-memory sink that keeps every forwarded record in order."""

    def __init__(self) -> None:
        self.records: list[ResourceRecord] = []
        self._lock = threading.Lock()

    def add(self, record: ResourceRecord) -> None:
        with self._lock:
            self.records.append(record)

    def names(self) -> list[str]:
        return [record.name for record in self.records]


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Provide a fresh in-memory record sink."""
    return RecordingSink()
