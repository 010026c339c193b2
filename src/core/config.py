"""Runtime configuration model for LogsViewer.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_DATA_ROOT,
    DEFAULT_STORE_WORKERS,
    ENRICHMENT_DATA_FILE_NAME,
    EXTRACTION_DIR_NAME,
    STORE_DIR_NAME,
)
from core.errors import LogsViewerConfigError

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class LogsViewerConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for extracted trees and derived state.
        store_workers: Number of record sink worker threads.
        fail_fast: Abort a resource kind on its first unreadable file.
    """

    data_root: Path
    store_workers: int = DEFAULT_STORE_WORKERS
    fail_fast: bool = True

    @property
    def extraction_root(self) -> Path:
        """Directory archives are extracted into and resources discovered from."""
        return self.data_root / EXTRACTION_DIR_NAME

    @property
    def store_root(self) -> Path:
        """Directory holding persisted record files."""
        return self.data_root / STORE_DIR_NAME

    @property
    def enrichment_data_file(self) -> Path:
        """Persisted enrichment index path."""
        return self.data_root / ENRICHMENT_DATA_FILE_NAME

    @classmethod
    def from_env(cls) -> "LogsViewerConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            LogsViewerConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("LOGSVIEWER_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        workers_value = os.getenv("LOGSVIEWER_STORE_WORKERS", str(DEFAULT_STORE_WORKERS))
        fail_fast_value = os.getenv("LOGSVIEWER_FAIL_FAST", "true")
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            store_workers=_parse_store_workers(workers_value),
            fail_fast=_parse_bool("LOGSVIEWER_FAIL_FAST", fail_fast_value),
        )


def _parse_store_workers(raw_value: str) -> int:
    """Parse the store worker count environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive worker count.

    Raises:
        LogsViewerConfigError: If value is not a positive integer.
    """
    try:
        workers = int(raw_value)
    except ValueError as error:
        raise LogsViewerConfigError(
            "Invalid LOGSVIEWER_STORE_WORKERS value: "
            f"expected integer, got '{raw_value}'. "
            "Set LOGSVIEWER_STORE_WORKERS to a positive number."
        ) from error
    if workers < 1:
        raise LogsViewerConfigError(
            f"Invalid LOGSVIEWER_STORE_WORKERS value: {workers}. "
            "At least one store worker is required."
        )
    return workers


def _parse_bool(variable_name: str, raw_value: str) -> bool:
    """Parse a boolean flag environment value."""
    normalized_value = raw_value.strip().lower()
    if normalized_value in _TRUE_VALUES:
        return True
    if normalized_value in _FALSE_VALUES:
        return False
    raise LogsViewerConfigError(
        f"Invalid {variable_name} value: expected true/false, got '{raw_value}'."
    )
