"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import LogsViewerConfig
from core.errors import LogsViewerConfigError


def test_from_env_reads_data_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve data root from environment."""
    monkeypatch.setenv("LOGSVIEWER_DATA_ROOT", "./.tmp-logsviewer")

    config = LogsViewerConfig.from_env()

    assert config.data_root.name == ".tmp-logsviewer" and config.data_root.is_absolute()


def test_from_env_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset variables should fall back to one worker and fail-fast ingestion."""
    for variable_name in ("LOGSVIEWER_DATA_ROOT", "LOGSVIEWER_STORE_WORKERS", "LOGSVIEWER_FAIL_FAST"):
        monkeypatch.delenv(variable_name, raising=False)

    config = LogsViewerConfig.from_env()

    assert (config.data_root.name, config.store_workers, config.fail_fast) == (
        ".logsviewer",
        1,
        True,
    )


def test_derived_paths_live_under_data_root(tmp_path) -> None:
    """Extraction root, store root, and index file should derive from data root."""
    config = LogsViewerConfig(data_root=tmp_path)

    derived = (config.extraction_root, config.store_root, config.enrichment_data_file)

    assert derived == (
        tmp_path / "space",
        tmp_path / "objects",
        tmp_path / "enrichment-data.json",
    )


def test_from_env_parses_fail_fast_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    """Boolean flags should accept common false spellings."""
    monkeypatch.setenv("LOGSVIEWER_FAIL_FAST", " Off ")

    config = LogsViewerConfig.from_env()

    assert config.fail_fast is False


def test_from_env_raises_for_invalid_fail_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for unrecognized boolean values."""
    monkeypatch.setenv("LOGSVIEWER_FAIL_FAST", "maybe")

    with pytest.raises(LogsViewerConfigError):
        LogsViewerConfig.from_env()

    assert os.getenv("LOGSVIEWER_FAIL_FAST") == "maybe"


def test_from_env_raises_for_invalid_workers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric worker counts."""
    monkeypatch.setenv("LOGSVIEWER_STORE_WORKERS", "many")

    with pytest.raises(LogsViewerConfigError):
        LogsViewerConfig.from_env()

    assert os.getenv("LOGSVIEWER_STORE_WORKERS") == "many"


def test_from_env_raises_for_zero_workers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should require at least one store worker."""
    monkeypatch.setenv("LOGSVIEWER_STORE_WORKERS", "0")

    with pytest.raises(LogsViewerConfigError):
        LogsViewerConfig.from_env()

    assert os.getenv("LOGSVIEWER_STORE_WORKERS") == "0"
