"""Core constants used across LogsViewer modules.

This module centralizes path names, archive markers, and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".logsviewer")
DEFAULT_STORE_WORKERS = 1
EXTRACTION_DIR_NAME = "space"
STORE_DIR_NAME = "objects"
ENRICHMENT_DATA_FILE_NAME = "enrichment-data.json"
STORE_RECORDS_SUFFIX = ".jsonl"
NAMESPACES_SEGMENT = "namespaces"
CLUSTER_SCOPED_SEGMENT = "cluster-scoped-resources"
ROOT_MARKER_SEGMENTS = (NAMESPACES_SEGMENT, CLUSTER_SCOPED_SEGMENT)
COLLISION_SUFFIX_SEPARATOR = "_"
LIST_ITEMS_FIELD = "items"
LIST_KIND = "List"
