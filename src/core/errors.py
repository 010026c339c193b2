"""LogsViewer exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type so a failed pass unwinds
to its caller instead of terminating the process.
"""

from __future__ import annotations


class LogsViewerError(Exception):
    """Base exception for all LogsViewer failures."""


class LogsViewerConfigError(LogsViewerError):
    """Raised for invalid runtime configuration."""


class LogsViewerExtractionError(LogsViewerError):
    """Raised for archive read, entry type, and file placement failures."""


class LogsViewerIngestError(LogsViewerError):
    """Raised for resource ingestion failures."""


class LogsViewerDecodeError(LogsViewerIngestError):
    """Raised when manifest bytes do not match the expected resource schema."""


class LogsViewerDiscoveryError(LogsViewerIngestError):
    """Raised for malformed resource discovery patterns."""


class LogsViewerCancelledError(LogsViewerIngestError):
    """Raised when an ingestion pass observes its cancel signal."""


class LogsViewerStoreError(LogsViewerError):
    """Raised for record sink persistence failures."""
