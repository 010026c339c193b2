"""Must-gather archive extraction.

This module unpacks diagnostic bundles into the extraction root that
resource ingestion discovers manifests from.
"""
