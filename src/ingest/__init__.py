"""Resource ingestion.

This module discovers and decodes cluster resource manifests from an
extracted must-gather tree and builds the pod enrichment index.
"""
