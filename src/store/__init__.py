"""Record sink layer.

This module persists decoded resource records asynchronously and
exposes the SDK client that wires ingestion to the sink.
"""
