"""Memorix core: memory lifecycle, deduplication and bounded retrieval."""

__version__ = "0.1.0"
