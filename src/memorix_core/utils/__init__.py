"""Shared utilities for Memorix services."""

from .hashing import compute_content_hash, normalize_content
from .datetime import utc_now, ensure_utc
from .tokens import count_tokens
from .vector_math import cosine_similarity, cosine_similarities

__all__ = [
    "compute_content_hash",
    "normalize_content",
    "utc_now",
    "ensure_utc",
    "count_tokens",
    "cosine_similarity",
    "cosine_similarities",
]
