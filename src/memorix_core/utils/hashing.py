"""Content hashing utilities for deduplication."""
import re
from hashlib import sha256

_WHITESPACE_RUN = re.compile(r"\s+")
_LINE_BREAKS = re.compile(r"[\r\n]+")


def normalize_content(content: str) -> str:
    """Normalize text so trivially different copies hash identically.

    Trims, lowercases, collapses whitespace runs to a single space and
    strips any remaining line breaks.
    """
    normalized = content.strip().lower()
    normalized = _WHITESPACE_RUN.sub(" ", normalized)
    return _LINE_BREAKS.sub(" ", normalized)


def compute_content_hash(content: str, normalize: bool = False) -> str:
    """Compute SHA-256 hash of content for deduplication.

    This is the single source of truth for content hashing.
    All services should use this function rather than implementing
    their own hashing logic.

    Args:
        content: The text content to hash
        normalize: Apply normalize_content() before hashing

    Returns:
        Hexadecimal SHA-256 hash string (64 characters)
    """
    if content is None:
        raise ValueError("Cannot hash None content")
    if normalize:
        content = normalize_content(content)
    return sha256(content.encode("utf-8")).hexdigest()
