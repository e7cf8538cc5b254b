"""Deduplication service package."""
from .base import (
    DeduplicationServicePluginBase,
    EXT_DEDUPLICATION_SERVICE,
    DeduplicationService,
    DuplicateDetector,
)
from .detectors import HashDuplicateDetector, HybridDuplicateDetector, SemanticDuplicateDetector

from scitrera_app_framework import Variables, get_extension


def get_deduplication_service(v: Variables = None) -> DeduplicationService:
    """Get the deduplication service instance."""
    return get_extension(EXT_DEDUPLICATION_SERVICE, v)


__all__ = (
    'DeduplicationService',
    'DeduplicationServicePluginBase',
    'DuplicateDetector',
    'HashDuplicateDetector',
    'HybridDuplicateDetector',
    'SemanticDuplicateDetector',
    'get_deduplication_service',
    'EXT_DEDUPLICATION_SERVICE',
)
