"""Embedding provider and service package."""
from .base import (
    EmbeddingProvider,
    EmbeddingProviderPluginBase,
    EmbeddingServicePluginBase,
    EXT_EMBEDDING_PROVIDER,
    EXT_EMBEDDING_SERVICE,
)
from .service_default import EmbeddingService

from scitrera_app_framework import Variables, get_extension


def get_embedding_service(v: Variables = None) -> EmbeddingService:
    """Get the embedding service instance."""
    return get_extension(EXT_EMBEDDING_SERVICE, v)


__all__ = (
    'EmbeddingProvider',
    'EmbeddingProviderPluginBase',
    'EmbeddingService',
    'EmbeddingServicePluginBase',
    'get_embedding_service',
    'EXT_EMBEDDING_PROVIDER',
    'EXT_EMBEDDING_SERVICE',
)
